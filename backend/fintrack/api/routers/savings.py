from fastapi import APIRouter

from fintrack.models.schemas import GoalSuggestionRequest, GoalSuggestionResponse
from fintrack.services.formatting import to_response
from fintrack.services.savings_service import get_goal_suggestion

router = APIRouter()


@router.post("/suggestion", response_model=GoalSuggestionResponse)
def savings_suggestion(payload: GoalSuggestionRequest) -> GoalSuggestionResponse:
    return to_response(get_goal_suggestion(payload.snapshot, payload.frequency))
