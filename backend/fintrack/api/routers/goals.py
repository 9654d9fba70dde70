from fastapi import APIRouter, Depends, HTTPException, Query, Response

from fintrack.api.deps import get_store
from fintrack.core.config import settings
from fintrack.models.schemas import (
    Cadence,
    Goal,
    GoalCreate,
    GoalFundsInput,
    GoalFundsResponse,
    GoalSuggestionResponse,
)
from fintrack.services.finance_store import FinanceStore, RecordNotFoundError
from fintrack.services.formatting import to_response
from fintrack.services.report_service import average_monthly_cash_flow
from fintrack.services.savings_service import get_goal_suggestion, snapshot_for_goal

router = APIRouter()


@router.get("", response_model=list[Goal])
def list_goals(user_id: str, store: FinanceStore = Depends(get_store)) -> list[Goal]:
    try:
        return store.list_goals(user_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("", response_model=Goal, status_code=201)
def add_goal(user_id: str, payload: GoalCreate, store: FinanceStore = Depends(get_store)) -> Goal:
    try:
        return store.add_goal(user_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.put("/{goal_id}", response_model=Goal)
def update_goal(
    user_id: str,
    goal_id: str,
    payload: GoalCreate,
    store: FinanceStore = Depends(get_store),
) -> Goal:
    try:
        return store.update_goal(user_id, goal_id, payload)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{goal_id}", status_code=204)
def delete_goal(user_id: str, goal_id: str, store: FinanceStore = Depends(get_store)) -> Response:
    try:
        store.delete_goal(user_id, goal_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return Response(status_code=204)


@router.post("/{goal_id}/funds", response_model=GoalFundsResponse)
def add_funds(
    user_id: str,
    goal_id: str,
    payload: GoalFundsInput,
    store: FinanceStore = Depends(get_store),
) -> GoalFundsResponse:
    try:
        return store.add_funds_to_goal(user_id, goal_id, payload.amount)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/{goal_id}/suggestion", response_model=GoalSuggestionResponse)
def goal_suggestion(
    user_id: str,
    goal_id: str,
    frequency: Cadence = Query(default="weekly"),
    store: FinanceStore = Depends(get_store),
) -> GoalSuggestionResponse:
    try:
        goal = store.get_goal(user_id, goal_id)
        transactions = store.list_transactions(user_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    cash_flow = average_monthly_cash_flow(transactions, months=settings.cash_flow_lookback_months)
    return to_response(get_goal_suggestion(snapshot_for_goal(goal, cash_flow), frequency))
