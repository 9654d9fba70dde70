from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from fintrack.api.deps import get_store
from fintrack.models.schemas import PERIOD_PATTERN, Budget, BudgetProgressResponse, BudgetUpsert
from fintrack.services.budget_service import budget_progress, period_of
from fintrack.services.finance_store import FinanceStore, RecordNotFoundError

router = APIRouter()


def _current_period() -> str:
    return period_of(date.today())


@router.get("", response_model=list[Budget])
def list_budgets(
    user_id: str,
    period: str | None = Query(default=None, pattern=PERIOD_PATTERN),
    store: FinanceStore = Depends(get_store),
) -> list[Budget]:
    try:
        return store.list_budgets(user_id, period or _current_period())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.put("", response_model=Budget)
def upsert_budget(user_id: str, payload: BudgetUpsert, store: FinanceStore = Depends(get_store)) -> Budget:
    try:
        return store.upsert_budget(user_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/copy-previous", response_model=list[Budget])
def copy_previous_month(
    user_id: str,
    period: str | None = Query(default=None, pattern=PERIOD_PATTERN),
    store: FinanceStore = Depends(get_store),
) -> list[Budget]:
    try:
        return store.copy_budgets_from_previous_month(user_id, period or _current_period())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/progress", response_model=BudgetProgressResponse)
def get_budget_progress(
    user_id: str,
    period: str | None = Query(default=None, pattern=PERIOD_PATTERN),
    store: FinanceStore = Depends(get_store),
) -> BudgetProgressResponse:
    period = period or _current_period()
    try:
        return budget_progress(store.list_budgets(user_id, period), store.list_transactions(user_id), period)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{budget_id}", status_code=204)
def delete_budget(user_id: str, budget_id: str, store: FinanceStore = Depends(get_store)) -> Response:
    try:
        store.delete_budget(user_id, budget_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return Response(status_code=204)
