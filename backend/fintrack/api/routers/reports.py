from fastapi import APIRouter, Depends, HTTPException

from fintrack.api.deps import get_store
from fintrack.core.config import settings
from fintrack.models.schemas import FinanceSummaryResponse, NetWorthTrendResponse
from fintrack.services.finance_store import FinanceStore
from fintrack.services.report_service import (
    average_monthly_cash_flow,
    current_month_cash_flow,
    expense_by_category,
    net_worth,
    net_worth_trend,
)

router = APIRouter()


@router.get("/summary", response_model=FinanceSummaryResponse)
def finance_summary(user_id: str, store: FinanceStore = Depends(get_store)) -> FinanceSummaryResponse:
    try:
        transactions = store.list_transactions(user_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return FinanceSummaryResponse(
        user_id=user_id,
        net_worth=net_worth(transactions),
        current_month_cash_flow=current_month_cash_flow(transactions),
        average_monthly_cash_flow=average_monthly_cash_flow(
            transactions, months=settings.cash_flow_lookback_months
        ),
        expense_by_category=expense_by_category(transactions),
    )


@router.get("/trend", response_model=NetWorthTrendResponse)
def finance_trend(user_id: str, store: FinanceStore = Depends(get_store)) -> NetWorthTrendResponse:
    try:
        transactions = store.list_transactions(user_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return NetWorthTrendResponse(user_id=user_id, points=net_worth_trend(transactions))
