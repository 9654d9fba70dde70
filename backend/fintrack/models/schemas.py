from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Cadence = Literal["daily", "weekly", "monthly"]
TransactionType = Literal["income", "expense"]
PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class FinancialSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    target_amount: float = Field(..., ge=0)
    current_amount: float = Field(..., ge=0)
    target_date: Optional[date] = None
    monthly_income: float = Field(..., ge=0)
    monthly_expense: float = Field(..., ge=0)


class GoalSuggestionRequest(BaseModel):
    snapshot: FinancialSnapshot
    frequency: Cadence = "weekly"


# Recommendation shapes, one per family of statuses.


class _Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)


class CompletedRecommendation(_Recommendation):
    status: Literal["COMPLETED"] = "COMPLETED"
    suggestion: float = 0


class NoDateRecommendation(_Recommendation):
    status: Literal["NO_DATE"] = "NO_DATE"
    suggestion: float = 0


class OverdueRecommendation(_Recommendation):
    status: Literal["OVERDUE"] = "OVERDUE"
    suggestion: float = 0


class UnrealisticRecommendation(_Recommendation):
    status: Literal["UNREALISTIC"] = "UNREALISTIC"
    suggestion: float = 0
    monthly_discretionary_income: float


class PlannedRecommendation(_Recommendation):
    status: Literal["IDEAL", "CHALLENGING"]
    suggestion: float = Field(..., ge=0)
    frequency: Cadence
    time_unit: str
    required_monthly_equivalent: float
    savings_capacity: float


class AdjustedRecommendation(_Recommendation):
    status: Literal["NEEDS_ADJUSTMENT"] = "NEEDS_ADJUSTMENT"
    suggestion: float = Field(..., ge=0)
    required_savings: float
    frequency: Cadence
    time_unit: str
    savings_capacity: float
    months_needed: int
    projected_completion: date


Recommendation = Annotated[
    Union[
        CompletedRecommendation,
        NoDateRecommendation,
        OverdueRecommendation,
        UnrealisticRecommendation,
        PlannedRecommendation,
        AdjustedRecommendation,
    ],
    Field(discriminator="status"),
]


class GoalSuggestionResponse(BaseModel):
    status: str
    suggestion: float
    message: str
    details: Recommendation


class TransactionCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=80)
    transaction_type: TransactionType
    transaction_date: date
    notes: str = Field("", max_length=200)


class Transaction(BaseModel):
    transaction_id: str
    user_id: str
    amount: float
    category: str
    transaction_type: TransactionType
    transaction_date: date
    notes: str
    goal_id: Optional[str] = None
    created_at: str


class GoalCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(..., min_length=1, max_length=80)
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(0, ge=0)
    target_date: Optional[date] = None


class Goal(BaseModel):
    goal_id: str
    user_id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: Optional[date] = None
    created_at: str


class GoalFundsInput(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    amount: float


class GoalFundsResponse(BaseModel):
    goal: Goal
    transaction: Transaction


class BudgetUpsert(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    period: str = Field(..., pattern=PERIOD_PATTERN)
    category: str = Field(..., min_length=1, max_length=80)
    amount: float = Field(..., ge=0)
    budget_type: TransactionType = "expense"


class Budget(BaseModel):
    budget_id: str
    user_id: str
    period: str
    category: str
    amount: float
    budget_type: TransactionType = "expense"
    created_at: str


class BudgetProgressItem(BaseModel):
    budget_id: str
    category: str
    budget_type: TransactionType
    amount: float
    spent: float
    remaining: float
    percentage: float


class UnbudgetedSpending(BaseModel):
    category: str
    spent: float


class BudgetProgressResponse(BaseModel):
    period: str
    budget_items: list[BudgetProgressItem]
    unbudgeted_spending: list[UnbudgetedSpending]


class CashFlow(BaseModel):
    income: float
    expense: float


class FinanceSummaryResponse(BaseModel):
    user_id: str
    net_worth: float
    current_month_cash_flow: CashFlow
    average_monthly_cash_flow: CashFlow
    expense_by_category: dict[str, float]


class TrendPoint(BaseModel):
    transaction_date: date
    balance: float


class NetWorthTrendResponse(BaseModel):
    user_id: str
    points: list[TrendPoint]
