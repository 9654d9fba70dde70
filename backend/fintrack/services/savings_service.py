from __future__ import annotations

import logging
import math
from datetime import date, datetime, time

from dateutil.relativedelta import relativedelta

from fintrack.models.schemas import (
    AdjustedRecommendation,
    Cadence,
    CashFlow,
    CompletedRecommendation,
    FinancialSnapshot,
    Goal,
    NoDateRecommendation,
    OverdueRecommendation,
    PlannedRecommendation,
    Recommendation,
    UnrealisticRecommendation,
)

logger = logging.getLogger(__name__)

SAFETY_BUFFER_PERCENTAGE = 0.2
DAYS_PER_MONTH = 30.44
WEEKS_PER_MONTH = 4.33
MAX_PROJECTION_MONTHS = 1200

TIME_UNITS: dict[str, str] = {"daily": "days", "weekly": "weeks", "monthly": "months"}
PERIODS_PER_MONTH: dict[str, float] = {
    "daily": DAYS_PER_MONTH,
    "weekly": WEEKS_PER_MONTH,
    "monthly": 1.0,
}

# (upper bound, step); amounts at or above the last bound use FINAL_STEP.
ROUNDING_STEPS = [
    (10_000, 1_000),
    (50_000, 5_000),
    (250_000, 10_000),
]
FINAL_STEP = 25_000


def round_to_sensible_amount(amount: float) -> int:
    """Round ``amount`` up to a denomination that grows with its magnitude."""
    if amount <= 0:
        return 0
    for bound, step in ROUNDING_STEPS:
        if amount < bound:
            return math.ceil(amount / step) * step
    return math.ceil(amount / FINAL_STEP) * FINAL_STEP


def _time_divider(frequency: Cadence, days_remaining: float, target: date, now: datetime) -> float:
    if frequency == "daily":
        divider = days_remaining
    elif frequency == "monthly":
        divider = (target.year - now.year) * 12 + (target.month - now.month)
        divider = max(divider, 1)
    else:
        divider = days_remaining / 7
    return divider if divider > 0 else 1


def get_goal_suggestion(
    snapshot: FinancialSnapshot,
    frequency: Cadence = "weekly",
    now: datetime | None = None,
) -> Recommendation:
    """Classify how realistic a savings goal is and recommend a contribution.

    The result is only valid for ``now``; callers should recompute rather than
    cache it across days.
    """
    if frequency not in TIME_UNITS:
        frequency = "weekly"
    now = now or datetime.now()

    amount_needed = snapshot.target_amount - snapshot.current_amount
    if amount_needed <= 0:
        return CompletedRecommendation()

    if snapshot.target_date is None:
        return NoDateRecommendation()

    end = datetime.combine(snapshot.target_date, time.min, tzinfo=now.tzinfo)
    days_remaining = (end - now).total_seconds() / 86400
    if days_remaining <= 1:
        return OverdueRecommendation()

    divider = _time_divider(frequency, days_remaining, snapshot.target_date, now)
    required_savings = round_to_sensible_amount(amount_needed / divider)

    discretionary = snapshot.monthly_income - snapshot.monthly_expense
    capacity = discretionary * (1 - SAFETY_BUFFER_PERCENTAGE)

    if discretionary <= 0:
        logger.debug("Negative cash flow (%.2f); no savings recommended.", discretionary)
        return UnrealisticRecommendation(monthly_discretionary_income=discretionary)

    periods_per_month = PERIODS_PER_MONTH[frequency]
    required_monthly = required_savings * periods_per_month

    if required_monthly <= discretionary:
        status = "IDEAL" if required_monthly <= capacity else "CHALLENGING"
        logger.debug("Goal classified %s: %s per %s.", status, required_savings, TIME_UNITS[frequency])
        return PlannedRecommendation(
            status=status,
            suggestion=required_savings,
            frequency=frequency,
            time_unit=TIME_UNITS[frequency],
            required_monthly_equivalent=round(required_monthly, 2),
            savings_capacity=round(capacity, 2),
        )

    # capacity is positive here, but can be tiny enough to push the projection
    # out by centuries.
    months_needed = math.ceil(amount_needed / capacity) if capacity > 0 else MAX_PROJECTION_MONTHS
    months_needed = min(max(months_needed, 1), MAX_PROJECTION_MONTHS)
    projected = now.date() + relativedelta(months=months_needed)
    alternative = max(round_to_sensible_amount(capacity / periods_per_month), 0)

    logger.debug(
        "Goal needs adjustment: required %s, alternative %s, %d months.",
        required_savings,
        alternative,
        months_needed,
    )
    return AdjustedRecommendation(
        suggestion=alternative,
        required_savings=required_savings,
        frequency=frequency,
        time_unit=TIME_UNITS[frequency],
        savings_capacity=round(capacity, 2),
        months_needed=months_needed,
        projected_completion=projected,
    )


def snapshot_for_goal(goal: Goal, cash_flow: CashFlow) -> FinancialSnapshot:
    return FinancialSnapshot(
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        target_date=goal.target_date,
        monthly_income=cash_flow.income,
        monthly_expense=cash_flow.expense,
    )
