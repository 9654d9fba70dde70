from __future__ import annotations

from datetime import date

from dateutil.relativedelta import relativedelta

from fintrack.models.schemas import (
    Budget,
    BudgetProgressItem,
    BudgetProgressResponse,
    Transaction,
    UnbudgetedSpending,
)


def period_start(period: str) -> date:
    try:
        year, month = (int(part) for part in period.split("-"))
        return date(year, month, 1)
    except ValueError as exc:
        raise ValueError(f"Invalid budget period '{period}', expected YYYY-MM.") from exc


def period_of(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def previous_period(period: str) -> str:
    return period_of(period_start(period) - relativedelta(months=1))


def spending_by_category(
    transactions: list[Transaction],
    period: str,
    transaction_type: str = "expense",
) -> dict[str, float]:
    start = period_start(period)
    end = start + relativedelta(months=1)
    spent: dict[str, float] = {}
    for tx in transactions:
        if tx.transaction_type == transaction_type and start <= tx.transaction_date < end:
            spent[tx.category] = spent.get(tx.category, 0.0) + tx.amount
    return spent


def budget_progress(
    budgets: list[Budget],
    transactions: list[Transaction],
    period: str,
) -> BudgetProgressResponse:
    actual = spending_by_category(transactions, period)
    received = spending_by_category(transactions, period, "income")

    items = []
    for budget in budgets:
        totals = received if budget.budget_type == "income" else actual
        spent = totals.get(budget.category, 0.0)
        percentage = (spent / budget.amount) * 100 if budget.amount > 0 else 0.0
        items.append(
            BudgetProgressItem(
                budget_id=budget.budget_id,
                category=budget.category,
                budget_type=budget.budget_type,
                amount=round(budget.amount, 2),
                spent=round(spent, 2),
                remaining=round(budget.amount - spent, 2),
                percentage=round(percentage, 2),
            )
        )
    items.sort(key=lambda x: x.percentage, reverse=True)

    budgeted = {b.category for b in budgets if b.budget_type == "expense"}
    unbudgeted = [
        UnbudgetedSpending(category=category, spent=round(spent, 2))
        for category, spent in actual.items()
        if category not in budgeted
    ]
    return BudgetProgressResponse(
        period=period,
        budget_items=items,
        unbudgeted_spending=unbudgeted,
    )
