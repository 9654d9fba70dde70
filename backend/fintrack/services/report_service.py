from __future__ import annotations

from datetime import date

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

from fintrack.models.schemas import CashFlow, Transaction, TrendPoint
from fintrack.services.finance_store import GOAL_FUNDS_NOTE_PREFIX, GOAL_SAVINGS_CATEGORY

SAVINGS_LABEL_PREFIX = "Savings: "


def _frame(transactions: list[Transaction]) -> pd.DataFrame:
    df = pd.DataFrame([tx.model_dump() for tx in transactions])
    df["transaction_date"] = pd.to_datetime(df["transaction_date"])
    df["signed_amount"] = np.where(df["transaction_type"] == "income", df["amount"], -df["amount"])
    return df


def _cash_flow(df: pd.DataFrame) -> CashFlow:
    income = float(df.loc[df["transaction_type"] == "income", "amount"].sum())
    expense = float(df.loc[df["transaction_type"] == "expense", "amount"].sum())
    return CashFlow(income=round(income, 2), expense=round(expense, 2))


def net_worth(transactions: list[Transaction]) -> float:
    if not transactions:
        return 0.0
    return round(float(_frame(transactions)["signed_amount"].sum()), 2)


def current_month_cash_flow(transactions: list[Transaction], today: date | None = None) -> CashFlow:
    if not transactions:
        return CashFlow(income=0.0, expense=0.0)
    today = today or date.today()
    df = _frame(transactions)
    start = pd.Timestamp(today.replace(day=1))
    return _cash_flow(df[df["transaction_date"] >= start])


def average_monthly_cash_flow(
    transactions: list[Transaction],
    months: int,
    today: date | None = None,
    include_goal_savings: bool = False,
) -> CashFlow:
    """Mean monthly income and expense over the last ``months`` calendar months.

    The current month counts as one of them. Goal contributions are excluded from
    expense by default, since they are money kept rather than spent.
    """
    if not transactions:
        return CashFlow(income=0.0, expense=0.0)
    today = today or date.today()
    months = max(months, 1)

    df = _frame(transactions)
    if not include_goal_savings:
        df = df[df["category"] != GOAL_SAVINGS_CATEGORY]
    start = pd.Timestamp(today.replace(day=1) - relativedelta(months=months - 1))
    end = pd.Timestamp(today.replace(day=1) + relativedelta(months=1))
    totals = _cash_flow(df[(df["transaction_date"] >= start) & (df["transaction_date"] < end)])
    return CashFlow(
        income=round(totals.income / months, 2),
        expense=round(totals.expense / months, 2),
    )


def _category_label(row: pd.Series) -> str:
    notes = row["notes"] or ""
    if row["category"] == GOAL_SAVINGS_CATEGORY and notes:
        return f"{SAVINGS_LABEL_PREFIX}{notes.replace(GOAL_FUNDS_NOTE_PREFIX, '')}"
    return row["category"]


def expense_by_category(transactions: list[Transaction]) -> dict[str, float]:
    if not transactions:
        return {}
    df = _frame(transactions)
    expenses = df[df["transaction_type"] == "expense"]
    if expenses.empty:
        return {}
    labels = expenses.apply(_category_label, axis=1)
    totals = expenses.groupby(labels, sort=False)["amount"].sum()
    return {str(k): round(float(v), 2) for k, v in totals.items()}


def net_worth_trend(transactions: list[Transaction]) -> list[TrendPoint]:
    if len(transactions) < 2:
        return []
    df = _frame(transactions).sort_values(["transaction_date", "created_at"], kind="stable")
    balances = np.cumsum(df["signed_amount"].to_numpy())
    return [
        TrendPoint(transaction_date=ts.date(), balance=round(float(balance), 2))
        for ts, balance in zip(df["transaction_date"], balances)
    ]
