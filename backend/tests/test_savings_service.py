from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from fintrack.models.schemas import FinancialSnapshot
from fintrack.services.formatting import describe_recommendation, format_currency, to_response
from fintrack.services.savings_service import (
    MAX_PROJECTION_MONTHS,
    get_goal_suggestion,
    round_to_sensible_amount,
)

NOW = datetime(2026, 1, 1)
SEVENTY_DAYS_OUT = date(2026, 3, 12)


def _snapshot(**overrides) -> FinancialSnapshot:
    values = {
        "target_amount": 900_000,
        "current_amount": 0,
        "target_date": SEVENTY_DAYS_OUT,
        "monthly_income": 5_000_000,
        "monthly_expense": 3_000_000,
    }
    values.update(overrides)
    return FinancialSnapshot(**values)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (-50, 0),
        (0, 0),
        (1, 1_000),
        (9_999, 10_000),
        (10_000, 10_000),
        (10_001, 15_000),
        (18_475, 20_000),
        (50_001, 60_000),
        (90_000, 90_000),
        (250_000, 250_000),
        (250_001, 275_000),
    ],
)
def test_round_to_sensible_amount(amount: float, expected: int) -> None:
    assert round_to_sensible_amount(amount) == expected


def test_completed_goal_short_circuits() -> None:
    result = get_goal_suggestion(_snapshot(current_amount=1_000_000, target_date=None), now=NOW)
    assert result.status == "COMPLETED"
    assert result.suggestion == 0


def test_missing_target_date() -> None:
    result = get_goal_suggestion(_snapshot(target_date=None), now=NOW)
    assert result.status == "NO_DATE"
    assert result.suggestion == 0


@pytest.mark.parametrize("target", [date(2025, 12, 1), date(2026, 1, 1), date(2026, 1, 2)])
def test_overdue_or_too_close(target: date) -> None:
    result = get_goal_suggestion(_snapshot(target_date=target), now=NOW)
    assert result.status == "OVERDUE"
    assert result.suggestion == 0


def test_ideal_weekly_plan() -> None:
    result = get_goal_suggestion(_snapshot(), "weekly", now=NOW)
    assert result.status == "IDEAL"
    assert result.suggestion == 90_000
    assert result.time_unit == "weeks"
    assert result.savings_capacity == pytest.approx(1_600_000)
    assert result.required_monthly_equivalent == pytest.approx(389_700)


def test_challenging_plan_uses_safety_buffer() -> None:
    result = get_goal_suggestion(_snapshot(monthly_expense=4_600_000), now=NOW)
    assert result.status == "CHALLENGING"
    assert result.suggestion == 90_000


@pytest.mark.parametrize(
    ("frequency", "required", "alternative"),
    [("daily", 15_000, 3_000), ("weekly", 90_000, 20_000), ("monthly", 450_000, 80_000)],
)
def test_needs_adjustment_offers_alternative(frequency: str, required: int, alternative: int) -> None:
    result = get_goal_suggestion(_snapshot(monthly_expense=4_900_000), frequency, now=NOW)
    assert result.status == "NEEDS_ADJUSTMENT"
    assert result.required_savings == required
    assert result.suggestion == alternative
    assert result.months_needed == 12
    assert result.projected_completion == date(2027, 1, 1)


def test_negative_cash_flow_is_unrealistic() -> None:
    result = get_goal_suggestion(_snapshot(monthly_expense=6_000_000), now=NOW)
    assert result.status == "UNREALISTIC"
    assert result.suggestion == 0
    assert result.monthly_discretionary_income == -1_000_000


def test_zero_cash_flow_is_unrealistic() -> None:
    result = get_goal_suggestion(_snapshot(monthly_expense=5_000_000), now=NOW)
    assert result.status == "UNREALISTIC"


def test_months_needed_is_bounded_for_tiny_capacity() -> None:
    result = get_goal_suggestion(
        _snapshot(target_amount=900_000_000, monthly_income=3_000_010, monthly_expense=3_000_000),
        now=NOW,
    )
    assert result.status == "NEEDS_ADJUSTMENT"
    assert result.months_needed == MAX_PROJECTION_MONTHS
    assert result.suggestion == 1_000


@pytest.mark.parametrize(
    ("frequency", "suggestion", "unit"),
    [("daily", 15_000, "days"), ("weekly", 90_000, "weeks"), ("monthly", 450_000, "months")],
)
def test_feasibility_does_not_depend_on_cadence(frequency: str, suggestion: int, unit: str) -> None:
    result = get_goal_suggestion(_snapshot(), frequency, now=NOW)
    assert result.status == "IDEAL"
    assert result.suggestion == suggestion
    assert result.time_unit == unit


def test_monthly_divider_never_below_one() -> None:
    # Same calendar month: zero whole months apart.
    result = get_goal_suggestion(_snapshot(target_date=date(2026, 1, 20)), "monthly", now=NOW)
    assert result.status == "IDEAL"
    assert result.suggestion == 900_000


def test_unknown_frequency_falls_back_to_weekly() -> None:
    result = get_goal_suggestion(_snapshot(), "fortnightly", now=NOW)  # type: ignore[arg-type]
    assert result.time_unit == "weeks"


def test_snapshot_rejects_missing_or_non_numeric_fields() -> None:
    with pytest.raises(ValidationError):
        FinancialSnapshot(target_amount=100, current_amount=0, monthly_income=10)
    with pytest.raises(ValidationError):
        FinancialSnapshot(
            target_amount="lots",
            current_amount=0,
            monthly_income=10,
            monthly_expense=5,
        )


def test_snapshot_rejects_infinite_amounts() -> None:
    with pytest.raises(ValidationError):
        _snapshot(target_amount=float("inf"))
    with pytest.raises(ValidationError):
        _snapshot(monthly_income=float("inf"))


def test_very_large_amounts_stay_bounded() -> None:
    result = get_goal_suggestion(_snapshot(target_amount=1e308), now=NOW)
    assert result.status == "NEEDS_ADJUSTMENT"
    assert result.months_needed == MAX_PROJECTION_MONTHS


def test_format_currency_groups_thousands() -> None:
    assert format_currency(90_000) == "Rp 90.000"
    assert format_currency(1_234_567.6) == "Rp 1.234.568"
    assert format_currency(0) == "Rp 0"


def test_messages_embed_amount_and_unit() -> None:
    ideal = describe_recommendation(get_goal_suggestion(_snapshot(), now=NOW))
    assert "<strong>Rp 90.000</strong>" in ideal
    assert "<strong>weeks</strong>" in ideal

    adjusted = describe_recommendation(get_goal_suggestion(_snapshot(monthly_expense=4_900_000), now=NOW))
    assert "<strong>Rp 20.000</strong>" in adjusted
    assert "January 2027" in adjusted


def test_response_carries_status_and_details() -> None:
    response = to_response(get_goal_suggestion(_snapshot(target_date=None), now=NOW))
    assert response.status == "NO_DATE"
    assert response.suggestion == 0
    assert response.details.status == "NO_DATE"
    assert response.message


def test_reads_clock_when_now_omitted() -> None:
    snapshot = _snapshot(target_date=date.today() + timedelta(days=120))
    result = get_goal_suggestion(snapshot)
    assert result.status == "IDEAL"


def test_target_date_follows_timezone_of_now() -> None:
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    result = get_goal_suggestion(_snapshot(), now=now)
    assert result.status == "IDEAL"
    assert result.suggestion == 90_000

    one_day_out = get_goal_suggestion(_snapshot(target_date=date(2026, 1, 2)), now=now)
    assert one_day_out.status == "OVERDUE"
