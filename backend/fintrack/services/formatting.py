from __future__ import annotations

from fintrack.core.config import settings
from fintrack.models.schemas import (
    AdjustedRecommendation,
    CompletedRecommendation,
    GoalSuggestionResponse,
    NoDateRecommendation,
    OverdueRecommendation,
    PlannedRecommendation,
    Recommendation,
    UnrealisticRecommendation,
)


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(round(amount)):,}".replace(",", settings.currency_grouping_separator)
    return f"{sign}{settings.currency_symbol} {grouped}"


def _bold(text: str) -> str:
    return f"<strong>{text}</strong>"


def describe_recommendation(result: Recommendation) -> str:
    """Render the display message for a recommendation, with light emphasis markup."""
    if isinstance(result, CompletedRecommendation):
        return "Congratulations! This goal has already been reached."
    if isinstance(result, NoDateRecommendation):
        return "Set a target date to get a savings recommendation."
    if isinstance(result, OverdueRecommendation):
        return "The target date is too close or has already passed. Please update it."
    if isinstance(result, UnrealisticRecommendation):
        return (
            "Your monthly cash flow is negative, so no savings amount can be recommended right now. "
            "Try reducing your expenses first."
        )

    amount = _bold(format_currency(result.suggestion))
    unit = _bold(result.time_unit)
    if isinstance(result, PlannedRecommendation):
        if result.status == "IDEAL":
            return (
                f"This plan is very realistic! Setting aside {amount} per {unit} "
                "still leaves enough room for your other needs."
            )
        return (
            f"Achievable, but it takes commitment! You need to set aside {amount} per {unit}. "
            "This plan uses almost all of your spare money."
        )

    if isinstance(result, AdjustedRecommendation):
        required = _bold(format_currency(result.required_savings))
        month_year = _bold(result.projected_completion.strftime("%B %Y"))
        return (
            f"This goal is not realistic yet. What you need ({required} per {result.time_unit}) "
            "exceeds your monthly spare money.<br><br>"
            f"Our suggestion: save within your capacity, around {amount} per {unit}. "
            f"At that pace you will reach the goal around {month_year}."
        )

    raise TypeError(f"Unsupported recommendation type: {type(result).__name__}")


def to_response(result: Recommendation) -> GoalSuggestionResponse:
    return GoalSuggestionResponse(
        status=result.status,
        suggestion=result.suggestion,
        message=describe_recommendation(result),
        details=result,
    )
