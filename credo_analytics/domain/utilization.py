"""Credit utilization checks against the limits of a score's category"""

from typing import List, Optional

from credo_analytics.domain.categories import ScoreRangeIndex, lookup_category
from credo_analytics.domain.models import (
    CreditCard,
    CreditCategory,
    UtilizationChange,
    UtilizationLimits,
    UtilizationReport,
    UtilizationWarning,
)

CARD_NOT_FOUND = "Card not found"
INSUFFICIENT_CREDIT = "Insufficient credit limit"


def category_limits(index: ScoreRangeIndex[CreditCategory], credit_score: float) -> Optional[UtilizationLimits]:
    category = lookup_category(index, credit_score)
    return category.utilization if category else None


def _percent(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def calculate_new_utilization(cards: List[CreditCard], card_id: str, amount: float) -> UtilizationChange:
    """Utilization before and after charging amount to one card"""
    total_limit = sum(card.limit or 0 for card in cards)
    current_balance = sum(card.balance or 0 for card in cards)
    current_utilization = _percent(current_balance, total_limit)

    card = next((c for c in cards if c.id == card_id), None)
    if card is None:
        return UtilizationChange(can_proceed=False, error=CARD_NOT_FOUND)

    available = card.limit - card.balance
    if available < amount:
        return UtilizationChange(
            can_proceed=False,
            error=INSUFFICIENT_CREDIT,
            available_credit=available,
            shortfall=amount - available,
        )

    new_card_balance = card.balance + amount
    new_balance = current_balance + amount
    new_utilization = _percent(new_balance, total_limit)

    return UtilizationChange(
        can_proceed=True,
        total_limit=total_limit,
        current_balance=current_balance,
        current_utilization=round(current_utilization, 2),
        new_balance=new_balance,
        new_utilization=round(new_utilization, 2),
        utilization_increase=round(new_utilization - current_utilization, 2),
        card_name=card.name,
        card_limit=card.limit,
        card_current_balance=card.balance,
        card_new_balance=new_card_balance,
        card_utilization=round(_percent(new_card_balance, card.limit), 2),
        available_credit=available,
    )


def utilization_warning(
    index: ScoreRangeIndex[CreditCategory],
    credit_score: float,
    change: UtilizationChange,
) -> UtilizationWarning:
    category = lookup_category(index, credit_score)
    if category is None:
        return UtilizationWarning(level="none", message="Unable to determine credit category")

    limits = category.utilization
    new = change.new_utilization

    if new >= limits.danger_threshold:
        level = "danger"
        message = (
            f"Critical: Your utilization will be {new:.1f}%, exceeding the "
            f"{limits.danger_threshold}% recommended limit for {category.name} category."
        )
        recommendation = (
            "This could negatively impact your credit score. Consider paying down "
            "existing balances or using a different payment method."
        )
    elif new >= limits.warning_threshold:
        level = "warning"
        message = (
            f"Warning: Your utilization will be {new:.1f}%, approaching the "
            f"{limits.danger_threshold}% limit for {category.name} category."
        )
        recommendation = f"Try to keep utilization below {limits.warning_threshold}% for optimal credit health."
    elif new >= limits.ideal:
        level = "caution"
        message = f"Your utilization will be {new:.1f}%. This is acceptable but not ideal."
        recommendation = f"Aim for under {limits.ideal}% utilization for the best credit score impact."
    else:
        level = "safe"
        message = f"Excellent! Your utilization will be {new:.1f}%, well below the recommended limit."
        recommendation = f"You're maintaining healthy credit habits for {category.name} category."

    return UtilizationWarning(
        level=level,
        message=message,
        recommendation=recommendation,
        category_name=category.name,
        recommended_limit=limits.recommended,
        ideal_limit=limits.ideal,
    )


def eligible_cards(cards: List[CreditCard], amount: float) -> List[CreditCard]:
    """Cards with enough available credit for the payment"""
    return [card for card in cards if card.limit - card.balance >= amount]


def utilization_report(
    index: ScoreRangeIndex[CreditCategory],
    credit_score: float,
    cards: List[CreditCard],
    card_id: str,
    amount: float,
) -> UtilizationReport:
    """
    Full pre-payment check: utilization change, category warning, the
    category's limits and which cards could cover the amount.
    """
    change = calculate_new_utilization(cards, card_id, amount)
    limits = category_limits(index, credit_score)
    candidates = eligible_cards(cards, amount)
    if not change.can_proceed:
        return UtilizationReport(success=False, change=change, limits=limits, eligible_cards=candidates)

    warning = utilization_warning(index, credit_score, change)
    return UtilizationReport(
        success=True,
        change=change,
        warning=warning,
        should_proceed=warning.level != "danger",
        limits=limits,
        eligible_cards=candidates,
    )
