"""Customer lifetime value (CLV) estimation"""

from datetime import timedelta
from typing import Dict, List, Optional

from credo_analytics.domain.models import CLVRecord, CLVSummary, CLVTier, Customer
from credo_analytics.domain.segmentation import SPEND_PER_TRANSACTION
from credo_analytics.utils.date_utils import Moment, as_utc, days_between, utcnow
from credo_analytics.utils.number_utils import round_half_up

PROFIT_MARGIN = 0.20
DAYS_PER_MONTH = 30
HIGH_VALUE_CLV = 1000
RETENTION_WINDOW_DAYS = 30

# (minimum clv, tier), highest first; thresholds are inclusive
CLV_TIERS = [
    (2000, CLVTier.PLATINUM),
    (1000, CLVTier.GOLD),
    (500, CLVTier.SILVER),
    (100, CLVTier.BRONZE),
]


def determine_clv_tier(clv: float) -> CLVTier:
    for threshold, tier in CLV_TIERS:
        if clv >= threshold:
            return tier
    return CLVTier.STARTER


def predict_lifespan_months(days_inactive: int, total_spending: float) -> int:
    """
    Expected remaining relationship length in months.

    Inactivity is checked before spending, so a high spender who has been
    away for more than 60 days still gets the shorter lifespan.
    """
    if days_inactive > 90:
        return 12
    elif days_inactive > 60:
        return 18
    elif total_spending > 1000:
        return 36
    return 24


def estimate_clv(customer: Customer, now: Optional[Moment] = None) -> CLVRecord:
    """
    CLV = (average order value x purchases per month) x lifespan x 20% margin.

    Spending is assumed to come in orders of 100, with at least one order.
    """
    now = as_utc(now) if now is not None else utcnow()
    joined = customer.joined_date or now
    total_spending = customer.total_spending or 0

    months_since_joined = max(1, days_between(joined, now) // DAYS_PER_MONTH)
    total_transactions = max(1, int(total_spending // SPEND_PER_TRANSACTION))
    purchase_frequency = total_transactions / months_since_joined
    aov = total_spending / total_transactions
    customer_value = aov * purchase_frequency

    days_inactive = days_between(customer.last_active or joined, now)
    lifespan = predict_lifespan_months(days_inactive, total_spending)

    clv = customer_value * lifespan * PROFIT_MARGIN

    return CLVRecord(
        customer_id=customer.id,
        predicted_clv=round_half_up(clv, 2),
        tier=determine_clv_tier(clv),
        avg_order_value=round_half_up(aov, 2),
        purchase_frequency=round_half_up(purchase_frequency, 2),
        predicted_lifespan_months=lifespan,
        customer_value=round_half_up(customer_value, 2),
        months_since_joined=months_since_joined,
        total_spending=total_spending,
        last_active=as_utc(customer.last_active) if customer.last_active is not None else None,
    )


def estimate_portfolio_clv(customers: List[Customer], now: Optional[Moment] = None) -> List[CLVRecord]:
    now = as_utc(now) if now is not None else utcnow()
    return [estimate_clv(customer, now) for customer in customers]


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def summarize_clv(records: List[CLVRecord], now: Optional[Moment] = None) -> CLVSummary:
    """
    Portfolio CLV overview.

    High-value customers are counted on the whole-dollar CLV, so 1000.3 is
    not above 1000. Retention is the share of customers whose last activity
    falls within RETENTION_WINDOW_DAYS of now; customers never active count
    as lapsed.
    """
    now = as_utc(now) if now is not None else utcnow()
    tier_counts: Dict[CLVTier, int] = {tier: 0 for tier in CLVTier}
    for record in records:
        tier_counts[record.tier] += 1

    total_clv = sum(r.predicted_clv for r in records)
    summary = CLVSummary(
        total_customers=len(records),
        avg_clv=0.0,
        total_clv=round_half_up(total_clv, 2),
        high_value_customers=sum(1 for r in records if round_half_up(r.predicted_clv) > HIGH_VALUE_CLV),
        tier_counts=tier_counts,
    )
    if not records:
        return summary

    retention_start = now - timedelta(days=RETENTION_WINDOW_DAYS)
    retained = sum(1 for r in records if r.last_active is not None and r.last_active >= retention_start)

    summary.avg_clv = round_half_up(total_clv / len(records), 2)
    summary.avg_order_value = round_half_up(_mean([r.avg_order_value for r in records]))
    summary.avg_purchase_frequency = round_half_up(_mean([r.purchase_frequency for r in records]), 2)
    summary.avg_lifespan_months = round_half_up(_mean([r.predicted_lifespan_months for r in records]), 1)
    summary.avg_customer_value = round_half_up(_mean([r.customer_value for r in records]))
    summary.retention_rate = round_half_up(retained / len(records) * 100, 1)
    return summary
