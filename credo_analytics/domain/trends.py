"""Sliding-window trend metrics over score, payment and spending history"""

from datetime import timedelta
from typing import List, Optional

from credo_analytics.domain.models import (
    Payment,
    PaymentActivity,
    ScorePoint,
    ScoreTrend,
    SpendingEntry,
    SpendingVelocity,
)
from credo_analytics.utils.date_utils import Moment, as_utc, in_window, utcnow

# Percentage change inside +/- this band counts as stable
STABLE_BAND_PERCENT = 1.0
# Second-half spending must move this far from the first half to count as a trend
VELOCITY_BAND = 0.10


def credit_score_trend(
    history: List[ScorePoint],
    window_days: int = 30,
    now: Optional[Moment] = None,
) -> ScoreTrend:
    """Percentage change between the oldest and newest score in the window"""
    end = as_utc(now) if now is not None else utcnow()
    start = end - timedelta(days=window_days)

    recent = sorted(
        (point for point in history if in_window(point.timestamp, start, end)),
        key=lambda point: as_utc(point.timestamp),
    )
    if len(recent) < 2:
        return ScoreTrend(
            percentage_change=0.0,
            direction="stable",
            data_points=len(recent),
            window_days=window_days,
        )

    oldest, newest = recent[0].score, recent[-1].score
    change = (newest - oldest) / oldest * 100 if oldest else 0.0

    if change > STABLE_BAND_PERCENT:
        direction = "up"
    elif change < -STABLE_BAND_PERCENT:
        direction = "down"
    else:
        direction = "stable"

    return ScoreTrend(
        percentage_change=round(change, 1),
        direction=direction,
        data_points=len(recent),
        window_days=window_days,
        oldest_score=oldest,
        newest_score=newest,
    )


def _payment_status(on_time_rate: float) -> str:
    if on_time_rate >= 95:
        return "Excellent"
    elif on_time_rate >= 80:
        return "Good"
    elif on_time_rate >= 60:
        return "Fair"
    return "Needs Attention"


def payment_activity(
    payments: List[Payment],
    window_days: int = 90,
    now: Optional[Moment] = None,
) -> PaymentActivity:
    """On-time rate of payments falling due inside the window"""
    if not payments:
        return PaymentActivity(0.0, 0, 0, 0.0, "No Activity", window_days)

    end = as_utc(now) if now is not None else utcnow()
    start = end - timedelta(days=window_days)
    recent = [p for p in payments if in_window(p.due_date, start, end)]
    if not recent:
        return PaymentActivity(0.0, 0, 0, 0.0, "No Recent Activity", window_days)

    completed = sum(1 for p in recent if p.completed)
    on_time_rate = completed / len(recent) * 100

    return PaymentActivity(
        on_time_rate=round(on_time_rate, 1),
        total_payments=len(recent),
        completed_payments=completed,
        avg_amount=round(sum(p.amount for p in recent) / len(recent), 2),
        status=_payment_status(on_time_rate),
        window_days=window_days,
    )


def spending_velocity(
    history: List[SpendingEntry],
    window_days: int = 30,
    now: Optional[Moment] = None,
) -> SpendingVelocity:
    """Average daily spend in the window and whether it is speeding up"""
    if not history:
        return SpendingVelocity(0.0, 0.0, 0.0, "No Data", window_days)

    end = as_utc(now) if now is not None else utcnow()
    start = end - timedelta(days=window_days)
    recent = [entry for entry in history if in_window(entry.timestamp, start, end)]
    if not recent:
        return SpendingVelocity(0.0, 0.0, 0.0, "No Recent Activity", window_days)

    total = sum(entry.amount for entry in recent)
    avg_daily = total / window_days

    midpoint = start + (end - start) / 2
    first_half = sum(e.amount for e in recent if as_utc(e.timestamp) < midpoint)
    second_half = total - first_half

    if second_half > first_half * (1 + VELOCITY_BAND):
        trend = "Increasing"
    elif second_half < first_half * (1 - VELOCITY_BAND):
        trend = "Decreasing"
    else:
        trend = "Stable"

    return SpendingVelocity(
        avg_daily_spending=round(avg_daily, 2),
        total_spending=round(total, 2),
        projected_monthly=round(avg_daily * 30, 2),
        trend=trend,
        window_days=window_days,
    )
