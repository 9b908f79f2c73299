"""RFM (recency / frequency / monetary) customer segmentation"""

import math
from bisect import bisect_left
from typing import Callable, Dict, List, Optional, Tuple

from credo_analytics.domain.models import Customer, RFMRecord, Segment, SegmentSummary
from credo_analytics.utils.date_utils import Moment, as_utc, days_between, utcnow
from credo_analytics.utils.number_utils import round_half_up

NEUTRAL_SCORE = 3
SPEND_PER_TRANSACTION = 100

ScoreRule = Callable[[int, int, int], bool]

# First match wins, so order is part of the contract: e.g. (5, 5, 5) also
# satisfies Loyal and Potential but must land in Champions. Every Can't-Lose
# tuple also satisfies At-Risk, so At-Risk always claims them.
SEGMENT_RULES: List[Tuple[Segment, ScoreRule]] = [
    (Segment.CHAMPIONS, lambda r, f, m: r >= 4 and f >= 4 and m >= 4),
    (Segment.LOYAL, lambda r, f, m: r >= 3 and f >= 4 and m >= 3),
    (Segment.POTENTIAL, lambda r, f, m: r >= 4 and f >= 3 and m >= 2),
    (Segment.PROMISING, lambda r, f, m: r >= 4 and f <= 2),
    (Segment.NEED_ATTENTION, lambda r, f, m: r >= 3 and f >= 2 and m >= 2),
    (Segment.ABOUT_TO_SLEEP, lambda r, f, m: 2 <= r <= 3 and f <= 2),
    (Segment.AT_RISK, lambda r, f, m: r <= 2 and f >= 3 and m >= 3),
    (Segment.CANT_LOSE, lambda r, f, m: r <= 2 and f >= 4 and m >= 4),
    (Segment.HIBERNATING, lambda r, f, m: r <= 2 and f <= 2 and m >= 2),
]


def determine_segment(r_score: int, f_score: int, m_score: int) -> Segment:
    for segment, rule in SEGMENT_RULES:
        if rule(r_score, f_score, m_score):
            return segment
    return Segment.LOST


def quintile_score(value: float, sorted_values: List[float], reverse: bool = False) -> int:
    """
    Score 1-5 by which fifth of the sorted values the value falls in.

    Buckets are ceil(n / 5) wide and the value's rank is its first position
    in sorted_values, so ties share a score. Empty lists and unknown values
    score a neutral 3. With reverse=True the score is inverted (6 - score).
    """
    if not sorted_values:
        return NEUTRAL_SCORE

    index = bisect_left(sorted_values, value)
    if index == len(sorted_values) or sorted_values[index] != value:
        return NEUTRAL_SCORE

    bucket_size = math.ceil(len(sorted_values) / 5)
    score = min(5, index // bucket_size + 1)
    return 6 - score if reverse else score


def transaction_count(total_spending: float) -> int:
    """Transactions implied by spending: one per 100 spent, at least one"""
    if total_spending <= 0:
        return 0
    return max(1, math.floor(total_spending / SPEND_PER_TRANSACTION))


def measure_customer(customer: Customer, now: Moment) -> RFMRecord:
    """Raw recency/frequency/monetary values; scores are filled in later"""
    last_seen = customer.last_active or customer.joined_date or now
    spending = customer.total_spending or 0

    return RFMRecord(
        customer_id=customer.id,
        recency=max(0, days_between(last_seen, now)),
        frequency=transaction_count(spending),
        monetary=spending,
    )


def segment_customers(customers: List[Customer], now: Optional[Moment] = None) -> List[RFMRecord]:
    """Score every customer against the whole population and assign segments"""
    now = as_utc(now) if now is not None else utcnow()
    records = [measure_customer(customer, now) for customer in customers]

    recency_values = sorted(r.recency for r in records)
    frequency_values = sorted(r.frequency for r in records)
    monetary_values = sorted(r.monetary for r in records)

    for record in records:
        # Fewer days since last activity is better
        record.r_score = quintile_score(record.recency, recency_values, reverse=True)
        record.f_score = quintile_score(record.frequency, frequency_values)
        record.m_score = quintile_score(record.monetary, monetary_values)
        record.segment = determine_segment(record.r_score, record.f_score, record.m_score)

    return records


def summarize_segments(records: List[RFMRecord]) -> SegmentSummary:
    counts: Dict[Segment, int] = {segment: 0 for segment in Segment}
    for record in records:
        counts[record.segment] += 1

    total = len(records)
    if total:
        avg_recency = round_half_up(sum(r.recency for r in records) / total)
        avg_frequency = round_half_up(sum(r.frequency for r in records) / total, 1)
        avg_monetary = round_half_up(sum(r.monetary for r in records) / total)
    else:
        avg_recency, avg_frequency, avg_monetary = 0, 0.0, 0

    return SegmentSummary(
        total_customers=total,
        avg_recency=avg_recency,
        avg_frequency=avg_frequency,
        avg_monetary=avg_monetary,
        champions=counts[Segment.CHAMPIONS],
        segment_counts=counts,
    )
