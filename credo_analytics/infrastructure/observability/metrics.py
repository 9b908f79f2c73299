"""Prometheus metrics for fraud audits, loan gating and customer segmentation"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from credo_analytics.domain.models import CLVRecord, LoanAnalysis, RFMRecord

# Fraud metrics
fraud_audit_counter = Counter(
    "credo_fraud_audit_total",
    "Portfolio fraud audits run",
    ["overall_risk"],  # NONE | LOW | MEDIUM | HIGH | CRITICAL
)

flagged_loans_counter = Counter(
    "credo_flagged_loans_total",
    "Loans flagged by portfolio audits",
    ["risk_level"],
)

loan_validation_counter = Counter(
    "credo_loan_validation_total",
    "New-loan fraud gate outcomes",
    ["outcome"],  # accepted | accepted_flagged | rejected | duplicate
)

# Segmentation metrics
rfm_segment_counter = Counter(
    "credo_rfm_segment_total",
    "Customers assigned to each RFM segment",
    ["segment"],
)

clv_tier_counter = Counter(
    "credo_clv_tier_total",
    "Customers assigned to each CLV tier",
    ["tier"],
)

analysis_duration_histogram = Histogram(
    "credo_analysis_duration_seconds",
    "Time spent in core analysis calls",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_fraud_audit(overall_risk: str, flagged: Iterable[LoanAnalysis]) -> None:
    fraud_audit_counter.labels(overall_risk=overall_risk).inc()
    for analysis in flagged:
        flagged_loans_counter.labels(risk_level=analysis.risk_level.value).inc()


def record_loan_validation(is_valid: bool, should_flag: bool) -> None:
    """Record gate outcome; accepted loans in the advisory band are counted apart"""
    if not is_valid:
        outcome = "rejected"
    elif should_flag:
        outcome = "accepted_flagged"
    else:
        outcome = "accepted"
    loan_validation_counter.labels(outcome=outcome).inc()


def record_segments(records: Iterable[RFMRecord]) -> None:
    for record in records:
        rfm_segment_counter.labels(segment=record.segment.value).inc()


def record_clv_tiers(records: Iterable[CLVRecord]) -> None:
    for record in records:
        clv_tier_counter.labels(tier=record.tier.value).inc()
