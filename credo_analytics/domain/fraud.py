"""Fraud network analysis - depth-bounded DFS over the loan relationship graph"""

import logging
from typing import Dict, List, Set, Tuple

from credo_analytics.domain.models import (
    FraudAnalysisResult,
    FraudPathEntry,
    Loan,
    RelationshipGraph,
    RiskLevel,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3

# Per-loan signal weights
FLAGGED_FRAUD_POINTS = 20
LARGE_UNPAID_POINTS = 10
UNKNOWN_PROVIDER_POINTS = 15
HIGH_UTILIZATION_POINTS = 5
POINTS_PER_CONNECTION = 2

LARGE_LOAN_THRESHOLD = 50_000
UNPAID_RATIO = 0.95
CONNECTION_THRESHOLD = 3

# A loan whose own score exceeds this is reported in the fraud path
SUSPICIOUS_LOAN_SCORE = 10


def classify_risk(fraud_score: float) -> RiskLevel:
    """
    Map a cumulative fraud score to a risk level.

    Upper bounds are exclusive: 50 is HIGH, 51 is CRITICAL.
    """
    if fraud_score > 50:
        return RiskLevel.CRITICAL
    elif fraud_score > 30:
        return RiskLevel.HIGH
    elif fraud_score > 15:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def score_loan(loan: Loan, connection_count: int) -> int:
    """
    Sum the independently triggered fraud signals for one loan.

    Signals:
    - flagged as fraud
    - large loan (> 50k) with more than 95% still outstanding
    - provider name mentions "unknown"
    - more than 95% outstanding, regardless of size
    - more than 3 graph neighbours: 2 points per neighbour, all of them
    """
    total = loan.total or 0
    remaining = loan.remaining or 0
    score = 0

    if loan.is_fraud:
        score += FLAGGED_FRAUD_POINTS

    if total > LARGE_LOAN_THRESHOLD and remaining > total * UNPAID_RATIO:
        score += LARGE_UNPAID_POINTS

    if loan.provider and "unknown" in loan.provider.lower():
        score += UNKNOWN_PROVIDER_POINTS

    # Zero-total loans carry no utilization signal
    if total > 0 and remaining / total > UNPAID_RATIO:
        score += HIGH_UTILIZATION_POINTS

    if connection_count > CONNECTION_THRESHOLD:
        score += connection_count * POINTS_PER_CONNECTION

    return score


def index_loans(loans: List[Loan]) -> Dict[str, Loan]:
    """Map id -> loan, keeping the first loan for a repeated id"""
    by_id: Dict[str, Loan] = {}
    for loan in loans:
        by_id.setdefault(loan.id, loan)
    return by_id


def detect_fraud_network(
    start_loan_id: str,
    graph: RelationshipGraph,
    loans: List[Loan],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> FraudAnalysisResult:
    """
    Walk the fraud network reachable from start_loan_id and score it.

    Pre-order DFS with an explicit stack. Neighbours are pushed in reverse so
    they pop in adjacency order, matching a recursive walk. A node is skipped
    when already visited or deeper than max_depth; too-deep nodes stay
    unvisited, so a shorter route found later can still reach them.
    """
    by_id = index_loans(loans)
    visited: Set[str] = set()
    visit_order: List[str] = []
    fraud_path: List[FraudPathEntry] = []
    fraud_score = 0

    stack: List[Tuple[str, int, List[str]]] = [(start_loan_id, 0, [])]
    while stack:
        loan_id, depth, path = stack.pop()
        if loan_id in visited or depth > max_depth:
            continue

        visited.add(loan_id)
        visit_order.append(loan_id)

        loan = by_id.get(loan_id)
        if loan is None:
            continue

        current_path = path + [loan_id]
        neighbours = graph.get(loan_id, [])
        loan_score = score_loan(loan, len(neighbours))
        fraud_score += loan_score

        if loan_score > SUSPICIOUS_LOAN_SCORE:
            fraud_path.append(
                FraudPathEntry(
                    loan_id=loan_id,
                    name=loan.name,
                    provider=loan.provider,
                    fraud_score=loan_score,
                    depth=depth,
                    path=current_path,
                )
            )

        for neighbour_id in reversed(neighbours):
            if neighbour_id not in visited:
                stack.append((neighbour_id, depth + 1, current_path))

    risk_level = classify_risk(fraud_score)
    logger.debug(
        "Fraud network traversal complete",
        extra={
            "start_loan_id": start_loan_id,
            "fraud_score": fraud_score,
            "risk_level": risk_level.value,
            "visited": len(visit_order),
        },
    )

    return FraudAnalysisResult(
        risk_level=risk_level,
        fraud_score=fraud_score,
        connected_loans=len(visit_order),
        network_depth=len(visit_order),
        fraud_path=fraud_path,
        visited=visit_order,
    )
