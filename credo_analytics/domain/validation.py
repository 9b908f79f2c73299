"""Pre-persistence fraud gate for new loans"""

import time
from dataclasses import replace
from typing import Callable, List, Optional

from credo_analytics.domain.exceptions import DuplicateLoanError
from credo_analytics.domain.fraud import (
    CONNECTION_THRESHOLD,
    DEFAULT_MAX_DEPTH,
    LARGE_LOAN_THRESHOLD,
    detect_fraud_network,
)
from credo_analytics.domain.graph import build_relationship_graph
from credo_analytics.domain.models import Loan, LoanValidation

# isValid is strict below REJECT_SCORE; should_flag starts at FLAG_SCORE, so
# scores 15-19 are accepted but still advised for flagging.
REJECT_SCORE = 20
FLAG_SCORE = 15

HIGH_RISK_WARNING = "This loan shows high-risk fraud patterns"
CONNECTIONS_WARNING = "This loan has many connections to existing loans"
LARGE_AMOUNT_WARNING = "Large loan amount - verify legitimacy"


def _millis() -> int:
    return int(time.time() * 1000)


def temporary_loan_id(existing_ids: set, prefix: str = "temp-", clock: Callable[[], int] = _millis) -> str:
    """Synthetic id for the candidate that cannot clash with a real one"""
    stamp = clock()
    candidate_id = f"{prefix}{stamp}"
    while candidate_id in existing_ids:
        stamp += 1
        candidate_id = f"{prefix}{stamp}"
    return candidate_id


def validate_new_loan(
    candidate: Loan,
    existing_loans: List[Loan],
    max_depth: int = DEFAULT_MAX_DEPTH,
    temp_id_prefix: str = "temp-",
    clock: Optional[Callable[[], int]] = None,
) -> LoanValidation:
    """
    Score a loan as if it had been added to the portfolio.

    The candidate is appended under a synthetic id, the graph is rebuilt and
    the network is analyzed from the candidate.

    Raises:
        DuplicateLoanError: candidate already carries the id of an existing loan
    """
    existing_ids = {loan.id for loan in existing_loans}
    if candidate.id and candidate.id in existing_ids:
        raise DuplicateLoanError(candidate.id)

    temp_id = temporary_loan_id(existing_ids, temp_id_prefix, clock or _millis)
    portfolio = list(existing_loans) + [replace(candidate, id=temp_id)]

    graph = build_relationship_graph(portfolio)
    analysis = detect_fraud_network(temp_id, graph, portfolio, max_depth)

    warnings: List[str] = []
    if analysis.fraud_score >= REJECT_SCORE:
        warnings.append(HIGH_RISK_WARNING)
    if analysis.connected_loans > CONNECTION_THRESHOLD:
        warnings.append(CONNECTIONS_WARNING)
    if (candidate.total or 0) > LARGE_LOAN_THRESHOLD:
        warnings.append(LARGE_AMOUNT_WARNING)

    return LoanValidation(
        is_valid=analysis.fraud_score < REJECT_SCORE,
        fraud_score=analysis.fraud_score,
        risk_level=analysis.risk_level,
        warnings=warnings,
        should_flag=analysis.fraud_score >= FLAG_SCORE,
    )
