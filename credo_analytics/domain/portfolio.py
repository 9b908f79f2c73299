"""Portfolio-wide fraud audit and per-loan fraud reports"""

from datetime import datetime
from typing import Callable, List, Optional, Tuple

from credo_analytics.domain.fraud import (
    CONNECTION_THRESHOLD,
    DEFAULT_MAX_DEPTH,
    classify_risk,
    detect_fraud_network,
    index_loans,
)
from credo_analytics.domain.graph import build_relationship_graph, graph_stats
from credo_analytics.domain.models import (
    GraphStats,
    Loan,
    LoanAnalysis,
    LoanFraudReport,
    PortfolioAudit,
    RiskLevel,
)
from credo_analytics.utils.date_utils import as_utc, utcnow

NO_LOANS_MESSAGE = "No loans to analyze"

NO_FRAUD_RECOMMENDATIONS = (
    "No fraud patterns detected in your loan portfolio",
    "Continue monitoring loan activity regularly",
)


def _at_level(level: RiskLevel) -> Callable[[List[LoanAnalysis]], List[LoanAnalysis]]:
    return lambda flagged: [a for a in flagged if a.risk_level == level]


def _highly_connected(flagged: List[LoanAnalysis]) -> List[LoanAnalysis]:
    return [a for a in flagged if a.connected_loans > CONNECTION_THRESHOLD]


# Evaluated in order; every rule whose selector matches at least one flagged
# loan appends its block. "{count}" is the number of matching loans.
RECOMMENDATION_RULES: List[Tuple[str, Callable[[List[LoanAnalysis]], List[LoanAnalysis]], Tuple[str, ...]]] = [
    (
        "critical",
        _at_level(RiskLevel.CRITICAL),
        (
            "CRITICAL: {count} loan(s) show severe fraud patterns",
            "Contact your financial institution immediately",
            "Freeze credit reports with all three bureaus",
        ),
    ),
    (
        "high",
        _at_level(RiskLevel.HIGH),
        (
            "HIGH RISK: {count} loan(s) need immediate review",
            "Request detailed statements from loan providers",
            "Verify all loan details and recent transactions",
        ),
    ),
    (
        "medium",
        _at_level(RiskLevel.MEDIUM),
        (
            "MEDIUM RISK: {count} loan(s) show unusual patterns",
            "Review loan documentation carefully",
            "Set up fraud alerts on your credit accounts",
        ),
    ),
    (
        "interconnected",
        _highly_connected,
        (
            "Multiple loans show interconnected patterns",
            "Investigate shared providers or account details",
        ),
    ),
]


def generate_recommendations(flagged_loans: List[LoanAnalysis]) -> List[str]:
    """Fixed advisory blocks keyed by which risk levels were flagged"""
    if not flagged_loans:
        return list(NO_FRAUD_RECOMMENDATIONS)

    recommendations: List[str] = []
    for _name, select, block in RECOMMENDATION_RULES:
        matches = select(flagged_loans)
        if matches:
            recommendations.extend(line.format(count=len(matches)) for line in block)
    return recommendations


def audit_portfolio(loans: List[Loan], max_depth: int = DEFAULT_MAX_DEPTH) -> PortfolioAudit:
    """
    Analyze every loan in a portfolio as a traversal start.

    Returns all per-loan analyses, the non-LOW ones sorted by score
    (highest first), an overall risk taken from the highest score, and
    recommendations. An empty portfolio is reported as RiskLevel.NONE.
    """
    if not loans:
        return PortfolioAudit(
            overall_risk=RiskLevel.NONE,
            total_loans=0,
            analyzed_loans=[],
            flagged_loans=[],
            recommendations=[NO_LOANS_MESSAGE],
            graph_stats=GraphStats(total_nodes=0, total_edges=0),
        )

    graph = build_relationship_graph(loans)

    analyzed = [
        LoanAnalysis(
            loan_id=loan.id,
            loan_name=loan.name,
            provider=loan.provider,
            analysis=detect_fraud_network(loan.id, graph, loans, max_depth),
        )
        for loan in loans
    ]

    flagged = sorted(
        (a for a in analyzed if a.risk_level != RiskLevel.LOW),
        key=lambda a: a.fraud_score,
        reverse=True,
    )

    return PortfolioAudit(
        overall_risk=classify_risk(max(a.fraud_score for a in analyzed)),
        total_loans=len(loans),
        analyzed_loans=analyzed,
        flagged_loans=flagged,
        recommendations=generate_recommendations(flagged),
        graph_stats=graph_stats(graph),
    )


def loan_fraud_report(
    loan_id: str,
    loans: List[Loan],
    now: Optional[datetime] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Optional[LoanFraudReport]:
    """Detailed network analysis for one loan; None if the id is unknown"""
    loan = index_loans(loans).get(loan_id)
    if loan is None:
        return None

    graph = build_relationship_graph(loans)
    analysis = detect_fraud_network(loan_id, graph, loans, max_depth)
    generated_at = as_utc(now) if now is not None else utcnow()

    return LoanFraudReport(
        loan_id=loan.id,
        name=loan.name,
        provider=loan.provider,
        amount=loan.total,
        remaining=loan.remaining,
        analysis=analysis,
        generated_at=generated_at.isoformat(),
    )
