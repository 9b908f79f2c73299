"""Unit tests for fraud network traversal and scoring"""

from collections import deque

import pytest

from credo_analytics.domain.fraud import classify_risk, detect_fraud_network, score_loan
from credo_analytics.domain.graph import build_relationship_graph
from credo_analytics.domain.models import Loan, RiskLevel


def reachable_within(graph, start, max_depth):
    """Ids whose shortest hop distance from start is at most max_depth"""
    distances = {start: 0}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        if distances[node] == max_depth:
            continue
        for other in graph.get(node, []):
            if other not in distances:
                distances[other] = distances[node] + 1
                queue.append(other)
    return set(distances)


@pytest.mark.parametrize(
    "score,expected",
    [
        (0, RiskLevel.LOW),
        (15, RiskLevel.LOW),
        (16, RiskLevel.MEDIUM),
        (30, RiskLevel.MEDIUM),
        (31, RiskLevel.HIGH),
        (50, RiskLevel.HIGH),
        (51, RiskLevel.CRITICAL),
        (200, RiskLevel.CRITICAL),
    ],
)
def test_classify_risk_boundaries(score, expected):
    """Thresholds are exclusive: 50 is HIGH, 51 is CRITICAL"""
    assert classify_risk(score) == expected


def test_score_loan_signals():
    assert score_loan(Loan(id="a", total=1000, remaining=100), 0) == 0
    assert score_loan(Loan(id="a", total=1000, remaining=100, is_fraud=True), 0) == 20
    assert score_loan(Loan(id="a", provider="UNKNOWN Finance", total=1000, remaining=100), 0) == 15
    # Utilization alone
    assert score_loan(Loan(id="a", total=1000, remaining=990), 0) == 5
    # Large and nearly unpaid also triggers utilization
    assert score_loan(Loan(id="a", total=60000, remaining=58000), 0) == 15


def test_connection_points_use_full_count():
    loan = Loan(id="a", total=1000, remaining=100)
    assert score_loan(loan, 3) == 0
    assert score_loan(loan, 4) == 8
    assert score_loan(loan, 6) == 12


def test_missing_numbers_score_nothing():
    """Zero totals carry no utilization or size signal"""
    assert score_loan(Loan(id="a"), 0) == 0
    assert score_loan(Loan(id="a", total=0, remaining=500), 0) == 0


def test_shared_email_network_from_either_end():
    loans = [
        Loan(id="a", provider="Bank A", email="x@example.com", total=1000, remaining=100),
        Loan(id="b", provider="Bank B", email="x@example.com", total=1000, remaining=100),
    ]
    graph = build_relationship_graph(loans)

    for start in ("a", "b"):
        result = detect_fraud_network(start, graph, loans)
        assert result.connected_loans == 2
        assert set(result.visited) == {"a", "b"}
        assert result.risk_level == RiskLevel.LOW


def test_isolated_large_unknown_loan_is_medium():
    """10 (large, unpaid) + 15 (unknown provider) + 5 (utilization) = 30, which is not > 30"""
    loans = [Loan(id="solo", name="Big", provider="Unknown Lender", total=60000, remaining=59000)]
    result = detect_fraud_network("solo", build_relationship_graph(loans), loans)

    assert result.fraud_score == 30
    assert result.risk_level == RiskLevel.MEDIUM
    assert result.connected_loans == 1
    assert len(result.fraud_path) == 1
    entry = result.fraud_path[0]
    assert (entry.loan_id, entry.fraud_score, entry.depth, entry.path) == ("solo", 30, 0, ["solo"])


def test_scores_accumulate_across_network(fraud_portfolio):
    graph = build_relationship_graph(fraud_portfolio)
    result = detect_fraud_network("fraud_2", graph, fraud_portfolio)

    assert result.fraud_score == 65
    assert result.risk_level == RiskLevel.CRITICAL
    assert result.visited == ["fraud_2", "fraud_1"]
    assert [e.loan_id for e in result.fraud_path] == ["fraud_2", "fraud_1"]
    assert result.fraud_path[1].path == ["fraud_2", "fraud_1"]
    assert result.fraud_path[1].depth == 1


def test_only_loans_above_ten_enter_path():
    loans = [Loan(id=f"l{i}", provider="Acme", total=1000, remaining=100) for i in range(5)]
    result = detect_fraud_network("l0", build_relationship_graph(loans), loans)

    # Each loan has 4 neighbours: 8 points, below the path threshold
    assert result.fraud_score == 40
    assert result.risk_level == RiskLevel.HIGH
    assert result.fraud_path == []


def test_preorder_traversal_order():
    graph = {"a": ["b", "c"], "b": ["a", "d"], "c": ["a"], "d": ["b"]}
    loans = [Loan(id=x, total=1) for x in "abc"] + [Loan(id="d", is_fraud=True)]

    result = detect_fraud_network("a", graph, loans)

    assert result.visited == ["a", "b", "d", "c"]
    entry = result.fraud_path[0]
    assert entry.loan_id == "d"
    assert entry.depth == 2
    assert entry.path == ["a", "b", "d"]


def test_depth_bound_stops_descent():
    graph = {"a": ["b"], "b": ["a", "c"], "c": ["b", "d"], "d": ["c", "e"], "e": ["d"]}
    loans = [Loan(id=x) for x in "abcde"]

    assert detect_fraud_network("a", graph, loans, max_depth=3).visited == ["a", "b", "c", "d"]
    assert detect_fraud_network("a", graph, loans, max_depth=0).visited == ["a"]


def test_too_deep_node_reached_by_shorter_route():
    """A node skipped for depth stays unvisited and can be reached later"""
    graph = {
        "a": ["b", "e"],
        "b": ["a", "c"],
        "c": ["b", "d"],
        "d": ["c", "e"],
        "e": ["d", "a"],
    }
    loans = [Loan(id=x) for x in "abcde"]

    result = detect_fraud_network("a", graph, loans, max_depth=2)

    assert result.visited == ["a", "b", "c", "e", "d"]


def test_cycles_visit_each_loan_once(identical_loans):
    graph = build_relationship_graph(identical_loans)
    result = detect_fraud_network("twin_0", graph, identical_loans, max_depth=10)

    assert sorted(result.visited) == sorted(loan.id for loan in identical_loans)
    assert len(result.visited) == len(set(result.visited))


def test_visited_bounded_by_reachable(fraud_portfolio, identical_loans):
    loans = fraud_portfolio + identical_loans
    graph = build_relationship_graph(loans)
    for loan in loans:
        for depth in (0, 1, 3):
            result = detect_fraud_network(loan.id, graph, loans, max_depth=depth)
            assert set(result.visited) <= reachable_within(graph, loan.id, depth)


def test_repeat_runs_identical(fraud_portfolio):
    graph = build_relationship_graph(fraud_portfolio)
    first = detect_fraud_network("fraud_1", graph, fraud_portfolio)
    second = detect_fraud_network("fraud_1", graph, fraud_portfolio)

    assert first == second


def test_unknown_start_loan():
    result = detect_fraud_network("ghost", {}, [])

    assert result.visited == ["ghost"]
    assert result.connected_loans == 1
    assert result.fraud_score == 0
    assert result.risk_level == RiskLevel.LOW


def test_inputs_not_mutated(fraud_portfolio):
    graph = build_relationship_graph(fraud_portfolio)
    snapshot = {k: list(v) for k, v in graph.items()}

    detect_fraud_network("fraud_1", graph, fraud_portfolio)

    assert graph == snapshot
    assert fraud_portfolio[0].is_fraud is True
    assert fraud_portfolio[0].fraud_report is None
