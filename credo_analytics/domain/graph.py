"""Relationship graph between loans that share suspicious attributes"""

from typing import List, Optional

from credo_analytics.domain.models import GraphStats, Loan, RelationshipGraph

LINK_ATTRIBUTES = ("provider", "email", "phone", "address")


def _shared(first: Optional[str], second: Optional[str]) -> bool:
    # Empty or missing values never link two loans
    return bool(first) and bool(second) and first == second


def loans_are_linked(first: Loan, second: Loan) -> bool:
    """True when two loans share a provider, email, phone or address"""
    return any(
        _shared(getattr(first, attr, None), getattr(second, attr, None))
        for attr in LINK_ATTRIBUTES
    )


def build_relationship_graph(loans: List[Loan]) -> RelationshipGraph:
    """
    Build an undirected adjacency list over loans.

    Every unordered pair is compared once (O(n^2)); portfolios hold tens of
    loans, so no attribute index is kept. Neighbour lists preserve the order
    in which pairs are discovered, which fixes the traversal order later on.
    """
    graph: RelationshipGraph = {loan.id: [] for loan in loans}

    for i, first in enumerate(loans):
        for second in loans[i + 1:]:
            if loans_are_linked(first, second):
                graph[first.id].append(second.id)
                graph[second.id].append(first.id)

    return graph


def graph_stats(graph: RelationshipGraph) -> GraphStats:
    return GraphStats(
        total_nodes=len(graph),
        total_edges=sum(len(neighbours) for neighbours in graph.values()) // 2,
    )
