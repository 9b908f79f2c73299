"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from credo_analytics.domain.categories import ScoreRangeIndex
from credo_analytics.domain.models import CreditCategory


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_category_index(request: Request) -> ScoreRangeIndex[CreditCategory]:
    """Provide the category index built once by the app factory"""
    return request.app.state.category_index
