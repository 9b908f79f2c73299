"""Pytest fixtures for testing"""

from datetime import datetime, timedelta, timezone
from typing import List

import pytest
from fastapi.testclient import TestClient

from credo_analytics.api.main import create_app
from credo_analytics.domain.categories import build_credit_category_index
from credo_analytics.domain.models import Customer, Loan

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def category_index():
    return build_credit_category_index()


@pytest.fixture
def fraud_portfolio() -> List[Loan]:
    """
    Two linked suspicious loans and one unrelated clean loan.

    fraud_1 scores 50 (flagged 20 + large unpaid 10 + unknown provider 15 +
    utilization 5), fraud_2 scores 15 (unknown provider), clean scores 0.
    """
    return [
        Loan(
            id="fraud_1",
            name="Quick Cash",
            provider="Unknown Lender",
            email="ring@example.com",
            total=60000,
            remaining=59000,
            is_fraud=True,
        ),
        Loan(
            id="fraud_2",
            name="Fast Funds",
            provider="Unknown Lender",
            total=1000,
            remaining=100,
        ),
        Loan(
            id="clean",
            name="Car Loan",
            provider="Clean Bank",
            email="me@example.com",
            total=20000,
            remaining=5000,
        ),
    ]


@pytest.fixture
def identical_loans() -> List[Loan]:
    """Four loans sharing every linking attribute"""
    return [
        Loan(
            id=f"twin_{i}",
            name=f"Twin {i}",
            provider="Acme Credit",
            email="same@example.com",
            phone="555-0100",
            address="1 Main St",
            total=1000,
            remaining=500,
        )
        for i in range(4)
    ]


def make_customer(customer_id: str, days_inactive: int, spending: float, joined_days_ago: int = 365) -> Customer:
    return Customer(
        id=customer_id,
        joined_date=NOW - timedelta(days=joined_days_ago),
        last_active=NOW - timedelta(days=days_inactive),
        total_spending=spending,
    )


@pytest.fixture
def customers() -> List[Customer]:
    """Five customers with distinct recency, frequency and spending"""
    return [
        make_customer("c1", 1, 5000),
        make_customer("c2", 10, 2000),
        make_customer("c3", 20, 1000),
        make_customer("c4", 30, 500),
        make_customer("c5", 40, 100),
    ]
