"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


@pytest.fixture
def portfolio_payload():
    return [
        {
            "id": "fraud_1",
            "name": "Quick Cash",
            "provider": "Unknown Lender",
            "email": "ring@example.com",
            "total": 60000,
            "remaining": 59000,
            "is_fraud": True,
            "fraud_report": {
                "reason": "Identity theft",
                "details": "Not opened by me",
                "reported_at": "2026-01-01T00:00:00Z",
            },
        },
        {"id": "fraud_2", "name": "Fast Funds", "provider": "Unknown Lender", "total": 1000, "remaining": 100},
        {"id": "clean", "name": "Car Loan", "provider": "Clean Bank", "total": 20000, "remaining": 5000},
    ]


def test_health_endpoint(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "credo_fraud_audit_total" in response.text


def test_request_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_audit_empty_portfolio(client: TestClient):
    response = client.post("/v1/fraud/audit", json={"loans": []})

    assert response.status_code == 200
    data = response.json()
    assert data["overall_risk"] == "NONE"
    assert data["recommendations"] == ["No loans to analyze"]


def test_audit_portfolio(client: TestClient, portfolio_payload):
    response = client.post("/v1/fraud/audit", json={"loans": portfolio_payload})

    assert response.status_code == 200
    data = response.json()
    assert data["overall_risk"] == "CRITICAL"
    assert data["total_loans"] == 3
    assert [a["loan_id"] for a in data["flagged_loans"]] == ["fraud_1", "fraud_2"]
    assert data["flagged_loans"][0]["analysis"]["fraud_score"] == 65
    assert data["graph_stats"] == {"total_nodes": 3, "total_edges": 1}


def test_audit_rejects_negative_amounts(client: TestClient):
    response = client.post("/v1/fraud/audit", json={"loans": [{"id": "a", "total": -5}]})
    assert response.status_code == 422


def test_analyze_shared_email(client: TestClient):
    loans = [
        {"id": "a", "provider": "Bank A", "email": "x@example.com", "total": 1000, "remaining": 100},
        {"id": "b", "provider": "Bank B", "email": "x@example.com", "total": 1000, "remaining": 100},
    ]
    response = client.post("/v1/fraud/analyze", json={"start_loan_id": "b", "loans": loans})

    assert response.status_code == 200
    data = response.json()
    assert data["connected_loans"] == 2
    assert data["visited"] == ["b", "a"]
    assert data["risk_level"] == "LOW"


def test_analyze_unknown_loan(client: TestClient, portfolio_payload):
    response = client.post("/v1/fraud/analyze", json={"start_loan_id": "nope", "loans": portfolio_payload})
    assert response.status_code == 404


def test_analyze_respects_max_depth(client: TestClient, portfolio_payload):
    response = client.post(
        "/v1/fraud/analyze",
        json={"start_loan_id": "fraud_2", "loans": portfolio_payload, "max_depth": 0},
    )
    assert response.json()["visited"] == ["fraud_2"]


def test_loan_report(client: TestClient, portfolio_payload):
    response = client.post("/v1/fraud/report/fraud_1", json={"loans": portfolio_payload})

    assert response.status_code == 200
    data = response.json()
    assert data["amount"] == 60000
    assert data["analysis"]["risk_level"] == "CRITICAL"
    assert data["generated_at"]

    assert client.post("/v1/fraud/report/missing", json={"loans": portfolio_payload}).status_code == 404


def test_validate_advisory_band(client: TestClient):
    response = client.post(
        "/v1/fraud/validate",
        json={"candidate": {"provider": "Unknown Finance", "total": 1000, "remaining": 100}, "existing_loans": []},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["is_valid"] is True
    assert data["should_flag"] is True
    assert data["fraud_score"] == 15


def test_validate_duplicate_id(client: TestClient, portfolio_payload):
    response = client.post(
        "/v1/fraud/validate",
        json={"candidate": {"id": "clean", "provider": "Clean Bank"}, "existing_loans": portfolio_payload},
    )
    assert response.status_code == 409


def test_validate_respects_max_depth(client: TestClient, portfolio_payload):
    candidate = {"provider": "Unknown Lender", "total": 1000, "remaining": 100}

    linked = client.post("/v1/fraud/validate", json={"candidate": candidate, "existing_loans": portfolio_payload})
    assert linked.json()["fraud_score"] == 80
    assert linked.json()["is_valid"] is False

    alone = client.post(
        "/v1/fraud/validate",
        json={"candidate": candidate, "existing_loans": portfolio_payload, "max_depth": 0},
    )
    assert alone.json()["fraud_score"] == 15
    assert alone.json()["is_valid"] is True


def test_rfm_segments(client: TestClient):
    as_of = "2026-01-15T12:00:00Z"
    customers = [
        {"id": "c1", "last_active": "2026-01-14T12:00:00Z", "total_spending": 5000},
        {"id": "c2", "last_active": "2025-12-06T12:00:00Z", "total_spending": 100},
    ]

    response = client.post("/v1/segments/rfm", json={"customers": customers, "as_of": as_of})

    assert response.status_code == 200
    data = response.json()
    by_id = {c["customer_id"]: c for c in data["customers"]}
    assert by_id["c1"]["recency"] == 1
    assert by_id["c2"]["recency"] == 40
    assert data["summary"]["total_customers"] == 2
    assert set(data["summary"]["segment_counts"]) >= {"champions", "lost"}


def test_clv(client: TestClient):
    customers = [
        {
            "id": "vip",
            "joined_date": "2025-09-17T12:00:00Z",
            "last_active": "2026-01-10T12:00:00Z",
            "total_spending": 1200,
        }
    ]

    response = client.post("/v1/segments/clv", json={"customers": customers, "as_of": "2026-01-15T12:00:00Z"})

    assert response.status_code == 200
    data = response.json()
    assert data["customers"][0]["tier"] == "platinum"
    assert data["customers"][0]["predicted_lifespan_months"] == 36
    assert data["summary"]["tier_counts"]["platinum"] == 1
    assert data["summary"]["retention_rate"] == 100.0
    assert data["summary"]["avg_lifespan_months"] == 36.0


def test_credit_category(client: TestClient):
    response = client.get("/v1/credit/category/720")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Moderate Risk"
    assert data["utilization"]["danger_threshold"] == 20
    assert len(data["required_actions"]) == 5


@pytest.mark.parametrize("score", [299, 851])
def test_credit_category_out_of_range(client: TestClient, score):
    assert client.get(f"/v1/credit/category/{score}").status_code == 404


def test_utilization_check(client: TestClient):
    response = client.post(
        "/v1/credit/utilization",
        json={
            "credit_score": 700,
            "cards": [{"id": "a", "limit": 1000, "balance": 100}, {"id": "b", "limit": 1000}],
            "card_id": "a",
            "amount": 100,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["change"]["new_utilization"] == 10.0
    assert data["warning"]["level"] == "caution"
    assert data["should_proceed"] is True
    assert data["limits"]["recommended"] == 20
    assert [c["id"] for c in data["eligible_cards"]] == ["a", "b"]


def test_score_trend(client: TestClient):
    response = client.post(
        "/v1/trends/score",
        json={
            "history": [
                {"score": 600, "timestamp": "2025-12-26T12:00:00Z"},
                {"score": 630, "timestamp": "2026-01-05T12:00:00Z"},
            ],
            "as_of": "2026-01-15T12:00:00Z",
        },
    )

    assert response.status_code == 200
    assert response.json()["direction"] == "up"


def test_payment_and_spending_trends(client: TestClient):
    as_of = "2026-01-15T12:00:00Z"
    payments = client.post(
        "/v1/trends/payments",
        json={"payments": [{"amount": 50, "due_date": "2026-01-01T00:00:00Z", "completed": True}], "as_of": as_of},
    )
    assert payments.json()["status"] == "Excellent"

    spending = client.post(
        "/v1/trends/spending",
        json={"history": [{"amount": 300, "timestamp": "2026-01-10T00:00:00Z"}], "as_of": as_of},
    )
    assert spending.json()["total_spending"] == 300
