"""Sliding-window trend endpoints"""

from fastapi import APIRouter

from credo_analytics.api.v1.schemas import (
    PaymentActivityRequest,
    PaymentActivityResponse,
    ScoreTrendRequest,
    ScoreTrendResponse,
    SpendingVelocityRequest,
    SpendingVelocityResponse,
)
from credo_analytics.domain.trends import credit_score_trend, payment_activity, spending_velocity

router = APIRouter()


@router.post("/trends/score", response_model=ScoreTrendResponse)
def score_trend(request_body: ScoreTrendRequest):
    result = credit_score_trend(request_body.domain_history(), request_body.window_days, request_body.as_of)
    return ScoreTrendResponse.model_validate(result)


@router.post("/trends/payments", response_model=PaymentActivityResponse)
def payments(request_body: PaymentActivityRequest):
    result = payment_activity(request_body.domain_payments(), request_body.window_days, request_body.as_of)
    return PaymentActivityResponse.model_validate(result)


@router.post("/trends/spending", response_model=SpendingVelocityResponse)
def spending(request_body: SpendingVelocityRequest):
    result = spending_velocity(request_body.domain_history(), request_body.window_days, request_body.as_of)
    return SpendingVelocityResponse.model_validate(result)
