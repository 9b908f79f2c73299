"""Credit category lookup and utilization check endpoints"""

from fastapi import APIRouter, Depends, HTTPException

from credo_analytics.api.dependencies import get_category_index
from credo_analytics.api.v1.schemas import (
    CreditCategoryResponse,
    UtilizationReportResponse,
    UtilizationRequest,
)
from credo_analytics.domain.categories import ScoreRangeIndex, lookup_category
from credo_analytics.domain.models import CreditCategory
from credo_analytics.domain.utilization import utilization_report

router = APIRouter()


@router.get("/credit/category/{score}", response_model=CreditCategoryResponse)
def get_category(score: int, index: ScoreRangeIndex[CreditCategory] = Depends(get_category_index)):
    """
    Credit category, required actions and utilization limits for a score.

    Returns 404 for scores outside 300-850.
    """
    category = lookup_category(index, score)
    if category is None:
        raise HTTPException(status_code=404, detail="Credit score must be between 300 and 850")

    return CreditCategoryResponse.model_validate(category)


@router.post("/credit/utilization", response_model=UtilizationReportResponse)
def check_utilization(
    request_body: UtilizationRequest,
    index: ScoreRangeIndex[CreditCategory] = Depends(get_category_index),
):
    """Effect of a card payment on utilization, judged against the score's category"""
    report = utilization_report(
        index,
        request_body.credit_score,
        [card.to_domain() for card in request_body.cards],
        request_body.card_id,
        request_body.amount,
    )
    return UtilizationReportResponse.model_validate(report)
