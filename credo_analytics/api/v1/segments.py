"""Customer segmentation endpoints - RFM segments and lifetime value"""

import time

from fastapi import APIRouter, Request

from credo_analytics.api.dependencies import get_request_id
from credo_analytics.api.v1.schemas import (
    CLVRecordSchema,
    CLVResponse,
    CLVSummarySchema,
    CustomersRequest,
    RFMRecordSchema,
    RFMResponse,
    SegmentSummarySchema,
)
from credo_analytics.domain.lifetime_value import estimate_portfolio_clv, summarize_clv
from credo_analytics.domain.segmentation import segment_customers, summarize_segments
from credo_analytics.infrastructure.observability.logging import log_segmentation
from credo_analytics.infrastructure.observability.metrics import (
    analysis_duration_histogram,
    record_clv_tiers,
    record_segments,
)

router = APIRouter()


@router.post("/segments/rfm", response_model=RFMResponse)
def rfm_segments(request_body: CustomersRequest, request: Request):
    """Score customers 1-5 on recency, frequency and monetary value and name their segment"""
    start_time = time.time()

    with analysis_duration_histogram.labels(operation="rfm").time():
        records = segment_customers(request_body.domain_customers(), now=request_body.as_of)
        summary = summarize_segments(records)

    record_segments(records)
    log_segmentation(get_request_id(request), "rfm", len(records), (time.time() - start_time) * 1000)

    return RFMResponse(
        customers=[RFMRecordSchema.model_validate(r) for r in records],
        summary=SegmentSummarySchema.model_validate(summary),
    )


@router.post("/segments/clv", response_model=CLVResponse)
def lifetime_value(request_body: CustomersRequest, request: Request):
    """Predict lifetime value and tier for each customer"""
    start_time = time.time()

    with analysis_duration_histogram.labels(operation="clv").time():
        records = estimate_portfolio_clv(request_body.domain_customers(), now=request_body.as_of)
        summary = summarize_clv(records, now=request_body.as_of)

    record_clv_tiers(records)
    log_segmentation(get_request_id(request), "clv", len(records), (time.time() - start_time) * 1000)

    return CLVResponse(
        customers=[CLVRecordSchema.model_validate(r) for r in records],
        summary=CLVSummarySchema.model_validate(summary),
    )
