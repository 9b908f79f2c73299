"""Fraud network endpoints - portfolio audit, single-loan analysis, new-loan gate"""

import logging
import time

from fastapi import APIRouter, HTTPException, Request

from credo_analytics.api.dependencies import get_request_id
from credo_analytics.api.v1.schemas import (
    AnalyzeRequest,
    FraudAnalysisResponse,
    LoanFraudReportResponse,
    LoanValidationResponse,
    PortfolioAuditResponse,
    PortfolioRequest,
    ValidateLoanRequest,
)
from credo_analytics.config import settings
from credo_analytics.domain.exceptions import DuplicateLoanError
from credo_analytics.domain.fraud import detect_fraud_network
from credo_analytics.domain.graph import build_relationship_graph
from credo_analytics.domain.portfolio import audit_portfolio, loan_fraud_report
from credo_analytics.domain.validation import validate_new_loan
from credo_analytics.infrastructure.observability.logging import log_fraud_audit, log_loan_validation
from credo_analytics.infrastructure.observability.metrics import (
    analysis_duration_histogram,
    loan_validation_counter,
    record_fraud_audit,
    record_loan_validation,
)

router = APIRouter()


def _max_depth(requested: int | None) -> int:
    return settings.fraud_max_depth if requested is None else requested


@router.post("/fraud/audit", response_model=PortfolioAuditResponse)
def audit(request_body: PortfolioRequest, request: Request):
    """
    Run the fraud network analysis from every loan in the portfolio.

    Returns per-loan analyses, flagged loans (highest score first), the
    overall risk and advisory recommendations.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        with analysis_duration_histogram.labels(operation="audit").time():
            result = audit_portfolio(request_body.domain_loans(), _max_depth(request_body.max_depth))
    except Exception as e:
        logging.error(f"Unexpected error during fraud audit: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_fraud_audit(result.overall_risk.value, result.flagged_loans)
    log_fraud_audit(
        request_id,
        result.total_loans,
        result.overall_risk.value,
        len(result.flagged_loans),
        duration_ms,
    )

    return PortfolioAuditResponse.model_validate(result)


@router.post("/fraud/analyze", response_model=FraudAnalysisResponse)
def analyze(request_body: AnalyzeRequest, request: Request):
    """Analyze the fraud network reachable from one loan"""
    loans = request_body.domain_loans()
    if not any(loan.id == request_body.start_loan_id for loan in loans):
        raise HTTPException(status_code=404, detail="Loan not found")

    with analysis_duration_histogram.labels(operation="analyze").time():
        graph = build_relationship_graph(loans)
        result = detect_fraud_network(
            request_body.start_loan_id,
            graph,
            loans,
            _max_depth(request_body.max_depth),
        )

    logging.info(
        "Fraud network analyzed",
        extra={
            "request_id": get_request_id(request),
            "start_loan_id": request_body.start_loan_id,
            "risk_level": result.risk_level.value,
            "fraud_score": result.fraud_score,
        },
    )
    return FraudAnalysisResponse.model_validate(result)


@router.post("/fraud/report/{loan_id}", response_model=LoanFraudReportResponse)
def report(loan_id: str, request_body: PortfolioRequest):
    """Detailed fraud report for one loan of the supplied portfolio"""
    result = loan_fraud_report(
        loan_id,
        request_body.domain_loans(),
        max_depth=_max_depth(request_body.max_depth),
    )
    if result is None:
        raise HTTPException(status_code=404, detail="Loan not found")

    return LoanFraudReportResponse.model_validate(result)


@router.post("/fraud/validate", response_model=LoanValidationResponse)
def validate(request_body: ValidateLoanRequest, request: Request):
    """
    Gate a loan before it is persisted.

    The caller decides whether to store it and whether to attach an
    auto-flagged fraud report (should_flag).
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        with analysis_duration_histogram.labels(operation="validate").time():
            result = validate_new_loan(
                request_body.candidate.to_domain(),
                [loan.to_domain() for loan in request_body.existing_loans],
                max_depth=_max_depth(request_body.max_depth),
                temp_id_prefix=settings.temp_loan_id_prefix,
            )

    except DuplicateLoanError as e:
        loan_validation_counter.labels(outcome="duplicate").inc()
        logging.warning(f"Duplicate loan: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error during loan validation: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_loan_validation(result.is_valid, result.should_flag)
    log_loan_validation(request_id, result.is_valid, result.should_flag, result.fraud_score, duration_ms)

    return LoanValidationResponse.model_validate(result)
