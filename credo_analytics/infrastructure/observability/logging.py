"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from credo_analytics.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_fraud_audit(
    request_id: str,
    total_loans: int,
    overall_risk: str,
    flagged_loans: int,
    duration_ms: float,
) -> None:
    """Log structured portfolio audit outcome"""
    logging.info(
        "Fraud audit completed",
        extra={
            "request_id": request_id,
            "step": "fraud_audit_complete",
            "total_loans": total_loans,
            "overall_risk": overall_risk,
            "flagged_loans": flagged_loans,
            "duration_ms": duration_ms,
        },
    )


def log_loan_validation(
    request_id: str,
    is_valid: bool,
    should_flag: bool,
    fraud_score: int,
    duration_ms: float,
) -> None:
    """Log structured new-loan gate outcome"""
    logging.info(
        "Loan validation completed",
        extra={
            "request_id": request_id,
            "step": "loan_validation_complete",
            "validation_outcome": "accepted" if is_valid else "rejected",
            "should_flag": should_flag,
            "fraud_score": fraud_score,
            "duration_ms": duration_ms,
        },
    )


def log_segmentation(request_id: str, analysis: str, customers: int, duration_ms: float) -> None:
    logging.info(
        "Customer segmentation completed",
        extra={
            "request_id": request_id,
            "step": f"{analysis}_complete",
            "customers": customers,
            "duration_ms": duration_ms,
        },
    )
