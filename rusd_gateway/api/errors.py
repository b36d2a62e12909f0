"""Map domain errors onto HTTP status codes"""

import logging
from fastapi import HTTPException
from rusd_gateway.domain.exceptions import (
    ActionInProgress,
    ConfigurationMissing,
    ConnectionCanceled,
    DomainException,
    InvalidAmount,
    NotConnected,
    SigningUnsupported,
    TransactionTimeout,
)
from rusd_gateway.domain.models import ActionReport

_STATUS_CODES = [
    (InvalidAmount, 422),
    (ActionInProgress, 409),
    (NotConnected, 409),
    (ConfigurationMissing, 503),
    (ConnectionCanceled, 403),
    (SigningUnsupported, 403),
    (TransactionTimeout, 504),
]


def status_code_for(error: Exception) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    # Simulation / submission / unclassified ledger failures
    return 502


def raise_for_report(report: ActionReport, request_id: str) -> None:
    """Turn a failed action report into an HTTPException carrying its message"""
    if report.succeeded:
        return
    error = report.error or DomainException(report.message)
    status_code = status_code_for(error)
    log = logging.warning if status_code < 500 else logging.error
    log(f"{report.action} failed: {report.message}", extra={"request_id": request_id})
    raise HTTPException(status_code=status_code, detail=report.message)
