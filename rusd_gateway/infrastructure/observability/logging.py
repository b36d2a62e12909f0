"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "rusd-gateway"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_transaction(
    method: str,
    contract_id: str,
    tx_hash: str | None,
    outcome: str,
    attempts: int,
    duration_ms: float,
) -> None:
    """Log structured write-path outcome for analysis"""
    logging.getLogger("rusd_gateway.ledger").info(
        "Contract call finished",
        extra={
            "step": "transaction_complete",
            "method": method,
            "contract_id": contract_id,
            "tx_hash": tx_hash,
            "outcome": outcome,
            "poll_attempts": attempts,
            "duration_ms": duration_ms,
        },
    )


def log_refresh_failure(account: str, error: str) -> None:
    """Log an aborted balance refresh cycle"""
    logging.getLogger("rusd_gateway.balances").warning(
        "Balance refresh failed",
        extra={"step": "balance_refresh", "account": account, "error": error},
    )
