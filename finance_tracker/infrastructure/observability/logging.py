"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "finance-tracker", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "finance-tracker") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_auth_event(
    request_id: str,
    event: str,
    success: bool,
    user_id: Optional[str] = None,
    reason: Optional[str] = None,
) -> None:
    """Log authentication outcome (login, register, token check); never logs credentials"""
    logging.getLogger("finance_tracker.auth").log(
        logging.INFO if success else logging.WARNING,
        "Authentication %s", "succeeded" if success else "rejected",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": event,
            "outcome": "success" if success else "failure",
            "reason": reason,
        },
    )


def log_transaction_event(
    request_id: str,
    kind: str,
    action: str,
    user_id: str,
    record_id: str,
) -> None:
    """Log a completed transaction mutation"""
    logging.getLogger("finance_tracker.transactions").info(
        "Transaction %s", action,
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "kind": kind,
            "step": action,
            "record_id": record_id,
        },
    )
