"""Structured JSON logging for the ledger engine"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from ledger_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps every record with time, level and service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger to stdout as JSON lines"""
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)

    # SQL echo is noise at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def log_processing_run(
    request_id: str,
    user_id: str,
    created: int,
    skipped: int,
    failed: int,
    duration_ms: float,
) -> None:
    """Log the outcome of one recurring-obligation run"""
    logging.info(
        "Recurring processing completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "recurring_processed",
            "entries_created": created,
            "definitions_skipped": skipped,
            "definitions_failed": failed,
            "duration_ms": duration_ms,
        },
    )


def log_budget_evaluation(request_id: str, user_id: str, status: str, percentage: int, alerted: bool) -> None:
    logging.info(
        "Budget evaluated",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "budget_evaluated",
            "budget_status": status,
            "budget_percentage": percentage,
            "alert_sent": alerted,
        },
    )
