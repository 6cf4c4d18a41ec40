"""Dependency injection for FastAPI endpoints"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from fastapi import Query, Request

from ledger_engine.config import settings
from ledger_engine.infrastructure.clients.notifier import NotificationClient
from ledger_engine.utils.date_utils import now_in


@dataclass
class Clock:
    """Today's date and the matching timestamp for one request"""

    today: date
    now: datetime


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock(
    today: Optional[date] = Query(None, description="Evaluate as if this were today (YYYY-MM-DD)"),
) -> Clock:
    """System clock in the app timezone, overridable per request so runs are reproducible"""
    now = now_in(settings.app_timezone)
    if today is None:
        return Clock(today=now.date(), now=now)
    # Keep timestamps on the injected day so later runs see a consistent history
    return Clock(today=today, now=datetime.combine(today, now.timetz()))


def get_notification_client() -> NotificationClient:
    """Provide notification webhook client instance"""
    return NotificationClient()
