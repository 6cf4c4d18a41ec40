"""Pydantic schemas for API responses"""

from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List, Optional


class LedgerEntrySchema(BaseModel):
    """Ledger entry created from a recurring definition"""

    entry_id: str
    recurring_id: Optional[str] = None
    title: str
    amount: Decimal
    direction: str
    category: str
    date: date


class ItemFailureSchema(BaseModel):
    """Item that could not be processed in this run"""

    id: str
    reason: str


class ProcessResponse(BaseModel):
    """Response for POST /v1/recurring/process"""

    user_id: str
    today: date
    created_count: int
    skipped_count: int
    failed_count: int
    entries: List[LedgerEntrySchema]
    failures: List[ItemFailureSchema]


class BudgetStatusResponse(BaseModel):
    """Response for POST /v1/budget/evaluate"""

    user_id: str
    status: str
    spent: Decimal
    monthly_limit: Decimal
    alert_threshold: float
    percentage: int
    message: Optional[str] = None
    alert_sent: bool = False


class ReminderSchema(BaseModel):
    """Bill reminder with its proximity classification"""

    reminder_id: str
    title: str
    amount: Decimal
    due_date: date
    category: str
    frequency: str
    urgency: str
    days_until: int


class UpcomingRemindersResponse(BaseModel):
    """Response for GET /v1/reminders/upcoming"""

    user_id: str
    today: date
    window_days: int
    banner: Optional[str] = None
    upcoming: List[ReminderSchema]
    reminders: List[ReminderSchema]


class NotifyResponse(BaseModel):
    """Response for POST /v1/reminders/notify"""

    user_id: str
    sent: List[str]
    failures: List[ItemFailureSchema]
