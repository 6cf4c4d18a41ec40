"""Pytest fixtures for testing"""

import os

# Point the app at SQLite before any ledger_engine module builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import uuid
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from ledger_engine.api.dependencies import get_notification_client
from ledger_engine.api.main import create_app
from ledger_engine.domain.exceptions import NotificationDispatchError
from ledger_engine.domain.models import BillReminder, Direction, Frequency, RecurringDefinition
from ledger_engine.infrastructure.database.models import Base, BillReminderRow, RecurringTransactionRow
from ledger_engine.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

USER_ID = "user_1"


class RecordingNotifier:
    """Stands in for NotificationClient; records payloads or fails on demand"""

    def __init__(self) -> None:
        self.sent: List[Dict[str, Any]] = []
        self.fail = False
        self.error: Optional[Exception] = None  # Raised as-is, bypassing dispatch error handling

    async def send(self, payload: Dict[str, Any]) -> None:
        if self.error is not None:
            raise self.error
        if self.fail:
            raise NotificationDispatchError("Notification webhook error: 503")
        self.sent.append(payload)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(db: Session, notifier: RecordingNotifier) -> TestClient:
    """Create FastAPI test client with test database and recording notifier"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_client] = lambda: notifier
    return TestClient(app)


def make_definition(**overrides) -> RecurringDefinition:
    """Weekly 50.00 expense due 2024-01-01 unless overridden"""
    fields = {
        "id": uuid.uuid4(),
        "user_id": USER_ID,
        "title": "Gym membership",
        "amount": Decimal("50.00"),
        "direction": Direction.EXPENSE,
        "category": "Health",
        "frequency": Frequency.WEEKLY,
        "next_occurrence": date(2024, 1, 1),
        "active": True,
        "last_processed_at": None,
    }
    fields.update(overrides)
    return RecurringDefinition(**fields)


def make_reminder(**overrides) -> BillReminder:
    fields = {
        "id": uuid.uuid4(),
        "user_id": USER_ID,
        "title": "Electricity",
        "amount": Decimal("1200.00"),
        "due_date": date(2024, 1, 15),
        "frequency": "monthly",
        "category": "Utilities",
        "active": True,
        "notify_days_before": 3,
        "last_notified_at": None,
    }
    fields.update(overrides)
    return BillReminder(**fields)


def add_recurring_row(db: Session, **overrides) -> RecurringTransactionRow:
    fields = {
        "user_id": USER_ID,
        "title": "Rent",
        "amount": Decimal("900.00"),
        "type": "expense",
        "category": "Housing",
        "frequency": "monthly",
        "next_date": date(2024, 1, 31),
        "is_active": True,
    }
    fields.update(overrides)
    row = RecurringTransactionRow(**fields)
    db.add(row)
    db.commit()
    return row


def add_reminder_row(db: Session, **overrides) -> BillReminderRow:
    fields = {
        "user_id": USER_ID,
        "title": "Internet",
        "amount": Decimal("60.00"),
        "due_date": date(2024, 1, 12),
        "frequency": "monthly",
        "category": "Utilities",
        "is_active": True,
        "notify_days_before": 3,
    }
    fields.update(overrides)
    row = BillReminderRow(**fields)
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
