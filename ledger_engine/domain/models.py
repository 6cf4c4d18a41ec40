"""Domain models - pure Python dataclasses representing ledger entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Optional

from ledger_engine.domain.exceptions import ValidationError


class Direction(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Frequencies the schedule advancer knows how to step"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReminderFrequency(str, Enum):
    """Display-only repeat label on a bill reminder; never advanced by the engine"""

    ONE_TIME = "one-time"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class BudgetStatus(str, Enum):
    DISABLED = "disabled"
    SAFE = "safe"
    WARNING = "warning"
    EXCEEDED = "exceeded"


class Urgency(str, Enum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"


def _coerce_enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {field_name}: {value!r}") from e


def _coerce_amount(value, field_name: str = "amount") -> Decimal:
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid {field_name}: {value!r}") from e


@dataclass
class RecurringDefinition:
    """Schedule that materializes a ledger entry every period"""

    id: uuid.UUID
    user_id: str
    title: str
    amount: Decimal
    direction: Direction
    category: str
    frequency: Frequency
    next_occurrence: date
    active: bool = True
    last_processed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValidationError("Recurring definition requires a title")
        self.amount = _coerce_amount(self.amount)
        if self.amount <= 0:
            raise ValidationError(f"Recurring amount must be positive, got {self.amount}")
        self.direction = _coerce_enum(Direction, self.direction, "direction")
        self.frequency = _coerce_enum(Frequency, self.frequency, "frequency")
        if isinstance(self.next_occurrence, datetime) or not isinstance(self.next_occurrence, date):
            raise ValidationError(f"next_occurrence must be a calendar date, got {self.next_occurrence!r}")


@dataclass
class LedgerEntry:
    """Concrete income or expense row in the user's ledger"""

    user_id: str
    title: str
    amount: Decimal
    direction: Direction
    category: str
    date: date
    created_at: datetime
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    recurring_id: Optional[uuid.UUID] = None  # Provenance only


@dataclass
class BudgetConfig:
    """Monthly spending limit; a limit of 0 disables monitoring"""

    monthly_limit: Decimal = Decimal("0")
    alert_threshold: float = 0.8

    def __post_init__(self) -> None:
        self.monthly_limit = _coerce_amount(self.monthly_limit, "monthly_limit")
        if self.monthly_limit < 0:
            raise ValidationError(f"Monthly limit cannot be negative, got {self.monthly_limit}")
        if not 0.0 <= float(self.alert_threshold) <= 1.0:
            raise ValidationError(f"Alert threshold must be within [0, 1], got {self.alert_threshold}")


@dataclass
class BillReminder:
    """Upcoming bill the user wants to be reminded about"""

    id: uuid.UUID
    user_id: str
    title: str
    amount: Decimal
    due_date: date
    frequency: ReminderFrequency = ReminderFrequency.MONTHLY
    category: str = "Other"
    active: bool = True
    notify_days_before: int = 3
    last_notified_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.amount = _coerce_amount(self.amount)
        if self.amount < 0:
            raise ValidationError(f"Reminder amount cannot be negative, got {self.amount}")
        self.frequency = _coerce_enum(ReminderFrequency, self.frequency, "reminder frequency")
        if self.notify_days_before < 0:
            raise ValidationError(f"notify_days_before cannot be negative, got {self.notify_days_before}")


@dataclass
class Materialization:
    """One due occurrence: the entry to insert and the schedule after advancing"""

    entry: LedgerEntry
    definition: RecurringDefinition
    previous_occurrence: date


@dataclass
class ProcessingFailure:
    definition_id: uuid.UUID
    reason: str


@dataclass
class ProcessingResult:
    """Outcome of one processor run, item by item"""

    created_entries: List[LedgerEntry] = field(default_factory=list)
    advanced_definitions: List[RecurringDefinition] = field(default_factory=list)
    skipped: List[uuid.UUID] = field(default_factory=list)  # Already processed by a concurrent run
    failures: List[ProcessingFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures


@dataclass
class BudgetEvaluation:
    status: BudgetStatus
    ratio: float
    percentage: int
    message: Optional[str]


@dataclass
class NotificationPayload:
    """Rendered reminder message handed to the external dispatcher"""

    reminder_id: uuid.UUID
    user_id: str
    title: str
    amount: Decimal
    due_date: date
    category: str
    frequency: str
    urgency: Urgency
    days_until: int
    subject: str

    def to_dict(self) -> dict:
        return {
            "event": "BILL_REMINDER",
            "reminder_id": str(self.reminder_id),
            "user_id": self.user_id,
            "title": self.title,
            "amount": str(self.amount),
            "due_date": self.due_date.isoformat(),
            "category": self.category,
            "frequency": self.frequency,
            "urgency": self.urgency.value,
            "days_until": self.days_until,
            "subject": self.subject,
        }
