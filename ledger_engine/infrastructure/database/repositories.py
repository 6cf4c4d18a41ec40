"""Data access layer: the engine's narrow read/write contract over the ledger tables"""

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_engine.config import settings
from ledger_engine.domain.exceptions import PersistenceFailure, ValidationError
from ledger_engine.domain.models import (
    BillReminder,
    BudgetConfig,
    BudgetStatus,
    Direction,
    LedgerEntry,
    Materialization,
    RecurringDefinition,
)
from ledger_engine.infrastructure.database.models import (
    BillReminderRow,
    BudgetSettingsRow,
    RecurringTransactionRow,
    TransactionRow,
)

logger = logging.getLogger(__name__)


def _to_definition(row: RecurringTransactionRow) -> RecurringDefinition:
    return RecurringDefinition(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        amount=row.amount,
        direction=row.type,
        category=row.category,
        frequency=row.frequency,
        next_occurrence=row.next_date,
        active=row.is_active,
        last_processed_at=row.last_processed_at,
    )


def _to_entry(row: TransactionRow) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        amount=row.amount,
        direction=Direction(row.type),
        category=row.category,
        date=row.date,
        created_at=row.created_at,
        recurring_id=row.recurring_id,
    )


def _to_reminder(row: BillReminderRow) -> BillReminder:
    return BillReminder(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        amount=row.amount,
        due_date=row.due_date,
        frequency=row.frequency,
        category=row.category,
        active=row.is_active,
        notify_days_before=row.notify_days_before,
        last_notified_at=row.last_notified_at,
    )


class RecurringRepository:
    """Read side for recurring schedules"""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self, user_id: str) -> List[RecurringDefinition]:
        """
        Active definitions for a user, ordered by next occurrence.

        Rows that fail domain validation are logged and left out so malformed
        data never reaches the processor.
        """
        rows = self.db.scalars(
            select(RecurringTransactionRow)
            .where(RecurringTransactionRow.user_id == user_id)
            .where(RecurringTransactionRow.is_active.is_(True))
            .order_by(RecurringTransactionRow.next_date)
        ).all()

        definitions = []
        for row in rows:
            try:
                definitions.append(_to_definition(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed recurring definition: {e}",
                    extra={"definition_id": str(row.id), "user_id": user_id},
                )
        return definitions


class LedgerRepository:
    """Read side for ledger entries"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_user(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[LedgerEntry]:
        """Entries for a user, optionally limited to dates within [start, end], oldest first"""
        query = select(TransactionRow).where(TransactionRow.user_id == user_id)
        if start is not None:
            query = query.where(TransactionRow.date >= start)
        if end is not None:
            query = query.where(TransactionRow.date <= end)

        rows = self.db.scalars(query.order_by(TransactionRow.date, TransactionRow.created_at)).all()
        return [_to_entry(row) for row in rows]


class BudgetRepository:
    """Budget configuration plus the last status an alert was sent for"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, user_id: str) -> Optional[BudgetSettingsRow]:
        return self.db.get(BudgetSettingsRow, user_id)

    def get_config(self, user_id: str) -> BudgetConfig:
        """Stored config, or a disabled budget when the user never set one"""
        row = self._get_row(user_id)
        if row is None:
            return BudgetConfig(monthly_limit=Decimal("0"), alert_threshold=settings.default_alert_threshold)
        return BudgetConfig(monthly_limit=row.monthly_limit, alert_threshold=row.alert_threshold)

    def get_last_status(self, user_id: str, month_start: date) -> Optional[BudgetStatus]:
        """Status recorded for the month starting at `month_start`; earlier months count as none"""
        row = self._get_row(user_id)
        if row is None or row.last_status is None or row.last_status_month != month_start:
            return None
        return BudgetStatus(row.last_status)

    def record_status(self, user_id: str, status: BudgetStatus, month_start: date) -> None:
        """Remember the latest status so the next evaluation can detect a crossing"""
        row = self._get_row(user_id)
        if row is None:
            row = BudgetSettingsRow(
                user_id=user_id,
                monthly_limit=Decimal("0"),
                alert_threshold=settings.default_alert_threshold,
            )
            self.db.add(row)
        row.last_status = status.value
        row.last_status_month = month_start
        self.db.flush()


class ReminderRepository:
    """Bill reminders and their notification timestamp"""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self, user_id: str) -> List[BillReminder]:
        rows = self.db.scalars(
            select(BillReminderRow)
            .where(BillReminderRow.user_id == user_id)
            .where(BillReminderRow.is_active.is_(True))
            .order_by(BillReminderRow.due_date)
        ).all()

        reminders = []
        for row in rows:
            try:
                reminders.append(_to_reminder(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed bill reminder: {e}",
                    extra={"reminder_id": str(row.id), "user_id": user_id},
                )
        return reminders

    def mark_notified(self, reminder_id: uuid.UUID, notified_at: datetime) -> None:
        self.db.execute(
            update(BillReminderRow)
            .where(BillReminderRow.id == reminder_id)
            .values(last_notified_at=notified_at)
            .execution_options(synchronize_session=False)
        )
        self.db.flush()


class SqlObligationStore:
    """
    ObligationStore backed by the ledger database.

    Each materialization is its own transaction:
    1. Conditionally advance the schedule, keyed on the next_date we planned from
    2. Insert the ledger entry
    3. Commit both, or roll back both

    A concurrent run that already moved next_date makes step 1 match zero rows,
    so the same occurrence can never be written twice.
    """

    def __init__(self, db: Session):
        self.db = db

    def materialize(self, materialization: Materialization) -> bool:
        definition = materialization.definition
        entry = materialization.entry

        try:
            result = self.db.execute(
                update(RecurringTransactionRow)
                .where(RecurringTransactionRow.id == definition.id)
                .where(RecurringTransactionRow.next_date == materialization.previous_occurrence)
                .where(RecurringTransactionRow.is_active.is_(True))
                .values(
                    next_date=definition.next_occurrence,
                    last_processed_at=definition.last_processed_at,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                return False

            self.db.add(
                TransactionRow(
                    id=entry.id,
                    user_id=entry.user_id,
                    title=entry.title,
                    amount=entry.amount,
                    type=entry.direction.value,
                    category=entry.category,
                    date=entry.date,
                    recurring_id=entry.recurring_id,
                    created_at=entry.created_at,
                )
            )
            self.db.commit()
            return True

        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(
                f"Could not materialize recurring definition {definition.id}: {e}",
                definition_id=definition.id,
            ) from e
