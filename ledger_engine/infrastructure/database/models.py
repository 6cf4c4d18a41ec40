"""SQLAlchemy ORM models for the ledger tables the engine reads and writes"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, Numeric, Text, Uuid, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class RecurringTransactionRow(Base):
    """Recurring income/expense schedule"""

    __tablename__ = "recurring_transactions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String(16), nullable=False)  # "income" or "expense"
    category = Column(Text, nullable=False)
    frequency = Column(String(16), nullable=False)  # "weekly" or "monthly"
    next_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRow(Base):
    """Ledger entry"""

    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_date", "user_id", "date"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String(16), nullable=False)
    category = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    recurring_id = Column(Uuid(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BudgetSettingsRow(Base):
    """Per-user monthly budget and the last status an alert went out for"""

    __tablename__ = "budget_settings"

    user_id = Column(Text, primary_key=True)
    monthly_limit = Column(Numeric(12, 2), nullable=False, default=0)
    alert_threshold = Column(Float, nullable=False, default=0.8)
    last_status = Column(String(16), nullable=True)
    last_status_month = Column(Date, nullable=True)  # First day of the month last_status was evaluated in
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class BillReminderRow(Base):
    """Bill reminder"""

    __tablename__ = "bill_reminders"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    frequency = Column(String(16), nullable=False, default="monthly")
    category = Column(Text, nullable=False, default="Other")
    is_active = Column(Boolean, nullable=False, default=True)
    notify_days_before = Column(Integer, nullable=False, default=3)
    last_notified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
