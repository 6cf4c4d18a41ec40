"""Unit tests for the budget monitor"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from ledger_engine.domain.budget import describe, evaluate, is_threshold_crossing, period_expense
from ledger_engine.domain.exceptions import ValidationError
from ledger_engine.domain.models import BudgetConfig, BudgetStatus, Direction, LedgerEntry

CONFIG = BudgetConfig(monthly_limit=Decimal("1000"), alert_threshold=0.8)


@pytest.mark.parametrize(
    "expense, expected",
    [
        (Decimal("0"), BudgetStatus.SAFE),
        (Decimal("799.99"), BudgetStatus.SAFE),
        (Decimal("800"), BudgetStatus.WARNING),
        (Decimal("999.99"), BudgetStatus.WARNING),
        (Decimal("1000"), BudgetStatus.EXCEEDED),
        (Decimal("1500"), BudgetStatus.EXCEEDED),
    ],
)
def test_evaluate_boundaries(expense, expected):
    assert evaluate(expense, CONFIG) == expected


def test_evaluate_disabled_when_no_limit():
    assert evaluate(Decimal("500"), BudgetConfig(monthly_limit=Decimal("0"), alert_threshold=0.8)) == BudgetStatus.DISABLED


def test_evaluate_accepts_plain_numbers():
    assert evaluate(800, CONFIG) == BudgetStatus.WARNING


def test_zero_threshold_warns_immediately():
    config = BudgetConfig(monthly_limit=Decimal("100"), alert_threshold=0.0)
    assert evaluate(Decimal("0"), config) == BudgetStatus.WARNING


def test_describe_messages():
    assert describe(Decimal("500"), CONFIG).message == "50% of budget used"
    assert describe(Decimal("856"), CONFIG).percentage == 86
    assert describe(Decimal("1200"), CONFIG).message == "Budget exceeded!"

    disabled = describe(Decimal("10"), BudgetConfig())
    assert disabled.status == BudgetStatus.DISABLED
    assert disabled.message is None


def test_budget_config_validation():
    with pytest.raises(ValidationError):
        BudgetConfig(monthly_limit=Decimal("100"), alert_threshold=1.5)
    with pytest.raises(ValidationError):
        BudgetConfig(monthly_limit=Decimal("-1"), alert_threshold=0.8)


def _entry(amount: str, direction: Direction, day: date) -> LedgerEntry:
    return LedgerEntry(
        user_id="user_1",
        title="x",
        amount=Decimal(amount),
        direction=direction,
        category="Food",
        date=day,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_period_expense_sums_current_month_expenses_only():
    entries = [
        _entry("100", Direction.EXPENSE, date(2024, 2, 1)),
        _entry("50.50", Direction.EXPENSE, date(2024, 2, 29)),
        _entry("999", Direction.INCOME, date(2024, 2, 10)),  # Income ignored
        _entry("70", Direction.EXPENSE, date(2024, 1, 31)),  # Previous month
    ]
    assert period_expense(entries, date(2024, 2, 15)) == Decimal("150.50")


@pytest.mark.parametrize(
    "previous, current, expected",
    [
        (None, BudgetStatus.SAFE, False),
        (BudgetStatus.SAFE, BudgetStatus.WARNING, True),
        (BudgetStatus.WARNING, BudgetStatus.WARNING, False),
        (BudgetStatus.WARNING, BudgetStatus.EXCEEDED, True),
        (BudgetStatus.EXCEEDED, BudgetStatus.EXCEEDED, False),
        (BudgetStatus.EXCEEDED, BudgetStatus.SAFE, False),
        (None, BudgetStatus.EXCEEDED, True),
        (BudgetStatus.DISABLED, BudgetStatus.WARNING, True),
    ],
)
def test_threshold_crossing(previous, current, expected):
    assert is_threshold_crossing(previous, current) is expected
