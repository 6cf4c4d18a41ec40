"""Budget monitor - classifies monthly spending against the configured limit"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledger_engine.domain.models import BudgetConfig, BudgetEvaluation, BudgetStatus, Direction, LedgerEntry
from ledger_engine.utils.date_utils import month_bounds

ALERT_STATUSES = frozenset({BudgetStatus.WARNING, BudgetStatus.EXCEEDED})


def _ratio(current_period_expense: Decimal, config: BudgetConfig) -> float:
    return float(Decimal(current_period_expense) / config.monthly_limit)


def evaluate(current_period_expense: Decimal, config: BudgetConfig) -> BudgetStatus:
    """
    Classify spending for the current period.

    - disabled: no limit configured (monthly_limit <= 0)
    - exceeded: spent >= 100% of the limit
    - warning:  spent >= alert_threshold of the limit
    - safe:     anything below the threshold
    """
    if config.monthly_limit <= 0:
        return BudgetStatus.DISABLED

    ratio = _ratio(current_period_expense, config)
    if ratio >= 1:
        return BudgetStatus.EXCEEDED
    if ratio >= config.alert_threshold:
        return BudgetStatus.WARNING
    return BudgetStatus.SAFE


def describe(current_period_expense: Decimal, config: BudgetConfig) -> BudgetEvaluation:
    """Status plus the usage figures and message shown to the user"""
    status = evaluate(current_period_expense, config)
    if status == BudgetStatus.DISABLED:
        return BudgetEvaluation(status=status, ratio=0.0, percentage=0, message=None)

    ratio = _ratio(current_period_expense, config)
    percentage = round(ratio * 100)
    if status == BudgetStatus.EXCEEDED:
        message = "Budget exceeded!"
    else:
        message = f"{percentage}% of budget used"

    return BudgetEvaluation(status=status, ratio=ratio, percentage=percentage, message=message)


def period_expense(entries: Iterable[LedgerEntry], today: date) -> Decimal:
    """Total of expense entries dated within today's calendar month"""
    start, end = month_bounds(today)
    return sum(
        (e.amount for e in entries if e.direction == Direction.EXPENSE and start <= e.date <= end),
        Decimal("0"),
    )


def is_threshold_crossing(previous: Optional[BudgetStatus], current: BudgetStatus) -> bool:
    """
    True when an alert should go out for `current`.

    Only moves into warning or exceeded count; staying in the same status, or
    dropping back to safe/disabled, never alerts.
    """
    return current in ALERT_STATUSES and current != previous
