"""Schedule advancer - decides when a recurring definition is due and where it moves next"""

from datetime import date, tzinfo
from typing import Optional

from ledger_engine.domain.models import Frequency, RecurringDefinition
from ledger_engine.utils.date_utils import add_months, add_weeks, as_date


def is_due(definition: RecurringDefinition, today: date) -> bool:
    """Active and scheduled on or before today"""
    return definition.active and definition.next_occurrence <= today


def is_clock_skewed(definition: RecurringDefinition, today: date, tz: Optional[tzinfo] = None) -> bool:
    """
    True when today is earlier than the day the definition was last processed.

    Happens when the clock moves backwards between runs. The processor treats
    the definition as not yet due rather than as an error. An aware
    last_processed_at is read in `tz` first so both days are in the same zone.
    """
    last = definition.last_processed_at
    if last is None:
        return False
    if tz is not None and last.tzinfo is not None:
        last = last.astimezone(tz)
    return today < as_date(last)


def step(occurrence: date, frequency: Frequency, periods: int = 1) -> date:
    """Move `occurrence` forward by whole periods (months clamp to the last valid day)"""
    if frequency == Frequency.WEEKLY:
        return add_weeks(occurrence, periods)
    return add_months(occurrence, periods)


def advance(definition: RecurringDefinition) -> date:
    """Next occurrence strictly after the current one (single period)"""
    return step(definition.next_occurrence, definition.frequency)


def advance_past(definition: RecurringDefinition, today: date) -> date:
    """
    Advance whole periods until the occurrence is strictly after today.

    Catch-up rule:
    - At least one period is always taken, so the result is > next_occurrence
    - Missed periods are skipped silently; no entry is back-filled for them
    - Each candidate is computed from the original occurrence (base + k periods)
      so monthly schedules keep their day-of-month across a multi-period jump:
      Jan 31 → Feb 29 → Mar 31, not Mar 29

    Terminates because every candidate is strictly later than the previous one.
    """
    base = definition.next_occurrence
    periods = 1
    candidate = step(base, definition.frequency, periods)
    while candidate <= today:
        periods += 1
        candidate = step(base, definition.frequency, periods)
    return candidate
