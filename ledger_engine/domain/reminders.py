"""Reminder proximity evaluator - how close each bill is and which ones to notify"""

from datetime import date
from typing import Iterable, List

from ledger_engine.domain.models import BillReminder, NotificationPayload, Urgency
from ledger_engine.utils.date_utils import add_days, as_date, days_between

DUE_SOON_DAYS = 3
DEFAULT_WINDOW_DAYS = 7


def days_until(reminder: BillReminder, today: date) -> int:
    """Whole calendar days until due; negative once the due date has passed"""
    return days_between(today, reminder.due_date)


def classify(reminder: BillReminder, today: date, due_soon_days: int = DUE_SOON_DAYS) -> Urgency:
    days = days_until(reminder, today)
    if days < 0:
        return Urgency.OVERDUE
    if days == 0:
        return Urgency.DUE_TODAY
    if days <= due_soon_days:
        return Urgency.DUE_SOON
    return Urgency.UPCOMING


def upcoming_within_window(
    reminders: Iterable[BillReminder],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> List[BillReminder]:
    """Active reminders due between today and today + window_days (inclusive), soonest first"""
    selected = [r for r in reminders if r.active and 0 <= days_until(r, today) <= window_days]
    return sorted(selected, key=lambda r: r.due_date)


def summarize_window(
    reminders: Iterable[BillReminder],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> str | None:
    """Banner text for the batched alert, or None when nothing is due"""
    count = len(upcoming_within_window(reminders, today, window_days))
    if count == 0:
        return None
    period = "this week" if window_days == DEFAULT_WINDOW_DAYS else f"in the next {window_days} days"
    return f"{count} bill{'s' if count > 1 else ''} due {period}"


def notification_window_start(reminder: BillReminder) -> date:
    return add_days(reminder.due_date, -reminder.notify_days_before)


def already_notified(reminder: BillReminder) -> bool:
    """Notified at some point inside the current due date's lead window"""
    if reminder.last_notified_at is None:
        return False
    return as_date(reminder.last_notified_at) >= notification_window_start(reminder)


def due_for_notification(reminders: Iterable[BillReminder], today: date) -> List[BillReminder]:
    """
    Reminders that should be sent now.

    A reminder qualifies when it is active, falls within its own
    notify_days_before lead time (and is not overdue), and has not been sent
    yet for this due date. Moving the due date forward opens a new window.
    """
    return [
        r
        for r in reminders
        if r.active
        and 0 <= days_until(r, today) <= r.notify_days_before
        and not already_notified(r)
    ]


def render_payload(reminder: BillReminder, today: date, due_soon_days: int = DUE_SOON_DAYS) -> NotificationPayload:
    """Message handed to the dispatcher; transport formatting happens downstream"""
    # e.g. "Monday, 15 January 2024"
    pretty_due = f"{reminder.due_date:%A}, {reminder.due_date.day} {reminder.due_date:%B %Y}"
    return NotificationPayload(
        reminder_id=reminder.id,
        user_id=reminder.user_id,
        title=reminder.title,
        amount=reminder.amount,
        due_date=reminder.due_date,
        category=reminder.category,
        frequency=reminder.frequency.value,
        urgency=classify(reminder, today, due_soon_days),
        days_until=days_until(reminder, today),
        subject=f"Bill Reminder: {reminder.title} due on {pretty_due}",
    )
