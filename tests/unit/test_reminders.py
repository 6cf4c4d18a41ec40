"""Unit tests for reminder proximity evaluation"""

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from ledger_engine.domain.models import Urgency
from ledger_engine.domain.reminders import (
    classify,
    days_until,
    due_for_notification,
    render_payload,
    summarize_window,
    upcoming_within_window,
)
from conftest import make_reminder

TODAY = date(2024, 1, 15)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (-1, Urgency.OVERDUE),
        (0, Urgency.DUE_TODAY),
        (1, Urgency.DUE_SOON),
        (2, Urgency.DUE_SOON),
        (3, Urgency.DUE_SOON),
        (4, Urgency.UPCOMING),
        (10, Urgency.UPCOMING),
    ],
)
def test_classify(offset, expected):
    reminder = make_reminder(due_date=TODAY + timedelta(days=offset))
    assert classify(reminder, TODAY) == expected


def test_days_until_uses_calendar_days():
    reminder = make_reminder(due_date=date(2024, 1, 16))
    assert days_until(reminder, TODAY) == 1
    assert days_until(make_reminder(due_date=date(2024, 1, 14)), TODAY) == -1


def test_upcoming_within_window_filters_and_orders():
    later = make_reminder(title="Water", due_date=TODAY + timedelta(days=7))
    sooner = make_reminder(title="Phone", due_date=TODAY + timedelta(days=2))
    overdue = make_reminder(title="Late", due_date=TODAY - timedelta(days=1))
    too_far = make_reminder(title="Insurance", due_date=TODAY + timedelta(days=8))
    inactive = make_reminder(title="Old", due_date=TODAY, active=False)

    upcoming = upcoming_within_window([later, sooner, overdue, too_far, inactive], TODAY)

    assert [r.title for r in upcoming] == ["Phone", "Water"]


def test_upcoming_within_custom_window():
    reminder = make_reminder(due_date=TODAY + timedelta(days=10))
    assert upcoming_within_window([reminder], TODAY, window_days=7) == []
    assert upcoming_within_window([reminder], TODAY, window_days=14) == [reminder]


def test_summarize_window():
    one = [make_reminder(due_date=TODAY + timedelta(days=1))]
    two = one + [make_reminder(due_date=TODAY + timedelta(days=5))]

    assert summarize_window([], TODAY) is None
    assert summarize_window(one, TODAY) == "1 bill due this week"
    assert summarize_window(two, TODAY) == "2 bills due this week"
    assert summarize_window(two, TODAY, window_days=30) == "2 bills due in the next 30 days"


def test_due_for_notification_respects_lead_time():
    inside = make_reminder(title="Inside", due_date=TODAY + timedelta(days=3), notify_days_before=3)
    outside = make_reminder(title="Outside", due_date=TODAY + timedelta(days=4), notify_days_before=3)
    same_day_only = make_reminder(title="SameDay", due_date=TODAY, notify_days_before=0)
    overdue = make_reminder(title="Overdue", due_date=TODAY - timedelta(days=1))

    due = due_for_notification([inside, outside, same_day_only, overdue], TODAY)

    assert [r.title for r in due] == ["Inside", "SameDay"]


def test_due_for_notification_sends_once_per_due_date():
    # Due 01-16 with a 3-day lead: window opens 01-13
    notified_in_window = make_reminder(
        title="Sent",
        due_date=date(2024, 1, 16),
        last_notified_at=datetime(2024, 1, 13, 7, 0, tzinfo=timezone.utc),
    )
    notified_last_cycle = make_reminder(
        title="Previous cycle",
        due_date=date(2024, 1, 16),
        last_notified_at=datetime(2023, 12, 13, 7, 0, tzinfo=timezone.utc),
    )

    due = due_for_notification([notified_in_window, notified_last_cycle], TODAY)

    assert [r.title for r in due] == ["Previous cycle"]


def test_render_payload():
    reminder = make_reminder(
        title="Electricity",
        amount=Decimal("1200.00"),
        due_date=date(2024, 1, 17),
        category="Utilities",
    )

    payload = render_payload(reminder, TODAY)

    assert payload.subject == "Bill Reminder: Electricity due on Wednesday, 17 January 2024"
    assert payload.urgency == Urgency.DUE_SOON
    assert payload.days_until == 2

    body = payload.to_dict()
    assert body["event"] == "BILL_REMINDER"
    assert body["amount"] == "1200.00"
    assert body["due_date"] == "2024-01-17"
    assert body["category"] == "Utilities"
    assert body["frequency"] == "monthly"
