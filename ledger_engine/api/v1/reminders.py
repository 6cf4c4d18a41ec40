"""Bill reminder endpoints: proximity listing and notification dispatch"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_engine.api.v1.schemas import ItemFailureSchema, NotifyResponse, ReminderSchema, UpcomingRemindersResponse
from ledger_engine.api.dependencies import Clock, get_clock, get_notification_client, get_request_id
from ledger_engine.config import settings
from ledger_engine.domain.exceptions import NotificationDispatchError
from ledger_engine.domain.models import BillReminder
from ledger_engine.domain.reminders import (
    classify,
    days_until,
    due_for_notification,
    render_payload,
    summarize_window,
    upcoming_within_window,
)
from ledger_engine.infrastructure.clients.notifier import NotificationClient
from ledger_engine.infrastructure.database.repositories import ReminderRepository
from ledger_engine.infrastructure.database.session import get_db
from ledger_engine.infrastructure.observability.metrics import record_notification

router = APIRouter()


def _to_schema(reminder: BillReminder, clock: Clock) -> ReminderSchema:
    return ReminderSchema(
        reminder_id=str(reminder.id),
        title=reminder.title,
        amount=reminder.amount,
        due_date=reminder.due_date,
        category=reminder.category,
        frequency=reminder.frequency.value,
        urgency=classify(reminder, clock.today, settings.due_soon_days).value,
        days_until=days_until(reminder, clock.today),
    )


@router.get("/reminders/upcoming", response_model=UpcomingRemindersResponse)
def get_upcoming_reminders(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    window_days: int = Query(settings.reminder_window_days, ge=0, le=365),
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db),
):
    """
    Classify every active reminder and pick the ones due within the window.

    Returns:
        All active reminders with urgency, the in-window subset, and a banner
        such as "2 bills due this week"
    """
    reminders = ReminderRepository(db).list_active(user_id)
    upcoming = upcoming_within_window(reminders, clock.today, window_days)

    return UpcomingRemindersResponse(
        user_id=user_id,
        today=clock.today,
        window_days=window_days,
        banner=summarize_window(reminders, clock.today, window_days),
        upcoming=[_to_schema(r, clock) for r in upcoming],
        reminders=[_to_schema(r, clock) for r in reminders],
    )


@router.post("/reminders/notify", response_model=NotifyResponse)
async def notify_due_reminders(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Dispatch every reminder inside its notify_days_before lead time.

    Each successful send stamps last_notified_at so the same due date is only
    announced once. Failed sends are reported and left unstamped.
    """
    request_id = get_request_id(request)
    repo = ReminderRepository(db)
    sent: List[str] = []
    failures: List[ItemFailureSchema] = []

    try:
        for reminder in due_for_notification(repo.list_active(user_id), clock.today):
            payload = render_payload(reminder, clock.today, settings.due_soon_days)
            try:
                await notifier.send(payload.to_dict())
            except NotificationDispatchError as e:
                record_notification("reminder", False)
                logging.warning(
                    f"Reminder not delivered: {e}",
                    extra={"request_id": request_id, "reminder_id": str(reminder.id)},
                )
                failures.append(ItemFailureSchema(id=str(reminder.id), reason=str(e)))
                continue

            record_notification("reminder", True)
            repo.mark_notified(reminder.id, clock.now)
            db.commit()
            sent.append(str(reminder.id))

    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Ledger store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger store unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info(
        "Reminder notifications dispatched",
        extra={"request_id": request_id, "user_id": user_id, "sent": len(sent), "failed": len(failures)},
    )
    return NotifyResponse(user_id=user_id, sent=sent, failures=failures)
