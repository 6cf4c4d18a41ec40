"""POST /v1/budget/evaluate - classify this month's spending and alert on a crossing"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_engine.api.v1.schemas import BudgetStatusResponse
from ledger_engine.api.dependencies import Clock, get_clock, get_notification_client, get_request_id
from ledger_engine.infrastructure.database.session import get_db
from ledger_engine.infrastructure.database.repositories import BudgetRepository, LedgerRepository
from ledger_engine.infrastructure.clients.notifier import NotificationClient
from ledger_engine.domain.budget import describe, is_threshold_crossing, period_expense
from ledger_engine.domain.exceptions import NotificationDispatchError
from ledger_engine.infrastructure.observability.metrics import record_budget_status, record_notification
from ledger_engine.infrastructure.observability.logging import log_budget_evaluation
from ledger_engine.utils.date_utils import month_bounds

router = APIRouter()


@router.post("/budget/evaluate", response_model=BudgetStatusResponse)
async def evaluate_budget(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Evaluate the current calendar month against the user's budget.

    An alert is dispatched only when the status moves into warning or
    exceeded. The new status is stored once the alert is out (or when no alert
    was needed), so a failed alert is attempted again on the next evaluation.
    Each month starts without a previous status, so a budget that is already
    over its threshold on the first check of a new month alerts again.
    """
    request_id = get_request_id(request)

    try:
        budget_repo = BudgetRepository(db)
        config = budget_repo.get_config(user_id)
        month_start, month_end = month_bounds(clock.today)
        entries = LedgerRepository(db).list_for_user(user_id, month_start, month_end)
        spent = period_expense(entries, clock.today)

        evaluation = describe(spent, config)
        previous = budget_repo.get_last_status(user_id, month_start)
        crossing = is_threshold_crossing(previous, evaluation.status)

        alerted = False
        if crossing:
            try:
                await notifier.send(
                    {
                        "event": "BUDGET_ALERT",
                        "user_id": user_id,
                        "status": evaluation.status.value,
                        "percentage": evaluation.percentage,
                        "message": evaluation.message,
                        "spent": str(spent),
                        "monthly_limit": str(config.monthly_limit),
                    }
                )
                alerted = True
            except NotificationDispatchError as e:
                logging.warning(f"Budget alert not delivered: {e}", extra={"request_id": request_id})
            record_notification("budget", alerted)

        if evaluation.status != previous and (alerted or not crossing):
            budget_repo.record_status(user_id, evaluation.status, month_start)
            db.commit()

    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Ledger store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger store unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_budget_status(evaluation.status)
    log_budget_evaluation(request_id, user_id, evaluation.status.value, evaluation.percentage, alerted)

    return BudgetStatusResponse(
        user_id=user_id,
        status=evaluation.status.value,
        spent=spent,
        monthly_limit=config.monthly_limit,
        alert_threshold=config.alert_threshold,
        percentage=evaluation.percentage,
        message=evaluation.message,
        alert_sent=alerted,
    )
