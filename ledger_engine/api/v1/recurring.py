"""POST /v1/recurring/process - materialize due recurring transactions"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_engine.api.v1.schemas import ProcessResponse, LedgerEntrySchema, ItemFailureSchema
from ledger_engine.api.dependencies import Clock, get_clock, get_request_id
from ledger_engine.infrastructure.database.session import get_db
from ledger_engine.infrastructure.database.repositories import RecurringRepository, SqlObligationStore
from ledger_engine.domain.obligations import ObligationProcessor
from ledger_engine.infrastructure.observability.metrics import record_processing
from ledger_engine.infrastructure.observability.logging import log_processing_run

router = APIRouter()


@router.post("/recurring/process", response_model=ProcessResponse)
def process_recurring(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db),
):
    """
    Run the obligation processor for one user (app open / periodic tick).

    Flow:
    1. Load active recurring definitions
    2. Plan one entry per due definition, advancing past today
    3. Write each entry + schedule advance atomically
    4. Report created, skipped (concurrent run) and failed definitions

    Partial failure still returns 200; failed definitions are untouched and
    will be retried on the next trigger.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        definitions = RecurringRepository(db).list_active(user_id)
        processor = ObligationProcessor(SqlObligationStore(db))
        result = processor.run(definitions, clock.today, clock.now)

    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Ledger store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger store unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_processing(result)
    log_processing_run(
        request_id,
        user_id,
        created=len(result.created_entries),
        skipped=len(result.skipped),
        failed=len(result.failures),
        duration_ms=duration_ms,
    )

    return ProcessResponse(
        user_id=user_id,
        today=clock.today,
        created_count=len(result.created_entries),
        skipped_count=len(result.skipped),
        failed_count=len(result.failures),
        entries=[
            LedgerEntrySchema(
                entry_id=str(entry.id),
                recurring_id=str(entry.recurring_id) if entry.recurring_id else None,
                title=entry.title,
                amount=entry.amount,
                direction=entry.direction.value,
                category=entry.category,
                date=entry.date,
            )
            for entry in result.created_entries
        ],
        failures=[ItemFailureSchema(id=str(f.definition_id), reason=f.reason) for f in result.failures],
    )
