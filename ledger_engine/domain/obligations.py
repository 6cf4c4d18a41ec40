"""Obligation processor - materializes due recurring definitions exactly once"""

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, List, Optional, Protocol, Tuple

from ledger_engine.domain.exceptions import PersistenceFailure
from ledger_engine.domain.models import (
    LedgerEntry,
    Materialization,
    ProcessingFailure,
    ProcessingResult,
    RecurringDefinition,
)
from ledger_engine.domain.schedule import advance_past, is_clock_skewed, is_due
from ledger_engine.utils.date_utils import utc_now

logger = logging.getLogger(__name__)


class ObligationStore(Protocol):
    """Write side of the persistence contract used by the processor"""

    def materialize(self, materialization: Materialization) -> bool:
        """
        Insert the entry and advance the definition as one atomic unit.

        The advance must be conditional on the definition still sitting at
        `materialization.previous_occurrence`.

        Returns:
            True if written, False if a concurrent run already advanced it

        Raises:
            PersistenceFailure: Nothing was committed
        """
        ...


def plan_due(
    definitions: Iterable[RecurringDefinition],
    today: date,
    now: datetime,
) -> List[Materialization]:
    """
    Build one materialization per due definition without touching the inputs.

    The entry is dated at the scheduled occurrence, not today, so a delayed run
    still records when the obligation actually fell due.
    """
    planned = []
    for definition in definitions:
        if not is_due(definition, today):
            continue

        if is_clock_skewed(definition, today, now.tzinfo):
            logger.warning(
                "Clock skew detected, treating definition as not yet due",
                extra={
                    "definition_id": str(definition.id),
                    "today": today.isoformat(),
                    "last_processed_at": definition.last_processed_at.isoformat(),
                },
            )
            continue

        entry = LedgerEntry(
            user_id=definition.user_id,
            title=definition.title,
            amount=definition.amount,
            direction=definition.direction,
            category=definition.category,
            date=definition.next_occurrence,
            created_at=now,
            recurring_id=definition.id,
        )
        advanced = replace(
            definition,
            next_occurrence=advance_past(definition, today),
            last_processed_at=now,
        )
        planned.append(
            Materialization(entry=entry, definition=advanced, previous_occurrence=definition.next_occurrence)
        )

    return planned


def process_due(
    definitions: Iterable[RecurringDefinition],
    today: date,
    now: Optional[datetime] = None,
) -> Tuple[List[LedgerEntry], List[RecurringDefinition]]:
    """Pure form of a processing run: (entries to create, definitions after advancing)"""
    planned = plan_due(definitions, today, now or utc_now())
    return [m.entry for m in planned], [m.definition for m in planned]


class ObligationProcessor:
    """Applies planned materializations through an ObligationStore, one definition at a time"""

    def __init__(self, store: ObligationStore):
        self.store = store

    def run(
        self,
        definitions: Iterable[RecurringDefinition],
        today: date,
        now: Optional[datetime] = None,
    ) -> ProcessingResult:
        """
        Process every due definition; one failure never aborts the others.

        Outcomes per definition:
        - written: entry created and schedule advanced together
        - skipped: a concurrent run got there first, nothing written
        - failed: store raised, nothing committed, retried on next trigger
        """
        result = ProcessingResult()

        for materialization in plan_due(definitions, today, now or utc_now()):
            definition_id = materialization.definition.id
            try:
                written = self.store.materialize(materialization)
            except PersistenceFailure as e:
                logger.error(
                    f"Failed to materialize recurring definition: {e}",
                    extra={"definition_id": str(definition_id)},
                )
                result.failures.append(ProcessingFailure(definition_id=definition_id, reason=str(e)))
                continue

            if not written:
                logger.info(
                    "Recurring definition already processed by a concurrent run",
                    extra={"definition_id": str(definition_id)},
                )
                result.skipped.append(definition_id)
                continue

            result.created_entries.append(materialization.entry)
            result.advanced_definitions.append(materialization.definition)

        if result.created_entries:
            logger.info(f"Created {len(result.created_entries)} transaction(s) from recurring entries")

        return result
