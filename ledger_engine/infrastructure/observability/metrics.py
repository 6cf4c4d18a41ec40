"""Prometheus metrics for recurring processing, budget status and reminder dispatch"""

from prometheus_client import Counter, Histogram

from ledger_engine.domain.models import BudgetStatus, ProcessingResult

# Recurring obligations
entries_materialized_counter = Counter(
    "ledger_entries_materialized_total",
    "Ledger entries created from recurring definitions",
    ["direction"],  # income | expense
)

recurring_outcome_counter = Counter(
    "ledger_recurring_outcomes_total",
    "Per-definition outcomes of recurring processing runs",
    ["outcome"],  # created | skipped | failed
)

# Budget
budget_status_counter = Counter(
    "ledger_budget_evaluations_total",
    "Budget evaluations by resulting status",
    ["status"],  # disabled | safe | warning | exceeded
)

# Notifications
notification_counter = Counter(
    "ledger_notifications_total",
    "Notification dispatch attempts",
    ["kind", "outcome"],  # kind: reminder | budget, outcome: sent | failed
)

notification_latency_histogram = Histogram(
    "ledger_notification_latency_seconds",
    "Notification webhook response time",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_processing(result: ProcessingResult) -> None:
    """Count every definition outcome of a run"""
    for entry in result.created_entries:
        entries_materialized_counter.labels(direction=entry.direction.value).inc()
    recurring_outcome_counter.labels(outcome="created").inc(len(result.created_entries))
    recurring_outcome_counter.labels(outcome="skipped").inc(len(result.skipped))
    recurring_outcome_counter.labels(outcome="failed").inc(len(result.failures))


def record_budget_status(status: BudgetStatus) -> None:
    budget_status_counter.labels(status=status.value).inc()


def record_notification(kind: str, sent: bool) -> None:
    notification_counter.labels(kind=kind, outcome="sent" if sent else "failed").inc()
