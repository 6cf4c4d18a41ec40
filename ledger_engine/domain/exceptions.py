"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Recurring definition, reminder or budget config violates its invariants"""

    pass


class PersistenceFailure(DomainException):
    """Writing a ledger entry or advancing a schedule failed; nothing was committed"""

    def __init__(self, message: str, definition_id: object | None = None):
        super().__init__(message)
        self.definition_id = definition_id


class NotificationDispatchError(DomainException):
    """Notification transport rejected the payload or is unavailable"""

    pass
