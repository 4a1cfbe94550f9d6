"""Errors raised by the reconciliation core."""

from __future__ import annotations


class ReconciliationError(Exception):
    """Base class for reconciliation failures."""


class ValidationError(ReconciliationError):
    """Raised when an observation carries neither an email nor a phone number."""


class ConflictError(ReconciliationError):
    """Raised when a concurrent transaction invalidated the read set of a reconciliation."""


class TransientStoreError(ReconciliationError):
    """Raised once conflicts persist after every retry attempt."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class StoreUnavailableError(ReconciliationError):
    """Raised when the store cannot be reached or a transaction cannot be committed."""


class DataIntegrityError(ReconciliationError):
    """Describes a link structure that breaks the store invariants.

    The resolver collects these instead of raising them; the degenerate link is
    worked around and reported so it can be logged.
    """

    def __init__(self, message: str, *, contact_id: int | None, linked_id: int | None) -> None:
        super().__init__(message)
        self.contact_id = contact_id
        self.linked_id = linked_id
