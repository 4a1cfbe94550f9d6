"""Translation of SQLAlchemy failures into domain errors."""

from __future__ import annotations

from typing import Final

from sqlalchemy.exc import DBAPIError

from contactgraph.domain.errors import ConflictError, ReconciliationError, StoreUnavailableError

# serialization_failure, deadlock_detected
SERIALIZATION_SQLSTATES: Final[frozenset[str]] = frozenset({"40001", "40P01"})
SQLITE_CONFLICT_MESSAGES: Final[tuple[str, ...]] = ("database is locked", "database is busy")


def is_serialization_failure(error: DBAPIError) -> bool:
    """Return whether ``error`` signals a concurrent transaction rather than an outage."""

    original = error.orig
    sqlstate = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if sqlstate in SERIALIZATION_SQLSTATES:
        return True
    message = str(original).lower()
    return any(fragment in message for fragment in SQLITE_CONFLICT_MESSAGES)


def translate_error(error: DBAPIError) -> ReconciliationError:
    if is_serialization_failure(error):
        return ConflictError(f"Concurrent update detected: {error.orig}")
    return StoreUnavailableError(f"Contact store failure: {error.orig}")
