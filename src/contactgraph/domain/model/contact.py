"""Contact records and their link structure."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from .enums import LinkPrecedence


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Contact:
    """One observed (email, phone number) pair.

    A primary contact holds no ``linked_id``; a secondary always points at the
    primary of its group. ``email``, ``phone_number`` and ``created_at`` never
    change once the contact exists; a merge rewrites only ``link_precedence``,
    ``linked_id`` and ``updated_at``, through the store.
    """

    email: str | None = None
    phone_number: str | None = None
    link_precedence: LinkPrecedence = LinkPrecedence.PRIMARY
    linked_id: int | None = None

    # assigned by the store on insert
    id: int | None = None

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.email is None and self.phone_number is None:
            raise ValueError("Contact requires an email or a phone number")
        if self.is_primary and self.linked_id is not None:
            raise ValueError("Primary contact cannot carry a linked_id")
        if self.is_secondary and self.linked_id is None:
            raise ValueError("Secondary contact requires a linked_id")
        if self.id is not None and self.linked_id == self.id:
            raise ValueError("Contact cannot link to itself")

    @property
    def is_primary(self) -> bool:
        return self.link_precedence == LinkPrecedence.PRIMARY

    @property
    def is_secondary(self) -> bool:
        return self.link_precedence == LinkPrecedence.SECONDARY

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def primary_id(self) -> int | None:
        """Id of the primary this contact belongs to (its own id when primary)."""
        return self.id if self.is_primary else self.linked_id

    def creation_key(self) -> tuple[datetime, int]:
        """Sort key ordering contacts oldest first, ties broken by id."""
        return (self.created_at, self.id if self.id is not None else 0)
