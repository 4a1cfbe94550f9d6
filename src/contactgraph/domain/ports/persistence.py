"""Ports for persisting contact records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contactgraph.domain.model import Contact


@runtime_checkable
class ContactRepository(Protocol):
    """Persistence contract for contact records.

    Soft-deleted contacts are invisible to every lookup.
    """

    def find_by_email_or_phone(
        self,
        email: str | None,
        phone_number: str | None,
    ) -> Sequence[Contact]: ...

    def find_primaries_by_email_or_phone(
        self,
        email: str | None,
        phone_number: str | None,
    ) -> Sequence[Contact]:
        """Return matching primaries, oldest first."""
        ...

    def get(self, contact_id: int) -> Contact | None: ...

    def find_group(self, primary_id: int) -> Sequence[Contact]:
        """Return the primary and every contact linked to it, ordered by id."""
        ...

    def create_primary(self, email: str | None, phone_number: str | None) -> Contact: ...

    def create_secondary(
        self,
        email: str | None,
        phone_number: str | None,
        linked_id: int,
    ) -> Contact: ...

    def demote_and_relink(self, contact_ids: Sequence[int], new_linked_id: int) -> None:
        """Demote the given primaries under ``new_linked_id``, re-pointing their secondaries."""
        ...
