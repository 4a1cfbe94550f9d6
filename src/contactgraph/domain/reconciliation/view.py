"""Identity view projection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contactgraph.domain.model import IdentityView

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contactgraph.domain.model import Contact


def build_identity_view(primary: Contact, group: Iterable[Contact]) -> IdentityView:
    """Project ``primary`` and the members of its group onto an :class:`IdentityView`."""

    if primary.id is None:
        raise ValueError("Cannot build a view for an unsaved contact")

    secondaries = sorted(
        (contact for contact in group if contact.id is not None and contact.id != primary.id),
        key=lambda contact: contact.id or 0,
    )
    ordered = [primary, *secondaries]

    return IdentityView(
        primary_contact_id=primary.id,
        emails=_unique(contact.email for contact in ordered),
        phone_numbers=_unique(contact.phone_number for contact in ordered),
        secondary_contact_ids=tuple(c.id for c in secondaries if c.id is not None),
    )


def _unique(values: Iterable[str | None]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(value for value in values if value is not None))
