"""Consolidated identity returned to callers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IdentityView:
    """Everything known about one entity, projected from its contact group.

    ``emails`` and ``phone_numbers`` start with the primary's values and
    follow with secondaries in ascending id order, without duplicates.
    """

    primary_contact_id: int
    emails: tuple[str, ...] = ()
    phone_numbers: tuple[str, ...] = ()
    secondary_contact_ids: tuple[int, ...] = ()
