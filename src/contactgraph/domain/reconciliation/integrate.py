"""Observation integration: record values the group has not seen yet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contactgraph.domain.model import Contact
    from contactgraph.domain.ports import ContactRepository

    from .observation import Observation

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Integration:
    """Group membership after integration and the secondary it created, if any."""

    group: tuple[Contact, ...]
    created: Contact | None = None


def integrate_observation(
    observation: Observation,
    primary: Contact,
    repository: ContactRepository,
) -> Integration:
    """Add a secondary under ``primary`` when the observation brings a new value.

    The new secondary stores the observation as given, even if only one of its
    values is new. Re-submitting known values creates nothing.
    """

    if primary.id is None:
        raise ValueError("Cannot integrate into an unsaved contact")

    group = tuple(repository.find_group(primary.id))
    emails = {contact.email for contact in group if contact.email is not None}
    phone_numbers = {contact.phone_number for contact in group if contact.phone_number is not None}

    if not observation.adds_to(emails, phone_numbers):
        return Integration(group=group)

    secondary = repository.create_secondary(
        observation.email,
        observation.phone_number,
        primary.id,
    )
    log.info("Created secondary contact %s under primary %s", secondary.id, primary.id)
    return Integration(group=(*group, secondary), created=secondary)
