"""Merge execution: fold extra primaries into the surviving one."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contactgraph.domain.ports import ContactRepository

    from .resolve import GroupResolution

log = logging.getLogger(__name__)


def apply_merge(resolution: GroupResolution, repository: ContactRepository) -> tuple[int, ...]:
    """Demote every extra primary of ``resolution`` and return the demoted ids.

    The repository applies all demotions, and the re-linking of the demoted
    primaries' secondaries, as one batch.
    """

    if not resolution.requires_merge:
        return ()

    primary_id = resolution.primary.id
    if primary_id is None:
        raise ValueError("Cannot merge into an unsaved contact")

    demoted_ids: list[int] = []
    for contact in resolution.demoted:
        if contact.id is None:
            raise ValueError("Cannot demote an unsaved contact")
        demoted_ids.append(contact.id)

    repository.demote_and_relink(demoted_ids, primary_id)
    log.info("Merged contacts %s into primary %s", demoted_ids, primary_id)
    return tuple(demoted_ids)
