"""Group resolution: pick the authoritative primary for a set of matches.

Responsibilities of this stage:
- map every matched contact to the primary owning it
- widen the candidate set with every primary sharing the observed values
- order candidates oldest first and split them into the survivor and the
  primaries that must be demoted

Link anomalies (dangling references, secondary-to-secondary chains) are worked
around and reported on the resolution rather than raised.

Out of scope for this stage:
- store mutation
- record creation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contactgraph.domain.errors import DataIntegrityError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from contactgraph.domain.model import Contact
    from contactgraph.domain.ports import ContactRepository

    from .observation import Observation


@dataclass(frozen=True, slots=True)
class GroupResolution:
    """Outcome of resolving one observation's matches."""

    primary: Contact
    demoted: tuple[Contact, ...] = ()
    anomalies: tuple[DataIntegrityError, ...] = ()

    @property
    def requires_merge(self) -> bool:
        return bool(self.demoted)


def resolve_group(
    observation: Observation,
    matches: Sequence[Contact],
    repository: ContactRepository,
) -> GroupResolution:
    """Resolve the surviving primary for ``matches`` and the primaries to fold into it.

    Candidates are the owning primaries of the matched contacts plus every
    primary matching the observation directly. The oldest genuine primary wins;
    a dangling secondary only stands in for the primary when no genuine one is
    among the candidates.
    """

    if not matches:
        raise ValueError("resolve_group requires at least one matching contact")

    tracer = _LinkTracer(repository, known=matches)
    owners = [tracer.owning_primary(contact) for contact in matches]
    broad = repository.find_primaries_by_email_or_phone(
        observation.email,
        observation.phone_number,
    )
    ordered = _order_candidates([*owners, *broad])

    return GroupResolution(
        primary=ordered[0],
        demoted=tuple(ordered[1:]),
        anomalies=tuple(tracer.anomalies),
    )


def _order_candidates(candidates: Iterable[Contact]) -> list[Contact]:
    unique: dict[int, Contact] = {}
    for candidate in candidates:
        if candidate.id is None:
            raise ValueError("Cannot resolve unsaved contacts")
        unique.setdefault(candidate.id, candidate)
    return sorted(unique.values(), key=_candidate_key)


def _candidate_key(contact: Contact) -> tuple[bool, datetime, int]:
    created_at, contact_id = contact.creation_key()
    return (not contact.is_primary, created_at, contact_id)


@dataclass(slots=True)
class _LinkTracer:
    """Follow ``linked_id`` references, caching every contact it has seen."""

    repository: ContactRepository
    known: Sequence[Contact] = ()
    anomalies: list[DataIntegrityError] = field(default_factory=list["DataIntegrityError"])
    _cache: dict[int, Contact | None] = field(default_factory=dict["int", "Contact | None"])

    def __post_init__(self) -> None:
        for contact in self.known:
            if contact.id is not None:
                self._cache[contact.id] = contact

    def owning_primary(self, contact: Contact) -> Contact:
        """Return the primary ``contact`` belongs to.

        A chain that dead-ends yields the last contact reached on it; a cycle
        yields ``contact`` itself.
        """

        if contact.is_primary:
            return contact

        visited: set[int | None] = {contact.id}
        current = contact
        while True:
            linked_id = current.linked_id
            if linked_id is None:
                self._report(current, "secondary contact has no linked_id")
                return current
            linked = self._lookup(linked_id)
            if linked is None:
                self._report(current, f"linked contact {linked_id} does not exist")
                return current
            if linked.is_primary:
                return linked
            self._report(current, f"linked contact {linked_id} is itself a secondary")
            if linked.id in visited:
                self._report(linked, "link cycle detected")
                return contact
            visited.add(linked.id)
            current = linked

    def _lookup(self, contact_id: int) -> Contact | None:
        if contact_id not in self._cache:
            self._cache[contact_id] = self.repository.get(contact_id)
        return self._cache[contact_id]

    def _report(self, contact: Contact, reason: str) -> None:
        self.anomalies.append(
            DataIntegrityError(
                f"Contact {contact.id}: {reason}",
                contact_id=contact.id,
                linked_id=contact.linked_id,
            )
        )
