"""Reconciliation orchestration: one observation in, one identity view out."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from contactgraph.domain.errors import ConflictError, TransientStoreError

from .integrate import integrate_observation
from .merge import apply_merge
from .observation import Observation
from .resolve import resolve_group
from .view import build_identity_view

if TYPE_CHECKING:
    from contactgraph.domain.errors import DataIntegrityError
    from contactgraph.domain.model import Contact, IdentityView
    from contactgraph.domain.ports import ContactRepository, ContactUnitOfWork

DEFAULT_MAX_ATTEMPTS = 3

UnitOfWorkFactory = Callable[[], "ContactUnitOfWork"]

log = logging.getLogger(__name__)


class LinkAction(StrEnum):
    """Which record, if any, a reconciliation created."""

    CREATED_PRIMARY = "created_primary"
    CREATED_SECONDARY = "created_secondary"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class ReconciliationOutcome:
    """Result of one committed reconciliation."""

    view: IdentityView
    action: LinkAction
    created: Contact | None = None
    demoted_ids: tuple[int, ...] = ()
    anomalies: tuple[DataIntegrityError, ...] = ()
    attempts: int = 1


def reconcile(
    email: str | None,
    phone_number: str | None,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> IdentityView:
    """Reconcile an (email, phone number) observation and return the consolidated identity."""

    observation = Observation.from_values(email, phone_number)
    outcome = reconcile_observation(
        observation,
        unit_of_work_factory=unit_of_work_factory,
        max_attempts=max_attempts,
    )
    return outcome.view


def reconcile_observation(
    observation: Observation,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> ReconciliationOutcome:
    """Run the reconciliation in its own unit of work, retrying on conflicts.

    Every attempt re-reads the store from scratch; the decision is a pure
    function of the store contents, so a retry after a conflict is safe.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_conflict: ConflictError | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            with unit_of_work_factory() as uow:
                outcome = run_reconciliation(observation, uow.repositories.contacts)
                uow.commit()
        except ConflictError as exc:
            last_conflict = exc
            log.warning(
                "Reconciliation conflict on attempt %s/%s: %s",
                attempt,
                max_attempts,
                exc,
            )
            continue

        if attempt > 1:
            outcome = _with_attempts(outcome, attempt)
        log.debug(
            "Reconciled %s: primary=%s, action=%s, demoted=%s",
            observation,
            outcome.view.primary_contact_id,
            outcome.action,
            outcome.demoted_ids,
        )
        return outcome

    raise TransientStoreError(
        f"Reconciliation still conflicting after {max_attempts} attempts",
        attempts=max_attempts,
    ) from last_conflict


def run_reconciliation(
    observation: Observation,
    contacts: ContactRepository,
) -> ReconciliationOutcome:
    """Reconcile ``observation`` against ``contacts`` inside an open transaction."""

    matches = contacts.find_by_email_or_phone(observation.email, observation.phone_number)
    if not matches:
        primary = contacts.create_primary(observation.email, observation.phone_number)
        log.info("Created primary contact %s", primary.id)
        return ReconciliationOutcome(
            view=build_identity_view(primary, (primary,)),
            action=LinkAction.CREATED_PRIMARY,
            created=primary,
        )

    resolution = resolve_group(observation, matches, contacts)
    for anomaly in resolution.anomalies:
        log.warning("Working around broken contact link: %s", anomaly)

    demoted_ids = apply_merge(resolution, contacts)
    integration = integrate_observation(observation, resolution.primary, contacts)

    return ReconciliationOutcome(
        view=build_identity_view(resolution.primary, integration.group),
        action=LinkAction.CREATED_SECONDARY if integration.created else LinkAction.NONE,
        created=integration.created,
        demoted_ids=demoted_ids,
        anomalies=resolution.anomalies,
    )


def _with_attempts(outcome: ReconciliationOutcome, attempts: int) -> ReconciliationOutcome:
    return ReconciliationOutcome(
        view=outcome.view,
        action=outcome.action,
        created=outcome.created,
        demoted_ids=outcome.demoted_ids,
        anomalies=outcome.anomalies,
        attempts=attempts,
    )
