"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from contactgraph.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContactUnitOfWork,
    is_started,
    startup,
)
from contactgraph.config import get_reconciliation_config
from contactgraph.domain.reconciliation import Observation, reconcile_observation

if TYPE_CHECKING:
    from contactgraph.domain.model import IdentityView
    from contactgraph.domain.reconciliation.engine import UnitOfWorkFactory


log = getLogger(__name__)


def identify_contact(
    email: str | None,
    phone_number: str | None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    max_attempts: int | None = None,
) -> IdentityView:
    """Reconcile one observation against the configured contact store."""

    observation = Observation.from_values(email, phone_number)

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyContactUnitOfWork
    if max_attempts is None:
        max_attempts = get_reconciliation_config().max_attempts

    outcome = reconcile_observation(
        observation,
        unit_of_work_factory=unit_of_work_factory,
        max_attempts=max_attempts,
    )

    log.info(
        "Identified contact: primary=%s, action=%s, demoted=%s, attempts=%s",
        outcome.view.primary_contact_id,
        outcome.action,
        list(outcome.demoted_ids),
        outcome.attempts,
    )
    return outcome.view
