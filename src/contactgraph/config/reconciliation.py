"""Reconciliation defaults."""

from __future__ import annotations

from dataclasses import dataclass

from contactgraph.domain.reconciliation import DEFAULT_MAX_ATTEMPTS

from .env import positive_int_env_var


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        max_attempts=positive_int_env_var("CONTACTGRAPH_RECONCILE_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
    )
