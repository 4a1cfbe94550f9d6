"""Identity reconciliation core.

Flow for one observation:
1) look up every live contact sharing its email or phone number
2) no match: create a new primary and stop
3) resolve the surviving primary of the matched group (``resolve``)
4) demote any other primary into it (``merge``)
5) record a secondary if the observation brings a new value (``integrate``)
6) project the group onto an identity view (``view``)

``engine`` runs these steps inside one unit of work per attempt.
"""

from __future__ import annotations

from .engine import (
    DEFAULT_MAX_ATTEMPTS,
    LinkAction,
    ReconciliationOutcome,
    reconcile,
    reconcile_observation,
    run_reconciliation,
)
from .integrate import Integration, integrate_observation
from .merge import apply_merge
from .observation import Observation
from .resolve import GroupResolution, resolve_group
from .view import build_identity_view

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "GroupResolution",
    "Integration",
    "LinkAction",
    "Observation",
    "ReconciliationOutcome",
    "apply_merge",
    "build_identity_view",
    "integrate_observation",
    "reconcile",
    "reconcile_observation",
    "resolve_group",
    "run_reconciliation",
]
