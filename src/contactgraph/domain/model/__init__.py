"""Public domain model surface."""

from __future__ import annotations

from contactgraph.domain.model.contact import Contact, utcnow
from contactgraph.domain.model.enums import LinkPrecedence
from contactgraph.domain.model.view import IdentityView

__all__ = [
    "Contact",
    "IdentityView",
    "LinkPrecedence",
    "utcnow",
]
