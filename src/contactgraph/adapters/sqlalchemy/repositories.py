"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import ColumnElement, or_, select, update

from contactgraph.adapters.sqlalchemy.mappings import contact_table
from contactgraph.domain.model import Contact, LinkPrecedence, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from sqlalchemy import Select
    from sqlalchemy.orm import Session


class SqlAlchemyContactRepository:
    """Contact store over one session; every statement joins the session's transaction."""

    def __init__(self, session: Session, *, clock: Callable[[], datetime] = utcnow) -> None:
        self.session = session
        self._clock = clock

    def find_by_email_or_phone(
        self,
        email: str | None,
        phone_number: str | None,
    ) -> list[Contact]:
        criteria = _match_criteria(email, phone_number)
        if criteria is None:
            return []
        return self._all(_live_contacts().where(criteria))

    def find_primaries_by_email_or_phone(
        self,
        email: str | None,
        phone_number: str | None,
    ) -> list[Contact]:
        criteria = _match_criteria(email, phone_number)
        if criteria is None:
            return []
        stmt = _live_contacts().where(criteria).where(
            contact_table.c.link_precedence == LinkPrecedence.PRIMARY
        )
        return self._all(stmt)

    def get(self, contact_id: int) -> Contact | None:
        contact = self.session.get(Contact, contact_id)
        if contact is None or contact.is_deleted:
            return None
        return contact

    def find_group(self, primary_id: int) -> list[Contact]:
        stmt = (
            select(Contact)
            .where(
                or_(
                    contact_table.c.id == primary_id,
                    contact_table.c.linked_id == primary_id,
                )
            )
            .where(contact_table.c.deleted_at.is_(None))
            .order_by(contact_table.c.id)
        )
        return self._all(stmt)

    def create_primary(self, email: str | None, phone_number: str | None) -> Contact:
        now = self._clock()
        return self._insert(
            Contact(email=email, phone_number=phone_number, created_at=now, updated_at=now)
        )

    def create_secondary(
        self,
        email: str | None,
        phone_number: str | None,
        linked_id: int,
    ) -> Contact:
        now = self._clock()
        return self._insert(
            Contact(
                email=email,
                phone_number=phone_number,
                link_precedence=LinkPrecedence.SECONDARY,
                linked_id=linked_id,
                created_at=now,
                updated_at=now,
            )
        )

    def demote_and_relink(self, contact_ids: Sequence[int], new_linked_id: int) -> None:
        ids = list(dict.fromkeys(contact_ids))
        if not ids:
            return
        if new_linked_id in ids:
            raise ValueError("Cannot demote a contact under itself")

        # One statement: the demoted primaries and their secondaries move together.
        stmt = (
            update(Contact)
            .where(
                or_(
                    contact_table.c.id.in_(ids),
                    contact_table.c.linked_id.in_(ids),
                )
            )
            .where(contact_table.c.id != new_linked_id)
            .values(
                link_precedence=LinkPrecedence.SECONDARY,
                linked_id=new_linked_id,
                updated_at=self._clock(),
            )
            .execution_options(synchronize_session="fetch")
        )
        self.session.execute(stmt)

    def _insert(self, contact: Contact) -> Contact:
        self.session.add(contact)
        self.session.flush()
        return contact

    def _all(self, stmt: Select[tuple[Contact]]) -> list[Contact]:
        return list(self.session.execute(stmt).scalars())


def _live_contacts() -> Select[tuple[Contact]]:
    return (
        select(Contact)
        .where(contact_table.c.deleted_at.is_(None))
        .order_by(contact_table.c.created_at, contact_table.c.id)
    )


def _match_criteria(email: str | None, phone_number: str | None) -> ColumnElement[bool] | None:
    clauses: list[ColumnElement[bool]] = []
    if email is not None:
        clauses.append(contact_table.c.email == email)
    if phone_number is not None:
        clauses.append(contact_table.c.phone_number == phone_number)
    if not clauses:
        return None
    return or_(*clauses)


if TYPE_CHECKING:
    from contactgraph.domain.ports.persistence import ContactRepository

    _session_stub = cast("Session", object())
    _repo_check: ContactRepository = SqlAlchemyContactRepository(_session_stub)
