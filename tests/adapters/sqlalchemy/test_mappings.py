from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import inspect, insert, select
from sqlalchemy.exc import IntegrityError

from contactgraph.adapters.sqlalchemy import contact_table, start_mappers
from contactgraph.domain.model import Contact, LinkPrecedence, utcnow

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_start_mappers_is_idempotent() -> None:
    # First invocation happens in the sqlite_engine fixture; calling again should be harmless.
    start_mappers()
    start_mappers()


def test_migrations_create_contact_schema(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert "contact" in inspector.get_table_names()
    columns = {column["name"] for column in inspector.get_columns("contact")}
    assert columns == {
        "id",
        "email",
        "phone_number",
        "linked_id",
        "link_precedence",
        "created_at",
        "updated_at",
        "deleted_at",
    }
    indexes = {index["name"] for index in inspector.get_indexes("contact")}
    assert {"ix_contact_email", "ix_contact_phone_number", "ix_contact_linked_id"} <= indexes


def test_contact_round_trips_through_session(sqlite_session: Session) -> None:
    contact = Contact(email="a@x.com", phone_number="111")
    sqlite_session.add(contact)
    sqlite_session.commit()
    sqlite_session.expire_all()

    loaded = sqlite_session.scalars(select(Contact)).one()

    assert loaded.email == "a@x.com"
    assert loaded.link_precedence is LinkPrecedence.PRIMARY
    assert loaded.created_at.tzinfo is not None


@pytest.mark.parametrize(
    "values",
    [
        {"email": None, "phone_number": None, "link_precedence": "PRIMARY", "linked_id": None},
        {"email": "a@x.com", "phone_number": None, "link_precedence": "SECONDARY", "linked_id": None},
        {"email": "a@x.com", "phone_number": None, "link_precedence": "PRIMARY", "linked_id": 1},
    ],
)
def test_check_constraints_reject_inconsistent_rows(
    sqlite_session: Session,
    values: dict[str, object],
) -> None:
    now = utcnow()

    with pytest.raises(IntegrityError):
        sqlite_session.execute(
            insert(contact_table).values(created_at=now, updated_at=now, **values)
        )
