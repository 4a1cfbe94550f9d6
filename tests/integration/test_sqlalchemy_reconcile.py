from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from contactgraph.adapters.sqlalchemy import contact_table
from contactgraph.domain.model import Contact, IdentityView, LinkPrecedence
from contactgraph.domain.reconciliation import (
    LinkAction,
    Observation,
    reconcile,
    reconcile_observation,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from contactgraph.adapters.sqlalchemy.unit_of_work import SqlAlchemyContactUnitOfWork


def _stored(factory: Callable[[], SqlAlchemyContactUnitOfWork]) -> list[Contact]:
    with factory() as uow:
        return list(uow.session.scalars(select(Contact).order_by(contact_table.c.id)))


@pytest.mark.integration
def test_first_contact_becomes_primary(
    sqlite_unit_of_work: Callable[[], SqlAlchemyContactUnitOfWork],
) -> None:
    view = reconcile("a@x.com", None, unit_of_work_factory=sqlite_unit_of_work)

    assert view == IdentityView(primary_contact_id=1, emails=("a@x.com",))
    [stored] = _stored(sqlite_unit_of_work)
    assert stored.link_precedence is LinkPrecedence.PRIMARY


@pytest.mark.integration
def test_new_value_is_recorded_as_secondary(
    sqlite_unit_of_work: Callable[[], SqlAlchemyContactUnitOfWork],
) -> None:
    reconcile("a@x.com", "111", unit_of_work_factory=sqlite_unit_of_work)

    view = reconcile("a@x.com", "222", unit_of_work_factory=sqlite_unit_of_work)

    assert view == IdentityView(
        primary_contact_id=1,
        emails=("a@x.com",),
        phone_numbers=("111", "222"),
        secondary_contact_ids=(2,),
    )


@pytest.mark.integration
def test_bridging_observation_merges_primaries(
    sqlite_unit_of_work: Callable[[], SqlAlchemyContactUnitOfWork],
) -> None:
    reconcile("a@x.com", None, unit_of_work_factory=sqlite_unit_of_work)
    reconcile(None, "222", unit_of_work_factory=sqlite_unit_of_work)
    reconcile("c@x.com", "222", unit_of_work_factory=sqlite_unit_of_work)

    outcome = reconcile_observation(
        Observation(email="a@x.com", phone_number="222"),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert outcome.action is LinkAction.NONE
    assert outcome.demoted_ids == (2,)
    assert outcome.view == IdentityView(
        primary_contact_id=1,
        emails=("a@x.com", "c@x.com"),
        phone_numbers=("222",),
        secondary_contact_ids=(2, 3),
    )
    stored = {contact.id: contact for contact in _stored(sqlite_unit_of_work)}
    assert stored[1].is_primary
    assert stored[2].linked_id == 1
    assert stored[3].linked_id == 1


@pytest.mark.integration
def test_repeated_observation_writes_nothing(
    sqlite_unit_of_work: Callable[[], SqlAlchemyContactUnitOfWork],
) -> None:
    reconcile("a@x.com", "111", unit_of_work_factory=sqlite_unit_of_work)
    first = reconcile("b@x.com", "111", unit_of_work_factory=sqlite_unit_of_work)
    before = [(c.id, c.updated_at) for c in _stored(sqlite_unit_of_work)]

    second = reconcile("b@x.com", "111", unit_of_work_factory=sqlite_unit_of_work)

    assert second == first
    assert [(c.id, c.updated_at) for c in _stored(sqlite_unit_of_work)] == before


@pytest.mark.integration
def test_chain_of_merges_keeps_single_primary(
    sqlite_unit_of_work: Callable[[], SqlAlchemyContactUnitOfWork],
) -> None:
    for email, phone_number in [
        ("a@x.com", None),
        ("b@x.com", None),
        ("c@x.com", None),
        ("b@x.com", "111"),
        ("c@x.com", "111"),
        ("a@x.com", "111"),
    ]:
        reconcile(email, phone_number, unit_of_work_factory=sqlite_unit_of_work)

    stored = _stored(sqlite_unit_of_work)
    primaries = [contact.id for contact in stored if contact.is_primary]
    assert primaries == [1]
    assert all(contact.linked_id == 1 for contact in stored if contact.is_secondary)

    view = reconcile(None, "111", unit_of_work_factory=sqlite_unit_of_work)
    assert view.emails == ("a@x.com", "b@x.com", "c@x.com")
