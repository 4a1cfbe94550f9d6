from __future__ import annotations

import pytest

from contactgraph import app as app_module
from contactgraph.domain.errors import ConflictError, TransientStoreError, ValidationError
from contactgraph.domain.model import IdentityView
from tests.helpers.contacts import FakeUnitOfWorkFactory


def test_identify_contact_uses_given_factory(fake_unit_of_work: FakeUnitOfWorkFactory) -> None:
    view = app_module.identify_contact(
        "a@x.com",
        "111",
        unit_of_work_factory=fake_unit_of_work,
    )

    assert view == IdentityView(
        primary_contact_id=1,
        emails=("a@x.com",),
        phone_numbers=("111",),
    )


def test_identify_contact_validates_before_startup(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail_startup(**_: object) -> None:
        raise AssertionError("store should not be started")

    monkeypatch.setattr(app_module, "startup", fail_startup)

    with pytest.raises(ValidationError):
        app_module.identify_contact(None, "")


def test_identify_contact_reads_attempts_from_env(
    monkeypatch: pytest.MonkeyPatch,
    fake_unit_of_work: FakeUnitOfWorkFactory,
) -> None:
    monkeypatch.setenv("CONTACTGRAPH_RECONCILE_ATTEMPTS", "2")
    fake_unit_of_work.commit_failures = [ConflictError("one"), ConflictError("two")]

    with pytest.raises(TransientStoreError) as excinfo:
        app_module.identify_contact("a@x.com", None, unit_of_work_factory=fake_unit_of_work)

    assert excinfo.value.attempts == 2
    assert fake_unit_of_work.opened == 2


def test_identify_contact_starts_store_on_demand(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    fake_factory = FakeUnitOfWorkFactory()

    monkeypatch.setattr(app_module, "is_started", lambda: False)
    monkeypatch.setattr(app_module, "startup", lambda: calls.append("startup"))
    monkeypatch.setattr(app_module, "SqlAlchemyContactUnitOfWork", fake_factory)

    view = app_module.identify_contact("a@x.com", None)

    assert calls == ["startup"]
    assert view.primary_contact_id == 1
    assert fake_factory.commits == 1


def test_identify_contact_rejects_explicit_zero_attempts(
    fake_unit_of_work: FakeUnitOfWorkFactory,
) -> None:
    with pytest.raises(ValueError, match="max_attempts"):
        app_module.identify_contact(
            "a@x.com",
            None,
            unit_of_work_factory=fake_unit_of_work,
            max_attempts=0,
        )

    assert fake_unit_of_work.opened == 0
