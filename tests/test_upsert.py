from datetime import date

import pytest

from db import get_session, EmployeeCore
from import_engine.errors import RowError
from import_engine.row_mapper import EmployeePayload
from import_engine.upsert import UPSERT_ORDER, commit_payload, failing_column


def _payload(emp_id, **sections):
    base = {name: {} for name in UPSERT_ORDER}
    base.update(sections)
    return EmployeePayload(row_number=2, employee_id=emp_id, sections=base)


def test_core_is_written_first():
    assert UPSERT_ORDER[0] == "core"
    assert set(UPSERT_ORDER) == {
        "core", "employment", "bank", "insurance", "contact", "onboard", "travel",
    }


def test_insert_then_update(db, fetch):
    assert commit_payload(_payload("E1", core={"name": "Ani"})) is True
    assert commit_payload(_payload("E1", bank={"bank_name": "BNI"})) is False

    stored = fetch("E1")
    assert stored["core"]["name"] == "Ani"
    assert stored["bank"]["bank_name"] == "BNI"


def test_constraint_failure_rolls_back_everything(db, fetch):
    bad = _payload("E1", core={"name": "Ani", "age": -3})
    with pytest.raises(RowError) as ei:
        commit_payload(bad)
    assert ei.value.column == "core.age"
    assert fetch("E1") is None

    bad = _payload("E2", travel={"travel_in": date(2024, 5, 2), "travel_out": date(2024, 5, 1)})
    with pytest.raises(RowError) as ei:
        commit_payload(bad)
    assert ei.value.column == "travel.travel_out"

    session = get_session()
    try:
        assert session.get(EmployeeCore, "E2") is None
    finally:
        session.close()


def test_failing_column_fallbacks():
    assert failing_column("NOT NULL constraint failed: employee_bank.account_no", "bank") == "bank.account_no"
    assert failing_column("database is locked", "contact") == "contact"
    assert failing_column("whatever", None) is None


def test_session_requires_init(db):
    from db import dispose_db, init_db

    dispose_db()
    with pytest.raises(RuntimeError):
        get_session()
    init_db(db)


def test_defaults_fill_on_insert_only(db, fetch):
    defaults = {"employment": {"status": "Active"}}

    first = _payload("E1", employment={"job_title": "Welder"})
    first.defaults = defaults
    commit_payload(first)
    assert fetch("E1")["employment"]["status"] == "Active"

    second = _payload("E1", employment={"status": "Resigned"})
    commit_payload(second)

    third = _payload("E1", employment={"job_title": "Foreman"})
    third.defaults = defaults
    commit_payload(third)
    stored = fetch("E1")["employment"]
    assert stored["status"] == "Resigned"
    assert stored["job_title"] == "Foreman"
