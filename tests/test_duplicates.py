import pytest

from db import get_session, EmployeeCore
from import_engine.duplicates import (
    Disposition, DuplicatePolicy, ExistingIds, resolve_duplicate,
)
from services.employee_service import EmployeeService


def test_policy_parse():
    assert DuplicatePolicy.parse("SKIP") is DuplicatePolicy.SKIP
    assert DuplicatePolicy.parse(None) is DuplicatePolicy.UPDATE
    assert DuplicatePolicy.parse(DuplicatePolicy.ERROR) is DuplicatePolicy.ERROR
    with pytest.raises(ValueError, match="Invalid onDuplicate policy"):
        DuplicatePolicy.parse("merge")


@pytest.mark.parametrize("policy, expected", [
    (DuplicatePolicy.UPDATE, Disposition.UPDATE),
    (DuplicatePolicy.SKIP, Disposition.SKIP),
    (DuplicatePolicy.ERROR, Disposition.REJECT),
])
def test_existing_id_per_policy(policy, expected):
    existing = ExistingIds(["E1"])
    assert resolve_duplicate("E1", policy, existing) is expected
    assert resolve_duplicate("E2", policy, existing) is Disposition.INSERT


def test_ids_seen_in_the_same_file_count_as_existing():
    existing = ExistingIds()
    assert resolve_duplicate("E5", DuplicatePolicy.SKIP, existing) is Disposition.INSERT
    existing.add("E5")
    assert resolve_duplicate("E5", DuplicatePolicy.SKIP, existing) is Disposition.SKIP


def test_preload_queries_in_chunks(db):
    session = get_session()
    with session.begin():
        session.add_all([EmployeeCore(employee_id=f"E{i}") for i in range(12)])
    session.close()

    session = get_session()
    try:
        found = EmployeeService.existing_ids(session, [f"E{i}" for i in range(0, 20, 2)], chunk_size=3)
        existing = ExistingIds.preload(session, ["E1", "E99", "", None])
    finally:
        session.close()

    assert found == {"E0", "E2", "E4", "E6", "E8", "E10"}
    assert "E1" in existing
    assert "E99" not in existing
