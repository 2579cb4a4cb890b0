"""
import_engine.duplicates - Decide what happens to a row whose
employee_id may already exist.

Policies
--------
update  (default) existing → overwrite, new → insert
skip    existing → row left out, reported as a warning
error   existing → row rejected with a row-level error
"""

from __future__ import annotations

import enum
from typing import Iterable

from sqlalchemy.orm import Session

import config
from services.employee_service import EmployeeService


class DuplicatePolicy(str, enum.Enum):
    UPDATE = "update"
    SKIP = "skip"
    ERROR = "error"

    @classmethod
    def parse(cls, value: "str | DuplicatePolicy | None") -> "DuplicatePolicy":
        if isinstance(value, cls):
            return value
        raw = str(value or config.DEFAULT_ON_DUPLICATE).strip().lower()
        try:
            return cls(raw)
        except ValueError:
            allowed = ", ".join(p.value for p in cls)
            raise ValueError(f"Invalid onDuplicate policy {raw!r}. Use one of: {allowed}") from None


class Disposition(enum.Enum):
    INSERT = "insert"
    UPDATE = "update"
    SKIP = "skip"
    REJECT = "reject"


class ExistingIds:
    """
    Lookup capability over employee_core.

    Preloaded with one IN (...) query per chunk of candidate ids, then
    kept current with identifiers cleared earlier in the same file, so
    a repeated id behaves like an existing one.
    """

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: set[str] = set(ids)

    @classmethod
    def preload(cls, session: Session, candidates: Iterable[str]) -> "ExistingIds":
        return cls(EmployeeService.existing_ids(
            session, candidates, chunk_size=config.EXISTING_ID_CHUNK,
        ))

    def __contains__(self, employee_id: str) -> bool:
        return employee_id in self._ids

    def add(self, employee_id: str) -> None:
        self._ids.add(employee_id)


def resolve_duplicate(
    employee_id: str,
    policy: DuplicatePolicy,
    existing: ExistingIds,
) -> Disposition:
    """Return the disposition of one row; never touches storage itself."""
    if employee_id not in existing:
        return Disposition.INSERT
    if policy is DuplicatePolicy.SKIP:
        return Disposition.SKIP
    if policy is DuplicatePolicy.ERROR:
        return Disposition.REJECT
    return Disposition.UPDATE
