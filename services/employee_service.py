"""
services.employee_service - Read and insert-or-update the seven
sub-records of an employee.

All session management is the caller's responsibility (open before,
close/commit after).  The import engine wraps every employee in its
own transaction around these calls.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from db.models import EmployeeCore, SECTION_MODELS


class EmployeeService:

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def existing_ids(
        session: Session,
        candidates: Iterable[str],
        chunk_size: int = 500,
    ) -> set[str]:
        """Return the subset of *candidates* already present in employee_core."""
        ids = sorted({c for c in candidates if c})
        found: set[str] = set()
        for start in range(0, len(ids), chunk_size):
            chunk = ids[start:start + chunk_size]
            rows = session.query(EmployeeCore.employee_id).filter(
                EmployeeCore.employee_id.in_(chunk)
            ).all()
            found.update(r[0] for r in rows)
        return found

    @staticmethod
    def get(session: Session, employee_id: str) -> Optional[dict]:
        """Return the whole aggregate as {section: {field: value}}, or None."""
        core = session.get(EmployeeCore, employee_id)
        if core is None:
            return None
        out: dict[str, Optional[dict]] = {}
        for section, model in SECTION_MODELS.items():
            rec = core if model is EmployeeCore else session.get(model, employee_id)
            out[section] = rec.to_dict() if rec is not None else None
        return out

    # ── Write ──────────────────────────────────────────────────────────

    @staticmethod
    def upsert_section(
        session: Session,
        section: str,
        employee_id: str,
        values: dict[str, Any],
        defaults: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Insert or update one sub-record and flush it.
        *defaults* fill fields left None, and only on insert: an update
        never overwrites stored data with a default.
        Returns True when a new row was inserted.
        """
        model = SECTION_MODELS[section]
        record = session.get(model, employee_id)
        inserted = record is None
        if inserted:
            record = model(employee_id=employee_id)
            session.add(record)
            if defaults:
                values = {**values, **{
                    name: value for name, value in defaults.items()
                    if values.get(name) is None
                }}
        for name, value in values.items():
            setattr(record, name, value)
        session.flush()
        return inserted
