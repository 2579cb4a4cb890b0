"""
import_engine.upsert - Write one employee aggregate in one transaction.

Every call takes a fresh session from the pool, writes core first and
then employment, bank, insurance, contact, onboard and travel, and
commits.  Any storage error rolls the whole employee back and is
re-raised as RowError carrying the failing column where it can be
determined.  Nothing here is shared between rows.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from db.engine import get_session
from db.models import SECTION_MODELS
from import_engine.errors import RowError
from import_engine.row_mapper import EmployeePayload
from services.employee_service import EmployeeService

logger = logging.getLogger(__name__)

UPSERT_ORDER = tuple(SECTION_MODELS)    # core, employment, bank, insurance, contact, onboard, travel

_TABLE_TO_SECTION = {m.__tablename__: name for name, m in SECTION_MODELS.items()}

# Named CHECK constraints → the column an operator has to fix
_CONSTRAINT_COLUMNS = {
    "ck_employee_core_age":      "core.age",
    "ck_employee_travel_window": "travel.travel_out",
}

_RE_TABLE_COLUMN = re.compile(r"\b(employee_[a-z]+)\.([a-z_0-9]+)\b")


def commit_payload(payload: EmployeePayload) -> bool:
    """
    Insert-or-update all seven sub-records of *payload*.
    Returns True if the core record was newly inserted.
    Raises RowError (after rollback) on any storage failure.
    """
    session = get_session()
    section: Optional[str] = None
    inserted = False
    try:
        with session.begin():
            for section in UPSERT_ORDER:
                created = EmployeeService.upsert_section(
                    session, section, payload.employee_id,
                    payload.sections.get(section, {}),
                    defaults=payload.defaults.get(section),
                )
                if section == "core":
                    inserted = created
    except SQLAlchemyError as exc:
        message = storage_message(exc)
        column = failing_column(message, section)
        logger.warning(
            f"Row {payload.row_number} employee_id={payload.employee_id} "
            f"rolled back at {column}: {message}"
        )
        raise RowError(message, column=column) from exc
    finally:
        session.close()
    return inserted


def storage_message(exc: SQLAlchemyError) -> str:
    """The driver's own message, without SQLAlchemy's statement dump."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig).strip()
    return str(exc).split("\n", 1)[0].strip()


def failing_column(message: str, section: Optional[str]) -> Optional[str]:
    """Best-effort '<section>.<field>' for a storage error message."""
    for constraint, column in _CONSTRAINT_COLUMNS.items():
        if constraint in message:
            return column
    m = _RE_TABLE_COLUMN.search(message)
    if m and m.group(1) in _TABLE_TO_SECTION:
        return f"{_TABLE_TO_SECTION[m.group(1)]}.{m.group(2)}"
    return section
