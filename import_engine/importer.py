"""
import_engine.importer - Top-level orchestrator.

Coordinates reader → header validation → row mapper → duplicate
resolver → (commit only) per-row upsert, and produces a structured
ImportReport.  Rows are handled strictly one after the other; a row
failure is recorded and processing moves on to the next row.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from db.engine import get_session
from import_engine.duplicates import (
    Disposition, DuplicatePolicy, ExistingIds, resolve_duplicate,
)
from import_engine.errors import RowError
from import_engine.field_map import IDENTIFIER_LABEL
from import_engine.headers import validate_headers
from import_engine.normalizer import to_string
from import_engine.profiles import get_profile
from import_engine.reader import read_table
from import_engine.report import ImportReport, write_import_logs
from import_engine.row_mapper import RowMapper
from import_engine.upsert import commit_payload

logger = logging.getLogger(__name__)


def run_import(
    file_content: bytes | str,
    filename: str,
    profile: str,
    on_duplicate: str | DuplicatePolicy | None = DuplicatePolicy.UPDATE,
    *,
    dry_run: bool = True,
    log_dir: Optional[str | Path] = None,
) -> ImportReport:
    """
    Validate (dry_run=True) or import (dry_run=False) an employee sheet.

    Parameters
    ----------
    file_content : raw upload (.xlsx / .xlsm bytes, or CSV bytes / str)
    filename : original file name, used to pick the reader
    profile : import profile key (expected headers + defaults)
    on_duplicate : "update" | "skip" | "error"
    log_dir : if given, JSON + CSV logs of the run are written there

    Returns
    -------
    ImportReport - always, unless the input itself is unusable:
    ValueError for an unknown profile / policy, ImportFileError for an
    unsupported or unreadable file.
    """
    prof = get_profile(profile)
    policy = DuplicatePolicy.parse(on_duplicate)
    report = ImportReport(
        mode="dry-run" if dry_run else "commit",
        profile=prof.key,
        on_duplicate=policy.value,
    )
    logger.info(f"Import {report.mode} started: file={filename!r} "
                f"profile={prof.key} onDuplicate={policy.value}")

    _process(report, file_content, filename, prof, policy, dry_run)

    if log_dir is not None:
        write_import_logs(report, log_dir)

    logger.info(f"Import {report.mode} finished: {report.summary()}")
    return report


def run_dry_run(file_content, filename, profile, on_duplicate=DuplicatePolicy.UPDATE, **kwargs) -> ImportReport:
    """Validation-only pass; nothing is written."""
    return run_import(file_content, filename, profile, on_duplicate, dry_run=True, **kwargs)


def run_commit(file_content, filename, profile, on_duplicate=DuplicatePolicy.UPDATE, **kwargs) -> ImportReport:
    """Persisting pass; one transaction per employee row."""
    return run_import(file_content, filename, profile, on_duplicate, dry_run=False, **kwargs)


# ── Pipeline ──────────────────────────────────────────────────────────

def _process(report, file_content, filename, prof, policy, dry_run) -> None:
    table = read_table(file_content, filename)
    if table is None:
        report.fatal_message = "File empty"
        report.add_batch_error("Empty file: no header row found")
        return

    header_result = validate_headers(list(prof.headers), table.headers, table.header_columns)
    mapper = RowMapper(table.headers, prof)

    if not mapper.has_identifier:
        report.header_validation = header_result
        report.total_rows = len(table.rows)
        report.fatal_message = "Employee identifier column missing"
        report.add_batch_error(f"Missing identifier column: {IDENTIFIER_LABEL}")
        return

    report.apply_header_validation(header_result)
    for label in table.duplicate_headers:
        report.add_warning(f"Duplicate header ignored: {label}")
    for label in mapper.ignored:
        report.add_warning(f"Header {label!r} maps to a field already taken by another column; ignored")

    candidates = [to_string(r.cells.get(mapper.identifier_label)) for r in table.rows]
    session = get_session()
    try:
        existing = ExistingIds.preload(session, [c for c in candidates if c])
    finally:
        session.close()

    for row in table.rows:
        report.total_rows += 1
        _process_row(report, row, mapper, existing, policy, dry_run)


def _process_row(report, row, mapper, existing, policy, dry_run) -> None:
    n = row.number
    try:
        payload = mapper.map(row)
    except RowError as exc:
        report.add_row_error(n, exc.column, str(exc), f"Row {n}: employee_id is required")
        return

    for w in payload.warnings:
        report.add_warning(w)

    emp_id = payload.employee_id
    disposition = resolve_duplicate(emp_id, policy, existing)

    if disposition is Disposition.SKIP:
        report.skipped += 1
        report.add_warning(f"Row {n} employee_id={emp_id} skipped due to duplicate")
        return
    if disposition is Disposition.REJECT:
        report.add_row_error(
            n, "employee_id", "Duplicate existing employee",
            f"Row {n} employee_id={emp_id} already exists (duplicate policy=error)",
        )
        return

    if dry_run:
        inserted = disposition is Disposition.INSERT
    else:
        try:
            inserted = commit_payload(payload)
        except RowError as exc:
            report.add_row_error(n, exc.column, str(exc), f"Row {n} employee_id={emp_id} error: {exc}")
            return
        except Exception as exc:
            logger.exception(f"Row {n} employee_id={emp_id}: unexpected failure")
            report.add_row_error(n, None, f"Unexpected: {exc}", f"Row {n} employee_id={emp_id} error: Unexpected: {exc}")
            return

    existing.add(emp_id)
    report.processed_rows += 1
    if inserted:
        report.inserted += 1
    else:
        report.updated += 1
