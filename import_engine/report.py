"""
import_engine.report - Structured result of an import run.

One ImportReport is filled row by row by the importer and rendered
three ways:

  to_dict()         API / caller response
  to_log_payload()  structured JSON log
  to_csv()          flat log, one finding per line:
                    Section, Severity, Row, Column, Message

Row numbers are the rows of the uploaded sheet (header = row 1).
"""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from import_engine.headers import HeaderValidation

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Section", "Severity", "Row", "Column", "Message"]


@dataclass
class RowIssue:
    row_number: int
    column: Optional[str]
    message: str

    def to_dict(self) -> dict:
        return {"rowNumber": self.row_number, "column": self.column, "message": self.message}


@dataclass
class ImportReport:
    mode: str = "dry-run"                  # "dry-run" | "commit"
    profile: str = ""
    on_duplicate: str = "update"

    total_rows: int = 0
    processed_rows: int = 0
    skipped: int = 0
    inserted: int = 0
    updated: int = 0

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    row_errors: list[RowIssue] = field(default_factory=list)
    header_validation: HeaderValidation = field(default_factory=HeaderValidation)

    # Findings that belong to neither the header check nor a row
    batch_errors: list[str] = field(default_factory=list)
    processing_warnings: list[str] = field(default_factory=list)

    fatal_message: Optional[str] = None
    log_file: Optional[str] = None
    log_csv_file: Optional[str] = None
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    # ── Recording ──────────────────────────────────────────────────────

    def add_batch_error(self, message: str) -> None:
        self.batch_errors.append(message)
        self.errors.append(message)

    def add_row_error(
        self,
        row_number: int,
        column: Optional[str],
        message: str,
        summary: Optional[str] = None,
    ) -> None:
        self.row_errors.append(RowIssue(row_number, column, message))
        self.errors.append(summary or f"Row {row_number}: {message}")

    def add_warning(self, message: str) -> None:
        self.processing_warnings.append(message)
        self.warnings.append(message)

    def apply_header_validation(self, result: HeaderValidation) -> None:
        self.header_validation = result
        for h in result.missing:
            self.errors.append(f"Missing header: {h}")
        for h in result.extra:
            self.warnings.append(f"Unexpected extra header ignored: {h}")
        if result.order_mismatch:
            self.warnings.append(
                f"Column order differs from the template for "
                f"{len(result.order_mismatch)} header(s); columns are matched by name"
            )

    # ── Derived ────────────────────────────────────────────────────────

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        if self.fatal_message:
            return self.fatal_message
        if self.mode == "commit":
            if self.errors:
                return "Imported with some errors."
            return f"Successfully processed {self.processed_rows} rows."
        return "Dry-run completed with errors" if self.errors else "Dry-run successful"

    def summary(self) -> dict:
        return {
            "rows": self.total_rows,
            "processedRows": self.processed_rows,
            "skipped": self.skipped,
            "inserted": self.inserted,
            "updated": self.updated,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }

    # ── Renderings ─────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "processedRows": self.processed_rows,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "summary": self.summary(),
            "headerValidation": self.header_validation.to_dict(),
            "rowErrors": [r.to_dict() for r in self.row_errors],
        }

    def to_log_payload(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "type": self.mode,
            "profile": self.profile,
            "onDuplicate": self.on_duplicate,
            "headerValidation": self.header_validation.to_dict(),
            "summary": self.summary(),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "rowErrors": [r.to_dict() for r in self.row_errors],
        }

    def to_csv_rows(self) -> list[list]:
        rows: list[list] = []
        hv = self.header_validation
        for h in hv.missing:
            rows.append(["HeaderValidation", "error", "", "header", f"Missing header: {h}"])
        for h in hv.extra:
            rows.append(["HeaderValidation", "warning", "", "header", f"Unexpected extra header: {h}"])
        for m in hv.order_mismatch:
            rows.append([
                "HeaderValidation", "warning", "", "header",
                f'Order mismatch: expected index {m.expected_index} for '
                f'"{m.expected_header}", found index {m.actual_index}',
            ])
        for r in self.row_errors:
            rows.append(["RowError", "error", r.row_number, r.column or "", r.message])
        for w in self.processing_warnings:
            rows.append(["Processing", "warning", "", "", w])
        for e in self.batch_errors:
            rows.append(["Processing", "error", "", "", e])
        return rows

    def to_csv(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(CSV_COLUMNS)
        writer.writerows(self.to_csv_rows())
        return buf.getvalue()


def write_import_logs(report: ImportReport, log_dir: str | Path) -> tuple[Optional[str], Optional[str]]:
    """
    Write the JSON and CSV logs of *report* into *log_dir*.

    Returns the bare file names (never absolute paths).  A write
    failure is logged and yields None; it never fails the import.
    """
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
    base = f"import-{report.mode}-{stamp}"
    try:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / f"{base}.json").write_text(
            json.dumps(report.to_log_payload(), indent=2, default=str), encoding="utf-8",
        )
        (directory / f"{base}.csv").write_text(report.to_csv(), encoding="utf-8")
    except OSError as exc:
        logger.error(f"Failed writing import logs to {log_dir}: {exc}")
        return None, None

    report.log_file = f"{base}.json"
    report.log_csv_file = f"{base}.csv"
    return report.log_file, report.log_csv_file
