"""
import_engine - Bulk employee spreadsheet import pipeline.

Public API:
    run_dry_run(content, filename, profile, on_duplicate) → ImportReport
    run_commit(content, filename, profile, on_duplicate)  → ImportReport
    run_import(..., dry_run=True|False)                   → ImportReport
"""

from import_engine.importer import run_import, run_dry_run, run_commit   # noqa: F401
from import_engine.report import ImportReport, write_import_logs         # noqa: F401
from import_engine.errors import ImportFileError, RowError               # noqa: F401
from import_engine.duplicates import DuplicatePolicy                     # noqa: F401
