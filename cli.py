#!/usr/bin/env python3
"""
cli - Run an employee import from the command line.

    python cli.py employees.xlsx --profile indonesia_active
    python cli.py employees.xlsx --profile expatriate_active --commit --on-duplicate skip

Without --commit only a dry-run is performed.  Exit code 1 when the
report contains errors.
"""

import argparse
import logging
import sys
from pathlib import Path

import config
from db import init_db
from import_engine import ImportFileError, run_import
from import_engine.duplicates import DuplicatePolicy

MAX_ERRORS_SHOWN = 10


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Bulk employee spreadsheet import")
    p.add_argument("file", type=Path, help=".xlsx / .xlsm / .csv file")
    p.add_argument("--profile", required=True, help="import profile key")
    p.add_argument("--on-duplicate", default=config.DEFAULT_ON_DUPLICATE,
                   choices=[d.value for d in DuplicatePolicy])
    p.add_argument("--commit", action="store_true", help="write to the database")
    p.add_argument("--log-dir", type=Path, default=None,
                   help=f"write JSON/CSV logs here (e.g. {config.IMPORT_LOG_DIR})")
    p.add_argument("--db", default=config.DB_URL, help="SQLAlchemy database URL")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    if not args.file.is_file():
        print(f"File not found: {args.file}")
        return 2

    init_db(args.db)
    try:
        report = run_import(
            args.file.read_bytes(), args.file.name, args.profile, args.on_duplicate,
            dry_run=not args.commit, log_dir=args.log_dir,
        )
    except (ImportFileError, ValueError) as exc:
        print(f"Import failed: {exc}")
        return 2

    s = report.summary()
    print(report.message)
    print(f"  rows={s['rows']} processed={s['processedRows']} skipped={s['skipped']} "
          f"inserted={s['inserted']} updated={s['updated']} "
          f"errors={s['errors']} warnings={s['warnings']}")
    if report.errors:
        print(f"  First errors (max {MAX_ERRORS_SHOWN}):")
        for err in report.errors[:MAX_ERRORS_SHOWN]:
            print(f"    {err}")
    if report.log_file:
        print(f"  Log: {Path(args.log_dir) / report.log_file}")

    return 0 if report.success else 1


if __name__ == "__main__":
    sys.exit(main())
