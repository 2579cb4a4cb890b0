"""
import_engine.reader - Turn an uploaded spreadsheet into named rows.

Responsibilities:
  • .xlsx / .xlsm via openpyxl (first worksheet, cached values)
  • .csv with BOM removal and ',' / ';' / tab sniffing
  • Header whitespace stripping
  • Dropping fully blank rows *without* renumbering the rest, so every
    row keeps its original spreadsheet row number (header = row 1)
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Iterable, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from import_engine.errors import ImportFileError

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = frozenset({".xlsx", ".xlsm"})
CSV_EXTENSIONS = frozenset({".csv"})


@dataclass
class SheetRow:
    number: int                      # 1-based row in the original file
    cells: dict[str, Any]


@dataclass
class TabularData:
    headers: list[str]
    # 0-based spreadsheet column of each entry in headers
    header_columns: list[int] = field(default_factory=list)
    rows: list[SheetRow] = field(default_factory=list)
    duplicate_headers: list[str] = field(default_factory=list)


def read_table(content: bytes | str, filename: str) -> Optional[TabularData]:
    """
    Parse *content* according to the extension of *filename*.

    Returns None when the file has no header row at all.
    Raises ImportFileError for unsupported or unreadable files.
    """
    ext = PurePath(filename or "").suffix.lower()
    if ext in EXCEL_EXTENSIONS:
        records = _excel_records(content)
    elif ext in CSV_EXTENSIONS:
        records = _csv_records(content)
    else:
        raise ImportFileError(f"Unsupported file type: {ext or '(none)'}")
    return _build(records)


# ── Format readers ────────────────────────────────────────────────────

def _excel_records(content: bytes | str) -> list[tuple]:
    if isinstance(content, str):
        raise ImportFileError("Spreadsheet content must be binary")
    try:
        wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise ImportFileError(f"Unreadable spreadsheet: {exc}") from exc

    try:
        if not wb.worksheets:
            return []
        ws = wb.worksheets[0]
        return [tuple(r) for r in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def _csv_records(content: bytes | str) -> list[list[str]]:
    text = _decode(content)
    if not text.strip():
        return []

    sample = text[:4096]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel
    try:
        return list(csv.reader(io.StringIO(text), dialect))
    except csv.Error as exc:
        raise ImportFileError(f"Unreadable CSV: {exc}") from exc


def _decode(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.info("CSV is not UTF-8, falling back to latin1")
            return raw.decode("latin1")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


# ── Row assembly ──────────────────────────────────────────────────────

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _build(records: Iterable[Iterable[Any]]) -> Optional[TabularData]:
    it = iter(records)
    header_row = next(it, None)
    if header_row is None:
        return None

    # Keep positions: a blank header cell still occupies its column
    columns: list[Optional[str]] = []
    seen: set[str] = set()
    data = TabularData(headers=[])
    for col, cell in enumerate(header_row):
        label = "" if cell is None else str(cell).strip()
        if not label:
            columns.append(None)
            continue
        if label in seen:
            data.duplicate_headers.append(label)
            columns.append(None)
            continue
        seen.add(label)
        columns.append(label)
        data.headers.append(label)
        data.header_columns.append(col)

    if not data.headers:
        return None

    for number, record in enumerate(it, start=2):      # row 1 = header
        values = list(record)
        if all(_is_blank(v) for v in values):
            continue
        cells = {
            label: values[idx] if idx < len(values) else None
            for idx, label in enumerate(columns)
            if label is not None
        }
        data.rows.append(SheetRow(number=number, cells=cells))

    return data
