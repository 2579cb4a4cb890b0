"""
import_engine.normalizer - Raw spreadsheet cell → typed domain value.

Every converter is a pure function returning either a typed value or
None.  Blank cells and cells that cannot be converted both come back
as None; callers that need to tell the two apart check is_blank() on
the raw value first.

Cell types
----------
string   trimmed text
integer  whole number
date     datetime.date (spreadsheet serials, date cells, date strings)
gender   'M' / 'F' / first letter
flag     'Y' / 'N' from boolean-like values
char1    first character, upper-cased
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Callable, Optional

from dateutil import parser as dateparser
from openpyxl.utils.datetime import from_excel

_TRUTHY = frozenset({"y", "yes", "true", "1", "x"})

_MONTHS = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6, "jul": 7, "july": 7,
    "aug": 8, "august": 8, "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10, "nov": 11, "november": 11, "dec": 12, "december": 12,
}

_RE_YMD       = re.compile(r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})$")
_RE_DMY       = re.compile(r"^(\d{1,2})[-/. ](\d{1,2})[-/. ](\d{2,4})$")
_RE_D_MON_Y   = re.compile(r"^(\d{1,2})[\s-]+([A-Za-z]+)[\s-]+(\d{2,4})$")
_RE_MON_D_Y   = re.compile(r"^([A-Za-z]+)\s+(\d{1,2}),?\s+(\d{2,4})$")
_RE_NUMERIC   = re.compile(r"^-?\d+(\.\d+)?$")
_RE_BARE_YEAR = re.compile(r"^\d{4}$")

# Serials below 61 fall in Excel's fictitious Jan/Feb 1900 range
MIN_SERIAL = 61

_FILL_PROBES = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def is_blank(value: Any) -> bool:
    """True for None, empty / whitespace-only strings and NaN."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


# ── Strings ───────────────────────────────────────────────────────────

def to_string(value: Any) -> Optional[str]:
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        # Account / ID numbers typed into numeric cells
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip() or None


# ── Numbers ───────────────────────────────────────────────────────────

def to_integer(value: Any) -> Optional[int]:
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isinf(value) or not value.is_integer():
            return None
        return int(value)
    s = str(value).strip().replace(",", "")
    if not _RE_NUMERIC.match(s):
        return None
    f = float(s)
    return int(f) if f.is_integer() else None


# ── Dates ─────────────────────────────────────────────────────────────

def excel_serial_to_date(serial: float) -> Optional[date]:
    """
    Spreadsheet serial → calendar date.

    Serials count days from 1899-12-30 (which absorbs Excel's phantom
    1900-02-29).
    The time-of-day fraction is dropped.  Serials below MIN_SERIAL, NaN
    or out-of-range serials give None rather than epoch zero.
    """
    if isinstance(serial, bool):
        return None
    try:
        serial = float(serial)
    except (TypeError, ValueError):
        return None
    if math.isnan(serial) or math.isinf(serial) or serial < MIN_SERIAL:
        return None
    try:
        converted = from_excel(math.floor(serial))
    except (OverflowError, ValueError):
        return None
    if isinstance(converted, datetime):
        return converted.date()
    return converted if isinstance(converted, date) else None


def _expand_year(y: int) -> int:
    if y < 100:
        return 2000 + y if y < 50 else 1900 + y
    return y


def _safe_date(y: int, m: int, d: int) -> Optional[date]:
    try:
        return date(_expand_year(y), m, d)
    except ValueError:
        return None


def _parse_date_string(s: str) -> Optional[date]:
    if _RE_NUMERIC.match(s):
        # A bare four-digit number is a year, not a day count
        if _RE_BARE_YEAR.match(s):
            return None
        return excel_serial_to_date(float(s))

    m = _RE_YMD.match(s)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _RE_DMY.match(s)
    if m:
        a, b, y = int(m.group(1)), int(m.group(2)), int(m.group(3))
        # Day-first, falling back to month-first when the month is impossible
        return _safe_date(y, b, a) or _safe_date(y, a, b)

    m = _RE_D_MON_Y.match(s)
    if m and m.group(2).lower() in _MONTHS:
        return _safe_date(int(m.group(3)), _MONTHS[m.group(2).lower()], int(m.group(1)))

    m = _RE_MON_D_Y.match(s)
    if m and m.group(1).lower() in _MONTHS:
        return _safe_date(int(m.group(3)), _MONTHS[m.group(1).lower()], int(m.group(2)))

    return _parse_generic(s)


def _parse_generic(s: str) -> Optional[date]:
    """
    dateutil fallback.  dateutil borrows any part the text lacks from its
    default, so the string is parsed against two unrelated defaults and
    only accepted when both agree, i.e. day, month and year were all given.
    """
    try:
        first, second = (
            dateparser.parse(s, dayfirst=True, default=d).date() for d in _FILL_PROBES
        )
    except (ValueError, OverflowError):
        return None
    return first if first == second else None


def to_date(value: Any) -> Optional[date]:
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        return excel_serial_to_date(value)
    return _parse_date_string(str(value).strip())


# ── Single-character codes ────────────────────────────────────────────

def to_char1(value: Any) -> Optional[str]:
    s = to_string(value)
    return s[0].upper() if s else None


def to_gender(value: Any) -> Optional[str]:
    s = to_string(value)
    if not s:
        return None
    g = s.lower()
    if g.startswith("m"):
        return "M"
    if g.startswith("f"):
        return "F"
    return s[0].upper()


def to_flag(value: Any) -> Optional[str]:
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return "Y" if value else "N"
    if isinstance(value, (int, float)):
        return "Y" if value == 1 else "N"
    return "Y" if str(value).strip().lower() in _TRUTHY else "N"


# ── Dispatch ──────────────────────────────────────────────────────────

CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "string":  to_string,
    "integer": to_integer,
    "date":    to_date,
    "gender":  to_gender,
    "flag":    to_flag,
    "char1":   to_char1,
}


def normalize(value: Any, cell_type: str) -> Any:
    """Convert *value* to *cell_type*; None means absent."""
    try:
        converter = CONVERTERS[cell_type]
    except KeyError:
        raise ValueError(f"Unknown cell type: {cell_type!r}") from None
    return converter(value)
