"""
import_engine.headers - Compare an uploaded header row with a profile.

Only missing headers are errors.  Extra and reordered headers are
reported as warnings: the row mapper resolves columns by name, so
neither ever blocks processing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from import_engine.field_map import resolve, sanitize_label


@dataclass
class OrderMismatch:
    expected_index: int
    expected_header: str
    actual_index: int

    def to_dict(self) -> dict:
        return {
            "expectedIndex": self.expected_index,
            "expectedHeader": self.expected_header,
            "actualIndex": self.actual_index,
        }


@dataclass
class HeaderValidation:
    missing: list[str] = field(default_factory=list)
    extra: list[str] = field(default_factory=list)
    order_mismatch: list[OrderMismatch] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "missing": list(self.missing),
            "extra": list(self.extra),
            "orderMismatch": [m.to_dict() for m in self.order_mismatch],
        }


def header_key(label: str) -> str:
    """
    Identity used to compare two header labels.  Labels mapping to the
    same field are equal ("Employee ID" == "Emp. ID"); unknown labels
    compare by their sanitized text.
    """
    spec = resolve(label)
    if spec is not None:
        return f"field:{spec.qualified}"
    return f"label:{sanitize_label(label)}"


def validate_headers(
    expected: list[str],
    actual: list[str],
    columns: Optional[list[int]] = None,
) -> HeaderValidation:
    """
    Return missing / extra / order-mismatch detail for *actual* vs *expected*.

    *columns* holds the spreadsheet column of each actual header; blank
    or repeated header cells leave gaps there, so indexes reported in
    order_mismatch point at real columns.  Without it, positions in
    *actual* are used.
    """
    result = HeaderValidation()
    if columns is None:
        columns = list(range(len(actual)))

    actual_pos: dict[str, int] = {}
    for label, col in zip(actual, columns):
        actual_pos.setdefault(header_key(label), col)

    expected_keys: set[str] = set()
    for idx, label in enumerate(expected):
        key = header_key(label)
        if key in expected_keys:
            continue
        expected_keys.add(key)

        pos = actual_pos.get(key)
        if pos is None:
            result.missing.append(label)
        elif pos != idx:
            result.order_mismatch.append(
                OrderMismatch(expected_index=idx, expected_header=label, actual_index=pos)
            )

    for label in actual:
        if header_key(label) not in expected_keys:
            result.extra.append(label)

    return result
