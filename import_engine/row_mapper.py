"""
import_engine.row_mapper - One spreadsheet row → seven sub-entity payloads.

Single-responsibility: given a SheetRow, either return an
EmployeePayload ready for the duplicate resolver / upsert engine, or
raise RowError when the employee identifier is missing.

The header → field resolution is done once per file in __init__, not
once per row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from db.models import SECTION_MODELS
from import_engine.errors import RowError
from import_engine.field_map import FieldSpec, IDENTIFIER_FIELD, resolve
from import_engine.normalizer import is_blank, normalize, to_string
from import_engine.profiles import ImportProfile
from import_engine.reader import SheetRow


@dataclass
class EmployeePayload:
    row_number: int
    employee_id: str
    # section → {field: value}; every section is present, possibly empty
    sections: dict[str, dict[str, Any]] = field(default_factory=dict)
    # section → {field: value} from the profile; only used when a record is created
    defaults: dict[str, dict[str, Any]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


class RowMapper:
    """
    Resolves the file's headers against the column map once and then
    maps rows.  Only fields whose column is present in the file end up
    in a payload, so an update never touches columns the file lacks.
    Profile defaults travel separately on the payload and are applied
    only to records that do not exist yet.
    """

    def __init__(self, headers: list[str], profile: Optional[ImportProfile] = None):
        self._columns: list[tuple[str, FieldSpec]] = []
        self._id_label: Optional[str] = None
        self.ignored: list[str] = []          # second header for the same field

        claimed: set[str] = set()
        for label in headers:
            spec = resolve(label)
            if spec is None:
                continue
            if spec.qualified in claimed:
                self.ignored.append(label)
                continue
            claimed.add(spec.qualified)
            if spec.field == IDENTIFIER_FIELD:
                self._id_label = label
            else:
                self._columns.append((label, spec))

        self._defaults = dict(profile.defaults) if profile else {}

    @property
    def identifier_label(self) -> Optional[str]:
        return self._id_label

    @property
    def has_identifier(self) -> bool:
        return self._id_label is not None

    def map(self, row: SheetRow) -> EmployeePayload:
        """Build the payload for *row*.  Raises RowError if the identifier is blank."""
        raw_id = row.cells.get(self._id_label) if self._id_label else None
        employee_id = to_string(raw_id)
        if not employee_id:
            raise RowError("Required field missing", column=IDENTIFIER_FIELD)

        payload = EmployeePayload(
            row_number=row.number,
            employee_id=employee_id,
            sections={name: {} for name in SECTION_MODELS},
        )

        for label, spec in self._columns:
            raw = row.cells.get(label)
            value = normalize(raw, spec.cell_type)
            if value is None and not is_blank(raw):
                payload.warnings.append(
                    f"Row {row.number}: {spec.field} could not be parsed as "
                    f"{spec.cell_type}, value='{raw}'"
                )
            payload.sections[spec.section][spec.field] = value

        for (section, fname), value in self._defaults.items():
            payload.defaults.setdefault(section, {})[fname] = value

        return payload
