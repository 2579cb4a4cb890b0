"""
import_engine.field_map - Column label ↔ sub-entity field mapping.

The lookup table is built once at import time.  Uploaded headers are
resolved by name, never by position:

  1. case/whitespace-folded label, parenthetical text kept
     ("First Join Date (Merdeka Group)")
  2. the same with UI hints such as "(Dropdown: M/F)" stripped

Columns that resolve to nothing are dropped by the row mapper.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FieldSpec:
    section: str                 # core / employment / bank / ...
    field: str                   # ORM attribute
    cell_type: str = "string"    # see import_engine.normalizer

    @property
    def qualified(self) -> str:
        return f"{self.section}.{self.field}"


IDENTIFIER_FIELD = "employee_id"
IDENTIFIER_LABEL = "Emp. ID"

# Canonical template label  →  field
COLUMNS: dict[str, FieldSpec] = {
    # ── core ──
    "Emp. ID":           FieldSpec("core", "employee_id"),
    "IMIP ID":           FieldSpec("core", "imip_id"),
    "Employee Name":     FieldSpec("core", "name"),
    "Gender":            FieldSpec("core", "gender", "gender"),
    "Place of Birth":    FieldSpec("core", "place_of_birth"),
    "Date of Birth":     FieldSpec("core", "date_of_birth", "date"),
    "Age":               FieldSpec("core", "age", "integer"),
    "Marital Status":    FieldSpec("core", "marital_status"),
    "Tax Status":        FieldSpec("core", "tax_status"),
    "Religion":          FieldSpec("core", "religion"),
    "Nationality":       FieldSpec("core", "nationality"),
    "Blood Type":        FieldSpec("core", "blood_type"),
    "Kartu Keluarga No": FieldSpec("core", "kartu_keluarga_no"),
    "KTP No":            FieldSpec("core", "ktp_no"),
    "NPWP":              FieldSpec("core", "npwp"),
    "Education":         FieldSpec("core", "education"),

    # ── employment ──
    "Company Office":    FieldSpec("employment", "company_office"),
    "Work Location":     FieldSpec("employment", "work_location"),
    "Division":          FieldSpec("employment", "division"),
    "Department":        FieldSpec("employment", "department"),
    "Section":           FieldSpec("employment", "section"),
    "Direct Report":     FieldSpec("employment", "direct_report"),
    "Job Title":         FieldSpec("employment", "job_title"),
    "Grade":             FieldSpec("employment", "grade", "integer"),
    "Position Grade":    FieldSpec("employment", "position_grade"),
    "Group Job Title":   FieldSpec("employment", "group_job_title"),
    "Terminated Date":   FieldSpec("employment", "terminated_date", "date"),
    "Terminated Type":   FieldSpec("employment", "terminated_type"),
    "Terminated Reason": FieldSpec("employment", "terminated_reason"),
    "Black List MTI":    FieldSpec("employment", "blacklist_mti", "flag"),
    "Black List IMIP":   FieldSpec("employment", "blacklist_imip", "flag"),
    "Status":            FieldSpec("employment", "status"),

    # ── bank ──
    "Bank Name":         FieldSpec("bank", "bank_name"),
    "Account Name":      FieldSpec("bank", "account_name"),
    "Account No":        FieldSpec("bank", "account_no"),

    # ── insurance ──
    "Insurance Endorsement": FieldSpec("insurance", "insurance_endorsement", "flag"),
    "Insurance Owlexa":      FieldSpec("insurance", "insurance_owlexa", "flag"),
    "Insurance FPG":         FieldSpec("insurance", "insurance_fpg", "flag"),
    "BPJS TK":               FieldSpec("insurance", "bpjs_tk"),
    "BPJS KES":              FieldSpec("insurance", "bpjs_kes"),
    "Status BPJS KES":       FieldSpec("insurance", "status_bpjs_kes"),

    # ── contact ──
    "Mobile Phone":            FieldSpec("contact", "phone_number"),
    "Email":                   FieldSpec("contact", "email"),
    "KTP Address":             FieldSpec("contact", "address"),
    "KTP City":                FieldSpec("contact", "city"),
    "Emergency Contact Name":  FieldSpec("contact", "emergency_contact_name"),
    "Emergency Contact Phone": FieldSpec("contact", "emergency_contact_phone"),
    "Spouse Name":             FieldSpec("contact", "spouse_name"),
    "Child Name 1":            FieldSpec("contact", "child_name_1"),
    "Child Name 2":            FieldSpec("contact", "child_name_2"),
    "Child Name 3":            FieldSpec("contact", "child_name_3"),

    # ── onboard ──
    "Point of Hire":                 FieldSpec("onboard", "point_of_hire"),
    "Point of Origin":               FieldSpec("onboard", "point_of_origin"),
    "Schedule Type":                 FieldSpec("onboard", "schedule_type"),
    "First Join Date Merdeka Group": FieldSpec("onboard", "first_join_date_merdeka", "date"),
    "Transfer Merdeka Group":        FieldSpec("onboard", "transfer_merdeka", "date"),
    "First Join Date":               FieldSpec("onboard", "first_join_date", "date"),
    "Join Date":                     FieldSpec("onboard", "join_date", "date"),
    "Employment Status":             FieldSpec("onboard", "employment_status"),
    "End Contract":                  FieldSpec("onboard", "end_contract", "date"),
    "Years in Service":              FieldSpec("onboard", "years_in_service", "integer"),

    # ── travel ──
    "Travel In":   FieldSpec("travel", "travel_in", "date"),
    "Travel Out":  FieldSpec("travel", "travel_out", "date"),
    "Passport No": FieldSpec("travel", "passport_no"),
    "KITAS No":    FieldSpec("travel", "kitas_no"),
}

# Alternative spellings found in older templates  →  canonical label
ALIASES: dict[str, str] = {
    "employee id":                     "Emp. ID",
    "employee_id":                     "Emp. ID",
    "emp id":                          "Emp. ID",
    "emp no":                          "Emp. ID",
    "poin of hire":                    "Point of Hire",
    "poh":                             "Point of Hire",
    "poin of origin":                  "Point of Origin",
    "first join date (merdeka group)": "First Join Date Merdeka Group",
    "transfer merdeka":                "Transfer Merdeka Group",
    "branch":                          "Company Office",
    "branch id":                       "Company Office",
    "job tittle":                      "Job Title",
    "group job tittle":                "Group Job Title",
    "insurance (card)":                "Insurance Endorsement",
    "insurance card":                  "Insurance Endorsement",
    "bpjs tk no":                      "BPJS TK",
    "bpjs kes no":                     "BPJS KES",
    "status bpjs kesehatan":           "Status BPJS KES",
    "emergency contact":               "Emergency Contact Name",
    "office email":                    "Email",
    "phone":                           "Mobile Phone",
    "address":                         "KTP Address",
    "city":                            "KTP City",
    "kk no":                           "Kartu Keluarga No",
    "name":                            "Employee Name",
}

_RE_PARENS = re.compile(r"\s*\([^)]*\)\s*")
_RE_SPACES = re.compile(r"\s+")


def fold_label(label: str) -> str:
    """Lower-case and collapse whitespace; keep everything else."""
    return _RE_SPACES.sub(" ", str(label or "")).strip().lower()


def sanitize_label(label: str) -> str:
    """fold_label() with parenthetical UI hints removed."""
    return fold_label(_RE_PARENS.sub(" ", str(label or "")))


def _build_lookup() -> dict[str, FieldSpec]:
    lookup: dict[str, FieldSpec] = {}
    for label, spec in COLUMNS.items():
        lookup[fold_label(label)] = spec
    for alias, canonical in ALIASES.items():
        lookup.setdefault(fold_label(alias), COLUMNS[canonical])
    return lookup


_LOOKUP = _build_lookup()


def resolve(label: str) -> Optional[FieldSpec]:
    """Return the FieldSpec an uploaded header maps to, or None."""
    spec = _LOOKUP.get(fold_label(label))
    if spec is None:
        spec = _LOOKUP.get(sanitize_label(label))
    return spec
