"""
db.models - SQLAlchemy ORM declarations.

Tables
------
The employee aggregate is split over seven tables, all keyed by the
natural employee identifier.  employee_core is the owner; every other
table holds at most one row per employee_id and is only ever written
in the same transaction as (and after) its core row.

employee_core        - identity / biographic data
employee_employment  - job and org placement, termination fields
employee_bank        - payroll account
employee_insurance   - benefits enrollment flags, BPJS numbers
employee_contact     - phone, email, address, emergency contact, dependents
employee_onboard     - hire lifecycle
employee_travel      - passport / KITAS, travel window
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Date, DateTime, ForeignKey, CheckConstraint,
)
from sqlalchemy.orm import DeclarativeBase


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class _SubRecord:
    """Columns shared by every table of the aggregate."""

    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)

    # Names of the payload columns, in declaration order (set per subclass)
    FIELDS: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        d = {"employee_id": self.employee_id}
        for name in self.FIELDS:
            val = getattr(self, name)
            d[name] = val.isoformat() if hasattr(val, "isoformat") else val
        return d


class EmployeeCore(_SubRecord, Base):
    __tablename__ = "employee_core"

    employee_id       = Column(String(50), primary_key=True)
    imip_id           = Column(String(50), index=True)
    name              = Column(String(200), index=True)
    gender            = Column(String(1))
    place_of_birth    = Column(String(100))
    date_of_birth     = Column(Date)
    age               = Column(Integer)
    marital_status    = Column(String(50))
    tax_status        = Column(String(20))
    religion          = Column(String(50))
    nationality       = Column(String(100))
    blood_type        = Column(String(5))
    kartu_keluarga_no = Column(String(50))
    ktp_no            = Column(String(50))
    npwp              = Column(String(50))
    education         = Column(String(100))

    FIELDS = (
        "imip_id", "name", "gender", "place_of_birth", "date_of_birth", "age",
        "marital_status", "tax_status", "religion", "nationality", "blood_type",
        "kartu_keluarga_no", "ktp_no", "npwp", "education",
    )

    __table_args__ = (
        CheckConstraint("age IS NULL OR age >= 0", name="ck_employee_core_age"),
    )


class EmployeeEmployment(_SubRecord, Base):
    __tablename__ = "employee_employment"

    employee_id       = Column(String(50),
                               ForeignKey("employee_core.employee_id", ondelete="CASCADE"),
                               primary_key=True)
    company_office    = Column(String(100))
    work_location     = Column(String(100))
    division          = Column(String(100))
    department        = Column(String(100), index=True)
    section           = Column(String(100))
    direct_report     = Column(String(200))
    job_title         = Column(String(200))
    grade             = Column(Integer)
    position_grade    = Column(String(50))
    group_job_title   = Column(String(200))
    terminated_date   = Column(Date)
    terminated_type   = Column(String(100))
    terminated_reason = Column(String(500))
    blacklist_mti     = Column(String(1))
    blacklist_imip    = Column(String(1))
    status            = Column(String(50))

    FIELDS = (
        "company_office", "work_location", "division", "department", "section",
        "direct_report", "job_title", "grade", "position_grade", "group_job_title",
        "terminated_date", "terminated_type", "terminated_reason",
        "blacklist_mti", "blacklist_imip", "status",
    )


class EmployeeBank(_SubRecord, Base):
    __tablename__ = "employee_bank"

    employee_id  = Column(String(50),
                          ForeignKey("employee_core.employee_id", ondelete="CASCADE"),
                          primary_key=True)
    bank_name    = Column(String(100))
    account_name = Column(String(200))
    account_no   = Column(String(50))

    FIELDS = ("bank_name", "account_name", "account_no")


class EmployeeInsurance(_SubRecord, Base):
    __tablename__ = "employee_insurance"

    employee_id           = Column(String(50),
                                   ForeignKey("employee_core.employee_id", ondelete="CASCADE"),
                                   primary_key=True)
    insurance_endorsement = Column(String(1))
    insurance_owlexa      = Column(String(1))
    insurance_fpg         = Column(String(1))
    bpjs_tk               = Column(String(50))
    bpjs_kes              = Column(String(50))
    status_bpjs_kes       = Column(String(50))

    FIELDS = (
        "insurance_endorsement", "insurance_owlexa", "insurance_fpg",
        "bpjs_tk", "bpjs_kes", "status_bpjs_kes",
    )


class EmployeeContact(_SubRecord, Base):
    __tablename__ = "employee_contact"

    employee_id             = Column(String(50),
                                     ForeignKey("employee_core.employee_id", ondelete="CASCADE"),
                                     primary_key=True)
    phone_number            = Column(String(50))
    email                   = Column(String(200))
    address                 = Column(String(500))
    city                    = Column(String(100))
    emergency_contact_name  = Column(String(200))
    emergency_contact_phone = Column(String(50))
    spouse_name             = Column(String(200))
    child_name_1            = Column(String(200))
    child_name_2            = Column(String(200))
    child_name_3            = Column(String(200))

    FIELDS = (
        "phone_number", "email", "address", "city",
        "emergency_contact_name", "emergency_contact_phone",
        "spouse_name", "child_name_1", "child_name_2", "child_name_3",
    )


class EmployeeOnboard(_SubRecord, Base):
    __tablename__ = "employee_onboard"

    employee_id             = Column(String(50),
                                     ForeignKey("employee_core.employee_id", ondelete="CASCADE"),
                                     primary_key=True)
    point_of_hire           = Column(String(100))
    point_of_origin         = Column(String(100))
    schedule_type           = Column(String(50))
    first_join_date_merdeka = Column(Date)
    transfer_merdeka        = Column(Date)
    first_join_date         = Column(Date)
    join_date               = Column(Date)
    employment_status       = Column(String(50))
    end_contract            = Column(Date)
    years_in_service        = Column(Integer)

    FIELDS = (
        "point_of_hire", "point_of_origin", "schedule_type",
        "first_join_date_merdeka", "transfer_merdeka", "first_join_date",
        "join_date", "employment_status", "end_contract", "years_in_service",
    )


class EmployeeTravel(_SubRecord, Base):
    __tablename__ = "employee_travel"

    employee_id = Column(String(50),
                         ForeignKey("employee_core.employee_id", ondelete="CASCADE"),
                         primary_key=True)
    travel_in   = Column(Date)
    travel_out  = Column(Date)
    passport_no = Column(String(50))
    kitas_no    = Column(String(50))

    FIELDS = ("travel_in", "travel_out", "passport_no", "kitas_no")

    __table_args__ = (
        CheckConstraint(
            "travel_in IS NULL OR travel_out IS NULL OR travel_out >= travel_in",
            name="ck_employee_travel_window",
        ),
    )


# Sub-entity name → model, in the order a commit writes them (core first)
SECTION_MODELS: dict[str, type[_SubRecord]] = {
    "core":       EmployeeCore,
    "employment": EmployeeEmployment,
    "bank":       EmployeeBank,
    "insurance":  EmployeeInsurance,
    "contact":    EmployeeContact,
    "onboard":    EmployeeOnboard,
    "travel":     EmployeeTravel,
}
