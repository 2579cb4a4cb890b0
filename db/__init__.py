"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    dispose_db()    → release pooled connections
    get_session()   → new Session
    Employee*       → ORM models, one per sub-record of the aggregate
"""

from db.engine import init_db, dispose_db, get_session   # noqa: F401
from db.models import (                             # noqa: F401
    Base,
    EmployeeCore,
    EmployeeEmployment,
    EmployeeBank,
    EmployeeInsurance,
    EmployeeContact,
    EmployeeOnboard,
    EmployeeTravel,
    SECTION_MODELS,
)
