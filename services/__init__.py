"""
services - Business-logic layer sitting between API/import engine and DB.
"""

from services.employee_service import EmployeeService     # noqa: F401
