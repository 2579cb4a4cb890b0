import io
import csv
from datetime import date

import pytest
from openpyxl import Workbook

import config
from db import dispose_db, init_db, get_session
from import_engine import profiles
from import_engine.profiles import get_profile
from services.employee_service import EmployeeService


@pytest.fixture(autouse=True)
def _profiles_loaded():
    """Every test starts from the shipped profile table."""
    profiles.load(config.PROFILES_PATH)


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    """Redirect import logs into a temporary directory."""
    p = tmp_path / "logs"
    p.mkdir()
    monkeypatch.setattr(config, "IMPORT_LOG_DIR", p)
    return p


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Fresh SQLite database per test."""
    url = f"sqlite:///{tmp_path / 'test.sqlite'}"
    monkeypatch.setattr(config, "DB_URL", url)
    init_db(url)
    yield url
    dispose_db()


@pytest.fixture
def app(db, log_dir):
    from main import create_app
    application = create_app()
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def fetch():
    """Load an employee aggregate from the database as plain dicts."""
    def _fetch(employee_id):
        session = get_session()
        try:
            return EmployeeService.get(session, employee_id)
        finally:
            session.close()
    return _fetch


def profile_headers(profile="expatriate_active"):
    return list(get_profile(profile).headers)


def xlsx_bytes(rows, headers=None, profile="expatriate_active"):
    """
    Build an .xlsx in memory.  *rows* are dicts keyed by header label;
    labels not in *headers* are ignored, missing ones stay blank.
    """
    headers = headers if headers is not None else profile_headers(profile)
    wb = Workbook()
    ws = wb.active
    ws.append(headers)
    for row in rows:
        if row is None:                 # blank spacer row
            ws.append([None] * len(headers))
            continue
        ws.append([row.get(h) for h in headers])
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def csv_bytes(rows, headers, delimiter=","):
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=delimiter)
    writer.writerow(headers)
    for row in rows:
        writer.writerow([row.get(h, "") for h in headers])
    return ("\ufeff" + buf.getvalue()).encode("utf-8")


def employee(emp_id, **extra):
    """A realistic data row for the expatriate templates."""
    row = {
        "Emp. ID": emp_id,
        "Employee Name": f"Employee {emp_id}",
        "Gender": "Male",
        "Date of Birth": date(1990, 4, 12),
        "Nationality": "Chinese",
        "Email": f"{emp_id.lower()}@example.com",
        "Job Title": "Process Engineer",
        "Department": "Smelter",
        "Bank Name": "Bank Mandiri",
        "Account No": "1230004567",
        "Passport No": f"E{emp_id}",
        "Travel In": date(2024, 1, 10),
        "Travel Out": date(2024, 6, 30),
    }
    row.update(extra)
    return row
