from datetime import date

import pytest

from import_engine.errors import RowError
from import_engine.profiles import get_profile
from import_engine.reader import SheetRow
from import_engine.row_mapper import RowMapper


HEADERS = ["Emp. ID", "Employee Name", "Gender", "Date of Birth", "Age", "Email", "Status", "Shoe Size"]


def _row(number=2, **cells):
    base = {h: None for h in HEADERS}
    base.update(cells)
    return SheetRow(number=number, cells=base)


def test_maps_into_sections():
    mapper = RowMapper(HEADERS)
    payload = mapper.map(_row(**{
        "Emp. ID": 1001.0, "Employee Name": " Budi ", "Gender": "male",
        "Date of Birth": 45000, "Age": "33", "Email": "budi@example.com",
    }))
    assert payload.employee_id == "1001"
    assert payload.row_number == 2
    assert payload.sections["core"] == {
        "name": "Budi", "gender": "M", "date_of_birth": date(2023, 3, 15), "age": 33,
    }
    assert payload.sections["contact"] == {"email": "budi@example.com"}
    assert payload.sections["employment"] == {"status": None}
    # Every section is present even when the file carries none of its columns
    assert payload.sections["travel"] == {}
    assert payload.warnings == []


def test_missing_identifier_raises():
    mapper = RowMapper(HEADERS)
    with pytest.raises(RowError) as ei:
        mapper.map(_row(number=7, **{"Employee Name": "Nobody"}))
    assert ei.value.column == "employee_id"
    assert "Required field missing" in str(ei.value)


def test_unparseable_value_warns_and_stores_null():
    mapper = RowMapper(HEADERS)
    payload = mapper.map(_row(number=4, **{"Emp. ID": "E9", "Date of Birth": "someday"}))
    assert payload.sections["core"]["date_of_birth"] is None
    assert payload.warnings == [
        "Row 4: date_of_birth could not be parsed as date, value='someday'"
    ]


def test_profile_defaults_travel_apart_from_row_values():
    mapper = RowMapper(HEADERS, get_profile("indonesia_inactive"))
    payload = mapper.map(_row(**{"Emp. ID": "E1", "Status": "Resigned"}))
    assert payload.sections["employment"] == {"status": "Resigned"}
    assert payload.defaults == {"employment": {"status": "Inactive"}}

    payload = RowMapper(["Emp. ID"], get_profile("expatriate_active")).map(
        SheetRow(number=2, cells={"Emp. ID": "X1"})
    )
    assert payload.sections["employment"] == {}
    assert payload.defaults == {"employment": {"status": "Active"}}


def test_non_date_text_warns():
    mapper = RowMapper(HEADERS)
    for raw in ("March", "10:30", "Monday"):
        payload = mapper.map(_row(number=5, **{"Emp. ID": "E9", "Date of Birth": raw}))
        assert payload.sections["core"]["date_of_birth"] is None
        assert payload.warnings == [
            f"Row 5: date_of_birth could not be parsed as date, value='{raw}'"
        ]


def test_second_header_for_same_field_is_ignored():
    mapper = RowMapper(["Emp. ID", "Employee ID", "Phone", "Mobile Phone"])
    assert mapper.identifier_label == "Emp. ID"
    assert mapper.ignored == ["Employee ID", "Mobile Phone"]
    payload = mapper.map(SheetRow(number=2, cells={
        "Emp. ID": "A1", "Employee ID": "B2", "Phone": "0811", "Mobile Phone": "0822",
    }))
    assert payload.employee_id == "A1"
    assert payload.sections["contact"] == {"phone_number": "0811"}


def test_has_identifier():
    assert RowMapper(["employee id", "Email"]).has_identifier
    assert not RowMapper(["Employee Name", "Email"]).has_identifier
