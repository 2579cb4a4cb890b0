import json

from import_engine.headers import HeaderValidation, OrderMismatch
from import_engine.report import CSV_COLUMNS, ImportReport, write_import_logs


def _report(mode="commit"):
    r = ImportReport(mode=mode, profile="indonesia_active")
    r.apply_header_validation(HeaderValidation(
        missing=["NPWP"],
        extra=["Shoe Size"],
        order_mismatch=[OrderMismatch(3, "Gender", 5)],
    ))
    r.total_rows = 3
    r.processed_rows = 1
    r.add_row_error(4, "core.age", "CHECK constraint failed", "Row 4 employee_id=E4 error: CHECK constraint failed")
    r.add_warning("Row 2 employee_id=E2 skipped due to duplicate")
    r.skipped = 1
    return r


def test_messages():
    assert ImportReport(mode="dry-run").message == "Dry-run successful"
    assert ImportReport(mode="commit", processed_rows=5).message == "Successfully processed 5 rows."
    assert _report("dry-run").message == "Dry-run completed with errors"
    assert _report("commit").message == "Imported with some errors."


def test_to_dict_shape():
    d = _report().to_dict()
    assert d["success"] is False
    assert d["processedRows"] == 1
    assert d["errors"] == [
        "Missing header: NPWP",
        "Row 4 employee_id=E4 error: CHECK constraint failed",
    ]
    assert d["warnings"][0] == "Unexpected extra header ignored: Shoe Size"
    assert d["summary"] == {
        "rows": 3, "processedRows": 1, "skipped": 1, "inserted": 0, "updated": 0,
        "errors": 2, "warnings": 3,
    }
    assert d["headerValidation"]["ok"] is False
    assert d["rowErrors"] == [{"rowNumber": 4, "column": "core.age", "message": "CHECK constraint failed"}]


def test_csv_rendering():
    lines = _report().to_csv().splitlines()
    assert lines[0] == ",".join(CSV_COLUMNS)
    assert lines[1] == "HeaderValidation,error,,header,Missing header: NPWP"
    assert "RowError,error,4,core.age,CHECK constraint failed" in lines
    assert "Processing,warning,,,Row 2 employee_id=E2 skipped due to duplicate" in lines
    assert any(l.startswith("HeaderValidation,warning") and "Order mismatch" in l for l in lines)


def test_write_import_logs(tmp_path):
    report = _report()
    json_name, csv_name = write_import_logs(report, tmp_path / "logs")

    assert json_name.startswith("import-commit-") and json_name.endswith(".json")
    payload = json.loads((tmp_path / "logs" / json_name).read_text(encoding="utf-8"))
    assert payload["type"] == "commit"
    assert payload["profile"] == "indonesia_active"
    assert payload["summary"]["errors"] == 2
    assert (tmp_path / "logs" / csv_name).read_text(encoding="utf-8").startswith("Section,")


def test_write_import_logs_failure_is_not_fatal(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    report = _report()
    assert write_import_logs(report, blocker) == (None, None)
    assert report.log_file is None
