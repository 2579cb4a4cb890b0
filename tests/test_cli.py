from cli import main
from conftest import employee, xlsx_bytes


def test_cli_dry_run_then_commit(db, tmp_path, fetch, capsys):
    path = tmp_path / "staff.xlsx"
    path.write_bytes(xlsx_bytes([employee("E1")]))

    assert main([str(path), "--profile", "expatriate_active", "--db", db]) == 0
    assert "Dry-run successful" in capsys.readouterr().out
    assert fetch("E1") is None

    logs = tmp_path / "logs"
    assert main([str(path), "--profile", "expatriate_active", "--db", db,
                 "--commit", "--log-dir", str(logs)]) == 0
    assert fetch("E1") is not None
    assert any(logs.glob("import-commit-*.json"))


def test_cli_exit_codes(db, tmp_path, capsys):
    path = tmp_path / "staff.xlsx"
    path.write_bytes(xlsx_bytes([employee("E1", **{"Emp. ID": None})]))

    assert main([str(path), "--profile", "expatriate_active", "--db", db]) == 1
    assert "employee_id is required" in capsys.readouterr().out

    assert main([str(path), "--profile", "nope", "--db", db]) == 2
    assert main([str(tmp_path / "missing.xlsx"), "--profile", "expatriate_active", "--db", db]) == 2
