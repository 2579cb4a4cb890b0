"""
api.routes_import - /api/v1/import/* endpoints.

Dry-run and commit take the spreadsheet as a multipart upload (field
'file') with ?profile=<key>&onDuplicate=update|skip|error.  Both answer
with the ImportReport JSON plus links to the written log files.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from urllib.parse import quote

from flask import request, jsonify, send_file, url_for
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from api import api_bp
from api.errors import error_response
import config
from import_engine import ImportFileError, run_import
from import_engine.field_map import resolve
from import_engine.profiles import get_profile, list_profiles

logger = logging.getLogger(__name__)

TEMPLATE_ROWS = 200                 # pre-formatted data rows in a template
DATE_FORMAT = "dd/mm/yyyy"


# ── Dry-run / commit ──────────────────────────────────────────────────

@api_bp.route("/import/dry-run", methods=["POST"])
def api_import_dry_run():
    """POST /api/v1/import/dry-run?profile=<key>&onDuplicate=update"""
    return _handle_upload(dry_run=True)


@api_bp.route("/import/commit", methods=["POST"])
def api_import_commit():
    """POST /api/v1/import/commit?profile=<key>&onDuplicate=update"""
    return _handle_upload(dry_run=False)


def _handle_upload(dry_run: bool):
    f = request.files.get("file")
    if f is None or not f.filename:
        return error_response("No file uploaded (multipart field 'file')", 400)

    ext = Path(f.filename).suffix.lower()
    if ext not in config.ALLOWED_EXTENSIONS:
        allowed = ", ".join(sorted(config.ALLOWED_EXTENSIONS))
        return error_response(f"Unsupported file type {ext or '(none)'}; allowed: {allowed}", 400)

    content = f.read()
    if len(content) > config.UPLOAD_MAX_BYTES:
        return error_response(
            f"File exceeds the upload limit of {config.UPLOAD_MAX_BYTES} bytes", 413,
        )
    if not content:
        return error_response("Uploaded file is empty", 400)

    try:
        report = run_import(
            content,
            f.filename,
            request.args.get("profile", ""),
            request.args.get("onDuplicate") or config.DEFAULT_ON_DUPLICATE,
            dry_run=dry_run,
            log_dir=config.IMPORT_LOG_DIR,
        )
    except ImportFileError as exc:
        logger.warning(f"Rejected upload {f.filename!r}: {exc}")
        return error_response(str(exc), 400)
    except ValueError as exc:
        return error_response(str(exc), 400)

    body = report.to_dict()
    body["logUrl"] = _log_url(report.log_file)
    body["logCsvUrl"] = _log_url(report.log_csv_file)
    return jsonify(body)


def _log_url(name: str | None) -> str | None:
    if not name:
        return None
    return f"{url_for('api.api_download_file')}?path={quote(name)}"


# ── Profiles & templates ──────────────────────────────────────────────

@api_bp.route("/import/profiles")
def api_import_profiles():
    """GET /api/v1/import/profiles"""
    return jsonify({"profiles": [p.to_dict() for p in list_profiles()]})


@api_bp.route("/import/template")
def api_import_template():
    """
    GET /api/v1/import/template?profile=<key>

    An .xlsx whose first row holds the profile's expected headers.
    Date columns come pre-formatted dd/mm/yyyy.
    """
    try:
        profile = get_profile(request.args.get("profile", ""))
    except ValueError as exc:
        return error_response(str(exc), 400)

    buf = io.BytesIO()
    build_template(profile.headers).save(buf)
    buf.seek(0)

    return send_file(
        buf,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=f"employee-import-{profile.key}.xlsx",
    )


def build_template(headers) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = "Employees"
    bold = Font(bold=True)

    for col, label in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=label)
        cell.font = bold
        ws.column_dimensions[get_column_letter(col)].width = max(12, len(label) + 2)

        spec = resolve(label)
        if spec is not None and spec.cell_type == "date":
            for row in range(2, TEMPLATE_ROWS + 2):
                ws.cell(row=row, column=col).number_format = DATE_FORMAT

    ws.freeze_panes = "A2"
    return wb
