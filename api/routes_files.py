"""
api.routes_files - Serve import log files.

Only files directly under config.IMPORT_LOG_DIR are served.
Path-traversal (../) is blocked by resolving to an absolute path
and checking it stays inside the log directory.
"""

from flask import request, send_file, abort

from api import api_bp
import config


@api_bp.route("/files")
def api_download_file():
    """GET /api/v1/files?path=<log file name>"""
    name = request.args.get("path", "")
    if not name:
        abort(400)

    root = config.IMPORT_LOG_DIR.resolve()
    safe_path = (root / name).resolve()

    # Must stay inside IMPORT_LOG_DIR
    if safe_path == root or root not in safe_path.parents:
        abort(403)
    if not safe_path.is_file():
        abort(404)

    return send_file(safe_path, as_attachment=True, download_name=safe_path.name)
