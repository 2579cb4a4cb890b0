"""
api.errors - JSON error handlers for the API blueprint.

Import endpoints answer in the report shape
({success, message, errors}) so clients can treat every failure alike.
"""

from flask import jsonify

from api import api_bp


def error_response(message: str, status: int, errors: list[str] | None = None):
    return jsonify({
        "success": False,
        "message": message,
        "errors": errors if errors is not None else [message],
    }), status


@api_bp.errorhandler(400)
def api_bad_request(_e):
    return error_response("bad request", 400)


@api_bp.errorhandler(403)
def api_forbidden(_e):
    return error_response("forbidden", 403)


@api_bp.errorhandler(404)
def api_not_found(_e):
    return error_response("not found", 404)


@api_bp.errorhandler(413)
def api_too_large(_e):
    return error_response("uploaded file too large", 413)


@api_bp.errorhandler(500)
def api_server_error(_e):
    return error_response("internal server error", 500)
