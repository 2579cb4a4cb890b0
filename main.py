#!/usr/bin/env python3
"""
HRDB - Employee import service
==============================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

import logging
import sys

from flask import Flask, jsonify

import config
from db import init_db
from import_engine import profiles
from api import api_bp


def create_app() -> Flask:
    """Flask application factory."""

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = config.SECRET
    app.config["MAX_CONTENT_LENGTH"] = config.UPLOAD_MAX_BYTES + 64 * 1024   # multipart overhead

    # ── Load import profiles ────────────────────────────────────────
    if not config.PROFILES_PATH.exists():
        print(f"FATAL: import profiles not found: {config.PROFILES_PATH}")
        sys.exit(1)

    count = profiles.load(config.PROFILES_PATH)
    print(f"  Profiles: {count} import profiles")

    # ── Initialise database ─────────────────────────────────────────
    init_db(config.DB_URL)
    print(f"  Database: {config.DB_URL}")

    config.IMPORT_LOG_DIR.mkdir(parents=True, exist_ok=True)
    print(f"  Import logs: {config.IMPORT_LOG_DIR}")

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


def main():
    print("=" * 56)
    print("  HRDB - Employee Import Service")
    print("=" * 56)

    app = create_app()

    print(f"\n  http://{config.HOST}:{config.PORT}/api/v1/import/profiles")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
