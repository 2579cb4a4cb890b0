"""
HRDB - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path

from dotenv import load_dotenv


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

load_dotenv(BASE_DIR / ".env")

PROFILES_PATH  = Path(os.environ.get("HRDB_PROFILES", BASE_DIR / "import_engine" / "profiles.yaml"))
IMPORT_LOG_DIR = Path(os.environ.get("HRDB_IMPORT_LOG_DIR", BASE_DIR / "logs" / "imports"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("HRDB_DB", f"sqlite:///{BASE_DIR / 'hrdb.sqlite'}")
DB_TIMEOUT_SECONDS = float(os.environ.get("HRDB_DB_TIMEOUT", "15"))   # lock wait per statement

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("HRDB_HOST", "0.0.0.0")
PORT   = int(os.environ.get("HRDB_PORT", "8080"))
DEBUG  = os.environ.get("HRDB_DEBUG", "0") == "1"
SECRET = os.environ.get("HRDB_SECRET", "hrdb-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("HRDB_LOG_LEVEL", "INFO").upper()

# ── Uploads ────────────────────────────────────────────────────────────
UPLOAD_MAX_BYTES   = int(os.environ.get("HRDB_UPLOAD_MAX_BYTES", str(10 * 1024 * 1024)))
ALLOWED_EXTENSIONS = frozenset(
    ext.strip().lower()
    for ext in os.environ.get("HRDB_ALLOWED_EXTENSIONS", ".xlsx,.xlsm,.csv").split(",")
    if ext.strip()
)

# ── Import engine ──────────────────────────────────────────────────────
DEFAULT_ON_DUPLICATE = "update"
EXISTING_ID_CHUNK    = 500       # ids per IN (...) lookup
