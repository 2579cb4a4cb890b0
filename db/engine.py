"""
db.engine - One engine per process, short-lived sessions on demand.

The import engine opens a session per employee row (commit) or one
for the duplicate lookups (dry-run); nothing holds a session open
between rows.  Swapping SQLite for another backend is a matter of
HRDB_DB alone.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

import config
from db.models import Base

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def init_db(db_url: str) -> Engine:
    """(Re)bind the module to *db_url* and make sure all seven tables exist."""
    global _engine, _SessionLocal

    dispose_db()

    url = make_url(db_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    connect_args = {"timeout": config.DB_TIMEOUT_SECONDS} if is_sqlite else {}

    engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
    if is_sqlite:
        event.listen(engine, "connect", _sqlite_on_connect)

    Base.metadata.create_all(engine)

    _engine = engine
    _SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    logger.info(f"Database ready: {url.render_as_string(hide_password=True)}")
    return engine


def _sqlite_on_connect(dbapi_conn, _record):
    # FK enforcement is off by default in SQLite; CASCADE relies on it
    cur = dbapi_conn.cursor()
    for pragma in ("journal_mode=WAL", "foreign_keys=ON", "synchronous=NORMAL"):
        cur.execute(f"PRAGMA {pragma}")
    cur.close()


def dispose_db() -> None:
    """Close pooled connections; get_session() fails until init_db() again."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def get_session() -> Session:
    """New session bound to the current engine.  The caller closes it."""
    if _SessionLocal is None:
        raise RuntimeError("init_db() has not been called")
    return _SessionLocal()
