from __future__ import annotations

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from mirrormgr.core.config import get_settings

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None

SQLITE_BUSY_TIMEOUT_MS = 5000


def _configure_sqlite_pragma(engine: Engine) -> None:
    if not engine.url.drivername.startswith("sqlite"):
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
        cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")
        cursor.close()


def get_engine() -> Engine:
    global _engine
    if _engine is not None:
        return _engine

    url = get_settings().effective_database_url
    connect_args: dict[str, object] = {}
    if url.startswith("sqlite"):
        # Request handlers run in a threadpool and share the pool's connections.
        connect_args["check_same_thread"] = False

    _engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
    _configure_sqlite_pragma(_engine)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is not None:
        return _session_factory

    _session_factory = sessionmaker(
        bind=get_engine(),
        autoflush=False,
        expire_on_commit=False,
        class_=Session,
    )
    return _session_factory


def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
