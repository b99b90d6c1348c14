import logging
from threading import Lock

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


logger = logging.getLogger(__name__)

Base = declarative_base()

_engine_lock = Lock()
_engine: Engine | None = None
_session_factory: sessionmaker | None = None
_schema_checked = False


def _build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, pool_pre_ping=True)


def get_engine() -> Engine:
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    with _engine_lock:
        if _engine is None:
            database_url = config.get_database_url()
            _engine = _build_engine(database_url)
            _session_factory = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=_engine,
            )
            logger.info("Database engine created for %s", _engine.url.render_as_string(hide_password=True))

    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return _session_factory


def ensure_schema() -> None:
    global _schema_checked

    if _schema_checked:
        return

    engine = get_engine()
    with _engine_lock:
        if _schema_checked:
            return

        # Registers the mapped tables on Base.metadata.
        from backend.models import user, website  # noqa: F401

        Base.metadata.create_all(bind=engine)
        _schema_checked = True


def reset_engine() -> None:
    global _engine, _session_factory, _schema_checked

    with _engine_lock:
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _session_factory = None
        _schema_checked = False


def get_db():
    ensure_schema()
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
