import pytest
from sqlalchemy import inspect

from backend import database
from backend.core import config


@pytest.fixture
def fresh_engine(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv('DATABASE_URL', 'sqlite://')
    database.reset_engine()
    try:
        yield
    finally:
        database.reset_engine()


def test_get_engine_is_created_once_and_memoized(fresh_engine) -> None:
    first = database.get_engine()
    second = database.get_engine()

    assert first is second
    assert str(first.url) == 'sqlite://'
    assert database.get_session_factory().kw['bind'] is first


def test_get_engine_reads_database_url_on_first_use(fresh_engine, monkeypatch: pytest.MonkeyPatch) -> None:
    engine = database.get_engine()
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///./should-not-be-used.db')

    assert database.get_engine() is engine
    assert str(database.get_engine().url) == 'sqlite://'


def test_reset_engine_builds_a_new_engine(fresh_engine) -> None:
    first = database.get_engine()
    database.reset_engine()

    assert database.get_engine() is not first


def test_ensure_schema_creates_tables(fresh_engine) -> None:
    database.ensure_schema()

    table_names = inspect(database.get_engine()).get_table_names()
    assert {'users', 'websites'} <= set(table_names)


def test_get_db_yields_a_session_bound_to_the_shared_engine(fresh_engine) -> None:
    generator = database.get_db()
    session = next(generator)
    try:
        assert session.get_bind() is database.get_engine()
    finally:
        generator.close()


def test_database_url_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('DATABASE_URL', raising=False)

    assert config.get_database_url() == config.DEFAULT_DATABASE_URL


def test_validate_runtime_config_requires_secret_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.delenv('JWT_SECRET', raising=False)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()

    monkeypatch.setenv('JWT_SECRET', 'a-real-production-secret-value-32b')
    config.validate_runtime_config()
