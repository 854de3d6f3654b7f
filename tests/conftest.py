import pytest

from lazyhydration.config import get_settings
from lazyhydration.infrastructure.database import (
    Base,
    DatabaseSessionFactory,
    reset_session_factory,
    set_session_factory,
)
from support import Record

SQLITE_URL = "sqlite+pysqlite:///:memory:"


@pytest.fixture(autouse=True)
def reset_record_counter():
    Record.created = 0
    yield
    Record.created = 0


@pytest.fixture
def session_factory():
    """In-memory SQLite factory installed as the default, with every mapped table created."""
    factory = DatabaseSessionFactory(SQLITE_URL)
    Base.metadata.create_all(factory.engine)
    set_session_factory(factory)
    yield factory
    reset_session_factory()


@pytest.fixture
def session(session_factory):
    with session_factory.get_session() as session:
        yield session


@pytest.fixture
def clean_settings(monkeypatch):
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
