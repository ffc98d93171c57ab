"""Pytest configuration and shared fixtures."""

import pytest
import yaml
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from memberfiles.core.access.model import Requester, Role
from memberfiles.core.config import get_config, get_settings
from memberfiles.db.base import Base
import memberfiles.db.models  # noqa: F401  (registers tables on Base.metadata)


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Start each test from environment defaults with empty config caches."""
    monkeypatch.delenv("MEMBERFILES_ACCESS_CONFIG_PATH", raising=False)
    get_settings.cache_clear()
    get_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_config.cache_clear()


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Write a YAML config and point ``MEMBERFILES_ACCESS_CONFIG_PATH`` at it."""
    def write(data):
        path = tmp_path / "memberfiles.yaml"
        path.write_text(yaml.safe_dump(data))
        monkeypatch.setenv("MEMBERFILES_ACCESS_CONFIG_PATH", str(path))
        get_settings.cache_clear()
        get_config.cache_clear()
        return path
    return write


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Session wrapped in a transaction that is rolled back after the test."""
    connection = engine.connect()
    transaction = connection.begin()
    session = sessionmaker(bind=connection)()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def anonymous():
    return Requester.anonymous()


@pytest.fixture
def member():
    return Requester(role=Role.MEMBER, member_id="m1")


@pytest.fixture
def committee_member():
    return Requester(role=Role.COMMITTEE_MEMBER, member_id="m3", committee_ids=frozenset(["c1"]))


@pytest.fixture
def board_member():
    return Requester(role=Role.BOARD_MEMBER, member_id="b1")


@pytest.fixture
def admin():
    return Requester(role=Role.ADMIN, member_id="a1")


@pytest.fixture
def sample_config():
    """Sample access configuration dictionary."""
    return {
        "access": {
            "denied_status": 404,
            "default_upload_visibility": "COMMITTEE_ONLY",
            "role_titles": {
                "Treasurer": "board_member",
                "webmaster": "admin",
            },
        },
        "logging": {
            "level": "DEBUG",
            "dir": "/tmp/memberfiles-logs",
        },
    }
