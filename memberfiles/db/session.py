"""Engine and session helpers."""

from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from memberfiles.core.config import get_settings


def make_session_factory(database_url: str, **engine_kwargs) -> sessionmaker:
    """Create a session factory bound to a new engine."""
    engine = create_engine(database_url, **engine_kwargs)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@lru_cache
def get_session_factory() -> sessionmaker:
    return make_session_factory(get_settings().database_url, pool_pre_ping=True)


def get_db() -> Generator:
    """Database session dependency."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
