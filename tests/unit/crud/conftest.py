"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdxld.crud import models  # noqa: F401
from mdxld.crud.memory_store import MemoryStore
from mdxld.crud.sql_store import SQLStore


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture(name="store", params=["memory", "sql"])
def store_fixture(request, session):
    """Every DocumentStore implementation, for contract tests."""
    if request.param == "memory":
        return MemoryStore()
    return SQLStore(session)
