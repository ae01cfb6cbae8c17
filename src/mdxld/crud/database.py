"""Engine construction and table creation"""

from sqlmodel import SQLModel, create_engine

from mdxld.crud import models  # noqa: F401  registers tables on SQLModel.metadata


def make_engine(db_url: str):
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, echo=False, connect_args=connect_args)


def init_db(engine) -> None:
    """Create all tables that do not exist yet."""
    SQLModel.metadata.create_all(engine)
