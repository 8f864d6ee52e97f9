"""
Database connection using SQLAlchemy.

SQLite by default; the file is created on first use. Any SQLAlchemy URL
works for a shared store.
"""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Create an engine, making the parent directory of a SQLite file."""
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(database_url, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create all tables if they don't exist."""
    from records_intel.storage import tables  # noqa: F401 registers models with Base

    Base.metadata.create_all(bind=engine)


def create_session_factory(database_url: str) -> sessionmaker:
    """Engine, schema and session factory for one database URL."""
    engine = create_db_engine(database_url)
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
