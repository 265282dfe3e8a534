"""Session factory for the SQLite (or other SQLAlchemy) store."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .models import Base


def get_session_factory(db_url: str = "sqlite:///shiftboard.db", echo: bool = False) -> sessionmaker:
    """
    Bind a session factory to db_url.

    The employees and kv_store tables are created if missing, so a fresh
    database file is usable straight away.
    """
    engine = create_engine(db_url, echo=echo)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
