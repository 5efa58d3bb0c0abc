"""
Database schema and connection management.

Uses SQLAlchemy for job storage; any database URL SQLAlchemy understands
works, SQLite being the default for local use.
"""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from sqlalchemy import create_engine, Column, String, DateTime
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import StoreUnavailable

Base = declarative_base()


def new_job_id() -> str:
    return uuid.uuid4().hex


class Job(Base):
    """Job application model."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, default=new_job_id)
    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    status = Column(String, nullable=False)  # Applied, Interviewing, Offer, Rejected
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation; the id travels as "_id"."""
        return {
            "_id": self.id,
            "title": self.title,
            "company": self.company,
            "status": self.status,
        }


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    SQLite files get their parent directory created, and connections may be
    shared across the server's worker threads. An in-memory SQLite database
    lives on a single shared connection so every thread sees the same tables.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        SQLAlchemy engine
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(url)
    connect_args = {"check_same_thread": False}
    if not url.database or url.database == ":memory:":
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args=connect_args)


def init_database(engine: Engine) -> None:
    """
    Create tables if they do not exist.

    Raises:
        StoreUnavailable: if the database cannot be reached
    """
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as e:
        raise StoreUnavailable(f"Database unavailable: {e}") from e


def get_session_factory(engine: Engine) -> sessionmaker:
    """
    Get a session factory bound to the engine.

    Objects stay usable after commit so records can be serialized once the
    session is closed.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)
