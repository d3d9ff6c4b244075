"""Database connection and session management for taskpulse.

The task store is an in-memory SQLite database by default. Any SQLAlchemy
URL may be supplied through `DATABASE_URL`; durability is not a goal.
"""

import os
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv

load_dotenv()

# In-memory SQLite by default
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///:memory:")


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def _is_memory_url(database_url: str) -> bool:
    return _is_sqlite_url(database_url) and (
        database_url.endswith(":memory:") or database_url.rstrip("/") == "sqlite:"
    )


def get_engine_kwargs(database_url: str) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    engine_kwargs: dict = {
        "echo": os.getenv("DEBUG", "False").lower() == "true",
    }

    if _is_sqlite_url(database_url):
        # FastAPI runs sync endpoints in a threadpool; sessions cross threads.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_url(database_url):
            # One shared connection, otherwise every session gets its own empty database.
            engine_kwargs["poolclass"] = StaticPool
        return engine_kwargs

    engine_kwargs["pool_pre_ping"] = True
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **get_engine_kwargs(database_url))


# Create engine (module-level singleton)
engine = build_engine(DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Get database session (dependency for FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None) -> None:
    """Create the schema if it does not exist yet."""
    # Register table metadata before create_all.
    from taskpulse.database import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
