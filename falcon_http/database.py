"""
Database configuration and initialization for Falcon HTTP.

Uses SQLite as the durable backend for store snapshots with SQLAlchemy ORM.
The engine is built from an AppConfig rather than a module-level URL.
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import AppConfig


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def create_db_engine(config: AppConfig) -> Engine:
    """
    Create the SQLite engine for the configured database file.

    Snapshots are written from a worker thread, so the connection must
    not be pinned to the thread that created it.
    """
    config.ensure_dirs()
    return create_engine(
        config.database_url,
        connect_args={"check_same_thread": False},
        echo=False  # Set to True for SQL query logging
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to the given engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """
    Initialize the database by creating all tables.
    
    This function should be called at application startup to ensure
    the database schema exists. It will create tables if they don't exist.
    """
    # Register models on Base.metadata before create_all
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
