"""
Database Connection Manager.

This module handles the low-level details of connecting to the SQL state
store. It exposes the SQLModel engine used by the SQL repository. The
engine is created lazily so the in-memory backend never needs a database.
"""

from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import create_engine, SQLModel

from ...config import settings
from ...exceptions import StateStoreError


@lru_cache()
def get_engine() -> Engine:
    if not settings.DATABASE_URL:
        raise StateStoreError("DATABASE_URL must be set to use the SQL state store.")
    # echo=False in production to avoid leaking sensitive data in logs
    return create_engine(settings.DATABASE_URL, echo=False)


def init_db(engine: Engine = None):
    """
    Idempotent initialization.
    Creates tables if they do not exist.
    """
    # Registers the table on SQLModel.metadata
    from . import tables  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())
