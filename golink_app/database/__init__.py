"""
Database connection helpers for the durable golink backend.
"""

from .connection import Base, create_sqlite_engine, create_session_factory, resolve_database_path

__all__ = [
    "Base",
    "create_sqlite_engine",
    "create_session_factory",
    "resolve_database_path",
]
