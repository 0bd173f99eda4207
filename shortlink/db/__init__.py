"""Database module for the shortlink application."""
from shortlink.db.base import (
    engine,
    get_engine,
    create_tables,
    dispose_engine,
    DatabaseHealthCheck,
)
from shortlink.db.session import get_db, db_transaction, db_dependency

__all__ = [
    "engine",
    "get_engine",
    "create_tables",
    "dispose_engine",
    "DatabaseHealthCheck",
    "get_db",
    "db_transaction",
    "db_dependency",
]
