"""Database layer for opstrack application."""

from opstrack.database.base import Database
from opstrack.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
