"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from opstrack.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV_VAR = "OPSTRACK_DB_PATH"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks OPSTRACK_DB_PATH
            environment variable, then defaults to ~/.opstrack/opstrack.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get(DB_PATH_ENV_VAR)

    if database_path is None:
        # Default to ~/.opstrack/opstrack.db
        home = Path.home()
        db_dir = home / ".opstrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "opstrack.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
