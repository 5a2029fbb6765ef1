#!/usr/bin/env python3
"""Migration script rewriting legacy operation state values.

Older databases stored operation states as variant names:
- "PendingTriage" -> "pending_triage"
- "Ok"            -> "ok"

The same upgrade runs automatically whenever opstrack initializes its
schema; this script applies it to a database file without starting the
application.

Usage:
    python migrations/migrate_state_encoding.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import opstrack modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from opstrack.database.factories import create_sqlite_database
from opstrack.database.schema import table_exists, upgrade_state_encoding


def migrate_database(database_path: str | None = None) -> int:
    """Rewrite legacy state values.

    Args:
        database_path: Path to database file. If None, uses default location.

    Returns:
        Number of rows rewritten
    """
    db = create_sqlite_database(database_path=database_path)
    try:
        if not table_exists(db.engine, "operations"):
            raise Exception("Table 'operations' does not exist. Please initialize the database schema first.")

        print("Starting migration: rewriting legacy operation states...")
        updated = upgrade_state_encoding(db.engine)
        if updated:
            print(f"  Rewrote {updated} operation state value(s)")
        else:
            print("Migration already applied: no legacy state values found")
        print("Migration completed successfully!")
        return updated
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Rewrite legacy operation state values to the current encoding"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides OPSTRACK_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
