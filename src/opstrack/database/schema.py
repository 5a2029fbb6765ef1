"""Schema upgrades applied when the database is initialized.

Operation states used to be persisted as their variant names
("PendingTriage", "Ok"). The current encoding stores lowercase
discriminants; rows written with the legacy encoding are rewritten in place.
"""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from opstrack.domain.entities import LEGACY_STATE_VALUES

logger = logging.getLogger(__name__)


def table_exists(engine: Engine, table_name: str) -> bool:
    """Check if a table exists in the database."""
    return table_name in inspect(engine).get_table_names()


def upgrade_state_encoding(engine: Engine) -> int:
    """Rewrite legacy operation state values to the current encoding.

    Args:
        engine: SQLAlchemy engine

    Returns:
        Number of rows rewritten
    """
    if not table_exists(engine, "operations"):
        return 0

    updated = 0
    with engine.begin() as conn:
        for legacy, current in LEGACY_STATE_VALUES.items():
            result = conn.execute(
                text("UPDATE operations SET state = :current WHERE state = :legacy"),
                {"current": current, "legacy": legacy},
            )
            updated += result.rowcount or 0

    if updated:
        logger.info("Upgraded %d operation state value(s) to the current encoding", updated)
    return updated
