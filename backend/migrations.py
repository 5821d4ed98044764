"""Lightweight DB migrations for SQLite.

This project avoids Alembic to keep the backend small. Instead we ensure that
columns added after the first release exist and backfill defaults when possible.
"""

from __future__ import annotations

import logging

from sqlalchemy import inspect, text

logger = logging.getLogger(__name__)


def _missing_columns(insp, table: str, wanted: dict[str, str]) -> list[str]:
    cols = {c["name"] for c in insp.get_columns(table)}
    return [f"ALTER TABLE {table} ADD COLUMN {name} {ddl}" for name, ddl in wanted.items() if name not in cols]


def ensure_practice_schema(engine) -> list[str]:
    """Bring older pieces / training_sessions tables up to date.

    Returns the DDL statements that were applied (empty if nothing to do).
    """

    insp = inspect(engine)
    tables = set(insp.get_table_names())
    ddl: list[str] = []
    backfill: list[str] = []

    if "pieces" in tables:
        # source, play statistics
        stmts = _missing_columns(insp, "pieces", {
            "source": "TEXT",
            "play_count": "INTEGER DEFAULT 0 NOT NULL",
            "last_played": "DATETIME",
        })
        ddl += stmts
        if any(" play_count " in s for s in stmts):
            backfill.append("UPDATE pieces SET play_count = 0 WHERE play_count IS NULL")

    if "training_sessions" in tables:
        # planned vs completed sessions
        stmts = _missing_columns(insp, "training_sessions", {
            "status": "VARCHAR(20) DEFAULT 'COMPLETED' NOT NULL",
            "created_at": "DATETIME",
        })
        ddl += stmts
        if any(" created_at " in s for s in stmts):
            # Best guess for old rows: created on the day they were logged for.
            backfill.append("UPDATE training_sessions SET created_at = date || ' 00:00:00.000000' WHERE created_at IS NULL")

    if not ddl:
        return []

    with engine.begin() as conn:
        for stmt in ddl + backfill:
            conn.execute(text(stmt))

    logger.info("Applied %d schema migration(s)", len(ddl))
    return ddl
