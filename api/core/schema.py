"""
Idempotent DDL for the counting tables.

Each family has a counter table (one row per key, atomically incremented)
and an append-only uniques table whose UNIQUE constraint is the dedup key.
"""

from __future__ import annotations

import logging

from .db import Database

logger = logging.getLogger(__name__)

# pg_advisory_xact_lock key held while creating tables.
SCHEMA_LOCK_KEY = 7_204_311

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS views (
      id BIGSERIAL PRIMARY KEY,
      path TEXT UNIQUE NOT NULL,
      count BIGINT NOT NULL DEFAULT 0,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS view_uniques (
      id BIGSERIAL PRIMARY KEY,
      path TEXT NOT NULL,
      day DATE NOT NULL,
      fingerprint_hash TEXT NOT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      UNIQUE (path, day, fingerprint_hash)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_view_uniques_path_day ON view_uniques (path, day)",
    """
    CREATE TABLE IF NOT EXISTS reactions (
      id BIGSERIAL PRIMARY KEY,
      path TEXT NOT NULL,
      reaction TEXT NOT NULL,
      count BIGINT NOT NULL DEFAULT 0,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      UNIQUE (path, reaction)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_reactions_path ON reactions (path)",
    """
    CREATE TABLE IF NOT EXISTS reaction_uniques (
      id BIGSERIAL PRIMARY KEY,
      path TEXT NOT NULL,
      reaction TEXT NOT NULL,
      day DATE NOT NULL,
      fingerprint_hash TEXT NOT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      UNIQUE (path, reaction, day, fingerprint_hash)
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_reaction_uniques_path_reaction_day
      ON reaction_uniques (path, reaction, day)
    """,
)


async def ensure_schema(database: Database) -> None:
    async with database.transaction() as conn:
        # Several workers may start at once; CREATE ... IF NOT EXISTS can still collide.
        await conn.execute("SELECT pg_advisory_xact_lock($1)", SCHEMA_LOCK_KEY)
        for statement in SCHEMA_STATEMENTS:
            await conn.execute(statement)
    logger.info("schema_ready tables=views,view_uniques,reactions,reaction_uniques")
