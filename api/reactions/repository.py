"""
Reaction persistence (raw SQL).

Same shape as `views.repository`, keyed additionally by `reaction`.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from core.db import Executor


async def record_unique(
    conn: Executor,
    *,
    path: str,
    reaction: str,
    day: date,
    fingerprint: str,
) -> bool:
    row = await conn.fetchrow(
        """
        INSERT INTO reaction_uniques (path, reaction, day, fingerprint_hash)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (path, reaction, day, fingerprint_hash) DO NOTHING
        RETURNING id
        """,
        path,
        reaction,
        day,
        fingerprint,
    )
    return row is not None


async def increment(conn: Executor, *, path: str, reaction: str) -> int:
    row = await conn.fetchrow(
        """
        INSERT INTO reactions (path, reaction, count)
        VALUES ($1, $2, 1)
        ON CONFLICT (path, reaction) DO UPDATE
        SET count = reactions.count + 1,
            updated_at = now()
        RETURNING count
        """,
        path,
        reaction,
    )
    if row is None:
        raise RuntimeError("Failed to increment reaction counter.")
    return int(row["count"])


async def get_count(conn: Executor, *, path: str, reaction: str) -> int:
    row = await conn.fetchrow(
        """
        SELECT count
        FROM reactions
        WHERE path = $1
          AND reaction = $2
        """,
        path,
        reaction,
    )
    return int(row["count"]) if row is not None else 0


async def list_for_path(conn: Executor, *, path: str) -> list[dict[str, Any]]:
    rows = await conn.fetch(
        """
        SELECT reaction, count
        FROM reactions
        WHERE path = $1
        ORDER BY reaction ASC
        """,
        path,
    )
    return [{"reaction": str(r["reaction"]), "count": int(r["count"])} for r in rows]
