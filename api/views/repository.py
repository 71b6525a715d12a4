"""
View-counting persistence (raw SQL).

Every function takes an executor (pool or connection) as its first argument
so the service can run the record/increment pair inside one transaction.
"""

from __future__ import annotations

from datetime import date

from core.db import Executor


async def record_unique(conn: Executor, *, path: str, day: date, fingerprint: str) -> bool:
    """
    Insert the (path, day, fingerprint) dedup row.

    Returns True only when this call created the row. A conflict on the
    unique key is the normal "already counted today" outcome, not an error.
    """
    row = await conn.fetchrow(
        """
        INSERT INTO view_uniques (path, day, fingerprint_hash)
        VALUES ($1, $2, $3)
        ON CONFLICT (path, day, fingerprint_hash) DO NOTHING
        RETURNING id
        """,
        path,
        day,
        fingerprint,
    )
    return row is not None


async def increment(conn: Executor, *, path: str) -> int:
    row = await conn.fetchrow(
        """
        INSERT INTO views (path, count)
        VALUES ($1, 1)
        ON CONFLICT (path) DO UPDATE
        SET count = views.count + 1,
            updated_at = now()
        RETURNING count
        """,
        path,
    )
    if row is None:
        raise RuntimeError("Failed to increment view counter.")
    return int(row["count"])


async def get_count(conn: Executor, *, path: str) -> int:
    row = await conn.fetchrow(
        """
        SELECT count
        FROM views
        WHERE path = $1
        """,
        path,
    )
    return int(row["count"]) if row is not None else 0


async def get_counts(conn: Executor, *, paths: list[str]) -> dict[str, int]:
    """
    Counts for the given paths. Paths never seen are absent from the result.
    """
    if not paths:
        return {}

    rows = await conn.fetch(
        """
        SELECT path, count
        FROM views
        WHERE path = ANY($1::text[])
        """,
        list(dict.fromkeys(paths)),
    )
    return {str(r["path"]): int(r["count"]) for r in rows}
