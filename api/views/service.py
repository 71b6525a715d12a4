"""
View-counting orchestration.

track(): fingerprint the visitor for today, try to record the unique event,
and bump the path counter only when that record was new. Record, increment
and read-back share one transaction, so a failure part way leaves neither
the dedup row nor the increment behind.

Concurrency is left to Postgres: of N racing duplicates exactly one INSERT
... ON CONFLICT DO NOTHING returns a row, and only that caller increments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from core import validation
from core.db import Database
from core.errors import STORAGE_EXCEPTIONS, StorageError
from core.fingerprint import Fingerprinter, utc_today

from . import repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewCount:
    path: str
    count: int


@dataclass(frozen=True)
class ViewTrack:
    path: str
    count: int
    is_new_unique: bool


class ViewCounter:
    def __init__(
        self,
        database: Database,
        fingerprinter: Fingerprinter,
        *,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._database = database
        self._fingerprinter = fingerprinter
        self._today = today

    async def track(self, path: str, ip: str | None, user_agent: str | None) -> ViewTrack:
        path = validation.validate_path(path)
        day = self._today()
        fingerprint = self._fingerprinter.fingerprint(ip, user_agent, day)

        try:
            async with self._database.transaction() as conn:
                is_new = await repository.record_unique(conn, path=path, day=day, fingerprint=fingerprint)
                if is_new:
                    count = await repository.increment(conn, path=path)
                else:
                    count = await repository.get_count(conn, path=path)
        except STORAGE_EXCEPTIONS as exc:
            logger.exception("view_track_failed path=%s day=%s", path, day.isoformat())
            raise StorageError("Failed to track view") from exc

        logger.debug("view_tracked path=%s new=%s count=%s", path, is_new, count)
        return ViewTrack(path=path, count=count, is_new_unique=is_new)

    async def get(self, path: str) -> ViewCount:
        path = validation.validate_path(path)
        try:
            count = await repository.get_count(self._database.pool, path=path)
        except STORAGE_EXCEPTIONS as exc:
            logger.exception("view_count_failed path=%s", path)
            raise StorageError("Failed to fetch view count") from exc
        return ViewCount(path=path, count=count)

    async def get_batch(self, paths: list[str]) -> list[ViewCount]:
        """
        One entry per requested path, in request order; 0 for unseen paths.
        """
        paths = validation.validate_paths(paths)
        if not paths:
            return []

        try:
            by_path = await repository.get_counts(self._database.pool, paths=paths)
        except STORAGE_EXCEPTIONS as exc:
            logger.exception("view_batch_failed size=%s", len(paths))
            raise StorageError("Failed to fetch batch view counts") from exc
        return [ViewCount(path=p, count=by_path.get(p, 0)) for p in paths]
