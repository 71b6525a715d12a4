"""
Reaction orchestration: one counted reaction per visitor, path, reaction
and UTC day. See `views.service` for the transaction and race reasoning;
this is the same flow with a `reaction` dimension in every key.
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
class ReactionCount:
    reaction: str
    count: int


@dataclass(frozen=True)
class ReactionTrack:
    path: str
    reaction: str
    count: int
    is_new_unique: bool


class ReactionCounter:
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

    async def react(
        self,
        path: str,
        reaction: str,
        ip: str | None,
        user_agent: str | None,
    ) -> ReactionTrack:
        path = validation.validate_path(path)
        reaction = validation.validate_reaction(reaction)
        day = self._today()
        fingerprint = self._fingerprinter.fingerprint(ip, user_agent, day)

        try:
            async with self._database.transaction() as conn:
                is_new = await repository.record_unique(
                    conn,
                    path=path,
                    reaction=reaction,
                    day=day,
                    fingerprint=fingerprint,
                )
                if is_new:
                    count = await repository.increment(conn, path=path, reaction=reaction)
                else:
                    count = await repository.get_count(conn, path=path, reaction=reaction)
        except STORAGE_EXCEPTIONS as exc:
            logger.exception("reaction_failed path=%s reaction=%s", path, reaction)
            raise StorageError("Failed to react") from exc

        logger.debug("reaction_tracked path=%s reaction=%s new=%s count=%s", path, reaction, is_new, count)
        return ReactionTrack(path=path, reaction=reaction, count=count, is_new_unique=is_new)

    async def get(self, path: str, reaction: str) -> int:
        path = validation.validate_path(path)
        reaction = validation.validate_reaction(reaction)
        try:
            return await repository.get_count(self._database.pool, path=path, reaction=reaction)
        except STORAGE_EXCEPTIONS as exc:
            logger.exception("reaction_count_failed path=%s reaction=%s", path, reaction)
            raise StorageError("Failed to fetch reaction count") from exc

    async def list_for_path(self, path: str) -> list[ReactionCount]:
        path = validation.validate_path(path)
        try:
            rows = await repository.list_for_path(self._database.pool, path=path)
        except STORAGE_EXCEPTIONS as exc:
            logger.exception("reaction_list_failed path=%s", path)
            raise StorageError("Failed to fetch reactions") from exc
        return [ReactionCount(reaction=r["reaction"], count=r["count"]) for r in rows]
