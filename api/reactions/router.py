"""
Reaction API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response

from core.client import ClientIdentity, get_client_identity

from . import schemas
from .service import ReactionCounter

router = APIRouter()


def get_reaction_counter(request: Request) -> ReactionCounter:
    return request.app.state.reaction_counter


@router.post("/react")
async def react(
    payload: schemas.ReactRequest,
    response: Response,
    client: ClientIdentity = Depends(get_client_identity),
    counter: ReactionCounter = Depends(get_reaction_counter),
) -> dict:
    result = await counter.react(payload.path, payload.reaction, client.ip, client.user_agent)
    response.headers["Cache-Control"] = "no-store"
    return {
        "path": result.path,
        "reaction": result.reaction,
        "count": result.count,
        "isNewUnique": result.is_new_unique,
    }


@router.get("")
async def list_reactions(
    path: str | None = Query(default=None),
    counter: ReactionCounter = Depends(get_reaction_counter),
) -> dict:
    rows = await counter.list_for_path(path)
    return {"path": path, "rows": [{"reaction": r.reaction, "count": r.count} for r in rows]}
