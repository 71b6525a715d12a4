"""
View-counting API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response

from core.client import ClientIdentity, get_client_identity

from . import schemas
from .service import ViewCounter

router = APIRouter()


def get_view_counter(request: Request) -> ViewCounter:
    return request.app.state.view_counter


@router.post("/track")
async def track_view(
    payload: schemas.TrackViewRequest,
    response: Response,
    client: ClientIdentity = Depends(get_client_identity),
    counter: ViewCounter = Depends(get_view_counter),
) -> dict:
    result = await counter.track(payload.path, client.ip, client.user_agent)
    response.headers["Cache-Control"] = "no-store"
    return {"path": result.path, "count": result.count, "isNewUnique": result.is_new_unique}


@router.get("")
async def get_views(
    path: str | None = Query(default=None),
    counter: ViewCounter = Depends(get_view_counter),
) -> dict:
    result = await counter.get(path)
    return {"path": result.path, "count": result.count}


@router.post("/batch")
async def batch_views(
    payload: schemas.BatchViewsRequest,
    counter: ViewCounter = Depends(get_view_counter),
) -> dict:
    rows = await counter.get_batch(payload.paths)
    return {"rows": [{"path": r.path, "count": r.count} for r in rows]}
