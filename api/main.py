"""
ASGI entrypoint.

Run with: uvicorn main:create_app --factory
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.db import Database
from core.errors import install_error_handlers
from core.fingerprint import Fingerprinter
from core.log_setup import configure_logging
from core.schema import ensure_schema
from core.settings import Settings
from reactions import router as reactions_router
from reactions.service import ReactionCounter
from views import router as views_router
from views.service import ViewCounter

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    # Missing secrets raise here, before the server accepts traffic.
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if database is None:
        database = Database(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        await database.connect()
        try:
            if settings.auto_create_schema:
                await ensure_schema(database)
            logger.info("startup_complete")
            yield
        finally:
            await database.close()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.trust_forwarded_for = settings.trust_forwarded_for
    app.state.trusted_proxy_hops = settings.trusted_proxy_hops
    app.state.view_counter = ViewCounter(database, Fingerprinter(settings.view_hash_secret))
    app.state.reaction_counter = ReactionCounter(database, Fingerprinter(settings.reaction_hash_secret))

    install_error_handlers(app)

    # Allow the SPA to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(views_router, prefix="/api/views", tags=["views"])
    app.include_router(reactions_router, prefix="/api/reactions", tags=["reactions"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app
