"""
FastAPI application entrypoint for the Music Catalog backend.

The catalog is public (no authentication): artists, albums, songs, playlists,
recently played and search under /api. The storage backend is built once per
application and injected through `app.state`; the web client hard-codes
userId=1, which is the seeded demo user.

CORS is enabled for local development (http://localhost:3000) and can be extended
via environment variables.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.api import config
from src.api.db import build_engine, database_url_from_env
from src.api.routes_albums import router as albums_router
from src.api.routes_artists import router as artists_router
from src.api.routes_playlists import router as playlists_router
from src.api.routes_recently_played import router as recently_played_router
from src.api.routes_search import router as search_router
from src.api.routes_songs import router as songs_router
from src.api.routes_users import router as users_router
from src.api.schemas import IntegrityReport
from src.api.seed import DEMO_USERNAME, seed_catalog
from src.api.sql_storage import SqlStorage
from src.api.storage import MemStorage, Storage

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Artists", "description": "Browse and create artists."},
    {"name": "Albums", "description": "Browse albums with their songs."},
    {"name": "Songs", "description": "Browse songs with artist and album attached."},
    {"name": "Playlists", "description": "Playlists and ordered playlist membership."},
    {"name": "Recently played", "description": "Per-user play history."},
    {"name": "Search", "description": "Substring search across the catalog."},
    {"name": "Users", "description": "Signup and user lookup (no login)."},
    {"name": "Health", "description": "Service health and basic runtime info."},
]


# PUBLIC_INTERFACE
def configure_logging() -> None:
    """Apply LOG_LEVEL to the root logger (idempotent)."""
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


# PUBLIC_INTERFACE
def build_storage() -> Storage:
    """Create the storage backend selected by STORAGE_BACKEND, seeded if SEED_CATALOG is on."""
    backend = config.storage_backend()
    strict = config.strict_references()
    if backend == "sql":
        storage: Storage = SqlStorage(build_engine(database_url_from_env()), strict_references=strict)
    else:
        storage = MemStorage(strict_references=strict)
    logger.info("storage_ready: backend=%s strict_references=%s", backend, strict)

    if config.seed_catalog_enabled() and storage.get_user_by_username(DEMO_USERNAME) is None:
        seed_catalog(storage, demo_password=config.seed_user_password())
    return storage


# PUBLIC_INTERFACE
def create_app(storage: Optional[Storage] = None, debug: Optional[bool] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        storage: storage to serve; built from the environment when omitted.
        debug: expose /api/debug/integrity; read from CATALOG_DEBUG when omitted.
    """
    if storage is None:
        storage = build_storage()
    if debug is None:
        debug = config.debug_enabled()

    app = FastAPI(
        title="Music Catalog Backend API",
        description=(
            "Backend for a music streaming catalog browser.\n\n"
            "Authentication: none (public API)\n\n"
            "Playback happens client-side from each song's audioUrl."
        ),
        version="1.0.0",
        openapi_tags=openapi_tags,
    )
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(artists_router)
    app.include_router(albums_router)
    app.include_router(songs_router)
    app.include_router(playlists_router)
    app.include_router(recently_played_router)
    app.include_router(search_router)
    app.include_router(users_router)

    @app.get(
        "/",
        summary="Health check",
        description="Simple health check endpoint.",
        tags=["Health"],
    )
    def health_check():
        """Return basic service health information."""
        return {"status": "ok"}

    if debug:

        @app.get(
            "/api/debug/integrity",
            response_model=IntegrityReport,
            summary="Integrity counters",
            description="Counts of rows the read views skipped or could not resolve.",
            tags=["Health"],
        )
        def integrity_report(request: Request) -> IntegrityReport:
            return request.app.state.storage.integrity.snapshot()

    return app


configure_logging()
app = create_app()
