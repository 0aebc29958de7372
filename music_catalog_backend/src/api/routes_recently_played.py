"""
Recently played endpoints:
- GET /api/recently-played/{userId} (newest first, at most 10)
- POST /api/recently-played
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from src.api.deps import storage_dep
from src.api.errors import CatalogRoute
from src.api.schemas import MessageResponse, RecentlyPlayedCreate, SongWithDetails
from src.api.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recently-played", tags=["Recently played"], route_class=CatalogRoute)


@router.get(
    "/{user_id}",
    response_model=List[SongWithDetails],
    summary="List recently played songs",
    description="Returns the user's ten most recent plays, newest first.",
    operation_id="list_recently_played",
)
def list_recently_played(user_id: int, storage: Storage = Depends(storage_dep)) -> List[SongWithDetails]:
    return storage.get_recently_played(user_id)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=201,
    summary="Record a play",
    operation_id="add_recently_played",
    responses={400: {"description": "userId and songId are required"}},
)
def add_recently_played(payload: RecentlyPlayedCreate, storage: Storage = Depends(storage_dep)) -> MessageResponse:
    row = storage.add_to_recently_played(payload.user_id, payload.song_id)
    logger.info("play_recorded: user_id=%s song_id=%s row_id=%s", row.user_id, row.song_id, row.id)
    return MessageResponse(message="Added to recently played")
