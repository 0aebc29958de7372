"""
Song endpoints:
- GET /api/songs
- GET /api/songs/{id} (song with artist and album)
- POST /api/songs

Songs carry an audio URL the client plays directly; the backend does not
stream audio itself.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from src.api.deps import storage_dep
from src.api.errors import CatalogRoute, NotFoundError
from src.api.schemas import Song, SongCreate, SongWithDetails
from src.api.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/songs", tags=["Songs"], route_class=CatalogRoute)


@router.get(
    "",
    response_model=List[Song],
    summary="List all songs",
    description="Returns all songs in the catalog in insertion order.",
    operation_id="list_songs",
)
def list_songs(storage: Storage = Depends(storage_dep)) -> List[Song]:
    """List all songs in the catalog (public)."""
    return storage.list_songs()


@router.get(
    "/{song_id}",
    response_model=SongWithDetails,
    summary="Get a song",
    description="Returns the song with its artist and album resolved.",
    operation_id="get_song",
    responses={404: {"description": "Song not found"}},
)
def get_song(song_id: int, storage: Storage = Depends(storage_dep)) -> SongWithDetails:
    song = storage.get_song_with_details(song_id)
    if song is None:
        raise NotFoundError("Song not found")
    return song


@router.post(
    "",
    response_model=Song,
    status_code=201,
    summary="Create a song",
    operation_id="create_song",
    responses={400: {"description": "Invalid song data"}},
)
def create_song(payload: SongCreate, storage: Storage = Depends(storage_dep)) -> Song:
    song = storage.create_song(payload)
    logger.info(
        "song_created: id=%s title=%s artist_id=%s album_id=%s",
        song.id,
        song.title,
        song.artist_id,
        song.album_id,
    )
    return song
