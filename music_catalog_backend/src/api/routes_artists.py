"""
Artist endpoints:
- GET /api/artists
- GET /api/artists/{id}
- POST /api/artists
- GET /api/artists/{id}/albums
- GET /api/artists/{id}/songs
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from src.api.deps import storage_dep
from src.api.errors import CatalogRoute, NotFoundError
from src.api.schemas import Album, Artist, ArtistCreate, Song
from src.api.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/artists", tags=["Artists"], route_class=CatalogRoute)


def _require_artist(storage: Storage, artist_id: int) -> Artist:
    artist = storage.get_artist(artist_id)
    if artist is None:
        raise NotFoundError("Artist not found")
    return artist


@router.get(
    "",
    response_model=List[Artist],
    summary="List artists",
    description="Returns every artist in insertion order.",
    operation_id="list_artists",
)
def list_artists(storage: Storage = Depends(storage_dep)) -> List[Artist]:
    return storage.list_artists()


@router.get(
    "/{artist_id}",
    response_model=Artist,
    summary="Get an artist",
    operation_id="get_artist",
    responses={404: {"description": "Artist not found"}},
)
def get_artist(artist_id: int, storage: Storage = Depends(storage_dep)) -> Artist:
    return _require_artist(storage, artist_id)


@router.post(
    "",
    response_model=Artist,
    status_code=201,
    summary="Create an artist",
    operation_id="create_artist",
    responses={400: {"description": "Invalid artist data"}},
)
def create_artist(payload: ArtistCreate, storage: Storage = Depends(storage_dep)) -> Artist:
    artist = storage.create_artist(payload)
    logger.info("artist_created: id=%s name=%s", artist.id, artist.name)
    return artist


@router.get(
    "/{artist_id}/albums",
    response_model=List[Album],
    summary="List an artist's albums",
    operation_id="list_artist_albums",
    responses={404: {"description": "Artist not found"}},
)
def list_artist_albums(artist_id: int, storage: Storage = Depends(storage_dep)) -> List[Album]:
    _require_artist(storage, artist_id)
    return storage.get_albums_by_artist(artist_id)


@router.get(
    "/{artist_id}/songs",
    response_model=List[Song],
    summary="List an artist's songs",
    operation_id="list_artist_songs",
    responses={404: {"description": "Artist not found"}},
)
def list_artist_songs(artist_id: int, storage: Storage = Depends(storage_dep)) -> List[Song]:
    _require_artist(storage, artist_id)
    return storage.get_songs_by_artist(artist_id)
