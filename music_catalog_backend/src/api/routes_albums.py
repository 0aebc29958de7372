"""
Album endpoints:
- GET /api/albums
- GET /api/albums/{id} (album with artist and songs)
- POST /api/albums
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from src.api.deps import storage_dep
from src.api.errors import CatalogRoute, NotFoundError
from src.api.schemas import Album, AlbumCreate, AlbumWithSongs
from src.api.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/albums", tags=["Albums"], route_class=CatalogRoute)


@router.get(
    "",
    response_model=List[Album],
    summary="List albums",
    operation_id="list_albums",
)
def list_albums(storage: Storage = Depends(storage_dep)) -> List[Album]:
    return storage.list_albums()


@router.get(
    "/{album_id}",
    response_model=AlbumWithSongs,
    summary="Get an album with its songs",
    description="Returns the album with its artist resolved and every song that belongs to it.",
    operation_id="get_album",
    responses={404: {"description": "Album not found"}},
)
def get_album(album_id: int, storage: Storage = Depends(storage_dep)) -> AlbumWithSongs:
    album = storage.get_album_with_songs(album_id)
    if album is None:
        raise NotFoundError("Album not found")
    return album


@router.post(
    "",
    response_model=Album,
    status_code=201,
    summary="Create an album",
    operation_id="create_album",
    responses={400: {"description": "Invalid album data"}},
)
def create_album(payload: AlbumCreate, storage: Storage = Depends(storage_dep)) -> Album:
    album = storage.create_album(payload)
    logger.info("album_created: id=%s title=%s artist_id=%s", album.id, album.title, album.artist_id)
    return album
