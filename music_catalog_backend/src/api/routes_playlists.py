"""
Playlist endpoints:
- GET /api/playlists/user/{userId}
- GET /api/playlists/{id} (playlist with ordered songs)
- POST /api/playlists
- POST /api/playlists/{id}/songs
- DELETE /api/playlists/{id}/songs/{songId}

Membership rows are not validated against existing playlists/songs and the
same song may be added more than once. Deleting removes one matching row per
call.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from src.api.deps import storage_dep
from src.api.errors import CatalogRoute, NotFoundError
from src.api.schemas import Playlist, PlaylistCreate, PlaylistSong, PlaylistSongCreate, PlaylistWithSongs
from src.api.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/playlists", tags=["Playlists"], route_class=CatalogRoute)


# Declared before /{playlist_id} so "user" is never parsed as an id.
@router.get(
    "/user/{user_id}",
    response_model=List[Playlist],
    summary="List a user's playlists",
    description="Returns every playlist owned by the user; empty when there are none.",
    operation_id="list_user_playlists",
)
def list_user_playlists(user_id: int, storage: Storage = Depends(storage_dep)) -> List[Playlist]:
    return storage.get_playlists_by_user(user_id)


@router.get(
    "/{playlist_id}",
    response_model=PlaylistWithSongs,
    summary="Get a playlist with its songs",
    description="Songs are ordered by ascending position; rows whose song no longer exists are skipped.",
    operation_id="get_playlist",
    responses={404: {"description": "Playlist not found"}},
)
def get_playlist(playlist_id: int, storage: Storage = Depends(storage_dep)) -> PlaylistWithSongs:
    playlist = storage.get_playlist_with_songs(playlist_id)
    if playlist is None:
        raise NotFoundError("Playlist not found")
    return playlist


@router.post(
    "",
    response_model=Playlist,
    status_code=201,
    summary="Create a playlist",
    operation_id="create_playlist",
    responses={400: {"description": "Invalid playlist data"}},
)
def create_playlist(payload: PlaylistCreate, storage: Storage = Depends(storage_dep)) -> Playlist:
    playlist = storage.create_playlist(payload)
    logger.info("playlist_created: id=%s user_id=%s public=%s", playlist.id, playlist.user_id, playlist.is_public)
    return playlist


@router.post(
    "/{playlist_id}/songs",
    response_model=PlaylistSong,
    status_code=201,
    summary="Add a song to a playlist",
    description="Appends a membership row. `position` defaults to 0; other rows are not renumbered.",
    operation_id="add_song_to_playlist",
    responses={400: {"description": "songId is required"}},
)
def add_song_to_playlist(
    playlist_id: int,
    payload: PlaylistSongCreate,
    storage: Storage = Depends(storage_dep),
) -> PlaylistSong:
    position = payload.position if payload.position is not None else 0
    row = storage.add_song_to_playlist(playlist_id, payload.song_id, position)
    logger.info(
        "playlist_song_added: playlist_id=%s song_id=%s position=%s row_id=%s",
        playlist_id,
        payload.song_id,
        position,
        row.id,
    )
    return row


@router.delete(
    "/{playlist_id}/songs/{song_id}",
    status_code=204,
    response_class=Response,
    summary="Remove a song from a playlist",
    description="Removes the first matching membership row, if any. Always answers 204.",
    operation_id="remove_song_from_playlist",
)
def remove_song_from_playlist(
    playlist_id: int,
    song_id: int,
    storage: Storage = Depends(storage_dep),
) -> Response:
    storage.remove_song_from_playlist(playlist_id, song_id)
    return Response(status_code=204)
