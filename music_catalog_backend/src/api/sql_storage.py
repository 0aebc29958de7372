"""
SQLAlchemy-backed implementation of the catalog storage contract.

Rows are converted to the pydantic record types on the way out, so callers see
the same objects MemStorage returns. Insertion order is id order because ids
come from the monotonic IdSequence.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from src.api.db import build_session_factory, session_scope
from src.api.errors import UsernameTakenError
from src.api.models import (
    ALL_ROW_TYPES,
    AlbumRow,
    ArtistRow,
    Base,
    PlaylistRow,
    PlaylistSongRow,
    RecentlyPlayedRow,
    SongRow,
    UserRow,
)
from src.api.schemas import (
    Album,
    AlbumCreate,
    Artist,
    ArtistCreate,
    Playlist,
    PlaylistCreate,
    PlaylistSong,
    RecentlyPlayed,
    Song,
    SongCreate,
    User,
)
from src.api.storage import IdSequence, Storage

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class SqlStorage(Storage):
    """Catalog storage persisted through SQLAlchemy (SQLite in memory by default)."""

    def __init__(self, engine: Engine, ids: Optional[IdSequence] = None, **kwargs):
        super().__init__(ids, **kwargs)
        self.engine = engine
        self._sessions = build_session_factory(engine)
        # Every session goes through this lock: the in-memory SQLite engine shares one
        # connection across worker threads, and check-then-write sequences must not interleave.
        self._lock = threading.RLock()
        Base.metadata.create_all(engine)
        self.ids.advance_past(self._highest_id())

    def _highest_id(self) -> int:
        highest = 0
        with self._lock, session_scope(self._sessions) as db:
            for row_type in ALL_ROW_TYPES:
                value = db.execute(select(func.max(row_type.id))).scalar()
                if value is not None and value > highest:
                    highest = value
        return highest

    def _get(self, row_type, row_id: int, model: Type[M]) -> Optional[M]:
        with self._lock, session_scope(self._sessions) as db:
            row = db.get(row_type, row_id)
            return model.model_validate(row) if row is not None else None

    def _list(self, stmt, model: Type[M]) -> List[M]:
        with self._lock, session_scope(self._sessions) as db:
            return [model.model_validate(row) for row in db.execute(stmt).scalars().all()]

    def _insert(self, row, model: Type[M]) -> M:
        with self._lock, session_scope(self._sessions) as db:
            db.add(row)
            db.flush()
            created = model.model_validate(row)
        logger.info("row_created: table=%s id=%s", row.__tablename__, created.id)
        return created

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(UserRow, user_id, User)

    def get_user_by_username(self, username: str) -> Optional[User]:
        rows = self._list(select(UserRow).where(UserRow.username == username), User)
        return rows[0] if rows else None

    def create_user(self, username: str, password_hash: str) -> User:
        with self._lock:
            if self.get_user_by_username(username) is not None:
                raise UsernameTakenError(username)
            try:
                return self._insert(
                    UserRow(id=self.ids.next_id(), username=username, password=password_hash),
                    User,
                )
            except IntegrityError:
                raise UsernameTakenError(username)

    # Artists

    def list_artists(self) -> List[Artist]:
        return self._list(select(ArtistRow).order_by(ArtistRow.id), Artist)

    def get_artist(self, artist_id: int) -> Optional[Artist]:
        return self._get(ArtistRow, artist_id, Artist)

    def create_artist(self, data: ArtistCreate) -> Artist:
        return self._insert(ArtistRow(id=self.ids.next_id(), **data.model_dump()), Artist)

    # Albums

    def list_albums(self) -> List[Album]:
        return self._list(select(AlbumRow).order_by(AlbumRow.id), Album)

    def get_album(self, album_id: int) -> Optional[Album]:
        return self._get(AlbumRow, album_id, Album)

    def create_album(self, data: AlbumCreate) -> Album:
        return self._insert(AlbumRow(id=self.ids.next_id(), **data.model_dump()), Album)

    def get_albums_by_artist(self, artist_id: int) -> List[Album]:
        stmt = select(AlbumRow).where(AlbumRow.artist_id == artist_id).order_by(AlbumRow.id)
        return self._list(stmt, Album)

    # Songs

    def list_songs(self) -> List[Song]:
        return self._list(select(SongRow).order_by(SongRow.id), Song)

    def get_song(self, song_id: int) -> Optional[Song]:
        return self._get(SongRow, song_id, Song)

    def create_song(self, data: SongCreate) -> Song:
        return self._insert(SongRow(id=self.ids.next_id(), **data.model_dump()), Song)

    def get_songs_by_album(self, album_id: int) -> List[Song]:
        stmt = select(SongRow).where(SongRow.album_id == album_id).order_by(SongRow.id)
        return self._list(stmt, Song)

    def get_songs_by_artist(self, artist_id: int) -> List[Song]:
        stmt = select(SongRow).where(SongRow.artist_id == artist_id).order_by(SongRow.id)
        return self._list(stmt, Song)

    # Playlists

    def list_playlists(self) -> List[Playlist]:
        return self._list(select(PlaylistRow).order_by(PlaylistRow.id), Playlist)

    def get_playlist(self, playlist_id: int) -> Optional[Playlist]:
        return self._get(PlaylistRow, playlist_id, Playlist)

    def create_playlist(self, data: PlaylistCreate) -> Playlist:
        return self._insert(PlaylistRow(id=self.ids.next_id(), **data.model_dump()), Playlist)

    def get_playlists_by_user(self, user_id: int) -> List[Playlist]:
        stmt = select(PlaylistRow).where(PlaylistRow.user_id == user_id).order_by(PlaylistRow.id)
        return self._list(stmt, Playlist)

    def add_song_to_playlist(self, playlist_id: int, song_id: int, position: Optional[int]) -> PlaylistSong:
        row = PlaylistSongRow(
            id=self.ids.next_id(),
            playlist_id=playlist_id,
            song_id=song_id,
            position=position,
        )
        return self._insert(row, PlaylistSong)

    def remove_song_from_playlist(self, playlist_id: int, song_id: int) -> None:
        with self._lock, session_scope(self._sessions) as db:
            stmt = (
                select(PlaylistSongRow)
                .where(PlaylistSongRow.playlist_id == playlist_id, PlaylistSongRow.song_id == song_id)
                .order_by(PlaylistSongRow.id)
                .limit(1)
            )
            row = db.execute(stmt).scalar_one_or_none()
            if row is not None:
                db.delete(row)
                logger.info("playlist_row_removed: playlist_id=%s song_id=%s row_id=%s", playlist_id, song_id, row.id)

    def list_playlist_rows(self, playlist_id: int) -> List[PlaylistSong]:
        stmt = select(PlaylistSongRow).where(PlaylistSongRow.playlist_id == playlist_id).order_by(PlaylistSongRow.id)
        return self._list(stmt, PlaylistSong)

    # Recently played

    def add_to_recently_played(self, user_id: int, song_id: int) -> RecentlyPlayed:
        row = RecentlyPlayedRow(
            id=self.ids.next_id(),
            user_id=user_id,
            song_id=song_id,
            played_at=self.clock(),
        )
        return self._insert(row, RecentlyPlayed)

    def list_recently_played_rows(self, user_id: int) -> List[RecentlyPlayed]:
        stmt = select(RecentlyPlayedRow).where(RecentlyPlayedRow.user_id == user_id).order_by(RecentlyPlayedRow.id)
        return self._list(stmt, RecentlyPlayed)
