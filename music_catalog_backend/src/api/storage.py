"""
Catalog storage: the backend-independent contract plus the in-memory backend.

`Storage` declares the primitive reads/writes every backend provides and builds
the denormalized read views (song details, album with songs, playlist with
songs, recently played, search) on top of them, so both backends share one
definition of ordering, filtering and reference resolution.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from src.api.errors import MissingReferenceError, UsernameTakenError
from src.api.schemas import (
    Album,
    AlbumCreate,
    AlbumWithSongs,
    Artist,
    ArtistCreate,
    IntegrityReport,
    Playlist,
    PlaylistCreate,
    PlaylistSong,
    PlaylistWithSongs,
    RecentlyPlayed,
    SearchResults,
    Song,
    SongCreate,
    SongWithDetails,
    User,
)

logger = logging.getLogger(__name__)

RECENTLY_PLAYED_LIMIT = 10

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdSequence:
    """Process-wide monotonic id source shared by every collection."""

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def advance_past(self, highest: int) -> None:
        """Make sure ids already in use are never handed out again."""
        with self._lock:
            if highest >= self._next:
                self._next = highest + 1


class IntegrityStats:
    """Counts rows the read views filtered out or could not resolve."""

    def __init__(self):
        self._lock = threading.Lock()
        self.dropped_playlist_rows = 0
        self.dropped_recently_played_rows = 0
        self.dropped_search_rows = 0
        self.missing_references = 0

    def bump(self, counter: str, amount: int = 1) -> None:
        if amount <= 0:
            return
        with self._lock:
            setattr(self, counter, getattr(self, counter) + amount)

    def snapshot(self) -> IntegrityReport:
        with self._lock:
            return IntegrityReport(
                dropped_playlist_rows=self.dropped_playlist_rows,
                dropped_recently_played_rows=self.dropped_recently_played_rows,
                dropped_search_rows=self.dropped_search_rows,
                missing_references=self.missing_references,
            )


def _contains(haystack: Optional[str], needle_lower: str) -> bool:
    return haystack is not None and needle_lower in haystack.lower()


class Storage(ABC):
    """
    Storage contract for the catalog.

    Reads never raise for a missing id; they return None. Writes do not check
    referential integrity. Dangling references met while building a view either
    resolve to None (default) or raise MissingReferenceError when
    `strict_references` is set.
    """

    def __init__(
        self,
        ids: Optional[IdSequence] = None,
        *,
        strict_references: bool = False,
        clock: Optional[Clock] = None,
    ):
        self.ids = ids or IdSequence()
        self.strict_references = strict_references
        self.clock: Clock = clock or _utcnow
        self.integrity = IntegrityStats()

    # Users

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, username: str, password_hash: str) -> User:
        """Store a user; raises UsernameTakenError if the name is in use."""

    # Artists

    @abstractmethod
    def list_artists(self) -> List[Artist]: ...

    @abstractmethod
    def get_artist(self, artist_id: int) -> Optional[Artist]: ...

    @abstractmethod
    def create_artist(self, data: ArtistCreate) -> Artist: ...

    # Albums

    @abstractmethod
    def list_albums(self) -> List[Album]: ...

    @abstractmethod
    def get_album(self, album_id: int) -> Optional[Album]: ...

    @abstractmethod
    def create_album(self, data: AlbumCreate) -> Album: ...

    # Songs

    @abstractmethod
    def list_songs(self) -> List[Song]: ...

    @abstractmethod
    def get_song(self, song_id: int) -> Optional[Song]: ...

    @abstractmethod
    def create_song(self, data: SongCreate) -> Song: ...

    # Playlists

    @abstractmethod
    def list_playlists(self) -> List[Playlist]: ...

    @abstractmethod
    def get_playlist(self, playlist_id: int) -> Optional[Playlist]: ...

    @abstractmethod
    def create_playlist(self, data: PlaylistCreate) -> Playlist: ...

    @abstractmethod
    def add_song_to_playlist(self, playlist_id: int, song_id: int, position: Optional[int]) -> PlaylistSong:
        """Append a join row. No existence checks, duplicates allowed, no renumbering."""

    @abstractmethod
    def remove_song_from_playlist(self, playlist_id: int, song_id: int) -> None:
        """Delete the first matching join row (insertion order), if any."""

    @abstractmethod
    def list_playlist_rows(self, playlist_id: int) -> List[PlaylistSong]:
        """Join rows of one playlist in insertion order."""

    # Recently played

    @abstractmethod
    def add_to_recently_played(self, user_id: int, song_id: int) -> RecentlyPlayed:
        """Append a play stamped with the storage clock. History is never capped."""

    @abstractmethod
    def list_recently_played_rows(self, user_id: int) -> List[RecentlyPlayed]:
        """All plays of one user in insertion order."""

    # Reference resolution

    def _resolve_artist(self, artist_id: Optional[int], owner: str) -> Optional[Artist]:
        if artist_id is None:
            return None
        artist = self.get_artist(artist_id)
        if artist is None:
            self._missing_reference("artist", artist_id, owner)
        return artist

    def _resolve_album(self, album_id: Optional[int], owner: str) -> Optional[Album]:
        if album_id is None:
            return None
        album = self.get_album(album_id)
        if album is None:
            self._missing_reference("album", album_id, owner)
        return album

    def _missing_reference(self, kind: str, ref_id: int, owner: str) -> None:
        self.integrity.bump("missing_references")
        if self.strict_references:
            raise MissingReferenceError(kind, ref_id, owner)
        logger.warning("missing_reference: owner=%s kind=%s ref_id=%s", owner, kind, ref_id)

    def _details_for(self, song: Song) -> SongWithDetails:
        owner = f"song {song.id}"
        return SongWithDetails(
            **song.model_dump(),
            artist=self._resolve_artist(song.artist_id, owner),
            album=self._resolve_album(song.album_id, owner),
        )

    def _resolve_song_ids(self, song_ids: Iterable[int], counter: str) -> List[SongWithDetails]:
        resolved: List[SongWithDetails] = []
        dropped = 0
        for song_id in song_ids:
            details = self.get_song_with_details(song_id)
            if details is None:
                dropped += 1
                continue
            resolved.append(details)
        if dropped:
            self.integrity.bump(counter, dropped)
            logger.warning("dropped_unresolved_rows: view=%s count=%s", counter, dropped)
        return resolved

    # Composed reads

    def get_song_with_details(self, song_id: int) -> Optional[SongWithDetails]:
        song = self.get_song(song_id)
        if song is None:
            return None
        return self._details_for(song)

    def get_album_with_songs(self, album_id: int) -> Optional[AlbumWithSongs]:
        album = self.get_album(album_id)
        if album is None:
            return None
        return AlbumWithSongs(
            **album.model_dump(),
            artist=self._resolve_artist(album.artist_id, f"album {album.id}"),
            songs=self.get_songs_by_album(album_id),
        )

    def get_albums_by_artist(self, artist_id: int) -> List[Album]:
        return [a for a in self.list_albums() if a.artist_id == artist_id]

    def get_songs_by_album(self, album_id: int) -> List[Song]:
        return [s for s in self.list_songs() if s.album_id == album_id]

    def get_songs_by_artist(self, artist_id: int) -> List[Song]:
        return [s for s in self.list_songs() if s.artist_id == artist_id]

    def get_playlists_by_user(self, user_id: int) -> List[Playlist]:
        return [p for p in self.list_playlists() if p.user_id == user_id]

    def get_playlist_with_songs(self, playlist_id: int) -> Optional[PlaylistWithSongs]:
        playlist = self.get_playlist(playlist_id)
        if playlist is None:
            return None
        # sorted() is stable: equal positions keep insertion order.
        rows = sorted(self.list_playlist_rows(playlist_id), key=lambda row: row.position or 0)
        songs = self._resolve_song_ids((row.song_id for row in rows), "dropped_playlist_rows")
        return PlaylistWithSongs(**playlist.model_dump(), songs=songs)

    def get_recently_played(self, user_id: int) -> List[SongWithDetails]:
        rows = sorted(
            self.list_recently_played_rows(user_id),
            key=lambda row: (row.played_at, row.id),
            reverse=True,
        )[:RECENTLY_PLAYED_LIMIT]
        return self._resolve_song_ids((row.song_id for row in rows), "dropped_recently_played_rows")

    # Search

    def search_songs(self, query: str) -> List[SongWithDetails]:
        needle = query.lower()
        matches = [s.id for s in self.list_songs() if _contains(s.title, needle)]
        return self._resolve_song_ids(matches, "dropped_search_rows")

    def search_all(self, query: str) -> SearchResults:
        needle = query.lower()
        return SearchResults(
            songs=self.search_songs(query),
            artists=[a for a in self.list_artists() if _contains(a.name, needle)],
            albums=[a for a in self.list_albums() if _contains(a.title, needle)],
            # Private playlists are never searchable, not even by their owner.
            playlists=[p for p in self.list_playlists() if p.is_public and _contains(p.name, needle)],
        )


class MemStorage(Storage):
    """Dict-backed storage. Dicts keep insertion order, which is the listing order."""

    def __init__(self, ids: Optional[IdSequence] = None, **kwargs):
        super().__init__(ids, **kwargs)
        self._lock = threading.RLock()
        self._users: Dict[int, User] = {}
        self._artists: Dict[int, Artist] = {}
        self._albums: Dict[int, Album] = {}
        self._songs: Dict[int, Song] = {}
        self._playlists: Dict[int, Playlist] = {}
        self._playlist_songs: Dict[int, PlaylistSong] = {}
        self._recently_played: Dict[int, RecentlyPlayed] = {}

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, username: str, password_hash: str) -> User:
        with self._lock:
            if self.get_user_by_username(username) is not None:
                raise UsernameTakenError(username)
            user = User(id=self.ids.next_id(), username=username, password=password_hash)
            self._users[user.id] = user
            return user

    # Artists

    def list_artists(self) -> List[Artist]:
        with self._lock:
            return list(self._artists.values())

    def get_artist(self, artist_id: int) -> Optional[Artist]:
        with self._lock:
            return self._artists.get(artist_id)

    def create_artist(self, data: ArtistCreate) -> Artist:
        with self._lock:
            artist = Artist(id=self.ids.next_id(), **data.model_dump())
            self._artists[artist.id] = artist
            return artist

    # Albums

    def list_albums(self) -> List[Album]:
        with self._lock:
            return list(self._albums.values())

    def get_album(self, album_id: int) -> Optional[Album]:
        with self._lock:
            return self._albums.get(album_id)

    def create_album(self, data: AlbumCreate) -> Album:
        with self._lock:
            album = Album(id=self.ids.next_id(), **data.model_dump())
            self._albums[album.id] = album
            return album

    # Songs

    def list_songs(self) -> List[Song]:
        with self._lock:
            return list(self._songs.values())

    def get_song(self, song_id: int) -> Optional[Song]:
        with self._lock:
            return self._songs.get(song_id)

    def create_song(self, data: SongCreate) -> Song:
        with self._lock:
            song = Song(id=self.ids.next_id(), **data.model_dump())
            self._songs[song.id] = song
            return song

    # Playlists

    def list_playlists(self) -> List[Playlist]:
        with self._lock:
            return list(self._playlists.values())

    def get_playlist(self, playlist_id: int) -> Optional[Playlist]:
        with self._lock:
            return self._playlists.get(playlist_id)

    def create_playlist(self, data: PlaylistCreate) -> Playlist:
        with self._lock:
            playlist = Playlist(id=self.ids.next_id(), **data.model_dump())
            self._playlists[playlist.id] = playlist
            return playlist

    def add_song_to_playlist(self, playlist_id: int, song_id: int, position: Optional[int]) -> PlaylistSong:
        with self._lock:
            row = PlaylistSong(
                id=self.ids.next_id(),
                playlist_id=playlist_id,
                song_id=song_id,
                position=position,
            )
            self._playlist_songs[row.id] = row
            return row

    def remove_song_from_playlist(self, playlist_id: int, song_id: int) -> None:
        with self._lock:
            for row_id, row in self._playlist_songs.items():
                if row.playlist_id == playlist_id and row.song_id == song_id:
                    del self._playlist_songs[row_id]
                    return

    def list_playlist_rows(self, playlist_id: int) -> List[PlaylistSong]:
        with self._lock:
            return [row for row in self._playlist_songs.values() if row.playlist_id == playlist_id]

    # Recently played

    def add_to_recently_played(self, user_id: int, song_id: int) -> RecentlyPlayed:
        with self._lock:
            row = RecentlyPlayed(
                id=self.ids.next_id(),
                user_id=user_id,
                song_id=song_id,
                played_at=self.clock(),
            )
            self._recently_played[row.id] = row
            return row

    def list_recently_played_rows(self, user_id: int) -> List[RecentlyPlayed]:
        with self._lock:
            return [row for row in self._recently_played.values() if row.user_id == user_id]
