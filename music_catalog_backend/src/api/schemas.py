"""
Pydantic models (request/response shapes) for API endpoints.

The same models double as the storage layer's record types. JSON uses camelCase
keys (artistId, imageUrl, ...); request bodies also accept snake_case names.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase and reading ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Users


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1, description="Unique username.")
    password: str = Field(..., min_length=1, description="Plain-text password (hashed before storage).")


class User(CamelModel):
    """Stored user row; `password` holds a passlib hash."""

    id: int
    username: str
    password: str


class UserResponse(CamelModel):
    id: int = Field(..., description="User id.")
    username: str = Field(..., description="Username.")


# Artists


class ArtistCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Artist name.")
    image_url: Optional[str] = Field(None, description="Artist image URL.")
    bio: Optional[str] = Field(None, description="Short biography.")


class Artist(ArtistCreate):
    id: int = Field(..., description="Artist id.")


# Albums


class AlbumCreate(CamelModel):
    title: str = Field(..., min_length=1, description="Album title.")
    artist_id: Optional[int] = Field(None, description="Referenced artist id.")
    image_url: Optional[str] = Field(None, description="Cover image URL.")
    release_year: Optional[int] = Field(None, description="Release year.")
    genre: Optional[str] = Field(None, description="Genre label.")


class Album(AlbumCreate):
    id: int = Field(..., description="Album id.")


# Songs


class SongCreate(CamelModel):
    title: str = Field(..., min_length=1, description="Song title.")
    artist_id: Optional[int] = Field(None, description="Referenced artist id.")
    album_id: Optional[int] = Field(None, description="Referenced album id.")
    duration: Optional[int] = Field(None, ge=0, description="Duration in seconds.")
    audio_url: Optional[str] = Field(None, description="Playable audio URL.")
    genre: Optional[str] = Field(None, description="Genre label.")


class Song(SongCreate):
    id: int = Field(..., description="Song id.")


# Playlists


class PlaylistCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Playlist name.")
    description: Optional[str] = Field(None, description="Free-form description.")
    user_id: Optional[int] = Field(None, description="Owning user id.")
    image_url: Optional[str] = Field(None, description="Cover image URL.")
    is_public: bool = Field(False, description="Whether the playlist shows up in search.")


class Playlist(PlaylistCreate):
    id: int = Field(..., description="Playlist id.")


class PlaylistSongCreate(CamelModel):
    song_id: int = Field(..., gt=0, description="Song to add.")
    position: Optional[int] = Field(None, description="Ordering slot; defaults to 0.")


class PlaylistSong(CamelModel):
    id: int
    playlist_id: int
    song_id: int
    position: Optional[int] = None


# Recently played


class RecentlyPlayedCreate(CamelModel):
    user_id: int = Field(..., gt=0, description="User who played the song.")
    song_id: int = Field(..., gt=0, description="Song that was played.")


class RecentlyPlayed(CamelModel):
    id: int
    user_id: int
    song_id: int
    played_at: datetime


class MessageResponse(BaseModel):
    message: str


# Denormalized read views


class SongWithDetails(Song):
    artist: Optional[Artist] = Field(None, description="Resolved artist (null if unresolved).")
    album: Optional[Album] = Field(None, description="Resolved album (null if none).")


class AlbumWithSongs(Album):
    artist: Optional[Artist] = Field(None, description="Resolved artist (null if unresolved).")
    songs: List[Song] = Field(default_factory=list)


class PlaylistWithSongs(Playlist):
    songs: List[SongWithDetails] = Field(default_factory=list, description="Songs ordered by position.")


class SearchResults(CamelModel):
    songs: List[SongWithDetails] = Field(default_factory=list)
    artists: List[Artist] = Field(default_factory=list)
    albums: List[Album] = Field(default_factory=list)
    playlists: List[Playlist] = Field(default_factory=list)


class IntegrityReport(CamelModel):
    dropped_playlist_rows: int = 0
    dropped_recently_played_rows: int = 0
    dropped_search_rows: int = 0
    missing_references: int = 0
