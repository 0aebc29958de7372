"""
SQLAlchemy models for the SQL storage backend.

Ids come from the shared IdSequence rather than per-table autoincrement, so
primary keys are plain integers assigned by the application. Reference columns
are deliberately not declared as foreign keys: dangling references are
tolerated and resolved (or reported) when read views are built.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class UserRow(Base):
    """User account row (username + password hash)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)


class ArtistRow(Base):
    __tablename__ = "artists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class AlbumRow(Base):
    __tablename__ = "albums"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    artist_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    release_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    genre: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class SongRow(Base):
    __tablename__ = "songs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    artist_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    album_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # seconds
    audio_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    genre: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class PlaylistRow(Base):
    __tablename__ = "playlists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class PlaylistSongRow(Base):
    """Playlist membership; (playlist_id, song_id) is intentionally not unique."""

    __tablename__ = "playlist_songs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    playlist_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    song_id: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class RecentlyPlayedRow(Base):
    __tablename__ = "recently_played"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    song_id: Mapped[int] = mapped_column(Integer, nullable=False)
    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


ALL_ROW_TYPES = (
    UserRow,
    ArtistRow,
    AlbumRow,
    SongRow,
    PlaylistRow,
    PlaylistSongRow,
    RecentlyPlayedRow,
)
