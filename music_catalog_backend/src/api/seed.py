"""
Fixture catalog loaded at startup.

The demo user is created first so it receives id 1, which is the id the web
client uses for "the current user". Albums and songs name their artist/album
instead of hard-coding ids; references are resolved against the ids the
storage actually assigned.
"""

from __future__ import annotations

import logging
from typing import Dict

from src.api.passwords import hash_password
from src.api.schemas import AlbumCreate, ArtistCreate, PlaylistCreate, SongCreate
from src.api.storage import Storage

logger = logging.getLogger(__name__)

_IMG_PORTRAIT_A = "https://images.unsplash.com/photo-1494790108755-2616c9cf0f93?w=200&h=200&fit=crop"
_IMG_PORTRAIT_B = "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=200&h=200&fit=crop"
_IMG_PORTRAIT_C = "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=200&h=200&fit=crop"
_IMG_COVER = "https://images.unsplash.com/photo-1493225457124-a3eb161ffa5f?w=200&h=200&fit=crop"
_IMG_CLASSICAL = "https://images.unsplash.com/photo-1507838153414-b4b713384a76?w=200&h=200&fit=crop"

DEMO_USERNAME = "demo"

ARTISTS = [
    {"name": "Taylor Swift", "image_url": _IMG_PORTRAIT_A, "bio": "Pop superstar"},
    {"name": "Drake", "image_url": _IMG_PORTRAIT_B, "bio": "Hip-hop artist"},
    {"name": "The Weeknd", "image_url": _IMG_PORTRAIT_C, "bio": "R&B artist"},
    {"name": "Billie Eilish", "image_url": _IMG_PORTRAIT_A, "bio": "Alternative pop"},
    {"name": "Calvin Harris", "image_url": _IMG_PORTRAIT_B, "bio": "Electronic music producer"},
    {"name": "Imagine Dragons", "image_url": _IMG_PORTRAIT_C, "bio": "Rock band"},
]

# (title, artist, release_year, genre, image_url)
ALBUMS = [
    ("Midnight City", "Taylor Swift", 2023, "Pop", _IMG_COVER),
    ("Electronic Hits", "Calvin Harris", 2023, "Electronic", _IMG_COVER),
    ("Hip-Hop Classics", "Drake", 2023, "Hip-Hop", _IMG_COVER),
    ("Classical Essentials", "The Weeknd", 2023, "Classical", _IMG_CLASSICAL),
    ("Pop Hits 2024", "Taylor Swift", 2024, "Pop", _IMG_COVER),
    ("Jazz Legends", "Billie Eilish", 2023, "Jazz", _IMG_COVER),
    ("Rock Anthems", "Imagine Dragons", 2023, "Rock", _IMG_COVER),
]

# (title, artist, album, duration_seconds, genre)
SONGS = [
    ("Blinding Lights", "The Weeknd", "Midnight City", 222, "Pop"),
    ("Watermelon Sugar", "Taylor Swift", "Midnight City", 174, "Pop"),
    ("Good 4 U", "Billie Eilish", "Pop Hits 2024", 178, "Pop"),
    ("Stay", "Drake", "Hip-Hop Classics", 141, "Hip-Hop"),
    ("Industry Baby", "Drake", "Hip-Hop Classics", 212, "Hip-Hop"),
    ("Heat Waves", "Imagine Dragons", "Rock Anthems", 238, "Rock"),
    ("Levitating", "Taylor Swift", "Pop Hits 2024", 203, "Pop"),
    ("Peaches", "Drake", "Hip-Hop Classics", 197, "Hip-Hop"),
    ("Save Your Tears", "The Weeknd", "Midnight City", 215, "Pop"),
    ("Positions", "Billie Eilish", "Jazz Legends", 172, "Pop"),
]

# (name, description, image_url, is_public)
PLAYLISTS = [
    ("Liked Songs", "Your favorite tracks", "", False),
    ("Discover Weekly", "Your weekly mixtape of fresh music", _IMG_COVER, True),
    ("Release Radar", "Catch all the latest music", _IMG_COVER, True),
    ("Daily Mix 1", "The Weeknd, Drake, Travis Scott and more", _IMG_COVER, True),
    ("My Playlist #1", "Personal collection", "", False),
    ("Chill Vibes", "Relaxing music", "", False),
    ("Workout Mix", "High energy tracks", "", False),
]


# PUBLIC_INTERFACE
def seed_catalog(storage: Storage, demo_password: str = "demo") -> None:
    """Load the fixture catalog into an empty storage."""
    user = storage.create_user(DEMO_USERNAME, hash_password(demo_password))

    artist_ids: Dict[str, int] = {}
    for artist in ARTISTS:
        artist_ids[artist["name"]] = storage.create_artist(ArtistCreate(**artist)).id

    album_ids: Dict[str, int] = {}
    for title, artist, year, genre, image_url in ALBUMS:
        album = storage.create_album(
            AlbumCreate(
                title=title,
                artist_id=artist_ids[artist],
                image_url=image_url,
                release_year=year,
                genre=genre,
            )
        )
        album_ids[title] = album.id

    for title, artist, album, duration, genre in SONGS:
        storage.create_song(
            SongCreate(
                title=title,
                artist_id=artist_ids[artist],
                album_id=album_ids[album],
                duration=duration,
                audio_url="",
                genre=genre,
            )
        )

    for name, description, image_url, is_public in PLAYLISTS:
        storage.create_playlist(
            PlaylistCreate(
                name=name,
                description=description,
                user_id=user.id,
                image_url=image_url,
                is_public=is_public,
            )
        )

    logger.info(
        "catalog_seeded: user_id=%s artists=%s albums=%s songs=%s playlists=%s",
        user.id,
        len(ARTISTS),
        len(ALBUMS),
        len(SONGS),
        len(PLAYLISTS),
    )
