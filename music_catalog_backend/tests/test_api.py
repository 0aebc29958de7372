from __future__ import annotations

from fastapi.testclient import TestClient

from src.api.main import create_app
from src.api.passwords import verify_password
from src.api.schemas import SongCreate
from src.api.storage import MemStorage


def _song_id(client, title):
    return next(s["id"] for s in client.get("/api/songs").json() if s["title"] == title)


def test_health_check(client):
    assert client.get("/").json() == {"status": "ok"}


def test_seeded_demo_user_has_id_one(client):
    resp = client.get("/api/users/1")
    assert resp.status_code == 200
    assert resp.json() == {"id": 1, "username": "demo"}


def test_list_endpoints_return_seeded_catalog(client):
    assert len(client.get("/api/artists").json()) == 6
    assert len(client.get("/api/albums").json()) == 7
    assert len(client.get("/api/songs").json()) == 10


def test_responses_use_camel_case_keys(client):
    album = client.get("/api/albums").json()[0]
    assert {"id", "title", "artistId", "imageUrl", "releaseYear", "genre"} <= set(album)


def test_get_artist_and_not_found(client):
    artist = client.get("/api/artists").json()[0]
    resp = client.get(f"/api/artists/{artist['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == artist["name"]

    missing = client.get("/api/artists/99999")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Artist not found"}


def test_non_numeric_id_is_not_found(client):
    assert client.get("/api/artists/abc").status_code == 404
    assert client.get("/api/artists/abc").json() == {"message": "Artist not found"}
    assert client.get("/api/artists/abc/albums").status_code == 404
    assert client.get("/api/albums/abc").json() == {"message": "Album not found"}
    assert client.get("/api/songs/abc").json() == {"message": "Song not found"}
    assert client.get("/api/playlists/abc").json() == {"message": "Playlist not found"}
    assert client.get("/api/users/abc").status_code == 404


def test_non_numeric_id_lists_are_empty(client):
    resp = client.get("/api/playlists/user/abc")
    assert resp.status_code == 200
    assert resp.json() == []
    resp = client.get("/api/recently-played/abc")
    assert resp.status_code == 200
    assert resp.json() == []


def test_removing_with_non_numeric_ids_is_a_no_op(client):
    playlist_id = client.get("/api/playlists/user/1").json()[0]["id"]
    before = client.get(f"/api/playlists/{playlist_id}").json()["songs"]
    for path in ("/api/playlists/abc/songs/1", f"/api/playlists/{playlist_id}/songs/abc"):
        resp = client.delete(path)
        assert resp.status_code == 204
        assert resp.content == b""
    assert client.get(f"/api/playlists/{playlist_id}").json()["songs"] == before


def test_adding_to_non_numeric_playlist_uses_generic_message(client):
    resp = client.post("/api/playlists/abc/songs", json={"songId": 3})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request data"


def test_create_artist(client):
    resp = client.post("/api/artists", json={"name": "Daft Punk", "bio": "Robots"})
    assert resp.status_code == 201
    body = resp.json()
    assert isinstance(body["id"], int)
    assert body["name"] == "Daft Punk"
    assert client.get(f"/api/artists/{body['id']}").status_code == 200


def test_create_artist_validation_error(client):
    resp = client.post("/api/artists", json={"bio": "no name"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid artist data"
    assert body["errors"][0]["loc"][-1] == "name"


def test_malformed_json_body_is_internal_error(client):
    resp = client.post(
        "/api/artists",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to create artist"}


def test_artist_albums_and_songs(client):
    drake = next(a for a in client.get("/api/artists").json() if a["name"] == "Drake")
    albums = client.get(f"/api/artists/{drake['id']}/albums").json()
    songs = client.get(f"/api/artists/{drake['id']}/songs").json()
    assert [a["title"] for a in albums] == ["Hip-Hop Classics"]
    assert sorted(s["title"] for s in songs) == ["Industry Baby", "Peaches", "Stay"]
    assert client.get("/api/artists/99999/songs").status_code == 404


def test_get_album_with_songs(client):
    album = next(a for a in client.get("/api/albums").json() if a["title"] == "Midnight City")
    resp = client.get(f"/api/albums/{album['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["artist"]["name"] == "Taylor Swift"
    assert [s["title"] for s in body["songs"]] == ["Blinding Lights", "Watermelon Sugar", "Save Your Tears"]

    assert client.get("/api/albums/99999").json() == {"message": "Album not found"}


def test_create_album_and_song(client):
    artist_id = client.post("/api/artists", json={"name": "New Artist"}).json()["id"]
    album = client.post("/api/albums", json={"title": "Debut", "artistId": artist_id, "releaseYear": 2025})
    assert album.status_code == 201
    assert album.json()["releaseYear"] == 2025

    song = client.post(
        "/api/songs",
        json={"title": "Opener", "artistId": artist_id, "albumId": album.json()["id"], "duration": 200},
    )
    assert song.status_code == 201
    details = client.get(f"/api/songs/{song.json()['id']}").json()
    assert details["artist"]["name"] == "New Artist"
    assert details["album"]["title"] == "Debut"


def test_create_song_validation_error(client):
    resp = client.post("/api/songs", json={"title": "x", "duration": "long"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid song data"


def test_get_song_with_details(client):
    song_id = _song_id(client, "Heat Waves")
    body = client.get(f"/api/songs/{song_id}").json()
    assert body["artist"]["name"] == "Imagine Dragons"
    assert body["album"]["title"] == "Rock Anthems"

    assert client.get("/api/songs/99999").status_code == 404


def test_song_without_album_serializes_null_album(client):
    created = client.post("/api/songs", json={"title": "Loose Single"}).json()
    body = client.get(f"/api/songs/{created['id']}").json()
    assert body["album"] is None
    assert body["artist"] is None


def test_create_playlist_then_read_it_back(client):
    resp = client.post("/api/playlists", json={"name": "My Mix", "userId": 1, "isPublic": True})
    assert resp.status_code == 201
    body = resp.json()
    assert isinstance(body["id"], int)
    assert body["name"] == "My Mix"

    view = client.get(f"/api/playlists/{body['id']}").json()
    assert view["songs"] == []
    assert view["isPublic"] is True


def test_create_playlist_defaults_to_private(client):
    body = client.post("/api/playlists", json={"name": "X", "userId": 1}).json()
    assert body["isPublic"] is False
    names = [p["name"] for p in client.get("/api/playlists/user/1").json()]
    assert "X" in names


def test_create_playlist_requires_name(client):
    resp = client.post("/api/playlists", json={"userId": 1})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid playlist data"


def test_user_playlists_empty_for_unknown_user(client):
    resp = client.get("/api/playlists/user/4242")
    assert resp.status_code == 200
    assert resp.json() == []


def test_get_missing_playlist(client):
    resp = client.get("/api/playlists/99999")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Playlist not found"}


def test_add_song_without_position_defaults_to_zero(client):
    playlist_id = client.post("/api/playlists", json={"name": "Empty", "userId": 1}).json()["id"]
    resp = client.post(f"/api/playlists/{playlist_id}/songs", json={"songId": 7})
    assert resp.status_code == 201
    body = resp.json()
    assert body["position"] == 0
    assert body["playlistId"] == playlist_id
    assert body["songId"] == 7


def test_add_song_requires_song_id(client):
    playlist_id = client.post("/api/playlists", json={"name": "P", "userId": 1}).json()["id"]
    for payload in ({}, {"position": 3}, {"songId": 0}):
        resp = client.post(f"/api/playlists/{playlist_id}/songs", json=payload)
        assert resp.status_code == 400
        assert resp.json()["message"] == "songId is required"


def test_playlist_songs_follow_positions(client):
    playlist_id = client.post("/api/playlists", json={"name": "Ordered", "userId": 1}).json()["id"]
    stay = _song_id(client, "Stay")
    peaches = _song_id(client, "Peaches")
    levitating = _song_id(client, "Levitating")
    client.post(f"/api/playlists/{playlist_id}/songs", json={"songId": stay, "position": 2})
    client.post(f"/api/playlists/{playlist_id}/songs", json={"songId": peaches, "position": 0})
    client.post(f"/api/playlists/{playlist_id}/songs", json={"songId": levitating, "position": 1})

    songs = client.get(f"/api/playlists/{playlist_id}").json()["songs"]
    assert [s["title"] for s in songs] == ["Peaches", "Levitating", "Stay"]
    assert songs[0]["artist"]["name"] == "Drake"


def test_delete_removes_one_duplicate_per_call(client):
    playlist_id = client.post("/api/playlists", json={"name": "Dupes", "userId": 1}).json()["id"]
    song = _song_id(client, "Stay")
    client.post(f"/api/playlists/{playlist_id}/songs", json={"songId": song, "position": 0})
    client.post(f"/api/playlists/{playlist_id}/songs", json={"songId": song, "position": 1})

    resp = client.delete(f"/api/playlists/{playlist_id}/songs/{song}")
    assert resp.status_code == 204
    assert resp.content == b""
    assert len(client.get(f"/api/playlists/{playlist_id}").json()["songs"]) == 1

    client.delete(f"/api/playlists/{playlist_id}/songs/{song}")
    assert client.get(f"/api/playlists/{playlist_id}").json()["songs"] == []

    # Nothing left to delete: still 204.
    assert client.delete(f"/api/playlists/{playlist_id}/songs/{song}").status_code == 204


def test_recently_played_round_trip(client):
    resp = client.post("/api/recently-played", json={"userId": 1, "songId": _song_id(client, "Positions")})
    assert resp.status_code == 201
    assert resp.json() == {"message": "Added to recently played"}

    recent = client.get("/api/recently-played/1").json()
    assert [s["title"] for s in recent] == ["Positions"]
    assert recent[0]["artist"]["name"] == "Billie Eilish"


def test_recently_played_keeps_ten_newest(client):
    song_ids = [s["id"] for s in client.get("/api/songs").json()]
    extra = client.post("/api/songs", json={"title": "Eleventh"}).json()["id"]
    for song_id in song_ids + [extra]:
        client.post("/api/recently-played", json={"userId": 1, "songId": song_id})

    recent = client.get("/api/recently-played/1").json()
    assert len(recent) == 10
    assert recent[0]["id"] == extra
    assert song_ids[0] not in [s["id"] for s in recent]


def test_recently_played_requires_both_ids(client):
    for payload in ({"userId": 1}, {"songId": 3}, {}):
        resp = client.post("/api/recently-played", json=payload)
        assert resp.status_code == 400
        assert resp.json()["message"] == "userId and songId are required"


def test_search_finds_song_with_artist(client):
    resp = client.get("/api/search", params={"q": "Blinding"})
    assert resp.status_code == 200
    songs = resp.json()["songs"]
    assert [s["title"] for s in songs] == ["Blinding Lights"]
    assert songs[0]["artist"]["name"] == "The Weeknd"


def test_search_without_matches(client):
    resp = client.get("/api/search", params={"q": "xyz-no-match"})
    assert resp.json() == {"songs": [], "artists": [], "albums": [], "playlists": []}


def test_search_hides_private_playlists(client):
    body = client.get("/api/search", params={"q": "mix"}).json()
    names = [p["name"] for p in body["playlists"]]
    assert "Daily Mix 1" in names
    assert "Workout Mix" not in names


def test_search_requires_query(client):
    for url in ("/api/search", "/api/search?q="):
        resp = client.get(url)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Query parameter 'q' is required"}


def test_signup_hashes_password(client, seeded_storage):
    resp = client.post("/api/users", json={"username": "alice", "password": "s3cret"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "alice"
    assert "password" not in body

    stored = seeded_storage.get_user(body["id"])
    assert stored.password != "s3cret"
    assert verify_password("s3cret", stored.password)


def test_signup_rejects_taken_or_blank_username(client):
    taken = client.post("/api/users", json={"username": "demo", "password": "x"})
    assert taken.status_code == 400
    assert taken.json() == {"message": "Username is already taken."}

    blank = client.post("/api/users", json={"username": "   ", "password": "x"})
    assert blank.status_code == 400
    assert blank.json()["message"] == "Invalid user data"

    assert client.get("/api/users/99999").status_code == 404


def test_unexpected_failure_is_generic_500():
    class BrokenStorage(MemStorage):
        def list_artists(self):
            raise RuntimeError("disk on fire")

    client = TestClient(create_app(BrokenStorage()))
    resp = client.get("/api/artists")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to fetch artists"}


def test_dangling_reference_in_strict_mode_is_500():
    storage = MemStorage(strict_references=True)
    song = storage.create_song(SongCreate(title="Orphan", artist_id=777))
    client = TestClient(create_app(storage))

    resp = client.get(f"/api/songs/{song.id}")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to fetch song"}


def test_integrity_counters_exposed_in_debug(client):
    playlist_id = client.post("/api/playlists", json={"name": "Broken", "userId": 1}).json()["id"]
    client.post(f"/api/playlists/{playlist_id}/songs", json={"songId": 99999})
    client.get(f"/api/playlists/{playlist_id}")

    report = client.get("/api/debug/integrity").json()
    assert report["droppedPlaylistRows"] == 1
    assert report["missingReferences"] == 0


def test_integrity_endpoint_hidden_without_debug():
    client = TestClient(create_app(MemStorage(), debug=False))
    assert client.get("/api/debug/integrity").status_code == 404


def test_sql_backend_serves_the_same_api(sql_client):
    assert len(sql_client.get("/api/songs").json()) == 10
    songs = sql_client.get("/api/search", params={"q": "blinding"}).json()["songs"]
    assert songs[0]["artist"]["name"] == "The Weeknd"

    playlist_id = sql_client.post("/api/playlists", json={"name": "SQL Mix", "userId": 1}).json()["id"]
    sql_client.post(f"/api/playlists/{playlist_id}/songs", json={"songId": songs[0]["id"]})
    view = sql_client.get(f"/api/playlists/{playlist_id}").json()
    assert [s["title"] for s in view["songs"]] == ["Blinding Lights"]
