"""
Error taxonomy and the route class that turns failures into JSON responses.

Every router uses `CatalogRoute`, so each handler body is wrapped in one place:
- CatalogError subclasses map to their own status code
- pydantic request validation maps to 400 with field-level details
- a non-numeric path id answers like an id that does not exist
- anything else maps to 500 with the route's generic failure message
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine, Dict, List, Optional, Tuple

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base class for errors that carry an HTTP status code."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.errors is not None:
            body["errors"] = self.errors
        return body


class ValidationError(CatalogError):
    status_code = 400


class NotFoundError(CatalogError):
    status_code = 404


class UsernameTakenError(CatalogError):
    status_code = 400

    def __init__(self, username: str):
        super().__init__("Username is already taken.")
        self.username = username


class MissingReferenceError(CatalogError):
    """A stored row points at an entity that does not exist."""

    status_code = 500

    def __init__(self, kind: str, ref_id: int, owner: str):
        super().__init__(f"{owner} references missing {kind} {ref_id}")
        self.kind = kind
        self.ref_id = ref_id
        self.owner = owner


# Keyed by operation_id.
VALIDATION_MESSAGES: Dict[str, str] = {
    "create_artist": "Invalid artist data",
    "create_album": "Invalid album data",
    "create_song": "Invalid song data",
    "create_playlist": "Invalid playlist data",
    "add_song_to_playlist": "songId is required",
    "add_recently_played": "userId and songId are required",
    "create_user": "Invalid user data",
}

FAILURE_MESSAGES: Dict[str, str] = {
    "list_artists": "Failed to fetch artists",
    "get_artist": "Failed to fetch artist",
    "create_artist": "Failed to create artist",
    "list_artist_albums": "Failed to fetch artist albums",
    "list_artist_songs": "Failed to fetch artist songs",
    "list_albums": "Failed to fetch albums",
    "get_album": "Failed to fetch album",
    "create_album": "Failed to create album",
    "list_songs": "Failed to fetch songs",
    "get_song": "Failed to fetch song",
    "create_song": "Failed to create song",
    "list_user_playlists": "Failed to fetch playlists",
    "get_playlist": "Failed to fetch playlist",
    "create_playlist": "Failed to create playlist",
    "add_song_to_playlist": "Failed to add song to playlist",
    "remove_song_from_playlist": "Failed to remove song from playlist",
    "list_recently_played": "Failed to fetch recently played",
    "add_recently_played": "Failed to add to recently played",
    "search": "Search failed",
    "create_user": "Failed to create user",
    "get_user": "Failed to fetch user",
}

# A path id that is not a number matches no row, so these operations answer the
# way they do for an id that does not exist. Keyed by operation_id.
UNPARSEABLE_ID_RESPONSES: Dict[str, Tuple[int, Any]] = {
    "get_artist": (404, {"message": "Artist not found"}),
    "list_artist_albums": (404, {"message": "Artist not found"}),
    "list_artist_songs": (404, {"message": "Artist not found"}),
    "get_album": (404, {"message": "Album not found"}),
    "get_song": (404, {"message": "Song not found"}),
    "get_playlist": (404, {"message": "Playlist not found"}),
    "get_user": (404, {"message": "User not found"}),
    "list_user_playlists": (200, []),
    "list_recently_played": (200, []),
    "remove_song_from_playlist": (204, None),
}

_DEFAULT_VALIDATION_MESSAGE = "Invalid request data"
_DEFAULT_FAILURE_MESSAGE = "Internal server error"


def _is_malformed_body(exc: RequestValidationError) -> bool:
    return any(err.get("type") == "json_invalid" for err in exc.errors())


def _only_path_errors(exc: RequestValidationError) -> bool:
    errors = exc.errors()
    return bool(errors) and all(tuple(err.get("loc", ()))[:1] == ("path",) for err in errors)


def _unparseable_id_response(operation_id: str, exc: RequestValidationError) -> Response:
    if operation_id in UNPARSEABLE_ID_RESPONSES:
        status_code, content = UNPARSEABLE_ID_RESPONSES[operation_id]
        if content is None:
            return Response(status_code=status_code)
        return JSONResponse(status_code=status_code, content=content)
    body = {"message": _DEFAULT_VALIDATION_MESSAGE, "errors": exc.errors()}
    return JSONResponse(status_code=400, content=jsonable_encoder(body))


class CatalogRoute(APIRoute):
    """APIRoute that converts every handler failure into a JSON error body."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_handler = super().get_route_handler()
        operation_id = self.operation_id or self.name

        async def catalog_route_handler(request: Request) -> Response:
            try:
                return await original_handler(request)
            except StarletteHTTPException:
                raise
            except CatalogError as exc:
                if exc.status_code >= 500:
                    logger.error("catalog_error: operation=%s error=%s", operation_id, exc.message)
                    return _failure_response(operation_id)
                return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))
            except RequestValidationError as exc:
                if _is_malformed_body(exc):
                    logger.warning("malformed_body: operation=%s", operation_id)
                    return _failure_response(operation_id)
                if _only_path_errors(exc):
                    return _unparseable_id_response(operation_id, exc)
                message = VALIDATION_MESSAGES.get(operation_id, _DEFAULT_VALIDATION_MESSAGE)
                body = {"message": message, "errors": exc.errors()}
                return JSONResponse(status_code=400, content=jsonable_encoder(body))
            except Exception:
                logger.exception("unhandled_error: operation=%s path=%s", operation_id, request.url.path)
                return _failure_response(operation_id)

        return catalog_route_handler


def _failure_response(operation_id: str) -> JSONResponse:
    message = FAILURE_MESSAGES.get(operation_id, _DEFAULT_FAILURE_MESSAGE)
    return JSONResponse(status_code=500, content={"message": message})
