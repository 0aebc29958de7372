"""
Search endpoint:
- GET /api/search?q=<text>

Case-insensitive substring match on song titles, artist names, album titles and
the names of public playlists.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.deps import storage_dep
from src.api.errors import CatalogRoute, ValidationError
from src.api.schemas import SearchResults
from src.api.storage import Storage

router = APIRouter(prefix="/api/search", tags=["Search"], route_class=CatalogRoute)


@router.get(
    "",
    response_model=SearchResults,
    summary="Search the catalog",
    description="Returns matching songs, artists, albums and public playlists. Empty lists when nothing matches.",
    operation_id="search",
    responses={400: {"description": "Query parameter 'q' is required"}},
)
def search(
    q: Optional[str] = Query(None, description="Search text"),
    storage: Storage = Depends(storage_dep),
) -> SearchResults:
    if not q:
        raise ValidationError("Query parameter 'q' is required")
    return storage.search_all(q)
