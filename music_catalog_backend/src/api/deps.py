"""
FastAPI dependencies shared by the routers.
"""

from __future__ import annotations

from fastapi import Request

from src.api.storage import Storage


# PUBLIC_INTERFACE
def storage_dep(request: Request) -> Storage:
    """Return the storage instance the application was built with."""
    return request.app.state.storage
