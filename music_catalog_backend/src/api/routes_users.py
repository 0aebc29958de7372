"""
User endpoints:
- POST /api/users (signup)
- GET /api/users/{id}

There is no login or session; the password is hashed and never returned.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from src.api.deps import storage_dep
from src.api.errors import CatalogRoute, NotFoundError, ValidationError
from src.api.passwords import hash_password
from src.api.schemas import UserCreate, UserResponse
from src.api.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"], route_class=CatalogRoute)


@router.post(
    "",
    response_model=UserResponse,
    status_code=201,
    summary="Sign up",
    description="Creates a user. Usernames are unique.",
    operation_id="create_user",
    responses={400: {"description": "Invalid user data or username already taken"}},
)
def create_user(req: UserCreate, storage: Storage = Depends(storage_dep)) -> UserResponse:
    """Register a new user with username/password."""
    username = req.username.strip()
    if not username:
        raise ValidationError(
            "Invalid user data",
            errors=[{"loc": ["body", "username"], "msg": "Username must not be blank."}],
        )
    user = storage.create_user(username, hash_password(req.password))
    logger.info("user_created: id=%s username=%s", user.id, user.username)
    return UserResponse(id=user.id, username=user.username)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
    operation_id="get_user",
    responses={404: {"description": "User not found"}},
)
def get_user(user_id: int, storage: Storage = Depends(storage_dep)) -> UserResponse:
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return UserResponse(id=user.id, username=user.username)
