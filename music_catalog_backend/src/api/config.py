"""
Runtime configuration read from environment variables.

Every getter falls back to a safe default when a variable is unset or invalid.
"""

from __future__ import annotations

import logging
import os
from typing import List

_TRUTHY = {"1", "true", "yes", "on"}

STORAGE_BACKENDS = ("memory", "sql")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


# PUBLIC_INTERFACE
def storage_backend() -> str:
    """Return the storage backend name: 'memory' (default) or 'sql'."""
    value = (os.getenv("STORAGE_BACKEND") or "memory").strip().lower()
    return value if value in STORAGE_BACKENDS else "memory"


# PUBLIC_INTERFACE
def seed_catalog_enabled() -> bool:
    """Whether the fixture catalog is loaded at startup."""
    return _env_flag("SEED_CATALOG", True)


# PUBLIC_INTERFACE
def seed_user_password() -> str:
    """Password of the seeded demo user."""
    return os.getenv("SEED_USER_PASSWORD", "demo") or "demo"


# PUBLIC_INTERFACE
def strict_references() -> bool:
    """Whether dangling references fail read views instead of resolving to null."""
    return _env_flag("STRICT_REFERENCES", False)


# PUBLIC_INTERFACE
def debug_enabled() -> bool:
    """Whether /api/debug/integrity is exposed."""
    return _env_flag("CATALOG_DEBUG", False)


# PUBLIC_INTERFACE
def log_level() -> int:
    """Root log level from LOG_LEVEL; unknown names fall back to INFO."""
    name = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


# PUBLIC_INTERFACE
def cors_origins() -> List[str]:
    """
    Allowed CORS origins.

    Local dev URLs are always included (credentials=true requires explicit
    origins). Extra origins come from CORS_ALLOW_ORIGINS or ALLOWED_ORIGINS as
    comma-separated values.
    """
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5000",
    ]
    raw = os.getenv("CORS_ALLOW_ORIGINS") or os.getenv("ALLOWED_ORIGINS", "")
    origins.extend(o.strip() for o in raw.split(",") if o.strip())
    return origins
