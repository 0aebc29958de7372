from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from src.api.db import build_engine
from src.api.main import create_app
from src.api.seed import seed_catalog
from src.api.sql_storage import SqlStorage
from src.api.storage import MemStorage


class StepClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


def _make_storage(backend: str, **kwargs):
    if backend == "sql":
        return SqlStorage(build_engine("sqlite://"), **kwargs)
    return MemStorage(**kwargs)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture(params=["memory", "sql"])
def storage(request, clock):
    """An empty storage, once per backend."""
    return _make_storage(request.param, clock=clock)


@pytest.fixture(params=["memory", "sql"])
def strict_storage(request):
    return _make_storage(request.param, strict_references=True)


@pytest.fixture
def seeded_storage():
    storage = MemStorage()
    seed_catalog(storage)
    return storage


@pytest.fixture
def client(seeded_storage):
    return TestClient(create_app(seeded_storage, debug=True))


@pytest.fixture
def sql_client():
    storage = SqlStorage(build_engine("sqlite://"))
    seed_catalog(storage)
    return TestClient(create_app(storage, debug=True))
