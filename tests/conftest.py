"""Shared fixtures: a repository over fake redis and a client for the app."""

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.repository import RedisTaskRepository
from tests.fakes import FakeRedis


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def repository(fake_redis: FakeRedis) -> RedisTaskRepository:
    return RedisTaskRepository(fake_redis)


@pytest.fixture
def client(repository: RedisTaskRepository) -> TestClient:
    return TestClient(create_app(repository=repository))


@pytest.fixture
def make_client():
    """Build a client over a repository of the test's choosing."""

    def _make(repository) -> TestClient:
        return TestClient(create_app(repository=repository))

    return _make
