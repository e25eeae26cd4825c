"""Shared fixtures: in-memory Supabase fakes and an app wired to them."""

import pytest
from fastapi.testclient import TestClient

from compare_api.api import create_app
from compare_api.api.dependencies import get_image_storage, get_post_repository
from compare_api.infrastructure.database import SupabaseClient
from compare_api.infrastructure.rate_limit import RateLimiter
from compare_api.infrastructure.storage import ImageStorage
from compare_api.tests.fakes import (
    JWT_SECRET,
    SUPABASE_URL,
    FakeBucket,
    FakeClock,
    FakePostRepository,
    FakeSupabase,
)


@pytest.fixture(autouse=True)
def environment(monkeypatch):
    """Known configuration for every test."""
    monkeypatch.setenv("SUPABASE_URL", SUPABASE_URL)
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", JWT_SECRET)
    for name in (
        "APP_ENV",
        "RATE_LIMIT_ENABLED",
        "ALLOW_GIF_UPLOADS",
        "EXPOSE_UPSTREAM_ERRORS",
        "SUPABASE_STORAGE_BUCKET",
    ):
        monkeypatch.delenv(name, raising=False)
    SupabaseClient.reset()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bucket() -> FakeBucket:
    return FakeBucket()


@pytest.fixture
def storage(bucket) -> ImageStorage:
    return ImageStorage(client=FakeSupabase(bucket=bucket), bucket="images")


@pytest.fixture
def repository() -> FakePostRepository:
    return FakePostRepository()


@pytest.fixture
def limiter(clock) -> RateLimiter:
    return RateLimiter(clock=clock)


@pytest.fixture
def app(limiter, repository, storage):
    app = create_app(rate_limiter=limiter)
    app.dependency_overrides[get_post_repository] = lambda: repository
    app.dependency_overrides[get_image_storage] = lambda: storage
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
