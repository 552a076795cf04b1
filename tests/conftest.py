"""
Pytest configuration and fixtures for Story API tests.

Stories are stored with the local backend in a per-test temporary
directory, so no cloud credentials are needed.
"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from story_api.auth.tokens import TeamTokens
from story_api.config import Settings
from story_api.main import create_app
from story_api.storage.backends.local import LocalStorageBackend
from story_api.stories.service import StoryService

FINANCE_TOKEN = "finance-token"
PAYROLL_TOKEN = "payroll-token"

TEAM_TOKENS = {
    FINANCE_TOKEN: "finance",
    PAYROLL_TOKEN: "payroll",
}


# ============================================
# Test Fixtures
# ============================================

@pytest.fixture
def team_tokens() -> TeamTokens:
    """Token mapping with two teams."""
    return TeamTokens(TEAM_TOKENS)


@pytest.fixture
def local_backend(tmp_path) -> LocalStorageBackend:
    """Local storage backend rooted in a temporary directory."""
    return LocalStorageBackend(root=tmp_path / "bucket")


@pytest.fixture
def story_service(local_backend, team_tokens) -> StoryService:
    """Story service over the local backend."""
    return StoryService(backend=local_backend, tokens=team_tokens, root="fortelling")


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing the local backend at a temporary directory."""
    return Settings(
        STORAGE_BACKEND="local",
        LOCAL_STORAGE_ROOT=str(tmp_path / "bucket"),
        TEAM_TOKENS=TEAM_TOKENS,
        DEBUG=True,
    )


@pytest.fixture
def client(test_settings: Settings, local_backend) -> Generator[TestClient, None, None]:
    """
    Create a test client; the lifespan runs on enter.
    """
    app = create_app(settings=test_settings, backend=local_backend)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def finance_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {FINANCE_TOKEN}"}


@pytest.fixture
def payroll_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {PAYROLL_TOKEN}"}


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no external services)"
    )
    config.addinivalue_line(
        "markers", "integration: HTTP-level tests against the FastAPI app"
    )
