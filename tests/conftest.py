"""
Global pytest configuration and fixtures for the organization RBAC API test suite.
"""

import os

# Settings are read at import time, so the environment is prepared first
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only-32-chars"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("JWT_AUDIENCE", None)

from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from orgrbac.core.database import get_db  # noqa: E402
from orgrbac.main import app  # noqa: E402

# Import fixtures from fixture modules
from tests.fixtures.auth_fixtures import *  # noqa: F403, F401, E402
from tests.fixtures.organization_fixtures import *  # noqa: F403, F401, E402
from tests.fixtures.supabase_fixtures import *  # noqa: F403, F401, E402
from tests.fixtures.supabase_fixtures import FakeSupabase  # noqa: E402


@pytest.fixture
def client(fake_db: FakeSupabase) -> Generator[TestClient, None, None]:
    """
    FastAPI test client whose database dependency is the fake Supabase client.

    Requests go through the real identity resolver, so tests authenticate with
    tokens signed by `test_jwt_secret`.
    """
    app.dependency_overrides[get_db] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def bare_client() -> TestClient:
    """Test client with no overrides, for routes that never touch the database."""
    return TestClient(app)
