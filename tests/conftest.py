"""
Pytest configuration and fixtures for the Wellness API tests.

Provides shared fixtures, including mocks of the external collaborators
(Supabase, YouTube, the LLM and the search cache) so no test makes a real
network call.
"""
import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
import os

# Set environment variables before importing main
os.environ["SUPABASE_URL"] = "https://test.supabase.co"
os.environ["SUPABASE_SERVICE_KEY"] = "test-key"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["GOOGLE_YT_API_KEY"] = "test-yt-key"
os.environ.pop("OPENAI_API_KEY", None)
os.environ.pop("REDIS_URL", None)
# Use memory storage for tests (not Redis)
os.environ["RATE_LIMIT_STORAGE_URI"] = "memory://"
# Set aggressive rate limits for testing
os.environ["RATE_LIMIT_DEFAULT"] = "5/minute"
os.environ["RATE_LIMIT_DATA_ACCESS"] = "5/minute"
os.environ["RATE_LIMIT_SEARCH"] = "3/minute"
os.environ["RATE_LIMIT_TIP"] = "3/minute"

# Import app after setting env vars
from main import app

TEST_USER_ID = "3f2b8c1e-7a4d-4e2b-9c1a-5d6e7f8a9b0c"
AUTH_HEADERS = {"Authorization": "Bearer test-token"}


class MockQueryBuilder:
    """
    Mock for the Supabase query builder that supports method chaining.

    Every chained call is recorded in ``calls`` as ``(method, args, kwargs)``
    so tests can assert on filters and payloads. ``execute()`` returns the
    upserted payload for upserts and the configured rows otherwise.

    Args:
        table: Table name passed to ``client.table()``
        data: Rows returned by ``execute()``
        error: Exception raised by ``execute()`` instead of returning
    """

    def __init__(self, table, data=None, error=None):
        self.table = table
        self.data = data or []
        self.error = error
        self.calls = []
        self._payload = None

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def gte(self, *args, **kwargs):
        return self._record("gte", *args, **kwargs)

    def lte(self, *args, **kwargs):
        return self._record("lte", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._record("delete", *args, **kwargs)

    def upsert(self, payload, **kwargs):
        self._payload = payload
        return self._record("upsert", payload, **kwargs)

    def execute(self):
        if self.error is not None:
            raise self.error
        response = MagicMock()
        response.data = self._payload if self._payload is not None else self.data
        return response


class MockSupabase:
    """Sync Supabase client stand-in; one MockQueryBuilder per table() call."""

    def __init__(self, data=None, error=None):
        self.data = data or []
        self.error = error
        self.builders = []
        self.auth = MagicMock()

    def table(self, name):
        builder = MockQueryBuilder(name, data=self.data, error=self.error)
        self.builders.append(builder)
        return builder

    def calls(self, method):
        """All recorded calls of one method across every builder."""
        return [c for b in self.builders for c in b.calls if c[0] == method]


@pytest.fixture
def mock_supabase():
    """Empty Supabase mock; tests set ``.data`` or ``.error`` as needed."""
    return MockSupabase()


@pytest.fixture
def client(mock_supabase):
    """
    Test client with the current user and score store overridden.

    Rate limiter counters and dependency overrides are reset around each test.
    """
    from api.dependencies import AuthenticatedUser, get_current_user, get_score_store, get_search_cache
    from api.rate_limiter import limiter
    from services.score_store import ScoreStore
    from services.search_cache import SearchCache

    # NOTE: slowapi's MemoryStorage has no public API to clear every counter.
    limiter._storage.storage.clear()
    app.dependency_overrides.clear()

    async def override_current_user():
        return AuthenticatedUser(id=TEST_USER_ID, email="user@example.com")

    app.dependency_overrides[get_current_user] = override_current_user
    app.dependency_overrides[get_score_store] = lambda: ScoreStore(mock_supabase)
    app.dependency_overrides[get_search_cache] = lambda: SearchCache(redis_url="")

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    """Test client without any overrides (real auth dependency)."""
    from api.rate_limiter import limiter
    from api.dependencies import reset_caches_for_testing

    limiter._storage.storage.clear()
    app.dependency_overrides.clear()
    reset_caches_for_testing()

    yield TestClient(app)

    app.dependency_overrides.clear()
    reset_caches_for_testing()
