"""
Tests for api/dependencies.py
"""
import os
import threading
import time
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from api.dependencies import (
    create_supabase_client,
    get_current_user,
    get_score_store,
    get_supabase_anon_client,
    get_supabase_service_role_client,
    get_tip_client,
    get_youtube_client,
    reset_caches_for_testing,
)
from services.score_store import ScoreStore

LONG_ANON_KEY = "a" * 150
LONG_SERVICE_KEY = "s" * 200


@pytest.fixture(autouse=True)
def reset_dependency_caches():
    reset_caches_for_testing()
    yield
    reset_caches_for_testing()


def _anon_client_with_user(user=None, error=None):
    client = MagicMock()
    if error is not None:
        client.auth.get_user.side_effect = error
    else:
        client.auth.get_user.return_value = SimpleNamespace(user=user)
    return client


class TestGetCurrentUser:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", [None, "", "Token abc", "Basic abc"])
    async def test_missing_or_malformed_header(self, header):
        with patch("api.dependencies.get_supabase_anon_client") as factory:
            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(authorization=header)

        assert exc_info.value.status_code == 401
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_bearer_token(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(authorization="Bearer   ")
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Empty token"

    @pytest.mark.asyncio
    async def test_valid_token(self):
        user = SimpleNamespace(id="user-1", email="u@example.com")
        client = _anon_client_with_user(user)
        with patch("api.dependencies.get_supabase_anon_client", return_value=client):
            result = await get_current_user(authorization="Bearer good-token")

        assert result.id == "user-1"
        assert result.email == "u@example.com"
        client.auth.get_user.assert_called_once_with("good-token")

    @pytest.mark.asyncio
    async def test_rejected_token(self):
        client = _anon_client_with_user(error=Exception("Invalid token signature"))
        with patch("api.dependencies.get_supabase_anon_client", return_value=client):
            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(authorization="Bearer bad-token")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid or expired token"

    @pytest.mark.asyncio
    async def test_token_without_user(self):
        client = _anon_client_with_user(user=None)
        with patch("api.dependencies.get_supabase_anon_client", return_value=client):
            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(authorization="Bearer orphan")
        assert exc_info.value.status_code == 401


class TestSupabaseClients:
    def test_truncated_anon_key(self):
        with patch.dict(os.environ, {"SUPABASE_URL": "https://test.supabase.co", "SUPABASE_ANON_KEY": "short"}):
            with pytest.raises(HTTPException) as exc_info:
                get_supabase_anon_client()
        assert exc_info.value.status_code == 500

    def test_missing_service_key(self):
        with patch.dict(os.environ, {"SUPABASE_URL": "https://test.supabase.co", "SUPABASE_SERVICE_KEY": ""}):
            with pytest.raises(HTTPException) as exc_info:
                get_supabase_service_role_client()
        assert "incomplete" in exc_info.value.detail

    @pytest.mark.parametrize("factory,env", [
        (get_supabase_anon_client, {"SUPABASE_ANON_KEY": LONG_ANON_KEY}),
        (get_supabase_service_role_client, {"SUPABASE_SERVICE_KEY": LONG_SERVICE_KEY}),
    ])
    def test_thread_safe_initialization(self, factory, env):
        call_count = [0]
        lock = threading.Lock()
        clients = []

        def slow_create_client(url, key):
            with lock:
                call_count[0] += 1
            time.sleep(0.01)
            return MagicMock()

        with patch.dict(os.environ, {"SUPABASE_URL": "https://test.supabase.co", **env}):
            with patch("api.dependencies.create_supabase_client", side_effect=slow_create_client):
                threads = [threading.Thread(target=lambda: clients.append(factory())) for _ in range(10)]
                for thread in threads:
                    thread.start()
                for thread in threads:
                    thread.join()

        assert call_count[0] == 1
        assert len(set(id(c) for c in clients)) == 1


def test_create_supabase_client_builds_sync_client():
    with patch("api.dependencies.create_client", return_value="client") as factory:
        assert create_supabase_client("https://test.supabase.co", "key") == "client"
    factory.assert_called_once_with("https://test.supabase.co", "key")


def test_score_store_wraps_client():
    client = MagicMock()
    assert isinstance(get_score_store(client), ScoreStore)


def test_outbound_clients_are_singletons():
    assert get_youtube_client() is get_youtube_client()
    assert get_tip_client() is get_tip_client()
