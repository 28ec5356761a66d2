"""Pytest fixtures for chat relay testing."""

import time
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from relaychat.api.ws.manager import ConnectionManager
from relaychat.config import Settings
from relaychat.main import create_app
from relaychat.models.schemas.message import ChatMessage
from relaychat.repositories.message_repository import MessageRepository
from relaychat.services.message_backend import MessageBackend


@pytest.fixture
def mock_redis_client():
    """Mock Redis client backed by in-memory lists."""
    client = AsyncMock()

    storage: dict[str, list[str]] = {}

    async def mock_rpush(key, *values):
        storage.setdefault(key, []).extend(values)
        return len(storage[key])

    async def mock_lrange(key, start, end):
        items = storage.get(key, [])
        if end == -1:
            return list(items[start:])
        return list(items[start:end + 1])

    async def mock_llen(key):
        return len(storage.get(key, []))

    async def mock_ping():
        return True

    client.rpush = mock_rpush
    client.lrange = mock_lrange
    client.llen = mock_llen
    client.ping = mock_ping
    client.storage = storage

    return client


@pytest.fixture
def failing_redis_client():
    """Mock Redis client whose every call fails as if the server went away."""
    client = AsyncMock()
    error = RedisConnectionError("Connection refused")

    client.rpush = AsyncMock(side_effect=error)
    client.lrange = AsyncMock(side_effect=error)
    client.llen = AsyncMock(side_effect=error)
    client.ping = AsyncMock(side_effect=error)

    return client


@pytest.fixture
def available_backend(mock_redis_client) -> MessageBackend:
    return MessageBackend(MessageRepository(mock_redis_client), mock_redis_client)


@pytest.fixture
def failing_backend(failing_redis_client) -> MessageBackend:
    return MessageBackend(MessageRepository(failing_redis_client), failing_redis_client)


@pytest.fixture
def unavailable_backend() -> MessageBackend:
    return MessageBackend()


@pytest.fixture
def make_websocket():
    """Factory for fake WebSocket objects that record what was sent."""

    def _make(fail_with: Exception | None = None):
        websocket = MagicMock()
        websocket.accept = AsyncMock()
        websocket.send_json = AsyncMock(side_effect=fail_with)
        return websocket

    return _make


@pytest.fixture
def connection_manager() -> ConnectionManager:
    return ConnectionManager()


@pytest.fixture
def sample_messages() -> list[ChatMessage]:
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return [
        ChatMessage(text="first", sender_id="a1", timestamp=base),
        ChatMessage(text="second", sender_id="b2", timestamp=base + timedelta(seconds=5)),
        ChatMessage(text="third", sender_id="a1", timestamp=base + timedelta(seconds=9)),
    ]


@contextmanager
def _running_client(backend: MessageBackend):
    settings = Settings(redis_url=None, log_level="WARNING")
    app = create_app(settings)
    with patch(
        "relaychat.main.MessageBackend.try_connect",
        new=AsyncMock(return_value=backend),
    ):
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def client(available_backend):
    """Test client whose app persists to the in-memory Redis mock."""
    with _running_client(available_backend) as test_client:
        yield test_client


@pytest.fixture
def degraded_client(unavailable_backend):
    """Test client whose app runs without persistence."""
    with _running_client(unavailable_backend) as test_client:
        yield test_client


@pytest.fixture
def failing_client(failing_backend):
    """Test client whose backend was reachable at startup but now fails."""
    with _running_client(failing_backend) as test_client:
        yield test_client


@pytest.fixture
def wait_for_connections():
    """Block until the server-side registry holds the expected number of connections."""

    def _wait(test_client: TestClient, expected: int, timeout: float = 2.0) -> None:
        manager = test_client.app.state.connection_manager
        deadline = time.monotonic() + timeout
        while manager.total_connections != expected:
            if time.monotonic() > deadline:
                raise AssertionError(
                    f"expected {expected} connections, found {manager.total_connections}"
                )
            time.sleep(0.01)

    return _wait
