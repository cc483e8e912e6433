"""Shared test fixtures.

Provides:
  - Mock HTTP transport for httpx (intercepts all requests)
  - Environment variable setup for credential resolution
  - AsyncMock X API clients wired into a ToolContext through the real
    ClientProvider, with the interaction log in tmp_path
"""

from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from clawbird.audit_log import AuditLog
from clawbird.client import ClientPair, XApiClient
from clawbird.client.provider import ClientProvider
from clawbird.models import ApiResponse, ToolResult
from clawbird.tools.base import ToolContext

FAKE_CREDENTIALS = {
    "api_key": "test-api-key",
    "api_secret": "test-api-secret",
    "access_token": "test-access-token",
    "access_token_secret": "test-access-secret",
}

X_ENV_VARS = ("X_API_KEY", "X_API_SECRET", "X_ACCESS_TOKEN", "X_ACCESS_SECRET", "X_BEARER_TOKEN")


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Usage:
        transport = MockTransport(responses=[
            httpx.Response(200, json={"data": {...}}),
        ])
        client = XApiClient(auth, transport=transport)

    Each call to handle_async_request pops the next response from the list.
    If the list is exhausted, returns a 500 error.
    """

    def __init__(self, responses: list[httpx.Response] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            response.stream = httpx.ByteStream(response.content)
            return response
        return httpx.Response(500, json={"error": "No more mock responses"})


def api_response(data: Any = None, **kwargs: Any) -> ApiResponse:
    """Shorthand for the value a mocked client method returns."""
    return ApiResponse(data=data, **kwargs)


def payload(result: ToolResult) -> Any:
    """Decode the JSON carried by a tool result envelope."""
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    return result.payload()


@pytest.fixture
def mock_env():
    """Set fake X credentials in environment variables."""
    env = {
        "X_API_KEY": "env-api-key",
        "X_API_SECRET": "env-api-secret",
        "X_ACCESS_TOKEN": "env-access-token",
        "X_ACCESS_SECRET": "env-access-secret",
    }
    with patch.dict("os.environ", env):
        yield env


@pytest.fixture
def empty_env(monkeypatch):
    """Remove every X_* credential variable."""
    for name in X_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_client() -> AsyncMock:
    client = AsyncMock(spec=XApiClient)
    client.get_me.return_value = api_response({"id": "42", "username": "clawbird"})
    return client


@pytest.fixture
def read_client() -> AsyncMock:
    return AsyncMock(spec=XApiClient)


@pytest.fixture
def audit_log(tmp_path) -> AuditLog:
    return AuditLog(tmp_path / "interactions.jsonl")


@pytest.fixture
def context(write_client, read_client, audit_log) -> ToolContext:
    """ToolContext whose provider hands out the mock clients."""
    provider = ClientProvider(
        FAKE_CREDENTIALS,
        factory=lambda credentials: ClientPair(write_client=write_client, read_client=read_client),
    )
    return ToolContext(clients=provider, audit_log=audit_log)
