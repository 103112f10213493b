"""Shared pytest fixtures and configuration.

This module provides common fixtures used across all test types.
"""

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.models.conversation import ActionResponse
from comput3_agent.services.comput3_client import Comput3Client

API_PREFIX = "/api/v0"

TEST_SETTINGS = {
    "COMPUT3AI_API_KEY": "test-api-key",
    "COMPUT3AI_WALLET_ADDRESS": "0x1234567890abcdef",
}


class FakeComput3Api:
    """In-process stand-in for the Comput3 REST API.

    Routes map (method, path) to a canned response or an exception raised
    by the transport. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any] | Exception] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json_body: Any = None,
        error: Exception | None = None,
    ) -> None:
        """Register a canned response or transport error."""
        if error is not None:
            self.routes[(method, path)] = error
        else:
            self.routes[(method, path)] = (status_code, json_body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"message": f"No route for {path}"})
        if isinstance(route, Exception):
            raise route
        status_code, json_body = route
        return httpx.Response(status_code, json=json_body)

    def client_factory(self, runtime: AgentRuntime) -> Comput3Client:
        """Build a real client wired to this fake API."""
        return Comput3Client.from_runtime(runtime, transport=self.transport)

    def request_body(self, index: int = -1) -> Any:
        """Decode the JSON body of a recorded request."""
        return json.loads(self.requests[index].content)


class ResponseRecorder:
    """Callback collecting every ActionResponse delivered by a handler."""

    def __init__(self) -> None:
        self.responses: list[ActionResponse] = []

    async def __call__(self, response: ActionResponse) -> None:
        self.responses.append(response)

    @property
    def last(self) -> ActionResponse:
        return self.responses[-1]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings from the developer's environment out of tests."""
    for name in (
        "COMPUT3AI_API_KEY",
        "COMPUT3AI_WALLET_ADDRESS",
        "COMPUT3AI_API_URL",
        "COMPUT3AI_LLM_CONFIG",
        "LLM_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_api() -> FakeComput3Api:
    """Provide an empty fake Comput3 API."""
    return FakeComput3Api()


@pytest.fixture
def recorder() -> ResponseRecorder:
    """Provide a response callback recorder."""
    return ResponseRecorder()


@pytest.fixture
def runtime() -> AgentRuntime:
    """Provide a runtime with credentials and no language model."""
    return AgentRuntime(settings=TEST_SETTINGS)


@pytest.fixture
def runtime_without_key() -> AgentRuntime:
    """Provide a runtime with no settings at all."""
    return AgentRuntime()


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """Provide a mock LLM client whose completion is set per test."""
    client = MagicMock()
    client.complete = AsyncMock(return_value="")
    client.close = AsyncMock()
    return client


@pytest.fixture
def model_runtime(mock_llm_client: MagicMock) -> AgentRuntime:
    """Provide a runtime with credentials and a (mock) language model."""
    return AgentRuntime(settings=TEST_SETTINGS, llm_client=mock_llm_client)
