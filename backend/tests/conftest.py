"""Pytest configuration with fixtures for async testing."""

import copy
import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from app.services.ollama_client import CompletionResponse, OllamaClient


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


INTRO_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "introduction": {"type": "string"},
        "capabilities": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["introduction", "capabilities"],
}


@pytest.fixture
def intro_schema() -> dict[str, Any]:
    """The introduction/capabilities schema; a fresh copy per test."""
    return copy.deepcopy(INTRO_SCHEMA)


@pytest.fixture
def mixed_schema() -> dict[str, Any]:
    """A schema touching every primitive type the validator knows."""
    return {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Full name"},
            "age": {"type": "number"},
            "count": {"type": "integer"},
            "active": {"type": "boolean"},
            "tags": {"type": "array"},
            "meta": {"type": "object"},
            "anything": {},
        },
        "required": ["name", "age", "count", "active", "tags", "meta", "anything"],
    }


# ---------------------------------------------------------------------------
# Completion service mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def make_completion() -> Callable[..., CompletionResponse]:
    """Factory for CompletionResponse objects."""

    def _make(content: str = "Test response", model: str = "gemma:2b") -> CompletionResponse:
        return CompletionResponse(
            content=content,
            model=model,
            input_tokens=100,
            output_tokens=50,
            latency_ms=250.0,
            raw={"model": model, "message": {"role": "assistant", "content": content}},
        )

    return _make


@pytest.fixture
def mock_client(make_completion) -> AsyncMock:
    """An OllamaClient stand-in whose chat() returns a plain reply."""
    client = AsyncMock(spec=OllamaClient)
    client.chat = AsyncMock(return_value=make_completion())
    return client


def _ollama_reply(content: str, model: str = "gemma:2b") -> dict[str, Any]:
    return {
        "model": model,
        "created_at": "2026-01-01T00:00:00Z",
        "message": {"role": "assistant", "content": content},
        "done": True,
        "prompt_eval_count": 12,
        "eval_count": 34,
    }


@pytest.fixture
def ollama_reply() -> Callable[..., dict[str, Any]]:
    """Factory for the body of a successful non-streaming /api/chat answer."""
    return _ollama_reply


class _ReplayStream(httpx.AsyncByteStream):
    """Async byte stream serving a recorded body on first iteration."""

    def __init__(self, body: bytes) -> None:
        self._body = body

    async def __aiter__(self):
        yield self._body


class RecordingTransport:
    """httpx.MockTransport handler that records requests and replays responses."""

    def __init__(self, responses: list[httpx.Response | Exception]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        # Replay with an unread stream so streaming callers can consume it.
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            stream=_ReplayStream(response.content),
        )

    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.content]


@pytest.fixture
def make_http_client() -> Callable[..., tuple[httpx.AsyncClient, RecordingTransport]]:
    """Factory for an AsyncClient backed by a RecordingTransport."""

    def _make(*responses: httpx.Response | Exception) -> tuple[httpx.AsyncClient, RecordingTransport]:
        transport = RecordingTransport(list(responses))
        client = httpx.AsyncClient(
            base_url="http://ollama.test",
            transport=httpx.MockTransport(transport),
        )
        return client, transport

    return _make
