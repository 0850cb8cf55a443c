"""Async client for the Ollama completion service.

Wraps ``POST /api/chat`` and ``GET /api/tags`` on a shared httpx client.
Normalizes non-streaming replies into a :class:`CompletionResponse` and
logs usage (tokens, latency) per call. Transport failures and non-2xx
answers become :class:`UpstreamUnavailableError`; a 2xx body without
``message.content`` becomes :class:`UpstreamMalformedError`.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.core.errors import UpstreamMalformedError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"
TAGS_PATH = "/api/tags"


@dataclass
class CompletionResponse:
    """Normalized non-streaming reply from the completion service."""

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: float = 0.0
    raw: dict[str, Any] = field(default_factory=dict)


class OllamaClient:
    """Thin async wrapper around the Ollama HTTP API."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
        task_type: str = "chat",
    ) -> CompletionResponse:
        """Send a non-streaming chat request and return the reply text.

        Raises UpstreamUnavailableError on transport faults or non-2xx
        status, UpstreamMalformedError when the body has no message content.
        """
        start = time.monotonic()
        data = await self.chat_raw(model, messages, options)
        latency = (time.monotonic() - start) * 1000

        message = data.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not content or not isinstance(content, str):
            logger.error("Ollama reply without message content for model=%s", model)
            raise UpstreamMalformedError()

        input_tokens = int(data.get("prompt_eval_count") or 0)
        output_tokens = int(data.get("eval_count") or 0)
        self._log_usage(model, input_tokens, output_tokens, latency, task_type)

        return CompletionResponse(
            content=content,
            model=data.get("model", model),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=round(latency, 1),
            raw=data,
        )

    async def chat_raw(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a non-streaming chat request and return the decoded body as-is."""
        payload = self._chat_payload(model, messages, options, stream=False)
        response = await self._send("POST", CHAT_PATH, json=payload)
        return self._decode(response)

    async def open_chat_stream(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Open a streaming chat request.

        Returns the response once upstream headers arrive; the caller owns it
        and must ``aclose()`` it after draining ``aiter_raw()``.
        """
        payload = self._chat_payload(model, messages, options, stream=True)
        request = self._http.build_request("POST", CHAT_PATH, json=payload)
        try:
            response = await self._http.send(request, stream=True)
        except httpx.HTTPError as exc:
            logger.error("No response received from Ollama: %s", exc)
            raise UpstreamUnavailableError(str(exc)) from exc

        if response.is_error:
            body = await response.aread()
            await response.aclose()
            logger.error("Ollama API error: %s %s", response.status_code, body[:500])
            raise UpstreamUnavailableError(
                f"Request failed with status code {response.status_code}",
                upstream_status=response.status_code,
            )
        return response

    async def list_models(self) -> dict[str, Any]:
        """Return the upstream model catalogue (``/api/tags``)."""
        response = await self._send("GET", TAGS_PATH)
        return self._decode(response)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------

    @staticmethod
    def _chat_payload(
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None,
        stream: bool,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": model, "messages": messages, "stream": stream}
        if options:
            payload["options"] = options
        return payload

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("No response received from Ollama: %s", exc)
            raise UpstreamUnavailableError(str(exc)) from exc

        if response.is_error:
            logger.error("Ollama API error: %s %s", response.status_code, response.text[:500])
            raise UpstreamUnavailableError(
                f"Request failed with status code {response.status_code}",
                upstream_status=response.status_code,
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Ollama returned a non-JSON body: %s", exc)
            raise UpstreamMalformedError() from exc
        if not isinstance(data, dict):
            raise UpstreamMalformedError()
        return data

    @staticmethod
    def _log_usage(
        model: str,
        input_tokens: int,
        output_tokens: int,
        latency_ms: float,
        task_type: str,
    ) -> None:
        logger.info(
            "LLM usage: model=%s tokens=%d+%d latency=%.0fms task=%s",
            model, input_tokens, output_tokens, latency_ms, task_type,
        )
