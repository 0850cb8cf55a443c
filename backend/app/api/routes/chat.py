"""Unstructured chat passthrough, optionally streamed."""

import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from app.api.deps import get_ollama_client
from app.core.config import settings
from app.core.errors import BadRequestError, UpstreamUnavailableError
from app.schemas.chat import PassthroughChatRequest
from app.services.ollama_client import OllamaClient

router = APIRouter(tags=["chat"])

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.post("/chat")
async def chat(
    payload: PassthroughChatRequest,
    client: OllamaClient = Depends(get_ollama_client),
) -> Any:
    """Forward a chat request to Ollama unchanged.

    With ``stream: true`` the upstream byte stream is piped straight to the
    caller; otherwise the upstream body is returned with timing added.
    """
    start = time.monotonic()
    if payload.messages is None:
        raise BadRequestError("Valid messages are required")

    model = payload.model or settings.DEFAULT_MODEL

    try:
        if payload.stream:
            upstream = await client.open_chat_stream(model, payload.messages, payload.options)
            return StreamingResponse(
                upstream.aiter_raw(),
                media_type="text/event-stream",
                headers=STREAM_HEADERS,
                background=BackgroundTask(upstream.aclose),
            )

        data = await client.chat_raw(model, payload.messages, payload.options)
    except UpstreamUnavailableError as exc:
        exc.latency_ms = int((time.monotonic() - start) * 1000)
        raise

    return {
        **data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "latency": int((time.monotonic() - start) * 1000),
    }
