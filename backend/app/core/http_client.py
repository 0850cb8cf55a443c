"""Shared httpx client for the completion service, kept on app.state."""

import httpx
from fastapi import Request

from app.core.config import settings


async def init_http_client(app_state: object) -> httpx.AsyncClient:
    """Create the shared AsyncClient and store it on app.state."""
    client = httpx.AsyncClient(
        base_url=settings.OLLAMA_API,
        timeout=httpx.Timeout(settings.OLLAMA_TIMEOUT_SECONDS),
    )
    app_state.http_client = client  # type: ignore[attr-defined]
    return client


async def close_http_client(app_state: object) -> None:
    """Close the AsyncClient stored on app.state."""
    client: httpx.AsyncClient | None = getattr(app_state, "http_client", None)
    if client is not None:
        await client.aclose()
        app_state.http_client = None  # type: ignore[attr-defined]


def get_http_client_from_app(request: Request) -> httpx.AsyncClient:
    """FastAPI dependency that returns the AsyncClient from app.state."""
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)
    if client is None:
        raise RuntimeError("HTTP client not initialized. Call init_http_client() first.")
    return client
