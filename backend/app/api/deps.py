"""Shared FastAPI dependencies for the API routes."""

import httpx
from fastapi import Depends

from app.core.http_client import get_http_client_from_app
from app.services.ollama_client import OllamaClient


def get_ollama_client(
    http_client: httpx.AsyncClient = Depends(get_http_client_from_app),
) -> OllamaClient:
    """Dependency wrapping the shared httpx client in an OllamaClient."""
    return OllamaClient(http_client)
