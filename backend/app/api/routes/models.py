"""Model catalogue endpoint proxying Ollama's ``/api/tags``."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_ollama_client
from app.core.errors import UpstreamUnavailableError
from app.services.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["models"])


@router.get("/models")
async def list_models(client: OllamaClient = Depends(get_ollama_client)) -> Any:
    try:
        return await client.list_models()
    except UpstreamUnavailableError as exc:
        logger.error("Failed to list models: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to list models", "message": exc.message},
        )
