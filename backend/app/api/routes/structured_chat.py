"""Structured chat endpoint: model output coerced into schema-shaped JSON."""

from fastapi import APIRouter, Depends

from app.api.deps import get_ollama_client
from app.schemas.chat import ChatRequest, PipelineResult
from app.services.ollama_client import OllamaClient
from app.services.structured_pipeline import StructuredCompletionPipeline

router = APIRouter(tags=["structured-chat"])


def _get_pipeline(
    client: OllamaClient = Depends(get_ollama_client),
) -> StructuredCompletionPipeline:
    """Dependency to construct a pipeline around the shared completion client."""
    return StructuredCompletionPipeline.from_client(client)


@router.post("/structured-chat", response_model=PipelineResult)
async def structured_chat(
    payload: ChatRequest,
    pipeline: StructuredCompletionPipeline = Depends(_get_pipeline),
) -> PipelineResult:
    """Run a chat completion and return JSON matching the requested schema."""
    return await pipeline.run(payload)
