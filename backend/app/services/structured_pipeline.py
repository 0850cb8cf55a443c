"""Structured completion pipeline.

Provides:
- Request checks (model and messages) before any upstream call
- JSON-instruction augmentation when a ``json_schema`` format is requested
- Extraction, shallow validation and regeneration of the model's answer
- Result transforms and latency reporting

When a schema is requested the pipeline never fails on the model's
behaviour: the worst case is a synthesized document with a ``warning``.
Only upstream outages and caller mistakes surface as errors.
"""

import logging
import time
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from app.core.config import settings
from app.core.errors import BadRequestError, ExtractionFailedError, GatewayError
from app.schemas.chat import ChatRequest, PipelineResult, Transform
from app.services.json_extractor import JsonExtractor
from app.services.json_regenerator import JsonRegenerator
from app.services.json_strategies import ExtractionStrategy
from app.services.ollama_client import OllamaClient
from app.services.prompt_augmenter import augment
from app.services.schema_validator import validate

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Could not parse the model response as JSON. Returning a generated fallback."


def apply_transforms(result: Any, transforms: Sequence[Transform]) -> Any:
    """Apply caller transforms in order; unknown transform types are ignored."""
    for transform in transforms:
        if transform.type == "filter" and transform.fields is not None:
            source = result if isinstance(result, Mapping) else {}
            result = {name: source[name] for name in transform.fields if name in source}
    return result


class StructuredCompletionPipeline:
    """Orchestrates augment -> call -> extract -> validate -> repair."""

    def __init__(
        self,
        client: OllamaClient,
        regenerator: JsonRegenerator,
        extractor: JsonExtractor | None = None,
        service_name: str | None = None,
    ) -> None:
        self._client = client
        self._regenerator = regenerator
        self._extractor = extractor or JsonExtractor(regenerator)
        self._service_name = service_name or settings.SERVICE_NAME

    @classmethod
    def from_client(cls, client: OllamaClient) -> "StructuredCompletionPipeline":
        """Build a pipeline whose regeneration pass uses the configured transform model."""
        return cls(client=client, regenerator=JsonRegenerator(client, settings.transform_model))

    async def run(self, request: ChatRequest) -> PipelineResult:
        """Process one structured chat request end-to-end.

        Steps:
        1. Reject requests without a model or messages
        2. Augment the system prompt when a JSON schema is requested
        3. Call the completion service (non-streaming)
        4. Extract, validate and, if needed, regenerate the JSON
        5. Apply transforms and package the result
        """
        start = time.monotonic()
        try:
            return await self._run(request, start)
        except GatewayError as exc:
            if exc.latency_ms is None:
                exc.latency_ms = _elapsed_ms(start)
            raise
        except Exception as exc:
            logger.exception("Structured chat failed unexpectedly")
            raise GatewayError(str(exc), latency_ms=_elapsed_ms(start)) from exc

    async def _run(self, request: ChatRequest, start: float) -> PipelineResult:
        model, messages = self._check_request(request)

        response_format = request.response_format
        wants_json = response_format is not None and response_format.type == "json_schema"
        schema = response_format.json_schema if wants_json else None

        if schema is not None:
            messages = augment(messages, schema)

        logger.info("Requesting completion from Ollama for model %s", model)
        response = await self._client.chat(model=model, messages=messages, options=request.options)

        result: Any = response.content
        warning: str | None = None
        if wants_json:
            try:
                result, warning = await self._structure(response.content, schema)
            except ExtractionFailedError as exc:
                logger.error("JSON processing failed: %s", exc)
                raise

        result = apply_transforms(result, request.transforms or [])

        return PipelineResult(
            model=model,
            result=result,
            timestamp=datetime.now(timezone.utc),
            service=request.service or self._service_name,
            warning=warning,
            latency=_elapsed_ms(start),
        )

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------

    @staticmethod
    def _check_request(request: ChatRequest) -> tuple[str, list[dict[str, Any]]]:
        if not request.model:
            raise BadRequestError("A model must be specified")
        if not request.messages:
            raise BadRequestError("Valid messages are required")
        return request.model, [msg.model_dump(exclude_none=True) for msg in request.messages]

    async def _structure(
        self, text: str, schema: Mapping[str, Any] | None,
    ) -> tuple[Any, str | None]:
        """Turn the model text into JSON; returns the value and an optional warning."""
        attempt = await self._extractor.extract_attempt(text, schema)

        if (
            schema is not None
            and attempt.strategy is not ExtractionStrategy.SYNTHESIZED
            and not validate(attempt.value, schema)
        ):
            logger.info("Schema validation failed, attempting to repair")
            attempt = await self._regenerator.regenerate_attempt(text, schema)

        if attempt.strategy is ExtractionStrategy.SYNTHESIZED:
            logger.warning("Returning synthesized fallback document")
            return attempt.value, FALLBACK_WARNING
        return attempt.value, None


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
