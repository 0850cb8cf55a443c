"""Schema-guided regeneration of JSON via a second completion call.

When the model's first answer cannot be used, the text is sent back to the
completion service with a transformation-only prompt. Whatever goes wrong
on that path (transport, status, body shape, parsing) ends in a
synthesized document, so :meth:`JsonRegenerator.regenerate` never raises.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from app.services.fallback import synthesize
from app.services.json_strategies import (
    ExtractionAttempt,
    ExtractionStrategy,
    first_success,
    parse_brace_span,
    parse_direct,
    parse_fenced_block,
)
from app.services.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

TRANSFORM_SYSTEM_PROMPT = (
    "You are a JSON transformation assistant. Convert the following text into a "
    "valid JSON object that follows the specified schema. Output only the JSON "
    "object, without explanations or markdown."
)

# Fence first, then loose braces, then the raw reply.
_REPLY_STRATEGIES = [parse_fenced_block, parse_brace_span, parse_direct]


def build_transform_messages(text: str, schema: Mapping[str, Any]) -> list[dict[str, str]]:
    """Two-message conversation asking the model to convert ``text`` to JSON."""
    schema_str = json.dumps(schema, separators=(",", ":"), ensure_ascii=False)
    return [
        {"role": "system", "content": TRANSFORM_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f"Convert this text to JSON following this schema: {schema_str}"
                f"\n\nText to convert: {text}"
            ),
        },
    ]


class JsonRegenerator:
    """Asks the completion service to rewrite arbitrary text as schema JSON."""

    def __init__(self, client: OllamaClient, model: str) -> None:
        self._client = client
        self.model = model

    async def regenerate(self, text: str, schema: Mapping[str, Any]) -> Any:
        """Return JSON for ``text``; falls back to a synthesized document."""
        attempt = await self.regenerate_attempt(text, schema)
        return attempt.value

    async def regenerate_attempt(self, text: str, schema: Mapping[str, Any]) -> ExtractionAttempt:
        """Like :meth:`regenerate`, but reports whether the value was synthesized."""
        logger.info("Using model %s for JSON transformation", self.model)
        try:
            response = await self._client.chat(
                model=self.model,
                messages=build_transform_messages(text, schema),
                task_type="json_transform",
            )
            winner, attempts = first_success(response.content, _REPLY_STRATEGIES)
            if winner is None:
                raise ValueError(attempts[-1].error or "regenerated reply is not JSON")
        except Exception as exc:
            logger.error("JSON generation failed: %s", exc)
            return ExtractionAttempt(ExtractionStrategy.SYNTHESIZED, True, synthesize(schema))

        logger.info("JSON regenerated via %s", winner.strategy.value)
        return ExtractionAttempt(ExtractionStrategy.REGENERATED, True, winner.value)
