"""Multi-strategy JSON extraction from raw model output.

Strategies run strictly in order, strictest first, and the first success
wins:

1. direct parse of the whole text
2. first fenced code block
3. greedy brace span
4. schema-guided regeneration (only when a schema is given)

Without a schema, exhausting 1-3 raises :class:`ExtractionFailedError`.
With a schema, step 4 always produces a value.
"""

import logging
from collections.abc import Mapping
from typing import Any

from app.core.errors import ExtractionFailedError
from app.services.json_regenerator import JsonRegenerator
from app.services.json_strategies import (
    ExtractionAttempt,
    first_success,
    parse_brace_span,
    parse_direct,
    parse_fenced_block,
)

logger = logging.getLogger(__name__)

LOCAL_STRATEGIES = [parse_direct, parse_fenced_block, parse_brace_span]


class JsonExtractor:
    """Pulls a JSON value out of model text, regenerating when it must."""

    def __init__(self, regenerator: JsonRegenerator) -> None:
        self._regenerator = regenerator

    async def extract(self, text: str, schema: Mapping[str, Any] | None = None) -> Any:
        attempt = await self.extract_attempt(text, schema)
        return attempt.value

    async def extract_attempt(
        self, text: str, schema: Mapping[str, Any] | None = None,
    ) -> ExtractionAttempt:
        """Return the winning attempt, so callers know which strategy produced it."""
        winner, attempts = first_success(text, LOCAL_STRATEGIES)
        for attempt in attempts:
            if not attempt.succeeded:
                logger.debug("Extraction via %s failed: %s", attempt.strategy.value, attempt.error)
        if winner is not None:
            logger.info("JSON extracted via %s", winner.strategy.value)
            return winner

        if schema is not None:
            logger.info("Local extraction failed, regenerating JSON from text and schema")
            return await self._regenerator.regenerate_attempt(text, schema)

        raise ExtractionFailedError(
            original_text=text,
            parse_error="No valid JSON could be extracted from the response",
        )
