"""Individual JSON recovery strategies over raw model text.

Each strategy takes the text and returns an :class:`ExtractionAttempt`
instead of raising, so callers can chain them with plain fallthrough.
The regexes deliberately favor recall: the fenced-block pattern takes the
first fence, and the brace span runs from the first ``{`` to the last
``}`` without balancing.
"""

import enum
import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

FENCED_BLOCK_RE = re.compile(r"```(?:json)?\n?([\s\S]*?)\n?```")
BRACE_SPAN_RE = re.compile(r"\{[\s\S]*\}")


class ExtractionStrategy(str, enum.Enum):
    DIRECT = "direct"
    FENCED_BLOCK = "fenced_block"
    BRACE_SPAN = "brace_span"
    REGENERATED = "regenerated"
    SYNTHESIZED = "synthesized"


@dataclass(frozen=True)
class ExtractionAttempt:
    """Outcome of one strategy; ``value`` is only meaningful when it succeeded."""

    strategy: ExtractionStrategy
    succeeded: bool
    value: Any = None
    error: str | None = None


def _parse(strategy: ExtractionStrategy, candidate: str) -> ExtractionAttempt:
    try:
        return ExtractionAttempt(strategy, True, json.loads(candidate))
    except (ValueError, TypeError, RecursionError) as exc:
        return ExtractionAttempt(strategy, False, error=str(exc))


def parse_direct(text: str) -> ExtractionAttempt:
    """Parse the whole text as JSON."""
    return _parse(ExtractionStrategy.DIRECT, text)


def parse_fenced_block(text: str) -> ExtractionAttempt:
    """Parse the content of the first markdown code fence."""
    match = FENCED_BLOCK_RE.search(text)
    if match is None:
        return ExtractionAttempt(ExtractionStrategy.FENCED_BLOCK, False, error="no fenced block found")
    return _parse(ExtractionStrategy.FENCED_BLOCK, match.group(1))


def parse_brace_span(text: str) -> ExtractionAttempt:
    """Parse the greedy span between the first '{' and the last '}'."""
    match = BRACE_SPAN_RE.search(text)
    if match is None:
        return ExtractionAttempt(ExtractionStrategy.BRACE_SPAN, False, error="no brace span found")
    return _parse(ExtractionStrategy.BRACE_SPAN, match.group(0))


Strategy = Callable[[str], ExtractionAttempt]


def first_success(text: str, strategies: list[Strategy]) -> tuple[ExtractionAttempt | None, list[ExtractionAttempt]]:
    """Run strategies in order and stop at the first one that parses.

    Returns the winning attempt (or None) together with every attempt made.
    """
    attempts: list[ExtractionAttempt] = []
    for strategy in strategies:
        attempt = strategy(text)
        attempts.append(attempt)
        if attempt.succeeded:
            return attempt, attempts
    return None, attempts
