"""Shallow schema conformance check for extracted JSON documents.

Only two things are checked: every ``required`` key is present, and each
present key whose property declares a primitive ``type`` holds a value of
that type. Nested shapes, ``enum``, ``format`` and ranges are ignored, and
``integer`` is not distinguished from an unchecked type.
"""

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_TYPE_CHECKS = {
    "number": _is_number,
    "string": lambda value: isinstance(value, str),
    "boolean": lambda value: isinstance(value, bool),
    "array": lambda value: isinstance(value, list),
    "object": lambda value: isinstance(value, dict),
}


def validate(document: Any, schema: Mapping[str, Any]) -> bool:
    """Return True when ``document`` satisfies the schema's shallow rules.

    Never raises; an unexpected fault counts as a validation failure.
    """
    try:
        return _validate(document, schema)
    except Exception:
        logger.exception("Schema validation error")
        return False


def _validate(document: Any, schema: Mapping[str, Any]) -> bool:
    if not isinstance(document, dict):
        logger.warning("Expected a JSON object, got %s", type(document).__name__)
        return False

    for prop in schema.get("required") or []:
        if prop not in document:
            logger.warning("Missing required property: %s", prop)
            return False

    properties = schema.get("properties") or {}
    for prop, value in document.items():
        prop_schema = properties.get(prop)
        if not isinstance(prop_schema, Mapping):
            continue
        expected = prop_schema.get("type")
        check = _TYPE_CHECKS.get(expected) if isinstance(expected, str) else None
        if check is not None and not check(value):
            logger.warning(
                "Invalid type for %s: expected %s, got %s",
                prop, expected, type(value).__name__,
            )
            return False

    return True
