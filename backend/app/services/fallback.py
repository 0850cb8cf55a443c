"""Deterministic, model-free synthesis of a minimally valid document."""

from collections.abc import Mapping
from typing import Any

FALLBACK_ERROR = "Could not generate valid JSON from the response"

# Values for declared types other than "string", which needs the property name.
_MINIMAL_VALUES: dict[str, Any] = {
    "number": 0,
    "integer": 0,
    "boolean": False,
}


def synthesize(schema: Mapping[str, Any] | None) -> dict[str, Any]:
    """Build the smallest document that satisfies the schema's required keys.

    Only required properties that have a sub-schema are filled in. Pure and
    total: never raises, never touches the network.
    """
    if not isinstance(schema, Mapping) or not isinstance(schema.get("properties"), Mapping):
        return {"error": FALLBACK_ERROR}

    properties = schema["properties"]
    required = schema.get("required")
    if not isinstance(required, list):
        required = []

    result: dict[str, Any] = {}
    for name in required:
        prop_schema = properties.get(name) if isinstance(name, str) else None
        if not isinstance(prop_schema, Mapping):
            continue
        result[name] = _minimal_value(name, prop_schema)
    return result


def _minimal_value(name: str, prop_schema: Mapping[str, Any]) -> Any:
    prop_type = prop_schema.get("type")
    if prop_type == "string":
        return prop_schema.get("description") or f"{name} autogenerated"
    if prop_type == "array":
        return []
    if prop_type == "object":
        return {}
    if isinstance(prop_type, str):
        return _MINIMAL_VALUES.get(prop_type)
    return None
