"""System-prompt augmentation steering the model toward bare JSON output."""

import json
from collections.abc import Mapping, Sequence
from typing import Any

JSON_INSTRUCTION_TEMPLATE = """You must respond with valid JSON that strictly follows this schema:
{schema}

Do not include explanations, markdown formatting or any text outside the JSON structure.
Your entire response must be parseable as JSON. Do not wrap the JSON in code blocks or markdown.
Respond only with a valid JSON object that matches the schema above."""


def build_json_instruction(schema: Mapping[str, Any]) -> str:
    """Render the JSON-only instruction with the schema pretty-printed."""
    schema_str = json.dumps(schema, indent=2, ensure_ascii=False)
    return JSON_INSTRUCTION_TEMPLATE.format(schema=schema_str)


def augment(
    messages: Sequence[Mapping[str, Any]],
    schema: Mapping[str, Any],
) -> list[dict[str, Any]]:
    """Return a new message list carrying the JSON instruction.

    The instruction is appended to every existing system message; when
    there is none, a new system message is prepended. The input sequence
    and its messages are left untouched.
    """
    instruction = build_json_instruction(schema)

    if any(msg.get("role") == "system" for msg in messages):
        return [
            {**msg, "content": f"{msg.get('content') or ''}\n\n{instruction}"}
            if msg.get("role") == "system"
            else dict(msg)
            for msg in messages
        ]

    return [{"role": "system", "content": instruction}, *(dict(msg) for msg in messages)]
