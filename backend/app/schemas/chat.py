"""Chat Pydantic schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """A single conversation turn; provider-specific extra keys are kept."""

    model_config = ConfigDict(extra="allow")

    role: Literal["system", "user", "assistant"]
    content: str | None = ""


class ResponseFormat(BaseModel):
    """Requested output format; ``json_schema`` enables the structured path."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    json_schema: dict[str, Any] | None = Field(default=None, alias="schema")


class Transform(BaseModel):
    """Post-processing step applied to the result; only ``filter`` is known."""

    model_config = ConfigDict(extra="allow")

    type: str
    fields: list[str] | None = None


class ChatRequest(BaseModel):
    """Schema for a structured chat request.

    ``model`` and ``messages`` are optional here so the pipeline can reject
    them with a 400 instead of a generic validation error.
    """

    model: str | None = None
    messages: list[Message] | None = None
    response_format: ResponseFormat | None = None
    transforms: list[Transform] | None = None
    options: dict[str, Any] | None = None
    service: str | None = None


class PipelineResult(BaseModel):
    """Schema for a structured chat response."""

    model: str
    result: Any
    timestamp: datetime
    service: str
    warning: str | None = Field(default=None, description="Set when the result is a synthesized fallback")
    latency: int = Field(..., description="End-to-end latency in milliseconds")


class PassthroughChatRequest(BaseModel):
    """Schema for the unstructured chat passthrough."""

    model: str | None = None
    messages: list[dict[str, Any]] | None = None
    stream: bool = False
    options: dict[str, Any] | None = None
