"""Pydantic v2 schemas for request/response validation."""

from app.schemas.chat import (
    ChatRequest,
    Message,
    PassthroughChatRequest,
    PipelineResult,
    ResponseFormat,
    Transform,
)

__all__ = [
    "ChatRequest",
    "Message",
    "PassthroughChatRequest",
    "PipelineResult",
    "ResponseFormat",
    "Transform",
]
