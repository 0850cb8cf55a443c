"""Gateway error taxonomy.

Every error that may reach a caller derives from :class:`GatewayError` and
knows its own HTTP status and JSON payload, so the transport layer can
render it with a single exception handler.
"""

from typing import Any

from fastapi import status


class GatewayError(Exception):
    """Base exception for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Server error"

    def __init__(self, message: str = "", latency_ms: float | None = None) -> None:
        super().__init__(message or self.error)
        self.message = message or self.error
        self.latency_ms = latency_ms

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.latency_ms is not None:
            payload["latency"] = self.latency_ms
        return payload


class BadRequestError(GatewayError):
    """Raised when the caller's request is missing a model or messages."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad request"

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class UpstreamUnavailableError(GatewayError):
    """Raised when the completion service is unreachable or returns non-2xx."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Server error"

    def __init__(
        self,
        message: str = "",
        latency_ms: float | None = None,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__(message, latency_ms=latency_ms)
        self.upstream_status = upstream_status


class UpstreamMalformedError(UpstreamUnavailableError):
    """Raised when the completion service answers 2xx without message content."""

    def __init__(self, message: str = "Invalid response from Ollama", latency_ms: float | None = None) -> None:
        super().__init__(message, latency_ms=latency_ms)


class ExtractionFailedError(GatewayError):
    """Raised when no JSON could be extracted and there is no schema to fall back on."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Failed to parse JSON from response"

    def __init__(
        self,
        original_text: str,
        parse_error: str = "",
        latency_ms: float | None = None,
    ) -> None:
        super().__init__(parse_error or "No valid JSON could be extracted from the response", latency_ms)
        self.original_text = original_text
        self.parse_error = self.message

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.error,
            "originalResponse": self.original_text,
            "parseError": self.parse_error,
        }
        if self.latency_ms is not None:
            payload["latency"] = self.latency_ms
        return payload
