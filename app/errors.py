"""Request-level error taxonomy.

Each error carries the HTTP status the API answers with. Degraded completion
responses and per-title provider failures are not errors; they are absorbed
where they happen.
"""
from __future__ import annotations

from typing import Any


class StreamGenieError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRequestError(StreamGenieError):
    status_code = 400


class ConfigurationError(StreamGenieError):
    """A required credential is missing. Never retried or degraded."""

    status_code = 500


class UpstreamError(StreamGenieError):
    """An external API answered with a non-success status or not at all."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        upstream_status: int | None = None,
        details: Any = None,
    ):
        super().__init__(message, details=details)
        self.upstream_status = upstream_status

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.upstream_status is not None:
            body["upstream_status"] = self.upstream_status
        return body
