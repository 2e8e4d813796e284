"""
/**
 * @file unfilter/services/errors.py
 * @description 翻译链路的错误类型（每种错误对应一个 HTTP 状态码）。
 */
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base for every failure the translate endpoint turns into a JSON response."""

    status_code = 500
    error = "Server error"

    def __init__(self, error: Optional[str] = None, detail: Optional[str] = None):
        self.error = error or self.error
        self.detail = detail
        super().__init__(self.error if detail is None else f"{self.error}: {detail}")

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


class ConfigurationError(RelayError):
    status_code = 500
    error = "Missing configuration"


class ValidationError(RelayError):
    status_code = 400
    error = "Missing phrase"


class AdmissionRejected(RelayError):
    status_code = 429
    error = "Too many requests. Please wait a minute and try again."


class UpstreamError(RelayError):
    """The completion provider answered with a non-2xx status or could not be reached."""

    status_code = 502
    error = "OpenAI error"

    def __init__(self, status: Optional[int] = None, body: str = "", error: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(error=error, detail=body)


class EmptyCompletionError(RelayError):
    status_code = 502
    error = "OpenAI returned no translation"


class StoreWriteError(RelayError):
    """Record store failure. Never reaches the caller as an error response."""

    status_code = 502
    error = "Airtable error"

    def __init__(self, status: Optional[int] = None, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(detail=body)


class InternalError(RelayError):
    status_code = 500
    error = "Server error"
