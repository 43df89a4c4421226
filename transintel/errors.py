"""
Error taxonomy for the translation backend.

Every error carries a short user-facing message, optional details and the
HTTP status the web layer answers with.
"""

import re
from typing import Optional

from google.genai import errors as genai_errors

from transintel.config import RetryPolicy


class TransIntelError(Exception):
    """Base class for all errors raised by the backend."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TransIntelError):
    """Missing or invalid input."""

    status_code = 400


class ConfigError(TransIntelError):
    """Server-side configuration is incomplete (e.g. no API key)."""

    status_code = 500


class ExtractionError(TransIntelError):
    """
    Remote file processing or upload failed.

    Attributes:
        status: Upstream status behind the failure, when one is known
    """

    def __init__(self, message: str, details: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message, details)
        self.status = status


class UpstreamError(TransIntelError):
    """
    Failure reported by (or while talking to) the Gemini API.

    Attributes:
        status: HTTP-like status code of the upstream failure
    """

    def __init__(self, status: int, message: str):
        super().__init__(message, details=message)
        self.status = status

    @property
    def retryable(self) -> bool:
        return self.status in RetryPolicy.RETRYABLE_STATUSES

    @classmethod
    def from_exception(cls, exc: Exception) -> "UpstreamError":
        """
        Classify an arbitrary exception raised by the upstream client.

        API errors keep their own code. Anything else is inspected by message:
        rate limits map to 429, timeouts to 504 and the rest to 500.
        """
        if isinstance(exc, UpstreamError):
            return exc

        message = str(exc) or type(exc).__name__
        if isinstance(exc, genai_errors.APIError) and exc.code:
            status = int(exc.code)
        elif re.search(r"\b429\b", message):
            status = 429
        elif isinstance(exc, TimeoutError) or "timeout" in message.lower() \
                or "timed out" in message.lower():
            status = 504
        else:
            status = 500

        error_cls = UpstreamTransientError if status in RetryPolicy.RETRYABLE_STATUSES \
            else UpstreamFatalError
        return error_cls(status, message)


class UpstreamTransientError(UpstreamError):
    """Rate limit, server error, unavailable or timeout. Retried."""


class UpstreamFatalError(UpstreamError):
    """Invalid credential, unsupported content and other non-retryable failures."""
