"""Custom exceptions for the ingestion pipeline and the HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class FetchError(Exception):
    """Base class for upstream retrieval failures."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class TransientNetworkError(FetchError):
    """Connection failure. Callers may retry; the fetcher never does."""


class FetchTimeout(TransientNetworkError):
    """The request did not complete within the configured timeout."""


class RedirectLoopError(FetchError):
    """Redirect budget exhausted before reaching a final response."""


class UpstreamStatusError(FetchError):
    """Final response carried a non-2xx status."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code


class ParseError(ValueError):
    """A single section, session or token could not be parsed."""


class PersistenceError(Exception):
    """A single record could not be written."""


class ConfigurationError(Exception):
    """Invalid or unsupported configuration."""


@dataclass
class AppError(Exception):
    """Base HTTP API error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)
