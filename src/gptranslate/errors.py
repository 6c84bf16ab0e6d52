from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gptranslate.models import TranslationResponse


class DuplicateRequest(RuntimeError):
    """Raised when an identical request is already in flight."""

    def __init__(self, message: str = "Duplicate request detected") -> None:
        super().__init__(message)


class ProviderError(RuntimeError):
    """Base class for failures surfaced by a translation call."""


class ConfigurationError(ProviderError):
    """Raised when configuration is missing or cannot be resolved."""


class TransportError(ProviderError):
    """Raised when the backend could not be reached or answered with an error status."""

    def __init__(self, provider: str, status_code: int | None, body: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"{provider} request failed: {body}"
        else:
            message = f"{provider} request failed ({status_code}): {body}"
        super().__init__(message)


class ResponseShapeError(ProviderError):
    """Raised when a backend answers successfully but with an unexpected structure."""


class UnsupportedCapability(ProviderError):
    """Raised when a provider cannot perform the requested operation."""


class HistoryWriteError(RuntimeError):
    """Raised when a finished translation could not be recorded in the history file.

    ``response`` carries the translation so callers can still show it.
    """

    def __init__(self, response: TranslationResponse, cause: Exception) -> None:
        self.response = response
        self.cause = cause
        super().__init__(f"Could not record translation history: {cause}")
