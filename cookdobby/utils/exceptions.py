"""Custom exception classes.

Every failure a ``generate`` call can produce derives from
``CookDobbyException`` and carries the fields of the error body returned to
callers: ``error`` plus optional ``details``, ``raw`` and ``parsed``.
"""

from typing import Any, Dict, Optional


class CookDobbyException(Exception):
    """Base exception for Cook Dobby application."""

    error = "Internal server error"

    def __init__(
        self,
        error: Optional[str] = None,
        *,
        details: Optional[str] = None,
        raw: Optional[str] = None,
        parsed: Any = None,
    ) -> None:
        self.error = error or self.error
        self.details = details
        self.raw = raw
        self.parsed = parsed
        super().__init__(self.error if details is None else f"{self.error}: {details}")

    def to_dict(self) -> Dict[str, Any]:
        """Render the failure body, omitting empty diagnostics."""
        body: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        if self.raw is not None:
            body["raw"] = self.raw
        if self.parsed is not None:
            body["parsed"] = self.parsed
        return body


class BadRequest(CookDobbyException):
    """Raised when the caller's input is missing or malformed."""

    error = "Missing prompt"


class ConfigurationError(CookDobbyException):
    """Raised when required configuration (the provider credential) is absent."""

    error = "Missing FIREWORKS_API_KEY"


class ProviderError(CookDobbyException):
    """Raised when the provider answers with a non-retryable error status."""

    error = "Fireworks error"

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        super().__init__(details=body)


class TransportExhausted(CookDobbyException):
    """Raised when every attempt hit 429/5xx or timed out."""

    error = "Fireworks retry failed"

    def __init__(self, last_body: Optional[str] = None, attempts: int = 0) -> None:
        self.attempts = attempts
        # An empty body counts as none captured.
        super().__init__(details=last_body if last_body else "Fireworks retry failed")


class NetworkFailure(CookDobbyException):
    """Raised on connection-level errors talking to the provider."""

    error = "Network failure talking to Fireworks"


class MalformedProviderResponse(CookDobbyException):
    """Raised when the provider envelope has no completion text."""

    error = "Malformed provider response"


class InvalidModelJSON(CookDobbyException):
    """Raised when the completion text holds no parseable JSON object."""

    error = "Invalid JSON from model"


class InvalidShape(CookDobbyException):
    """Raised when a payload tagged with a known mode lacks required fields."""

    def __init__(self, mode: str, parsed: Any) -> None:
        self.mode = mode
        super().__init__(f"{mode.capitalize()} shape invalid", parsed=parsed)


class UnknownMode(CookDobbyException):
    """Raised when the payload's mode is neither landing nor recipe."""

    error = "Unknown mode"

    def __init__(self, parsed: Any) -> None:
        super().__init__(parsed=parsed)
