"""Exceptions raised by the learndot client."""

from typing import Optional


class LearndotError(Exception):
    """Base exception for all learndot errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class CredentialError(LearndotError):
    """Raised when no API token can be obtained from any source."""


class LoginStrategyUnavailable(LearndotError):
    """Raised when a single token strategy cannot produce a token."""


class ConfigurationError(LearndotError):
    """Raised when the client is constructed with an unusable configuration."""


class TransportError(LearndotError):
    """Raised on network-level failures (DNS, refused connection, timeout)."""


class DeadlineExceeded(TransportError):
    """Raised when a paginated operation runs past its deadline."""

    def __init__(self, deadline: float, pages_fetched: int) -> None:
        super().__init__(
            f"Deadline of {deadline}s exceeded after fetching {pages_fetched} page(s)"
        )
        self.deadline = deadline
        self.pages_fetched = pages_fetched


class BackendError(LearndotError):
    """Raised when the backend answers with any status other than 200."""

    def __init__(self, status_code: int, message: str, url: Optional[str] = None) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.status_message = message
        self.url = url
