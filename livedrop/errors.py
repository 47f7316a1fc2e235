"""Error taxonomy shared by the client, poller and order flow."""

from __future__ import annotations


class StorefrontError(Exception):
    """Base class for every error surfaced to the storefront user."""

    code = "STOREFRONT"

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ValidationError(StorefrontError):
    """A prerequisite is missing or input is malformed; nothing was sent."""

    code = "VALIDATION"


class NetworkError(StorefrontError):
    """The request never produced an HTTP response."""

    code = "NETWORK"


class ServerError(StorefrontError):
    """The backend answered with a non-2xx status or an unreadable body."""

    code = "SERVER"

    def __init__(
        self, message: str, *, status_code: int | None = None, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code


class NotEligible(StorefrontError):
    """A purchase was attempted while the stream is not active."""

    code = "NOT_ELIGIBLE"

    def __init__(self, message: str = "Stream not active or expired") -> None:
        super().__init__(message, hint="Wait for a live stream before buying")


class SubmissionFailed(StorefrontError):
    """The order endpoint rejected the purchase or could not be reached."""

    code = "SUBMISSION_FAILED"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, hint="Review the order and submit again")
        self.status_code = status_code


__all__ = [
    "StorefrontError",
    "ValidationError",
    "NetworkError",
    "ServerError",
    "NotEligible",
    "SubmissionFailed",
]
