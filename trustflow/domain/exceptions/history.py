"""History store and scoring input exceptions."""

from .base import DomainException


class BackingStoreUnavailableException(DomainException):
    """
    Raised when the history store fails or does not answer in time.

    Mutations that hit this error were not applied and may be retried.
    """

    retriable = True

    def __init__(self, operation: str, reason: str | None = None):
        message = f"History store unavailable during {operation}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="BACKING_STORE_UNAVAILABLE",
        )
        self.operation = operation


class InvalidInputException(DomainException):
    """Raised when an amount or identifier is rejected before any state change."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
        )
