"""duratools exception hierarchy."""

from __future__ import annotations


class DuraToolsError(Exception):
    """Base error for duratools."""


class ConfigurationError(DuraToolsError):
    """Raised when configuration or inputs are invalid."""


class ListingFetchError(DuraToolsError):
    """Raised when a page of a container listing could not be fetched."""

    def __init__(self, container: str, cause: BaseException) -> None:
        super().__init__(f"Could not get contents of {container!r} due to error: {cause}")
        self.container = container
        self.cause = cause


class ExhaustedIterationError(DuraToolsError):
    """Raised when a listing iterator is advanced past its last key."""


class DuraStoreError(DuraToolsError):
    """Raised when a DuraStore REST call fails."""

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        status_code: int | None = None,
    ) -> None:
        prefix = operation
        if status_code is not None:
            prefix = f"{prefix} (status={status_code})"
        super().__init__(f"{prefix}: {message}")
        self.operation = operation
        self.message = message
        self.status_code = status_code


class ContentNotFoundError(DuraStoreError):
    """Raised when a space or content item does not exist."""
