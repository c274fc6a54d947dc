"""Error types for the acquisition and matting pipelines."""

from __future__ import annotations


class ProductPhotoError(Exception):
    """Base exception for productphoto."""


class ConfigurationError(ProductPhotoError):
    """Raised when a mandatory setting (usually an API key) is missing."""


class DiscoveryError(ProductPhotoError):
    """Raised when the search request or its parsing fails."""


class TransferError(ProductPhotoError):
    """Raised when an image download or its write to disk fails."""


class ValidationError(ProductPhotoError):
    """Raised when the vision classifier call fails or answers malformed."""


class CleanupError(ProductPhotoError):
    """Raised when a temporary artifact cannot be deleted."""


class MattingError(ProductPhotoError):
    """Raised when a background-removal API call fails.

    ``retryable`` marks rate-limit, 5xx and transport failures. Nothing is
    retried within a run; the stage only logs that a later run may succeed.
    """

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
        retryable: bool = False,
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        self.detail = detail
        self.retryable = retryable
        super().__init__(f"[{provider}] {message}")
