"""Protocol for background-removal providers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BackgroundRemover(Protocol):
    """Protocol for background-removal providers.

    Implementations: RemoveBgClient.
    """

    def remove_background(self, image: bytes, filename: str, content_type: str) -> bytes:
        """Return the matted image (PNG bytes) for the encoded source *image*.

        Raises:
            MattingError: on any transport or API failure.
        """
        ...
