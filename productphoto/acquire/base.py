"""Capability protocols for the acquisition pipeline.

The controller depends only on these protocols: one each for the search
page, the image host, the vision model and the validation step.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from productphoto.types import Artifact, ClassificationVerdict


@runtime_checkable
class CandidateSource(Protocol):
    """Protocol for candidate image discovery.

    Implementations: GoogleImageSearch.
    """

    def find(self, query: str, max_results: int = 3) -> list[str]:
        """Return up to *max_results* unique image URLs for *query*.

        Never raises for expected failures; an empty list means no candidates.
        """
        ...


@runtime_checkable
class ImageFetcher(Protocol):
    """Protocol for downloading a candidate to a temporary artifact."""

    def fetch(self, url: str, dest: Path) -> Artifact | None:
        """Download *url* to *dest* plus an inferred extension.

        Returns None when the download failed; nothing is left on disk then.
        """
        ...


@runtime_checkable
class ImageClassifier(Protocol):
    """Protocol for the external vision classifier.

    Implementations: GeminiClassifier.
    """

    def classify(self, image: bytes, label: str) -> ClassificationVerdict:
        """Judge whether *image* is an acceptable product photo of *label*.

        May raise ``ValidationError`` (or any transport error); callers
        treat every failure as a rejection.
        """
        ...


@runtime_checkable
class ArtifactValidator(Protocol):
    """Protocol for the fail-closed validation step used by the controller."""

    def validate(self, artifact: Artifact, label: str) -> bool: ...
