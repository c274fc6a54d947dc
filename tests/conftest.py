"""Shared test fixtures for productphoto."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest
from PIL import Image

from productphoto.context import RunContext
from productphoto.errors import MattingError, ValidationError
from productphoto.types import Artifact, CatalogItem, ClassificationVerdict
from productphoto.utils.image import infer_extension, with_extension


def make_image_bytes(fmt: str = "JPEG", size: tuple[int, int] = (32, 32)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, (40, 80, 120)).save(buf, format=fmt)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Fake collaborators (no network)
# ---------------------------------------------------------------------------


class FakeSource:
    """Returns a fixed URL list and records every query."""

    def __init__(self, urls: list[str] | None = None) -> None:
        self.urls = urls or []
        self.queries: list[tuple[str, int]] = []

    def find(self, query: str, max_results: int = 3) -> list[str]:
        self.queries.append((query, max_results))
        return self.urls[:max_results]


class FakeFetcher:
    """Writes image bytes for URLs not listed in ``failing``."""

    def __init__(self, failing: set[str] | None = None, raising: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.raising = raising or set()
        self.calls: list[tuple[str, Path]] = []

    def fetch(self, url: str, dest: Path) -> Artifact | None:
        self.calls.append((url, dest))
        if url in self.failing:
            return None
        ext = infer_extension(url)
        path = with_extension(dest, ext)
        path.write_bytes(make_image_bytes())
        if url in self.raising:
            raise RuntimeError(f"stream broke for {url}")
        return Artifact(local_path=path, extension=ext, source_url=url)


class FakeValidator:
    """Accepts artifacts whose source URL is in ``accepted``."""

    def __init__(self, accepted: set[str] | None = None) -> None:
        self.accepted = accepted or set()
        self.calls: list[tuple[Artifact, str]] = []

    def validate(self, artifact: Artifact, label: str) -> bool:
        self.calls.append((artifact, label))
        return artifact.source_url in self.accepted


class FakeClassifier:
    """Returns a canned answer, or raises when ``error`` is set."""

    def __init__(self, answer: str = "YES", error: Exception | None = None) -> None:
        self.answer = answer
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    def classify(self, image: bytes, label: str) -> ClassificationVerdict:
        self.calls.append((image, label))
        if self.error is not None:
            raise self.error
        return ClassificationVerdict(accepted="YES" in self.answer.upper(), raw_text=self.answer)


class FakeRemover:
    """Returns a small PNG; fails for file names listed in ``failing``."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[tuple[str, str]] = []

    def remove_background(self, image: bytes, filename: str, content_type: str) -> bytes:
        self.calls.append((filename, content_type))
        if filename in self.failing:
            raise MattingError("fake", "simulated failure", status_code=402, detail="credits")
        return make_image_bytes("PNG")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_productphoto_logging():
    """CLI tests attach handlers and disable propagation; undo that."""
    yield
    root = logging.getLogger("productphoto")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)


@pytest.fixture
def fenix_item() -> CatalogItem:
    return CatalogItem(series="Fenix", product="Fenix", model="7")


@pytest.fixture
def pauses() -> list[float]:
    return []


@pytest.fixture
def context(pauses) -> RunContext:
    """Run context whose sleep records the requested delays instead of sleeping."""
    return RunContext(logger=logging.getLogger("productphoto.test"), sleep=pauses.append)


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")
