"""Image file helpers: extension whitelist, extension inference, MIME sniffing."""

from __future__ import annotations

import io
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from PIL import Image, UnidentifiedImageError


# ---------------------------------------------------------------------------
# Extensions
# ---------------------------------------------------------------------------

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif")
DEFAULT_EXTENSION = ".jpg"


def infer_extension(url: str) -> str:
    """Derive a whitelisted file extension from a URL path.

    Returns the lower-cased path suffix when it is in ``IMAGE_EXTENSIONS``,
    otherwise ``.jpg``. URLs that cannot be parsed as absolute URLs also fall
    back to ``.jpg``.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return DEFAULT_EXTENSION
    if not parsed.scheme or not parsed.netloc:
        return DEFAULT_EXTENSION
    ext = PurePosixPath(parsed.path).suffix.lower()
    return ext if ext in IMAGE_EXTENSIONS else DEFAULT_EXTENSION


def with_extension(dest: Path, ext: str) -> Path:
    """Append *ext* to *dest* unless it already ends with it (case-insensitive)."""
    if str(dest).lower().endswith(ext):
        return dest
    return dest.with_name(dest.name + ext)


def find_existing(base: Path) -> Path | None:
    """Return ``base + ext`` for the first whitelisted extension that exists.

    Only presence is checked; a zero-byte or corrupt file still counts.
    """
    for ext in IMAGE_EXTENSIONS:
        candidate = base.with_name(base.name + ext)
        if candidate.exists():
            return candidate
    return None


# ---------------------------------------------------------------------------
# MIME types
# ---------------------------------------------------------------------------

_PIL_FORMAT_MIME = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


def sniff_mime_type(data: bytes, default: str = "image/jpeg") -> str:
    """Detect the MIME type of encoded image bytes (header-only decode)."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return _PIL_FORMAT_MIME.get(img.format or "", default)
    except (UnidentifiedImageError, OSError):
        return default


def content_type_for(path: Path) -> str:
    """MIME type hint derived from a file name's extension."""
    ext = path.suffix.lower().lstrip(".")
    if ext in ("jpg", "jpeg"):
        return "image/jpeg"
    return f"image/{ext}" if ext else "application/octet-stream"
