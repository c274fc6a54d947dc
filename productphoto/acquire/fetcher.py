"""Candidate image downloads."""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from productphoto.config import FetchConfig
from productphoto.errors import TransferError
from productphoto.types import Artifact
from productphoto.utils.image import infer_extension, with_extension

logger = logging.getLogger(__name__)


class HttpImageFetcher:
    """Streamed image downloader with browser-like headers.

    Satisfies the ``ImageFetcher`` protocol. A failed download returns None
    and leaves no partial file behind.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or FetchConfig()
        self._session = session or requests.Session()
        self._session.max_redirects = self.config.max_redirects

    def fetch(self, url: str, dest: Path) -> Artifact | None:
        """Download *url* to *dest* plus the extension inferred from the URL.

        Args:
            url: Candidate image URL.
            dest: Destination path without extension.

        Returns:
            The downloaded ``Artifact``, or None on any network, timeout,
            HTTP status or write error.
        """
        ext = infer_extension(url)
        path = with_extension(dest, ext)
        try:
            self._download(url, path)
        except TransferError as e:
            logger.error("Error downloading image: %s", e)
            _discard(path)
            return None

        logger.info("Downloaded image to: %s", path)
        return Artifact(local_path=path, extension=ext, source_url=url)

    def _download(self, url: str, path: Path) -> None:
        try:
            with self._session.get(
                url,
                headers=self.config.headers(),
                stream=True,
                timeout=self.config.timeout_seconds,
                allow_redirects=True,
            ) as response:
                response.raise_for_status()
                with open(path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as exc:
            raise TransferError(f"{url}: {exc}") from exc
        except OSError as exc:
            raise TransferError(f"writing {path}: {exc}") from exc


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error("Error cleaning up partial download %s: %s", path, e)
