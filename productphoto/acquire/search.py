"""Candidate discovery by scraping an image search results page.

The markup is third-party and unversioned, so extraction is layered and
best-effort:

    1. Thumbnails hosted on a trusted domain (``data:`` URIs are skipped)
    2. Any absolute ``<img>`` ``src`` / ``data-src``, only if (1) found nothing
    3. ``["<image url>",<int>,<int>]`` triples embedded in inline scripts

Results of the strategies that ran are merged in that order, deduplicated,
and truncated. Every strategy returns a plain list; "nothing found" is an
empty list, never an exception.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import requests
from bs4 import BeautifulSoup

from productphoto.config import SearchConfig
from productphoto.errors import DiscoveryError

logger = logging.getLogger(__name__)

SCRIPT_IMAGE_RE = re.compile(
    r'\["(https?://[^"]+\.(?:jpg|jpeg|png|webp|gif)[^"]*)",\d+,\d+\]'
)


# ---------------------------------------------------------------------------
# Extraction strategies
# ---------------------------------------------------------------------------


def extract_trusted_thumbnails(soup: BeautifulSoup, trusted_domains: list[str]) -> list[str]:
    """``<img src>`` values hosted on one of *trusted_domains*."""
    urls: list[str] = []
    for img in soup.find_all("img"):
        src = img.get("src")
        if not src:
            continue
        if src.startswith("data:image"):
            # Inline base64 thumbnails
            continue
        if any(domain in src for domain in trusted_domains):
            urls.append(src)
    return urls


def extract_absolute_images(soup: BeautifulSoup) -> list[str]:
    """Every absolute HTTP(S) ``src`` and lazy-load ``data-src``."""
    urls: list[str] = []
    for img in soup.find_all("img"):
        for attr in ("src", "data-src"):
            value = img.get(attr)
            if value and value.startswith("http"):
                urls.append(value)
    return urls


def extract_script_images(soup: BeautifulSoup) -> list[str]:
    """Image URLs from ``["url",h,w]`` literals inside ``<script>`` bodies."""
    urls: list[str] = []
    for script in soup.find_all("script"):
        content = script.string or script.get_text()
        if content:
            urls.extend(SCRIPT_IMAGE_RE.findall(content))
    return urls


def dedupe(urls: list[str]) -> list[str]:
    """Drop repeats, keeping first-occurrence order."""
    return list(dict.fromkeys(urls))


def parse_candidates(
    html: str, max_results: int, trusted_domains: list[str]
) -> list[str]:
    """Run the layered strategies over *html* and return up to *max_results* URLs."""
    soup = BeautifulSoup(html, "html.parser")
    urls = extract_trusted_thumbnails(soup, trusted_domains)
    if not urls:
        urls = extract_absolute_images(soup)
    urls.extend(extract_script_images(soup))
    return dedupe(urls)[:max_results]


# ---------------------------------------------------------------------------
# GoogleImageSearch
# ---------------------------------------------------------------------------


class GoogleImageSearch:
    """Candidate source backed by the Google Images results page.

    Satisfies the ``CandidateSource`` protocol.
    """

    def __init__(
        self,
        config: SearchConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or SearchConfig()
        self._session = session or requests.Session()

    def find(self, query: str, max_results: int | None = None) -> list[str]:
        """Return up to *max_results* candidate image URLs for *query*.

        Any request or parse error is logged and yields an empty list.
        """
        limit = self.config.max_results if max_results is None else max_results
        logger.info("Searching for: %s", query)
        try:
            html = self._fetch_results_page(query)
            return parse_candidates(html, limit, self.config.trusted_thumbnail_domains)
        except DiscoveryError as e:
            logger.error("Error searching for images: %s", e)
            return []
        except Exception as e:
            logger.error("Error parsing search results for %r: %s", query, e)
            return []

    def _fetch_results_page(self, query: str) -> str:
        params: dict[str, Any] = {"q": query, **self.config.search_params}
        try:
            response = self._session.get(
                self.config.search_url,
                params=params,
                headers={"User-Agent": self.config.user_agent},
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DiscoveryError(f"search request failed: {exc}") from exc
        return response.text
