"""remove.bg background-removal provider."""

from __future__ import annotations

import json
import logging

import requests

from productphoto.config import MattingConfig
from productphoto.errors import MattingError

logger = logging.getLogger(__name__)


def parse_error_body(body: bytes) -> str:
    """Extract a readable error detail from a failed response body.

    remove.bg answers errors with ``{"errors": [...]}``; the ``errors`` field
    is returned as JSON text. Anything else is returned as raw text.
    """
    text = body.decode("utf-8", errors="replace")
    try:
        data = json.loads(text)
    except ValueError:
        return text
    if isinstance(data, dict) and "errors" in data:
        return json.dumps(data["errors"])
    return text


class RemoveBgClient:
    """Background removal via the remove.bg HTTP API.

    Sends the image as ``multipart/form-data`` field ``image_file`` with the
    ``X-Api-Key`` header; a successful response body is the PNG result.

    Satisfies the ``BackgroundRemover`` protocol.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = "https://api.remove.bg/v1.0/removebg",
        timeout: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("remove.bg API key is required")
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: MattingConfig, api_key: str) -> RemoveBgClient:
        return cls(api_key=api_key, endpoint=config.endpoint, timeout=config.timeout_seconds)

    def remove_background(self, image: bytes, filename: str, content_type: str) -> bytes:
        try:
            response = self._session.post(
                self._endpoint,
                files={"image_file": (filename, image, content_type)},
                headers={"X-Api-Key": self._api_key},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise MattingError("remove.bg", str(exc), retryable=_is_retryable(exc)) from exc

        if not response.ok:
            detail = parse_error_body(response.content or b"")
            logger.error("API Error (%d): %s", response.status_code, response.reason)
            logger.error("Error details: %s", detail)
            raise MattingError(
                "remove.bg",
                f"HTTP {response.status_code}: {detail}",
                status_code=response.status_code,
                detail=detail,
                retryable=response.status_code in (429, 500, 502, 503, 504),
            )
        return response.content


def _is_retryable(exc: Exception) -> bool:
    return isinstance(exc, (requests.Timeout, requests.ConnectionError))
