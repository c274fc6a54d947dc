"""Vision-model validation of downloaded candidates.

``GeminiClassifier`` asks a Gemini multimodal model whether an image is an
acceptable front-facing product shot. ``Validator`` wraps any classifier and
is fail-closed: a missing file, a transport error, a quota error or a
malformed response is a rejection, never a retry.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from productphoto.acquire.base import ImageClassifier
from productphoto.config import DEFAULT_PROMPT_TEMPLATE, ValidatorConfig
from productphoto.errors import ConfigurationError, ValidationError
from productphoto.types import Artifact, ClassificationVerdict
from productphoto.utils.image import sniff_mime_type

logger = logging.getLogger(__name__)


def interpret_verdict(text: str | None) -> ClassificationVerdict:
    """Map free classifier text to a verdict.

    Accepted iff the trimmed, upper-cased text contains ``YES``.

    Raises:
        ValidationError: if *text* is None or blank.
    """
    if text is None or not text.strip():
        raise ValidationError("empty classifier response")
    normalized = text.strip().upper()
    return ClassificationVerdict(accepted="YES" in normalized, raw_text=text)


def check_prompt_template(template: str) -> None:
    """Ensure *template* formats with ``{label}`` as its only placeholder.

    Raises:
        ConfigurationError: on an unknown or positional placeholder.
    """
    try:
        template.format(label="")
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigurationError(
            f"prompt_template may only use the {{label}} placeholder: {exc!r}"
        ) from exc


def build_prompt(template: str, label: str) -> str:
    """Format the rubric prompt; an unknown placeholder falls back to the default rubric."""
    try:
        return template.format(label=label)
    except (KeyError, IndexError, ValueError) as e:
        logger.warning("Invalid prompt template (%r); using the default rubric", e)
        return DEFAULT_PROMPT_TEMPLATE.format(label=label)


class GeminiClassifier:
    """Front-facing product photo check via Google Gemini (``google-genai`` SDK).

    Authentication: explicit ``api_key`` parameter, else the environment
    variable named by ``api_key_env_var`` (default GEMINI_API_KEY).

    The image is sent as inline data; the SDK base64-encodes it on the wire.

    Satisfies the ``ImageClassifier`` protocol.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        api_key_env_var: str = "GEMINI_API_KEY",
    ) -> None:
        check_prompt_template(prompt_template)
        self._model = model
        self._prompt_template = prompt_template
        self._client: Any = None
        self._api_key = api_key or os.environ.get(api_key_env_var)

        if not self._api_key:
            raise ValueError(
                f"No credentials provided. Set the {api_key_env_var} env var "
                f"or pass api_key explicitly."
            )

    @classmethod
    def from_config(cls, config: ValidatorConfig, api_key: str | None = None) -> GeminiClassifier:
        return cls(
            api_key=api_key,
            model=config.model,
            prompt_template=config.prompt_template,
            api_key_env_var=config.api_key_env_var,
        )

    def classify(self, image: bytes, label: str) -> ClassificationVerdict:
        """Submit *image* with the rubric for *label* and interpret the answer.

        Raises:
            ValidationError: on any API failure or an empty response.
        """
        genai = self._get_genai()
        client = self._get_client(genai)
        prompt = build_prompt(self._prompt_template, label)

        try:
            response = client.models.generate_content(
                model=self._model,
                contents=[
                    prompt,
                    genai.types.Part.from_bytes(data=image, mime_type=sniff_mime_type(image)),
                ],
            )
            text = response.text
        except Exception as exc:
            raise ValidationError(f"[gemini] {exc}") from exc

        return interpret_verdict(text)

    # ------------------------------------------------------------------

    def _get_genai(self) -> Any:
        try:
            import google.genai as genai  # type: ignore[import-untyped]
            return genai
        except ImportError as exc:
            raise ImportError(
                "google-genai is required for the Gemini classifier. "
                "Install it with: pip install 'google-genai>=1.0'"
            ) from exc

    def _get_client(self, genai: Any) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client


class Validator:
    """Fail-closed validation of an artifact. Satisfies ``ArtifactValidator``."""

    def __init__(self, classifier: ImageClassifier, logger: logging.Logger | None = None) -> None:
        self.classifier = classifier
        self._logger = logger or logging.getLogger(__name__)

    def validate(self, artifact: Artifact, label: str) -> bool:
        path = artifact.local_path
        if not path.is_file():
            self._logger.error("Image file does not exist: %s", path)
            return False

        try:
            image = path.read_bytes()
            verdict = self.classifier.classify(image, label)
        except Exception as e:
            self._logger.error("Error validating image with vision model: %s", e)
            return False

        self._logger.info(
            "Vision validation for %s: %s", label, "PASSED" if verdict.accepted else "FAILED"
        )
        return verdict.accepted
