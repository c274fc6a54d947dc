"""Configuration models for productphoto.

Pydantic v2 models with sensible defaults; works without a config file.
API keys are never stored in the config, only the names of the environment
variables that hold them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from productphoto.errors import ConfigurationError

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

DEFAULT_PROMPT_TEMPLATE = """
Please analyze this image and tell me if it contains ONLY a front-facing watch (specifically a {label}) with nothing else in the frame.

Requirements:
1. The image must show ONLY the watch face from the front
2. The watch should not be shown from the back
3. There should not be any other objects, people, or text in the image
4. The watch should be the clear and central subject
5. Photo should be high quality and larger than 300x300 pixels
6. Ensure that the photo is not grainy, blurry or low resolution at all. Should be 4k quality

Answer with ONLY 'YES' if ALL requirements are met, or 'NO' if ANY requirement is not met.
"""


class PathsConfig(BaseModel):
    """Filesystem layout.

    Relative paths are resolved against ``project_root``; the image
    directories live inside ``workspace``.
    """

    project_root: Path = Field(Path("."), description="Root holding the primary .env and logs")
    workspace: Path = Field(
        Path("product_photo_downloader"), description="Directory holding a fallback .env and images"
    )
    images_dir: Path = Field(Path("garmin_watch_images"), description="Accepted images")
    matte_dir: Path = Field(Path("garmin_watch_images_nobg"), description="Background-removed images")
    log_dir: Path = Field(Path("logs"), description="Log file directory")

    def _under(self, base: Path, path: Path) -> Path:
        return path if path.is_absolute() else base / path

    @property
    def root(self) -> Path:
        return self.project_root.resolve()

    @property
    def workspace_path(self) -> Path:
        return self._under(self.root, self.workspace)

    @property
    def images_path(self) -> Path:
        return self._under(self.workspace_path, self.images_dir)

    @property
    def matte_path(self) -> Path:
        return self._under(self.workspace_path, self.matte_dir)

    @property
    def log_path(self) -> Path:
        return self._under(self.root, self.log_dir)

    def env_candidates(self) -> list[Path]:
        """``.env`` files in lookup order: project root first, then workspace."""
        return [self.root / ".env", self.workspace_path / ".env"]


class SearchConfig(BaseModel):
    """Configuration for candidate discovery on the image search page."""

    search_url: str = Field("https://www.google.com/search", description="Search endpoint")
    search_params: dict[str, str] = Field(
        default_factory=lambda: {"tbm": "isch"}, description="Extra query params (image vertical)"
    )
    user_agent: str = Field(BROWSER_USER_AGENT, description="Spoofed browser user agent")
    trusted_thumbnail_domains: list[str] = Field(
        default_factory=lambda: ["googleusercontent.com"],
        description="Hosts whose thumbnails are preferred over arbitrary <img> sources",
    )
    max_results: int = Field(3, description="Candidate URLs returned per query")
    timeout_seconds: float = Field(15.0, description="Search request timeout")


class FetchConfig(BaseModel):
    """Configuration for candidate image downloads."""

    user_agent: str = Field(BROWSER_USER_AGENT, description="Spoofed browser user agent")
    referer: str = Field("https://www.google.com/", description="Referer of the search surface")
    accept: str = Field("image/avif,image/webp,image/apng,image/*,*/*;q=0.8")
    accept_language: str = Field("en-US,en;q=0.9")
    timeout_seconds: float = Field(10.0, description="Per-download timeout")
    max_redirects: int = Field(5, description="Redirects followed before giving up")
    chunk_size: int = Field(8192, description="Streaming chunk size in bytes")

    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Referer": self.referer,
            "Accept": self.accept,
            "Accept-Language": self.accept_language,
            "Sec-Fetch-Dest": "image",
            "Sec-Fetch-Mode": "no-cors",
            "Sec-Fetch-Site": "cross-site",
        }


class ValidatorConfig(BaseModel):
    """Configuration for the Gemini vision classifier."""

    model: str = Field("gemini-2.5-flash", description="Gemini model identifier")
    api_key_env_var: str = Field("GEMINI_API_KEY", description="Env var holding the API key")
    placeholder_keys: list[str] = Field(
        default_factory=lambda: ["YOUR_GEMINI_API_KEY"],
        description="Values treated as an unset key",
    )
    prompt_template: str = Field(
        DEFAULT_PROMPT_TEMPLATE,
        description="Rubric sent with every image. Available placeholder: {label}.",
    )


class AcquisitionConfig(BaseModel):
    """Configuration for the per-item acquisition loop."""

    brand: str = Field("Garmin", description="Brand prefixed to every product label")
    query_suffix: str = Field(
        "watch product photo official front facing high resolution",
        description="Appended to the product label to form the search query",
    )
    max_candidates: int = Field(3, description="Candidates tried per item")
    candidate_delay_seconds: float = Field(2.0, description="Pause between candidate attempts")
    item_delay_seconds: float = Field(3.0, description="Pause between catalog items")
    log_file: str = Field("garmin_photo_download.log", description="Log file name under log_dir")


class MattingConfig(BaseModel):
    """Configuration for the remove.bg matting stage."""

    endpoint: str = Field("https://api.remove.bg/v1.0/removebg", description="remove.bg API URL")
    api_key_env_var: str = Field("REMOVE_BG_API_KEY", description="Env var holding the API key")
    placeholder_keys: list[str] = Field(
        default_factory=lambda: ["your_api_key", "YOUR_REMOVE_BG_API_KEY"],
        description="Values treated as an unset key",
    )
    supported_formats: list[str] = Field(
        default_factory=lambda: [".png", ".jpg", ".jpeg"], description="Source extensions processed"
    )
    output_suffix: str = Field("_nobg", description="Appended to the source stem")
    timeout_seconds: float = Field(60.0, description="Per-request timeout")
    log_file: str = Field("bg_removal.log", description="Log file name under log_dir")


class ProductPhotoConfig(BaseModel):
    """Top-level configuration for productphoto."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    validator: ValidatorConfig = Field(default_factory=ValidatorConfig)
    acquisition: AcquisitionConfig = Field(default_factory=AcquisitionConfig)
    matting: MattingConfig = Field(default_factory=MattingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> ProductPhotoConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    @classmethod
    def default(cls) -> ProductPhotoConfig:
        """Return configuration with all defaults."""
        return cls()


def load_config(path: Path | None) -> ProductPhotoConfig:
    """Load *path*, or the defaults when it is None.

    Raises:
        ConfigurationError: if the file cannot be read, is not valid YAML, or
            does not match the config schema.
    """
    if path is None:
        return ProductPhotoConfig.default()
    try:
        return ProductPhotoConfig.from_yaml(path)
    except (OSError, yaml.YAMLError, PydanticValidationError) as exc:
        raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


def load_environment(paths: PathsConfig) -> Path | None:
    """Load the first existing ``.env`` file among ``paths.env_candidates()``.

    Returns the loaded file, or None when neither exists and only the bare
    process environment is used. Variables already set in the process
    environment are not overridden.
    """
    for candidate in paths.env_candidates():
        if candidate.is_file():
            load_dotenv(candidate)
            logger.debug("Loaded environment from %s", candidate)
            return candidate
    return None


def resolve_api_key(env_var: str, placeholders: list[str] | None = None) -> str:
    """Read an API key from the environment.

    Raises:
        ConfigurationError: if the variable is unset, blank, or a placeholder.
    """
    value = os.environ.get(env_var, "").strip()
    if not value or value in (placeholders or []):
        raise ConfigurationError(
            f"{env_var} environment variable not found. "
            f"Create a .env file with {env_var}=<your key> in the project root "
            f"or the workspace directory, or export it."
        )
    return value
