"""Tests for productphoto.config."""

from __future__ import annotations

import os

import pytest

from productphoto.config import (
    AcquisitionConfig,
    FetchConfig,
    PathsConfig,
    ProductPhotoConfig,
    load_config,
    load_environment,
    resolve_api_key,
)
from productphoto.errors import ConfigurationError


class TestAcquisitionConfig:
    def test_defaults(self):
        cfg = AcquisitionConfig()
        assert cfg.max_candidates == 3
        assert cfg.candidate_delay_seconds == 2.0
        assert cfg.item_delay_seconds == 3.0
        assert cfg.brand == "Garmin"


class TestFetchConfig:
    def test_defaults(self):
        cfg = FetchConfig()
        assert cfg.timeout_seconds == 10.0
        assert cfg.max_redirects == 5

    def test_headers(self):
        headers = FetchConfig().headers()
        assert headers["Referer"] == "https://www.google.com/"
        assert "image/*" in headers["Accept"]
        assert headers["Sec-Fetch-Dest"] == "image"
        assert "Mozilla" in headers["User-Agent"]


class TestPathsConfig:
    def test_layout(self, tmp_path):
        paths = PathsConfig(project_root=tmp_path)
        assert paths.images_path == tmp_path.resolve() / "product_photo_downloader" / "garmin_watch_images"
        assert paths.matte_path == tmp_path.resolve() / "product_photo_downloader" / "garmin_watch_images_nobg"
        assert paths.log_path == tmp_path.resolve() / "logs"

    def test_absolute_paths_kept(self, tmp_path):
        paths = PathsConfig(project_root=tmp_path, images_dir=tmp_path / "elsewhere")
        assert paths.images_path == tmp_path / "elsewhere"

    def test_env_candidates_order(self, tmp_path):
        paths = PathsConfig(project_root=tmp_path)
        root_env, local_env = paths.env_candidates()
        assert root_env == tmp_path.resolve() / ".env"
        assert local_env == tmp_path.resolve() / "product_photo_downloader" / ".env"


class TestProductPhotoConfig:
    def test_default(self):
        cfg = ProductPhotoConfig.default()
        assert cfg.search.max_results == 3
        assert cfg.matting.supported_formats == [".png", ".jpg", ".jpeg"]

    def test_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "acquisition:\n  item_delay_seconds: 0\n  brand: Acme\n"
            "validator:\n  model: gemini-test\n"
        )
        cfg = ProductPhotoConfig.from_yaml(yaml_path)
        assert cfg.acquisition.item_delay_seconds == 0
        assert cfg.acquisition.brand == "Acme"
        assert cfg.validator.model == "gemini-test"
        # Other fields keep defaults
        assert cfg.acquisition.candidate_delay_seconds == 2.0

    def test_from_empty_yaml(self, tmp_path):
        yaml_path = tmp_path / "empty.yaml"
        yaml_path.write_text("")
        cfg = ProductPhotoConfig.from_yaml(yaml_path)
        assert cfg.fetch.timeout_seconds == 10.0


class TestLoadConfig:
    def test_none_gives_defaults(self):
        assert load_config(None) == ProductPhotoConfig.default()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config(tmp_path / "absent.yaml")

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("acquisition: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_schema_mismatch(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("fetch:\n  timeout_seconds: forever\n")
        with pytest.raises(ConfigurationError, match="timeout_seconds"):
            load_config(path)


@pytest.fixture
def scratch_env_var():
    """Name of a scratch variable, removed again after the test."""
    name = "PRODUCTPHOTO_TEST_KEY"
    os.environ.pop(name, None)
    yield name
    os.environ.pop(name, None)


class TestLoadEnvironment:
    def test_project_root_env_wins(self, tmp_path, scratch_env_var):
        paths = PathsConfig(project_root=tmp_path)
        paths.workspace_path.mkdir(parents=True)
        (tmp_path / ".env").write_text(f"{scratch_env_var}=root\n")
        (paths.workspace_path / ".env").write_text(f"{scratch_env_var}=local\n")

        loaded = load_environment(paths)

        assert loaded == tmp_path.resolve() / ".env"
        assert os.environ[scratch_env_var] == "root"

    def test_falls_back_to_workspace_env(self, tmp_path, scratch_env_var):
        paths = PathsConfig(project_root=tmp_path)
        paths.workspace_path.mkdir(parents=True)
        (paths.workspace_path / ".env").write_text(f"{scratch_env_var}=local\n")

        assert load_environment(paths) == paths.workspace_path / ".env"
        assert os.environ[scratch_env_var] == "local"

    def test_existing_environment_not_overridden(self, tmp_path, scratch_env_var):
        os.environ[scratch_env_var] = "exported"
        (tmp_path / ".env").write_text(f"{scratch_env_var}=from-file\n")

        load_environment(PathsConfig(project_root=tmp_path))

        assert os.environ[scratch_env_var] == "exported"

    def test_no_env_file(self, tmp_path):
        assert load_environment(PathsConfig(project_root=tmp_path)) is None


class TestResolveApiKey:
    def test_present(self, monkeypatch):
        monkeypatch.setenv("PRODUCTPHOTO_TEST_KEY", "  abc123 ")
        assert resolve_api_key("PRODUCTPHOTO_TEST_KEY") == "abc123"

    def test_missing(self, monkeypatch):
        monkeypatch.delenv("PRODUCTPHOTO_TEST_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="PRODUCTPHOTO_TEST_KEY"):
            resolve_api_key("PRODUCTPHOTO_TEST_KEY")

    def test_placeholder(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "YOUR_GEMINI_API_KEY")
        with pytest.raises(ConfigurationError):
            resolve_api_key("GEMINI_API_KEY", ["YOUR_GEMINI_API_KEY"])
