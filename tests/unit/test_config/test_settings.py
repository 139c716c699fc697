"""Tests for settings and the YAML config loader."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from asset_preview.core.config.loader import ConfigLoader
from asset_preview.core.config.settings import LoggingSettings, PreviewSettings, Settings
from asset_preview.core.exceptions.errors import ConfigurationError


class TestPreviewSettings:
    """Tests for PreviewSettings."""

    def test_defaults(self) -> None:
        """Test default values."""
        settings = PreviewSettings()

        assert settings.asset_mapping_path is None
        assert settings.api_timeout == 5000
        assert settings.show_refresh_notification is False
        assert settings.activity_id_file == ".activityId"
        assert settings.refresh_on_hover_threshold == 300000
        assert settings.auto_refresh_interval == 60000
        assert settings.max_width == 400
        assert settings.max_height == 400

    def test_camel_case_keys(self) -> None:
        """Test that editor style keys are accepted."""
        settings = PreviewSettings(**{
            "assetApiUrl": "https://x/m",
            "apiTimeout": 2500,
            "refreshOnHoverThreshold": 0,
            "activityIdFile": ".session",
        })

        assert settings.asset_api_url == "https://x/m"
        assert settings.api_timeout == 2500
        assert settings.refresh_on_hover_threshold == 0
        assert settings.activity_id_file == ".session"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_url_disables_remote(self, value: str) -> None:
        """Test that a blank URL counts as unset."""
        settings = PreviewSettings(asset_api_url=value)

        assert settings.asset_api_url is None
        assert not settings.remote_enabled

    def test_remote_enabled(self) -> None:
        """Test remote_enabled with a URL."""
        assert PreviewSettings(asset_api_url=" https://x/m ").asset_api_url == "https://x/m"
        assert PreviewSettings(asset_api_url="https://x/m").remote_enabled

    def test_negative_interval_rejected(self) -> None:
        """Test that the interval must not be negative."""
        with pytest.raises(ValidationError):
            PreviewSettings(auto_refresh_interval=-1)

    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reading values from the environment."""
        monkeypatch.setenv("ASSET_PREVIEW_ASSET_API_URL", "https://env/m")
        monkeypatch.setenv("ASSET_PREVIEW_API_TIMEOUT", "1234")

        settings = PreviewSettings()

        assert settings.asset_api_url == "https://env/m"
        assert settings.api_timeout == 1234


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_level_normalized(self) -> None:
        """Test that the level is upper-cased."""
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_invalid_level(self) -> None:
        """Test that unknown levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingSettings(level="verbose")

    def test_empty_file_is_none(self) -> None:
        """Test that an empty log file means no file handler."""
        assert LoggingSettings(file="").file is None


class TestSettingsFromYaml:
    """Tests for Settings.from_yaml and Settings.load."""

    def test_preview_section(self, temp_dir: Path) -> None:
        """Test the snake_case preview section."""
        path = temp_dir / "asset-preview.yaml"
        path.write_text(
            "preview:\n"
            "  asset_api_url: https://yaml/m\n"
            "  auto_refresh_interval: 0\n"
            "logging:\n"
            "  level: warning\n",
            encoding="utf-8",
        )

        settings = Settings.from_yaml(path)

        assert settings.preview.asset_api_url == "https://yaml/m"
        assert settings.preview.auto_refresh_interval == 0
        assert settings.logging.level == "WARNING"

    def test_image_preview_section(self, temp_dir: Path) -> None:
        """Test the editor namespace with camelCase keys."""
        path = temp_dir / "config.yaml"
        path.write_text(
            "imagePreview:\n"
            "  assetMappingPath: config/assets.json\n"
            "  showRefreshNotification: true\n",
            encoding="utf-8",
        )

        settings = Settings.from_yaml(path)

        assert settings.preview.asset_mapping_path == "config/assets.json"
        assert settings.preview.show_refresh_notification is True
        assert settings.logging.level == "INFO"

    def test_load_prefers_yaml_in_cwd(
        self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that load() picks up asset-preview.yaml from the working directory."""
        (temp_dir / "asset-preview.yaml").write_text(
            "preview:\n  api_timeout: 750\n", encoding="utf-8"
        )
        monkeypatch.chdir(temp_dir)

        assert Settings.load().preview.api_timeout == 750

    def test_load_without_yaml(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test defaults when no file is present."""
        monkeypatch.chdir(temp_dir)

        assert Settings.load().preview.api_timeout == 5000


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_no_path(self) -> None:
        """Test that a loader without a path returns an empty config."""
        assert ConfigLoader().load() == {}

    def test_missing_file(self, temp_dir: Path) -> None:
        """Test a missing file."""
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(temp_dir / "nope.yaml").load()

        assert "not found" in exc_info.value.message

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        """Test a file that is not valid YAML."""
        path = temp_dir / "bad.yaml"
        path.write_text("preview: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(path).load()

        assert "error" in exc_info.value.details

    def test_non_mapping_root(self, temp_dir: Path) -> None:
        """Test a YAML list at the top level."""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            ConfigLoader(path).load()

    def test_get_section(self, temp_dir: Path) -> None:
        """Test section lookups."""
        path = temp_dir / "c.yaml"
        path.write_text("preview:\n  max_width: 200\nflag: 1\n", encoding="utf-8")
        loader = ConfigLoader(path)
        loader.load()

        assert loader.get_section("preview") == {"max_width": 200}
        assert loader.get_section("flag") == {}
        assert loader.get_section("missing") == {}

    def test_empty_file(self, temp_dir: Path) -> None:
        """Test that an empty file is an empty mapping."""
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert ConfigLoader(path).load() == {}
