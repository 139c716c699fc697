"""Application settings using Pydantic Settings."""

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from asset_preview.core.config.loader import ConfigLoader

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case_keys(data: Any) -> Any:
    """Rename camelCase keys (``assetApiUrl``) to field names (``asset_api_url``)."""
    if not isinstance(data, dict):
        return data
    return {
        (_CAMEL_BOUNDARY.sub("_", key).lower() if isinstance(key, str) else key): value
        for key, value in data.items()
    }


class PreviewSettings(BaseSettings):
    """Asset mapping and preview settings.

    Durations are expressed in milliseconds. Keys may be given in the
    editor's camelCase form (``assetApiUrl``) or as field names.
    """

    model_config = SettingsConfigDict(
        env_prefix="ASSET_PREVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    asset_mapping_path: str | None = Field(
        default=None,
        description="Workspace-relative override for the local mapping file",
    )
    asset_api_url: str | None = Field(
        default=None,
        description="Remote mapping endpoint; remote fetch is disabled when unset",
    )
    api_timeout: int = Field(
        default=5000,
        ge=1,
        description="Remote request timeout in milliseconds",
    )
    show_refresh_notification: bool = Field(
        default=False,
        description="Notify on silent background refreshes",
    )
    activity_id_file: str = Field(
        default=".activityId",
        description="Workspace-relative activity signal file",
    )
    refresh_on_hover_threshold: int = Field(
        default=300000,
        description="Staleness bound for on-demand checks (<= 0 disables them)",
    )
    auto_refresh_interval: int = Field(
        default=60000,
        ge=0,
        description="Background refresh interval (0 disables the loop)",
    )
    max_width: int = Field(default=400, ge=1, description="Preview width hint")
    max_height: int = Field(default=400, ge=1, description="Preview height hint")

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Accept camelCase configuration keys."""
        return _snake_case_keys(data)

    @field_validator("asset_mapping_path", "asset_api_url", mode="before")
    @classmethod
    def validate_optional_str(cls, v: str | None) -> str | None:
        """Treat blank strings as unset."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def remote_enabled(self) -> bool:
        """Whether a remote endpoint is configured."""
        return self.asset_api_url is not None


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="ASSET_PREVIEW_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ASSET_PREVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    preview: PreviewSettings = Field(default_factory=PreviewSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        The ``preview`` section may also be named ``imagePreview``, the
        editor's configuration namespace.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.
        """
        loader = ConfigLoader(path)
        loader.load()

        preview_config = loader.get_section("preview") or loader.get_section("imagePreview")
        logging_config = loader.get_section("logging")

        return cls(
            preview=PreviewSettings(**preview_config),
            logging=LoggingSettings(**logging_config),
        )

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from default locations.

        Priority: asset-preview.yaml > environment variables > .env > defaults

        Returns:
            Settings instance.
        """
        default_path = Path("asset-preview.yaml")
        if default_path.exists():
            return cls.from_yaml(default_path)

        return cls()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()
