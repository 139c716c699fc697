"""Pytest configuration and shared fixtures."""

import json
import shutil
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

from asset_preview.assets.remote_client import RemoteMappingFetcher
from asset_preview.core.config.settings import PreviewSettings

API_URL = "https://assets.example.com/mappings"


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def workspace(temp_dir: Path) -> Path:
    """An empty workspace root."""
    root = temp_dir / "workspace"
    root.mkdir()
    return root


def write_json(path: Path, data: object) -> Path:
    """Write ``data`` as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def write_mapping():
    """Helper writing a JSON mapping file."""
    return write_json


@pytest.fixture
def settings() -> PreviewSettings:
    """Preview settings with the remote endpoint enabled."""
    return PreviewSettings(
        asset_api_url=API_URL,
        api_timeout=1000,
        refresh_on_hover_threshold=300000,
        auto_refresh_interval=60000,
    )


@pytest.fixture
def local_settings() -> PreviewSettings:
    """Preview settings without a remote endpoint."""
    return PreviewSettings(asset_api_url=None)


@pytest.fixture
def fetcher() -> MagicMock:
    """A fetcher whose ``fetch`` returns an empty mapping by default."""
    mock = MagicMock(spec=RemoteMappingFetcher)
    mock.fetch = AsyncMock(return_value={})
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def clock() -> FakeClock:
    """A controllable clock."""
    return FakeClock()
