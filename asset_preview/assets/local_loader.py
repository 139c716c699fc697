"""Local asset mapping file loader."""

import json
from pathlib import Path
from typing import Any

from asset_preview.core.exceptions.errors import (
    LocalFileMalformedError,
    LocalFileUnreadableError,
    LocalMappingError,
)
from asset_preview.core.logger.logger import get_logger
from asset_preview.models.assets import AssetMapping

logger = get_logger(__name__)

# Merge order: later entries overwrite earlier ones
DEFAULT_MAPPING_FILES = [
    Path(".image-assets.json"),
    Path("assets.config.json"),
    Path(".vscode") / "image-assets.json",
]


class LocalMappingLoader:
    """Load and merge asset mappings bundled with a workspace.

    Candidates are the configured override path followed by the default
    mapping files. Every candidate that exists and holds a JSON object is
    merged in list order, so a later file wins on duplicate keys. A file that
    cannot be read or parsed is logged and skipped.
    """

    def __init__(self, override_path: str | None = None) -> None:
        """Initialize the loader.

        Args:
            override_path: User configured mapping file, relative to the
                workspace root (absolute paths are used as is).
        """
        self.override_path = override_path

    def candidate_paths(self, workspace_root: Path) -> list[Path]:
        """Build the ordered candidate list for a workspace.

        Args:
            workspace_root: Workspace root directory.

        Returns:
            Candidate paths in merge order.
        """
        root = Path(workspace_root)
        candidates = [root / name for name in DEFAULT_MAPPING_FILES]
        if self.override_path:
            candidates.insert(0, root / self.override_path)
        return candidates

    def load(self, workspace_root: Path) -> AssetMapping:
        """Load every available candidate for a workspace.

        Args:
            workspace_root: Workspace root directory.

        Returns:
            Merged mapping, possibly empty.
        """
        merged: AssetMapping = {}

        for path in self.candidate_paths(workspace_root):
            if not path.is_file():
                continue
            try:
                mapping = self.read_file(path)
            except LocalMappingError as e:
                logger.error(f"Failed to load asset mappings: {e}")
                continue

            merged.update(mapping)
            logger.info(f"Loaded {len(mapping)} asset mappings from {path}")

        return merged

    def read_file(self, path: Path) -> AssetMapping:
        """Read a single mapping file.

        Args:
            path: JSON file to read.

        Returns:
            Mapping read from the file.

        Raises:
            LocalFileUnreadableError: If the file cannot be read.
            LocalFileMalformedError: If the content is not a JSON object.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LocalFileUnreadableError(
                f"Cannot read mapping file: {e}", path=str(path)
            ) from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise LocalFileMalformedError(
                f"Invalid JSON in mapping file: {e.msg}",
                path=str(path),
                details={"line": e.lineno, "column": e.colno},
            ) from e

        if not isinstance(data, dict):
            raise LocalFileMalformedError(
                f"Mapping file must contain a JSON object, got {type(data).__name__}",
                path=str(path),
            )

        return coerce_mapping(data, source=str(path))


def coerce_mapping(data: dict[str, Any], source: str) -> AssetMapping:
    """Keep scalar values as strings and drop nested ones.

    Args:
        data: Decoded JSON object.
        source: Where the object came from, for logging.

    Returns:
        String to string mapping.
    """
    mapping: AssetMapping = {}
    for key, value in data.items():
        if isinstance(value, str):
            mapping[key] = value
        elif isinstance(value, (int, float, bool)):
            mapping[key] = str(value)
        else:
            logger.debug(f"Skipping non-scalar mapping value for {key} in {source}")
    return mapping
