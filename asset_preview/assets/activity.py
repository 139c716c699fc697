"""Activity signal file reader."""

from pathlib import Path

from asset_preview.core.logger.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ACTIVITY_FILE = ".activityId"


class ActivitySignalReader:
    """Read the activity signal stored in a workspace root.

    The value is read on every call; detecting a change is up to the caller.
    """

    def __init__(self, filename: str = DEFAULT_ACTIVITY_FILE) -> None:
        self.filename = filename or DEFAULT_ACTIVITY_FILE

    def path_for(self, workspace_root: Path) -> Path:
        return Path(workspace_root) / self.filename

    def read(self, workspace_root: Path) -> str:
        """Return the stripped signal, or ``""`` if it is missing or unreadable."""
        path = self.path_for(workspace_root)
        try:
            return path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read activity file {path}: {e}")
            return ""
