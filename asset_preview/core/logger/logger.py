"""Logging system with Rich support."""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from asset_preview.core.config.settings import LoggingSettings, get_settings

# Global console instance
_console: Console | None = None
_loggers: dict[str, logging.Logger] = {}


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """Setup logging configuration.

    Args:
        settings: Logging settings. Uses global settings if not provided.
    """
    global _console

    if settings is None:
        settings = get_settings().logging

    if settings.use_rich:
        _console = Console(stderr=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.level))
    root_logger.handlers.clear()

    handler: RichHandler | logging.StreamHandler
    if settings.use_rich:
        handler = RichHandler(
            console=_console,
            show_path=True,
            show_time=True,
            rich_tracebacks=True,
            markup=False,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(settings.format))

    root_logger.addHandler(handler)

    if settings.file:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, settings.level))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get or create a logger by name.

    Handlers are installed by ``setup_logging``, which the CLI calls once the
    configuration has been loaded; module-level calls never read settings.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def get_console() -> Console:
    """Get the global Rich console instance.

    Returns:
        Console instance.
    """
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console
