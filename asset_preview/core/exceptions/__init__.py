"""Exception definitions module."""

from asset_preview.core.exceptions.errors import (
    AssetPreviewError,
    ConfigurationError,
    LocalFileMalformedError,
    LocalFileUnreadableError,
    LocalMappingError,
    RemoteFetchError,
    RemoteHttpError,
    RemoteMalformedBodyError,
    RemoteNoResponseError,
    RemoteTimeoutError,
)

__all__ = [
    "AssetPreviewError",
    "ConfigurationError",
    "LocalMappingError",
    "LocalFileUnreadableError",
    "LocalFileMalformedError",
    "RemoteFetchError",
    "RemoteHttpError",
    "RemoteMalformedBodyError",
    "RemoteNoResponseError",
    "RemoteTimeoutError",
]
