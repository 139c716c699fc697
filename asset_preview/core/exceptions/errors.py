"""Custom exception definitions for Asset Preview."""

from typing import Any


class AssetPreviewError(Exception):
    """Base exception for all Asset Preview errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(AssetPreviewError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)


class LocalMappingError(AssetPreviewError):
    """Exception raised when a local mapping file cannot be used."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize local mapping error.

        Args:
            message: Error message.
            path: Mapping file that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)


class LocalFileUnreadableError(LocalMappingError):
    """A mapping file exists but could not be read."""


class LocalFileMalformedError(LocalMappingError):
    """A mapping file was read but is not a JSON object."""


class RemoteFetchError(AssetPreviewError):
    """Exception raised when the remote mapping endpoint fails."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize remote fetch error.

        Args:
            message: Error message.
            url: Endpoint URL that was requested.
            details: Additional error details.
        """
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)


class RemoteTimeoutError(RemoteFetchError):
    """The request did not complete within the configured timeout."""


class RemoteNoResponseError(RemoteFetchError):
    """The connection failed before any response was received."""


class RemoteMalformedBodyError(RemoteFetchError):
    """The endpoint answered 200 but the body is not a JSON object."""


class RemoteHttpError(RemoteFetchError):
    """The endpoint answered with a status other than 200."""

    def __init__(
        self,
        message: str,
        status: int,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize HTTP status error.

        Args:
            message: Error message.
            status: HTTP status code returned by the endpoint.
            url: Endpoint URL that was requested.
            details: Additional error details.
        """
        details = details or {}
        details["status"] = status
        super().__init__(message, url=url, details=details)
        self.status = status
