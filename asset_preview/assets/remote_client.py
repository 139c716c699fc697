"""HTTP client for the remote asset mapping endpoint."""

import asyncio
import json
from typing import Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from asset_preview import __version__
from asset_preview.assets.local_loader import coerce_mapping
from asset_preview.core.exceptions.errors import (
    RemoteHttpError,
    RemoteMalformedBodyError,
    RemoteNoResponseError,
    RemoteTimeoutError,
)
from asset_preview.core.logger.logger import get_logger
from asset_preview.models.assets import AssetMapping

logger = get_logger(__name__)

USER_AGENT = f"AssetPreview/{__version__} (Image Asset Resolver)"
ACTIVITY_HEADER = "x-activity-id"


class RemoteMappingFetcher:
    """Fetch asset mappings from a single HTTP endpoint.

    Each call performs exactly one GET bounded by the given timeout. Retries
    are left to the caller.
    """

    def __init__(self) -> None:
        self._session: ClientSession | None = None

    async def __aenter__(self) -> "RemoteMappingFetcher":
        """Enter async context manager."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()

    async def _ensure_session(self) -> ClientSession:
        """Ensure aiohttp session exists.

        Returns:
            ClientSession instance.
        """
        if self._session is None or self._session.closed:
            self._session = ClientSession(headers=self._get_default_headers())
        return self._session

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests.

        Returns:
            Dictionary of headers.
        """
        return {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def build_headers(self, activity_id: str = "") -> dict[str, str]:
        """Headers for one mapping request.

        Args:
            activity_id: Current activity signal; omitted when empty.

        Returns:
            Dictionary of headers.
        """
        headers = self._get_default_headers()
        if activity_id:
            headers[ACTIVITY_HEADER] = activity_id
        return headers

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def fetch(
        self,
        url: str,
        timeout_ms: int = 5000,
        activity_id: str = "",
    ) -> AssetMapping:
        """Fetch the mapping published at ``url``.

        Args:
            url: Endpoint URL.
            timeout_ms: Total request timeout in milliseconds.
            activity_id: Activity signal sent as ``x-activity-id`` when set.

        Returns:
            Mapping returned by the endpoint.

        Raises:
            RemoteTimeoutError: If the request exceeds the timeout.
            RemoteHttpError: If the status is not 200.
            RemoteNoResponseError: If the connection fails.
            RemoteMalformedBodyError: If the body is not a JSON object.
        """
        session = await self._ensure_session()
        timeout = ClientTimeout(total=timeout_ms / 1000)

        logger.debug(f"Request: GET {url} (timeout {timeout_ms}ms)")

        try:
            async with session.get(
                url,
                headers=self.build_headers(activity_id),
                timeout=timeout,
            ) as response:
                if response.status != 200:
                    raise RemoteHttpError(
                        f"HTTP {response.status}: {response.reason}",
                        status=response.status,
                        url=url,
                    )
                body = await response.text()
        except asyncio.TimeoutError as e:
            raise RemoteTimeoutError(
                f"Request timed out after {timeout_ms}ms", url=url
            ) from e
        except ClientError as e:
            raise RemoteNoResponseError(f"No response from server: {e}", url=url) from e

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise RemoteMalformedBodyError(
                f"Response is not valid JSON: {e.msg}", url=url
            ) from e

        if not isinstance(data, dict):
            raise RemoteMalformedBodyError(
                f"Response must be a JSON object, got {type(data).__name__}",
                url=url,
            )

        mapping = coerce_mapping(data, source=url)
        logger.debug(f"Fetched {len(mapping)} asset mappings from {url}")
        return mapping
