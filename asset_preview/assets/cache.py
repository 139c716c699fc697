"""Per-workspace asset mapping cache."""

import asyncio
import os
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from asset_preview.assets.activity import ActivitySignalReader
from asset_preview.assets.local_loader import LocalMappingLoader
from asset_preview.assets.remote_client import RemoteMappingFetcher
from asset_preview.assets.scheduler import AutoRefreshScheduler
from asset_preview.core.config.settings import PreviewSettings, get_settings
from asset_preview.core.exceptions.errors import RemoteFetchError
from asset_preview.core.logger.logger import get_logger
from asset_preview.matching.engine import ASSET_ID_PATTERN
from asset_preview.models.assets import CacheStats, RefreshOutcome, WorkspaceAssetData

logger = get_logger(__name__)


def _normalize(path: Path | str) -> Path:
    return Path(os.path.abspath(path))


class WorkspaceAssetCache:
    """Asset id to URL mappings, one per workspace root.

    Mappings are merged from local files and an optional remote endpoint
    (remote wins on conflicts) and kept fresh by three triggers: an explicit
    ``reload()``, the on-demand ``check_and_refresh_if_needed()`` and a
    periodic background job. ``resolve()`` only reads memory.

    Both refresh triggers go through ``_refresh_workspace`` which holds a
    per-workspace lock, so their writes never interleave. A process-wide flag
    additionally drops an on-demand check while another one is running.
    Merged mappings are built as new dicts and swapped in; a fetch whose
    workspace entry was replaced while it ran is discarded.
    """

    def __init__(
        self,
        settings: PreviewSettings | None = None,
        workspace_roots: Sequence[Path | str] = (),
        reader: ActivitySignalReader | None = None,
        loader: LocalMappingLoader | None = None,
        fetcher: RemoteMappingFetcher | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the cache.

        Args:
            settings: Preview settings. Uses global settings if not provided.
            workspace_roots: Known workspace roots; the first is primary.
            reader: Activity signal reader.
            loader: Local mapping loader.
            fetcher: Remote mapping fetcher.
            clock: Source of the current time.
        """
        self.settings = settings or get_settings().preview
        self.workspace_roots = [_normalize(root) for root in workspace_roots]
        self.reader = reader or ActivitySignalReader(self.settings.activity_id_file)
        self.loader = loader or LocalMappingLoader(self.settings.asset_mapping_path)
        self.fetcher = fetcher or RemoteMappingFetcher()
        self._clock = clock

        self.registry: dict[Path, WorkspaceAssetData] = {}
        self._locks: dict[Path, asyncio.Lock] = {}
        self._refresh_in_progress = False
        self._scheduler = AutoRefreshScheduler(self._auto_refresh)

        # Callbacks for silent refreshes
        self._on_refresh_complete: Callable[[RefreshOutcome], None] | None = None
        self._on_refresh_error: Callable[[RefreshOutcome], None] | None = None

    async def __aenter__(self) -> "WorkspaceAssetCache":
        """Load every workspace and start the background refresh."""
        await self.reload()
        self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Stop refreshing and release the HTTP session."""
        await self.close()

    def on_refresh_complete(self, callback: Callable[[RefreshOutcome], None]) -> None:
        """Set callback for successful silent refreshes.

        Only invoked when ``show_refresh_notification`` is enabled.
        """
        self._on_refresh_complete = callback

    def on_refresh_error(self, callback: Callable[[RefreshOutcome], None]) -> None:
        """Set callback for failed silent refreshes.

        Only invoked when ``show_refresh_notification`` is enabled.
        """
        self._on_refresh_error = callback

    # ==================== Workspace lookup ====================

    @property
    def primary_root(self) -> Path | None:
        """First known workspace root."""
        return self.workspace_roots[0] if self.workspace_roots else None

    def workspace_for(self, document: Path | str | None) -> Path | None:
        """Return the workspace root that contains ``document``.

        Args:
            document: Document path or workspace root.

        Returns:
            The innermost containing root, or None.
        """
        if document is None:
            return None
        path = _normalize(document)
        owners = [
            root for root in self.workspace_roots
            if path == root or root in path.parents
        ]
        if not owners:
            return None
        return max(owners, key=lambda root: len(root.parts))

    def _root_for(self, document: Path | str | None) -> Path | None:
        return self.workspace_for(document) or self.primary_root

    def _lock_for(self, root: Path) -> asyncio.Lock:
        if root not in self._locks:
            self._locks[root] = asyncio.Lock()
        return self._locks[root]

    # ==================== Lookups ====================

    @staticmethod
    def is_asset_identifier(text: str) -> bool:
        """Check whether ``text`` is exactly an asset identifier."""
        return ASSET_ID_PATTERN.fullmatch(text) is not None

    def resolve(self, asset_id: str, document: Path | str | None = None) -> str | None:
        """Look up an asset id in the owning workspace's mapping.

        Args:
            asset_id: Asset identifier.
            document: Document whose workspace should be used.

        Returns:
            Mapped URL or path, or None if unresolved.
        """
        root = self._root_for(document)
        if root is None:
            return None
        data = self.registry.get(root)
        if data is None:
            return None
        return data.mapping.get(asset_id) or None

    def get_all_asset_ids(self, document: Path | str | None = None) -> list[str]:
        """List asset ids loaded for a workspace."""
        root = self._root_for(document)
        data = self.registry.get(root) if root is not None else None
        return list(data.mapping) if data else []

    def add_mapping(
        self,
        asset_id: str,
        url: str,
        document: Path | str | None = None,
    ) -> None:
        """Add or overwrite one entry in the live mapping.

        The update timestamp and activity id are left untouched.

        Args:
            asset_id: Asset identifier.
            url: Image URL or path.
            document: Document whose workspace should be updated.
        """
        root = self._root_for(document)
        if root is None:
            logger.warning(f"No workspace to add mapping for {asset_id}")
            return
        data = self.registry.setdefault(root, WorkspaceAssetData())
        data.mapping[asset_id] = url

    # ==================== Loading ====================

    async def reload(self, document: Path | str | None = None) -> list[RefreshOutcome]:
        """Clear and rebuild mappings from local files and the remote endpoint.

        Args:
            document: Reload only this document's workspace; all when None.

        Returns:
            Outcomes of the remote fetches (empty if remote is disabled).
        """
        if document is None:
            roots = list(self.workspace_roots)
            self.registry.clear()
        else:
            root = self._root_for(document)
            roots = [root] if root is not None else []
            for root in roots:
                self.registry.pop(root, None)

        outcomes = []
        for root in roots:
            outcome = await self._load_workspace(root)
            if outcome is not None:
                outcomes.append(outcome)

        stats = self.get_stats()
        logger.info(f"Reloaded asset mappings: {stats.total} entries in {len(roots)} workspace(s)")
        return outcomes

    async def _load_workspace(
        self,
        root: Path,
        notify: bool = False,
    ) -> RefreshOutcome | None:
        """Build fresh data for a workspace: local files, then remote on top."""
        data = WorkspaceAssetData(
            mapping=self.loader.load(root),
            activity_id=self.reader.read(root),
        )
        self.registry[root] = data

        if not self.settings.remote_enabled:
            return None
        return await self._refresh_workspace(root, notify=notify)

    async def _refresh_workspace(
        self,
        root: Path,
        notify: bool = False,
    ) -> RefreshOutcome:
        """Fetch remote mappings and merge them over the current ones.

        Existing entries stay visible while the request is in flight.

        Args:
            root: Workspace root.
            notify: Whether this is a silent refresh eligible for callbacks.

        Returns:
            Outcome of the fetch.
        """
        url = self.settings.asset_api_url
        async with self._lock_for(root):
            data = self.registry.setdefault(root, WorkspaceAssetData())
            try:
                remote = await self.fetcher.fetch(
                    url,
                    timeout_ms=self.settings.api_timeout,
                    activity_id=data.activity_id,
                )
            except RemoteFetchError as e:
                logger.warning(f"Remote asset fetch failed for {root}: {e}")
                outcome = RefreshOutcome(workspace=root, success=False, error=e.message)
                if notify and self.settings.show_refresh_notification and self._on_refresh_error:
                    self._on_refresh_error(outcome)
                return outcome

            # A reload or activity change replaced the entry while the request
            # was running; the result belongs to the old context.
            if self.registry.get(root) is not data:
                logger.info(
                    f"Discarding {len(remote)} asset mappings for {root}: "
                    "workspace data was replaced during the fetch"
                )
                return RefreshOutcome(
                    workspace=root,
                    success=False,
                    error="Discarded: workspace data was replaced during the fetch",
                )

            data.mapping = {**data.mapping, **remote}
            data.last_update = self._clock()

        logger.info(f"Loaded {len(remote)} asset mappings from {url}")
        outcome = RefreshOutcome(workspace=root, success=True, entries=len(remote))
        if notify and self.settings.show_refresh_notification and self._on_refresh_complete:
            self._on_refresh_complete(outcome)
        return outcome

    def _is_stale(self, data: WorkspaceAssetData) -> bool:
        if data.last_update is None:
            return True
        elapsed_ms = (self._clock() - data.last_update).total_seconds() * 1000
        return elapsed_ms > self.settings.refresh_on_hover_threshold

    async def check_and_refresh_if_needed(self, document: Path | str | None = None) -> bool:
        """Refresh a workspace if its activity signal changed or it is stale.

        A changed activity signal drops the workspace's data and reloads it
        regardless of age. Otherwise data older than the hover threshold is
        refreshed in place. Calls made while another check is running are
        ignored.

        Args:
            document: Document whose workspace should be checked.

        Returns:
            True if a refresh was performed.
        """
        if not self.settings.remote_enabled or self.settings.refresh_on_hover_threshold <= 0:
            return False

        if self._refresh_in_progress:
            logger.debug("Refresh already in progress, skipping check")
            return False

        root = self._root_for(document)
        if root is None:
            return False

        self._refresh_in_progress = True
        try:
            current_activity = self.reader.read(root)
            data = self.registry.get(root)

            if data is None or data.activity_id != current_activity:
                previous = data.activity_id if data else None
                logger.info(
                    f"Activity changed for {root} ({previous!r} -> {current_activity!r}), "
                    "clearing asset mappings"
                )
                self.registry.pop(root, None)
                await self._load_workspace(root, notify=True)
                return True

            if self._is_stale(data):
                logger.debug(f"Asset mappings for {root} are stale, refreshing")
                await self._refresh_workspace(root, notify=True)
                return True

            return False
        finally:
            self._refresh_in_progress = False

    # ==================== Background refresh ====================

    async def _auto_refresh(self) -> None:
        """Scheduled job: refresh the primary workspace, never raising."""
        root = self.primary_root
        if root is None or not self.settings.remote_enabled:
            return
        try:
            await self._refresh_workspace(root, notify=True)
        except Exception as e:
            logger.error(f"Auto refresh failed: {e}")

    def start(self) -> bool:
        """Start the periodic refresh if enabled.

        Must be called from within a running event loop.

        Returns:
            True if the background job is running.
        """
        if not self.settings.remote_enabled:
            logger.debug("No asset API configured, auto refresh not started")
            return False
        return self._scheduler.start(self.settings.auto_refresh_interval)

    def stop(self) -> None:
        """Stop the periodic refresh."""
        self._scheduler.stop()

    def restart_auto_refresh(self) -> bool:
        """Restart the periodic refresh with the current settings."""
        if not self.settings.remote_enabled:
            self.stop()
            return False
        return self._scheduler.restart(self.settings.auto_refresh_interval)

    def apply_settings(self, settings: PreviewSettings) -> bool:
        """Swap in new settings and restart the periodic refresh.

        Mappings are not reloaded; call ``reload()`` for that.

        Args:
            settings: New preview settings.

        Returns:
            True if the background job is running afterwards.
        """
        self.settings = settings
        self.reader.filename = settings.activity_id_file
        self.loader.override_path = settings.asset_mapping_path
        return self.restart_auto_refresh()

    @property
    def auto_refresh_running(self) -> bool:
        """Whether the periodic refresh is scheduled."""
        return self._scheduler.is_running

    async def close(self) -> None:
        """Stop the background job and close the HTTP session."""
        self.stop()
        await self.fetcher.close()

    # ==================== Statistics ====================

    def get_stats(self, document: Path | str | None = None) -> CacheStats:
        """Get mapping statistics.

        Args:
            document: Report on this document's workspace; aggregate over
                all workspaces when None.

        Returns:
            Cache statistics.
        """
        if document is not None:
            root = self._root_for(document)
            data = self.registry.get(root) if root is not None else None
            if data is None:
                return CacheStats()
            total = len(data.mapping)
            return CacheStats(
                total=total,
                loaded=total > 0,
                last_update=data.last_update,
                activity_id=data.activity_id,
                workspaces=1,
            )

        total = sum(len(data.mapping) for data in self.registry.values())
        updates = [d.last_update for d in self.registry.values() if d.last_update]
        primary = self.registry.get(self.primary_root) if self.primary_root else None
        return CacheStats(
            total=total,
            loaded=total > 0,
            last_update=max(updates) if updates else None,
            activity_id=primary.activity_id if primary else None,
            workspaces=len(self.registry),
        )
