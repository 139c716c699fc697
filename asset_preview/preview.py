"""Hover previews: match text, resolve it and build the markdown shown to the user."""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from asset_preview.assets.cache import WorkspaceAssetCache
from asset_preview.core.logger.logger import get_logger
from asset_preview.matching.engine import TextMatchEngine
from asset_preview.matching.resolver import LocationResolver
from asset_preview.models.matching import (
    AbsoluteUrl,
    AssetToken,
    ImageReference,
    LocalFile,
    NoMatch,
    NotFound,
    ResolvedLocation,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Preview:
    """Markdown content for one hover."""

    markdown: str
    reference: str
    location: ResolvedLocation | None = None
    asset_id: str | None = None

    @property
    def found(self) -> bool:
        return isinstance(self.location, (AbsoluteUrl, LocalFile))


class HoverPreviewer:
    """Glue between the text engine, the asset cache and the location resolver."""

    def __init__(
        self,
        cache: WorkspaceAssetCache,
        engine: TextMatchEngine | None = None,
        resolver: LocationResolver | None = None,
    ) -> None:
        self.cache = cache
        self.engine = engine or TextMatchEngine()
        self.resolver = resolver or LocationResolver()
        self._pending: set[asyncio.Task] = set()

    def schedule_refresh_check(self, document_path: Path | str) -> asyncio.Task | None:
        """Run the cache staleness check in the background.

        Returns:
            The scheduled task, or None outside a running event loop.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return None
        task = loop.create_task(self.cache.check_and_refresh_if_needed(document_path))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def preview(
        self,
        document_path: Path | str,
        line: str,
        offset: int,
    ) -> Preview | None:
        """Build the preview for the cursor at ``offset`` in ``line``.

        The cache check runs in the background; the answer comes from the
        mapping as it is right now.

        Args:
            document_path: Absolute path of the hovered document.
            line: Text of the hovered line.
            offset: Character offset of the cursor.

        Returns:
            Preview, or None when nothing under the cursor is an image.
        """
        self.schedule_refresh_check(document_path)
        return self.preview_now(document_path, line, offset)

    def preview_now(
        self,
        document_path: Path | str,
        line: str,
        offset: int,
    ) -> Preview | None:
        """Synchronous part of ``preview``; no refresh is triggered."""
        result = self.engine.match(line, offset)

        if isinstance(result, NoMatch):
            return None

        if isinstance(result, AssetToken):
            url = self.cache.resolve(result.asset_id, document_path)
            if url is None:
                return self._asset_not_found(result.asset_id)
            return self._build(url, document_path, asset_id=result.asset_id)

        if isinstance(result, ImageReference):
            return self._build(result.raw, document_path)

        raise TypeError(f"Unexpected match result: {result!r}")

    def _build(
        self,
        reference: str,
        document_path: Path | str,
        asset_id: str | None = None,
    ) -> Preview:
        workspace_root = self.cache.workspace_for(document_path)
        location = self.resolver.resolve(reference, document_path, workspace_root)

        if isinstance(location, NotFound):
            return Preview(
                markdown=f"Image not found: {reference}",
                reference=reference,
                location=location,
                asset_id=asset_id,
            )

        target = location.uri if isinstance(location, LocalFile) else location.url
        settings = self.cache.settings
        lines = [
            f"![Image Preview]({target}|width={settings.max_width},height={settings.max_height})",
            "",
        ]
        if asset_id:
            lines.append(f"Asset: `{asset_id}`")
            lines.append("")
        lines.append(f"Path: `{reference}`")
        return Preview(
            markdown="\n".join(lines),
            reference=reference,
            location=location,
            asset_id=asset_id,
        )

    def _asset_not_found(self, asset_id: str) -> Preview:
        stats = self.cache.get_stats()
        logger.debug(f"Unresolved asset {asset_id} ({stats.total} mappings loaded)")
        if stats.loaded:
            hint = "Add it to a mapping file or reload the asset mappings."
        else:
            hint = "No asset mappings are loaded. Add a mapping file or configure the asset API."
        return Preview(
            markdown=f"Asset not found: `{asset_id}`\n\n{hint}",
            reference=asset_id,
            asset_id=asset_id,
        )
