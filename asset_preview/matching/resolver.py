"""Turn raw image references into locations a renderer can load."""

import os
from pathlib import Path

from asset_preview.models.matching import AbsoluteUrl, LocalFile, NotFound, ResolvedLocation


class LocationResolver:
    """Resolve URLs and file paths relative to a document and its workspace."""

    def resolve(
        self,
        reference: str,
        document_path: Path | str,
        workspace_root: Path | str | None = None,
    ) -> ResolvedLocation:
        """Resolve a raw reference.

        ``http(s)://`` URLs are returned unchanged and protocol relative
        ``//host/...`` URLs get an ``https:`` prefix. Anything else is a file
        path looked up next to the document first, then under the workspace
        root.

        Args:
            reference: Raw URL or path taken from the text.
            document_path: Absolute path of the current document.
            workspace_root: Root of the document's workspace, if any.

        Returns:
            AbsoluteUrl, LocalFile or NotFound.
        """
        if reference.startswith(("http://", "https://")):
            return AbsoluteUrl(reference)
        if reference.startswith("//"):
            return AbsoluteUrl(f"https:{reference}")

        document_dir = os.path.dirname(os.path.abspath(document_path))
        candidate = os.path.normpath(os.path.join(document_dir, reference))
        if os.path.exists(candidate):
            return LocalFile(Path(candidate))

        if workspace_root is not None:
            # Join rather than resolve: "/public/x.png" is workspace relative here
            candidate = os.path.normpath(
                os.path.join(os.path.abspath(workspace_root), reference.lstrip("/\\"))
            )
            if os.path.exists(candidate):
                return LocalFile(Path(candidate))

        return NotFound(reference)
