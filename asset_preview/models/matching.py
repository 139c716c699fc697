"""Result types for text matching and location resolution."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AssetToken:
    """An asset identifier to be looked up in the mapping."""

    asset_id: str


@dataclass(frozen=True)
class ImageReference:
    """A literal URL or path to an image."""

    raw: str


@dataclass(frozen=True)
class NoMatch:
    """Nothing under the cursor looks like an image."""


MatchResult = AssetToken | ImageReference | NoMatch


@dataclass(frozen=True)
class AbsoluteUrl:
    """A fully qualified http(s) URL."""

    url: str


@dataclass(frozen=True)
class LocalFile:
    """An existing file on disk."""

    path: Path

    @property
    def uri(self) -> str:
        """``file://`` URI for the renderer."""
        return self.path.as_uri()


@dataclass(frozen=True)
class NotFound:
    """The reference does not exist next to the document or in the workspace."""

    reference: str


ResolvedLocation = AbsoluteUrl | LocalFile | NotFound
