"""Data models module."""

from asset_preview.models.assets import (
    AssetMapping,
    CacheStats,
    RefreshOutcome,
    WorkspaceAssetData,
)
from asset_preview.models.matching import (
    AbsoluteUrl,
    AssetToken,
    ImageReference,
    LocalFile,
    MatchResult,
    NoMatch,
    NotFound,
    ResolvedLocation,
)

__all__ = [
    "AssetMapping",
    "CacheStats",
    "RefreshOutcome",
    "WorkspaceAssetData",
    "AbsoluteUrl",
    "AssetToken",
    "ImageReference",
    "LocalFile",
    "MatchResult",
    "NoMatch",
    "NotFound",
    "ResolvedLocation",
]
