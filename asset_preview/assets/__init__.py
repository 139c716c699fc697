"""Asset mapping sources and the per-workspace cache."""

from asset_preview.assets.activity import ActivitySignalReader
from asset_preview.assets.cache import WorkspaceAssetCache
from asset_preview.assets.local_loader import DEFAULT_MAPPING_FILES, LocalMappingLoader
from asset_preview.assets.remote_client import RemoteMappingFetcher
from asset_preview.assets.scheduler import AutoRefreshScheduler

__all__ = [
    "ActivitySignalReader",
    "AutoRefreshScheduler",
    "DEFAULT_MAPPING_FILES",
    "LocalMappingLoader",
    "RemoteMappingFetcher",
    "WorkspaceAssetCache",
]
