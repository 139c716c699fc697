"""Asset mapping data models."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

AssetMapping = dict[str, str]
"""Asset identifier to image URL or path."""


class WorkspaceAssetData(BaseModel):
    """Mapping state held for a single workspace root.

    ``mapping`` is replaced wholesale by refreshes; ``last_update`` only moves
    on a successful remote fetch.
    """

    mapping: AssetMapping = Field(default_factory=dict)
    activity_id: str = Field(default="", description="Last seen activity signal")
    last_update: datetime | None = Field(
        default=None,
        description="Time of the last successful remote fetch",
    )


class CacheStats(BaseModel):
    """Statistics for one workspace or for all of them."""

    total: int = Field(default=0, ge=0, description="Number of mapped asset ids")
    loaded: bool = Field(default=False, description="Whether any entries are loaded")
    last_update: datetime | None = Field(default=None)
    activity_id: str | None = Field(default=None)
    workspaces: int = Field(default=0, ge=0, description="Workspaces included")


class RefreshOutcome(BaseModel):
    """Result of one remote refresh attempt."""

    workspace: Path
    success: bool
    entries: int = Field(default=0, ge=0, description="Entries returned by the endpoint")
    error: str | None = Field(default=None)
