"""Text matching and location resolution."""

from asset_preview.matching.engine import (
    ASSET_ID_PATTERN,
    IMAGE_EXTENSIONS,
    TextMatchEngine,
    has_image_extension,
)
from asset_preview.matching.resolver import LocationResolver

__all__ = [
    "ASSET_ID_PATTERN",
    "IMAGE_EXTENSIONS",
    "TextMatchEngine",
    "has_image_extension",
    "LocationResolver",
]
