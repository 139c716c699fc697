"""Find the image reference or asset token under a cursor."""

import posixpath
import re
from collections.abc import Callable

from asset_preview.models.matching import AssetToken, ImageReference, MatchResult, NoMatch

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".webp", ".ico"})

_EXT = r"\.(?:png|jpg|jpeg|gif|bmp|svg|webp|ico)"

ASSET_ID_PATTERN = re.compile(r"__ASSET_\d+_\d+")

IMAGE_WORD_PATTERN = re.compile(
    rf"(?:https?://[^\s)'\"]+{_EXT})"
    rf"|(?:(?:\.\.?/|/)[^\s)'\"]*{_EXT})"
    rf"|(?:[a-zA-Z]:[\\/][^\s)'\"]*{_EXT})",
    re.IGNORECASE,
)

QUOTED_PATTERN = re.compile(r"[\"'`]([^\"'`]+)[\"'`]")
PAREN_PATTERN = re.compile(r"\(([^)]+)\)")

Matcher = Callable[[str, int], MatchResult | None]


def has_image_extension(text: str) -> bool:
    """Check the extension of ``text`` against the supported image types."""
    return posixpath.splitext(text)[1].lower() in IMAGE_EXTENSIONS


def _spans_at(pattern: re.Pattern[str], line: str, offset: int):
    """Yield matches of ``pattern`` whose span contains ``offset`` (ends inclusive)."""
    for match in pattern.finditer(line):
        if match.start() <= offset <= match.end():
            yield match


def match_asset_word(line: str, offset: int) -> MatchResult | None:
    for match in _spans_at(ASSET_ID_PATTERN, line, offset):
        return AssetToken(match.group(0))
    return None


def match_image_word(line: str, offset: int) -> MatchResult | None:
    for match in _spans_at(IMAGE_WORD_PATTERN, line, offset):
        return ImageReference(match.group(0))
    return None


def match_quoted(line: str, offset: int) -> MatchResult | None:
    """Check quoted spans; the inner text may be an asset id or an image path."""
    for match in _spans_at(QUOTED_PATTERN, line, offset):
        inner = match.group(1)
        if ASSET_ID_PATTERN.fullmatch(inner):
            return AssetToken(inner)
        if has_image_extension(inner):
            return ImageReference(inner)
    return None


def match_parenthesized(line: str, offset: int) -> MatchResult | None:
    """Check ``(...)`` spans such as Markdown link targets.

    Asset ids are not recognised here, only image paths.
    """
    for match in _spans_at(PAREN_PATTERN, line, offset):
        inner = match.group(1)
        if has_image_extension(inner):
            return ImageReference(inner)
    return None


DEFAULT_MATCHERS: tuple[Matcher, ...] = (
    match_asset_word,
    match_image_word,
    match_quoted,
    match_parenthesized,
)


class TextMatchEngine:
    """Apply matchers in priority order and return the first hit."""

    def __init__(self, matchers: tuple[Matcher, ...] = DEFAULT_MATCHERS) -> None:
        self.matchers = matchers

    def match(self, line: str, offset: int) -> MatchResult:
        """Classify what the cursor at ``offset`` in ``line`` points at.

        Args:
            line: Text of the current line.
            offset: Character offset of the cursor.

        Returns:
            AssetToken, ImageReference or NoMatch.
        """
        for matcher in self.matchers:
            result = matcher(line, offset)
            if result is not None:
                return result
        return NoMatch()
