"""Range replacement over immutable text with source map carry-over.

TextSplicer records replacements against the original text and produces the
result in one pass, so k replacements over n characters cost O(n + k)
instead of re-copying the text per replacement.

Python 3.13+.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from assetlocalizer.sourcemap import remap_source_map

__all__ = ["Edit", "SpliceRangeError", "SpliceResult", "TextSplicer"]

logger = logging.getLogger(__name__)


class SpliceRangeError(ValueError):
    """Edits overlap or fall outside the text.

    Raised for programming errors: the engine only ever submits disjoint
    ranges it located itself.
    """


@dataclass(frozen=True, slots=True)
class Edit:
    """Replace text[start:end] with replacement.

    start == end inserts replacement before text[start].
    """

    start: int
    end: int
    replacement: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            msg = f"Invalid edit range [{self.start}, {self.end})"
            raise SpliceRangeError(msg)


@dataclass(frozen=True, slots=True)
class SpliceResult:
    """Edited text and, when a map was supplied, its remapped source map."""

    text: str
    source_map: dict[str, Any] | None = None


class TextSplicer:
    """Collects edits against one text and applies them together.

    Example:
        >>> splicer = TextSplicer('export default "PH";')
        >>> splicer.replace(15, 19, '"Hello"')
        >>> splicer.apply().text
        'export default "Hello";'
    """

    __slots__ = ("_edits", "_text")

    def __init__(self, text: str) -> None:
        self._text = text
        self._edits: list[Edit] = []

    @property
    def original(self) -> str:
        return self._text

    def replace(self, start: int, end: int, replacement: str) -> None:
        """Schedule replacement of [start, end)."""
        self._edits.append(Edit(start, end, replacement))

    def extend(self, edits: Iterable[Edit]) -> None:
        """Schedule several edits."""
        self._edits.extend(edits)

    def __len__(self) -> int:
        return len(self._edits)

    def apply(
        self, source_map: Mapping[str, Any] | None = None, *, file: str | None = None
    ) -> SpliceResult:
        """Apply every scheduled edit.

        Args:
            source_map: v3 source map for the original text, if any
            file: New ``file`` value for the remapped source map

        Returns:
            SpliceResult; source_map is None when none was supplied

        Raises:
            SpliceRangeError: An edit lies outside the text or overlaps
                another (zero-width edits at one offset are allowed)
        """
        text = self._text
        # Insertions sort before a replacement at the same offset; the stable
        # sort keeps insertions at one offset in submission order.
        edits = sorted(self._edits, key=lambda edit: (edit.start, edit.end))

        pieces: list[str] = []
        cursor = 0
        for edit in edits:
            if edit.end > len(text):
                msg = f"Edit [{edit.start}, {edit.end}) exceeds text length {len(text)}"
                raise SpliceRangeError(msg)
            if edit.start < cursor:
                msg = f"Edit [{edit.start}, {edit.end}) overlaps a previous edit ending at {cursor}"
                raise SpliceRangeError(msg)
            pieces.append(text[cursor : edit.start])
            pieces.append(edit.replacement)
            cursor = edit.end
        pieces.append(text[cursor:])
        new_text = "".join(pieces)

        new_map = None
        if source_map is not None:
            spans = [(edit.start, edit.end, len(edit.replacement)) for edit in edits]
            new_map = remap_source_map(source_map, text, new_text, spans, file=file)

        logger.debug("Applied %d edit(s)", len(edits))
        return SpliceResult(new_text, new_map)
