"""Immutable cursor infrastructure for call-expression parsing.

Python 3.13+. Zero external dependencies.

Design:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns a NEW cursor
    - Line:column lookups go through LineOffsetCache

Line Ending Support:
    LF and CRLF are supported (\\n is the line delimiter). CR-only sources
    produce incorrect line numbers.
"""

from dataclasses import dataclass

from assetlocalizer.diagnostics import ErrorTemplate

__all__ = ["JS_WHITESPACE", "Cursor", "LineOffsetCache", "ParseResult"]

# ECMAScript WhiteSpace and LineTerminator code points.
JS_WHITESPACE = frozenset(" \t\n\r\v\f\u00a0\ufeff\u2028\u2029")


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("__('k')", 0)
        >>> cursor.current
        '_'
        >>> cursor.advance(2).current
        '('
        >>> Cursor("hi", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """True once the position reaches the end of the source."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            diagnostic = ErrorTemplate.call_syntax("unexpected end of input", self.pos)
            raise EOFError(diagnostic.message)
        return self.source[self.pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions (clamped at EOF)."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Source text from the current position to end_pos (exclusive)."""
        return self.source[self.pos : end_pos]

    def skip_whitespace(self) -> "Cursor":
        """Skip JavaScript whitespace and line terminators.

        Example:
            >>> Cursor("  \\n\\t x", 0).skip_whitespace().current
            'x'
        """
        pos = self.pos
        source = self.source
        length = len(source)
        while pos < length and source[pos] in JS_WHITESPACE:
            pos += 1
        return self if pos == self.pos else Cursor(source, pos)

    def expect(self, char: str) -> "Cursor | None":
        """Consume char if it is current, otherwise return None."""
        if not self.is_eof and self.current == char:
            return self.advance()
        return None


class LineOffsetCache:
    """Cached line offsets for repeated offset <-> line:column conversion.

    Precomputes line start offsets in one pass, then answers lookups with
    binary search.

    Example:
        >>> cache = LineOffsetCache("abc\\ndef\\nghi")
        >>> cache.get_line_col(4)
        (2, 1)
        >>> cache.get_offset(2, 1)
        4

    Thread Safety:
        Thread-safe. Internal state is only set during __init__.
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        offsets = [0]
        index = source.find("\n")
        while index != -1:
            offsets.append(index + 1)
            index = source.find("\n", index + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    @property
    def line_count(self) -> int:
        """Number of lines (a trailing newline starts an empty last line)."""
        return len(self._offsets)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get 1-indexed (line, column) for a character offset.

        Positions outside the source are clamped.
        """
        pos = max(0, min(pos, self._source_len))

        # Index of largest offset <= pos
        left, right = 0, len(self._offsets) - 1
        while left < right:
            mid = (left + right + 1) // 2
            if self._offsets[mid] <= pos:
                left = mid
            else:
                right = mid - 1

        return (left + 1, pos - self._offsets[left] + 1)

    def get_offset(self, line: int, column: int) -> int:
        """Inverse of get_line_col: character offset for a 1-indexed position.

        Raises:
            ValueError: If line is outside the source
        """
        if line < 1 or line > len(self._offsets):
            msg = f"line {line} outside source with {len(self._offsets)} lines"
            raise ValueError(msg)
        return self._offsets[line - 1] + column - 1


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parsed value plus the cursor positioned after it.

    Type Parameters:
        T: The type of the parsed value
    """

    value: T
    cursor: Cursor
