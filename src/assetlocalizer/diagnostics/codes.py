"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Configuration errors (options, locale tables, templates)
        2000-2999: String key diagnostics (missing and unused keys)
        3000-3999: Call-site diagnostics (parse-time interception)
        4000-4999: Placeholder and compiler diagnostics (post-build pass)
    """

    # Configuration errors (1000-1999)
    OPTIONS_REQUIRED = 1001
    LOCALES_REQUIRED = 1002
    LOCALES_EMPTY = 1003
    LOCALE_TABLE_MALFORMED = 1004
    LOCALE_FILE_UNREADABLE = 1005
    SOURCE_MAP_LOCALE_UNKNOWN = 1006
    COMPILER_EMPTY = 1007
    COMPILER_CONFLICT = 1008
    FILENAME_MISSING_LOCALE_TOKEN = 1009
    UNKNOWN_LOCALE = 1010
    INVALID_OPTION = 1011

    # String key diagnostics (2000-2999)
    MISSING_KEY = 2001
    UNUSED_KEY = 2002

    # Call-site diagnostics (3000-3999)
    CONFUSING_USAGE = 3001
    CALL_SYNTAX = 3002

    # Placeholder and compiler diagnostics (4000-4999)
    PLACEHOLDER_DECODE_FAILED = 4001
    COMPILER_NOT_FOUND = 4002
    COMPILER_FAILED = 4003
    COMPILER_WARNING = 4004
    COMPILER_ERROR = 4005


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes. For multi-byte UTF-8 characters, character offset differs
        from byte offset.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, or line or
                column is less than 1.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Carries everything a host needs to surface a build warning or error:
    a stable code, the message text, and where it happened.

    Attributes:
        code: Unique error code
        message: Human-readable description; also the deduplication key
        span: Location in the module source (None when not tied to a call site)
        module: Module identifier the diagnostic refers to
        hint: Suggestion for fixing the problem
        locale: Locale being processed when the diagnostic was raised
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    module: str | None = None
    hint: str | None = None
    locale: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable description."""
        return self.message

    @property
    def location(self) -> str | None:
        """Return ``module:line:column`` (or just the module) when known."""
        if self.module is None:
            return None
        if self.span is None:
            return self.module
        return f"{self.module}:{self.span.line}:{self.span.column}"

    def format_error(self) -> str:
        """Format diagnostic like a compiler message.

        Delegates to DiagnosticFormatter.

        Example output:
            warning[MISSING_KEY]: Missing localization for key "hi" ...
              --> /src/index.js:3:16
              = help: Add the key to every locale table

        Returns:
            Formatted diagnostic text
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
