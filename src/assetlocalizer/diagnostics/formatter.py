"""Diagnostic formatting service.

Renders build diagnostics for terminals (compiler style, optionally
colored), for logs (one line each) and for tooling (JSON).
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Compiler-style multi-line output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Truncate messages longer than this (0 disables)

    Example:
        >>> from assetlocalizer.diagnostics import ErrorTemplate
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.unused_key("bye")))
        UNUSED_KEY: Unused string key "bye"
    """

    output_format: OutputFormat = OutputFormat.RUST
    color: bool = False
    max_content_length: int = 0

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        severity = diagnostic.severity
        if self.color:
            code = "1;31" if severity == "error" else "1;33"
            severity_str = f"\033[{code}m{severity}\033[0m"
        else:
            severity_str = severity

        message = self._truncate(diagnostic.message)
        parts = [f"{severity_str}[{diagnostic.code.name}]: {message}"]

        location = diagnostic.location
        if location is not None:
            parts.append(f"  --> {location}")
        if diagnostic.locale:
            parts.append(f"  = locale: {diagnostic.locale}")
        if diagnostic.hint:
            parts.append(f"  = help: {self._truncate(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        return f"{diagnostic.code.name}: {self._truncate(diagnostic.message)}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": self._truncate(diagnostic.message),
            "severity": diagnostic.severity,
        }

        if diagnostic.module:
            data["module"] = diagnostic.module
        if diagnostic.span:
            data["line"] = diagnostic.span.line
            data["column"] = diagnostic.span.column
            data["start"] = diagnostic.span.start
            data["end"] = diagnostic.span.end
        if diagnostic.locale:
            data["locale"] = diagnostic.locale
        if diagnostic.hint:
            data["hint"] = self._truncate(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _truncate(self, text: str) -> str:
        if self.max_content_length and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
