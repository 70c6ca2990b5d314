"""Diagnostic system for assetlocalizer.

Provides structured diagnostics with codes, spans and hints, the exception
hierarchy that carries them, and the build-scoped collector.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .collector import DiagnosticCollector
from .errors import (
    CallSyntaxError,
    ConfigurationError,
    LocalizeCompilerError,
    LocalizeError,
    MissingKeyError,
    PlaceholderDecodeError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "CallSyntaxError",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticCollector",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "LocalizeCompilerError",
    "LocalizeError",
    "MissingKeyError",
    "OutputFormat",
    "PlaceholderDecodeError",
    "SourceSpan",
]
