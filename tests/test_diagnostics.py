"""Tests for diagnostics, templates, formatting and collection."""

import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from assetlocalizer.diagnostics import (
    ConfigurationError,
    Diagnostic,
    DiagnosticCode,
    DiagnosticCollector,
    DiagnosticFormatter,
    ErrorTemplate,
    LocalizeError,
    MissingKeyError,
    OutputFormat,
    SourceSpan,
)


class TestSourceSpan:
    """Span invariants."""

    def test_valid_span(self) -> None:
        """Offsets are 0-based, line and column 1-based."""
        span = SourceSpan(start=19, end=35, line=1, column=20)
        assert (span.line, span.column) == (1, 20)

    @pytest.mark.parametrize(
        ("start", "end", "line", "column"),
        [(-1, 0, 1, 1), (5, 4, 1, 1), (0, 0, 0, 1), (0, 0, 1, 0)],
    )
    def test_invalid_span(self, start: int, end: int, line: int, column: int) -> None:
        """Negative offsets, inverted ranges and 0 line/column are rejected."""
        with pytest.raises(ValueError):
            SourceSpan(start, end, line, column)


class TestErrorTemplate:
    """Message wording (observable: it is the deduplication key)."""

    def test_missing_key_message(self) -> None:
        """The missing-key warning names key, location and locales."""
        span = SourceSpan(19, 35, 1, 20)
        diagnostic = ErrorTemplate.missing_key("hello-key", ["ja"], module="index.js", span=span)
        assert diagnostic.message == (
            'Missing localization for key "hello-key" used in index.js:1:20 from locales: ja'
        )
        assert diagnostic.severity == "warning"
        assert diagnostic.location == "index.js:1:20"

    def test_fatal_missing_key_is_error(self) -> None:
        """throw_on_missing turns the diagnostic into an error."""
        assert ErrorTemplate.missing_key("k", ["es"], fatal=True).severity == "error"

    def test_unknown_location(self) -> None:
        """Without a module the location is reported as unknown."""
        message = ErrorTemplate.missing_key("k", ["es", "ja"]).message
        assert message.endswith("used in <unknown> from locales: es, ja")

    def test_configuration_messages(self) -> None:
        """Configuration errors keep their established wording."""
        assert ErrorTemplate.compiler_empty().message == "localizeCompiler can't be an empty object"
        assert (
            ErrorTemplate.filename_missing_locale_token("output.filename").message
            == "output.filename must include [locale]"
        )


class TestExceptions:
    """Exceptions carrying diagnostics."""

    def test_diagnostic_exception(self) -> None:
        """str() is the diagnostic message."""
        error = ConfigurationError(ErrorTemplate.locales_required())
        assert str(error) == "Locales are required"
        assert error.diagnostic is not None
        assert error.diagnostic.code is DiagnosticCode.LOCALES_REQUIRED
        assert isinstance(error, LocalizeError)

    def test_plain_message(self) -> None:
        """A plain string message has no diagnostic."""
        assert LocalizeError("plain").diagnostic is None

    def test_missing_key_error_fields(self) -> None:
        """MissingKeyError exposes the key and locales."""
        error = MissingKeyError("missing", key="k", missing_locales=["es"])
        assert error.key == "k"
        assert error.missing_locales == ("es",)


class TestDiagnosticFormatter:
    """Output formats."""

    DIAGNOSTIC = Diagnostic(
        code=DiagnosticCode.MISSING_KEY,
        message='Missing localization for key "k"',
        span=SourceSpan(0, 5, 3, 7),
        module="src/app.js",
        hint="Add the key to every locale table",
        locale="es",
        severity="warning",
    )

    def test_rust_format(self) -> None:
        """Compiler-style output with location, locale and help."""
        assert DiagnosticFormatter().format(self.DIAGNOSTIC) == (
            'warning[MISSING_KEY]: Missing localization for key "k"\n'
            "  --> src/app.js:3:7\n"
            "  = locale: es\n"
            "  = help: Add the key to every locale table"
        )

    def test_simple_format(self) -> None:
        """Single line with code name."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        assert formatter.format(ErrorTemplate.unused_key("bye")) == 'UNUSED_KEY: Unused string key "bye"'

    def test_json_format(self) -> None:
        """JSON output carries the structured fields."""
        data = json.loads(DiagnosticFormatter(output_format=OutputFormat.JSON).format(self.DIAGNOSTIC))
        assert data["code"] == "MISSING_KEY"
        assert data["code_value"] == 2001
        assert (data["line"], data["column"]) == (3, 7)
        assert data["locale"] == "es"

    def test_truncation_and_color(self) -> None:
        """Long messages are truncated; color wraps the severity."""
        formatter = DiagnosticFormatter(color=True, max_content_length=10)
        first_line = formatter.format(self.DIAGNOSTIC).splitlines()[0]
        assert first_line.startswith("\033[1;33mwarning\033[0m[MISSING_KEY]: ")
        assert first_line.endswith("Missing lo...")

    def test_format_error_delegates(self) -> None:
        """Diagnostic.format_error uses the default formatter."""
        assert self.DIAGNOSTIC.format_error() == DiagnosticFormatter().format(self.DIAGNOSTIC)

    def test_format_all(self) -> None:
        """Diagnostics are separated by blank lines."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        text = formatter.format_all([ErrorTemplate.unused_key("a"), ErrorTemplate.unused_key("b")])
        assert text == 'UNUSED_KEY: Unused string key "a"\n\nUNUSED_KEY: Unused string key "b"'


class TestDiagnosticCollector:
    """Deduplicating, thread-safe collection."""

    def test_dedup_by_message(self) -> None:
        """The same message is recorded once."""
        collector = DiagnosticCollector()
        assert collector.add(ErrorTemplate.unused_key("k"))
        assert not collector.add(ErrorTemplate.unused_key("k"))
        assert len(collector) == 1

    def test_split_by_severity(self) -> None:
        """Errors and warnings are kept apart; iteration yields errors first."""
        collector = DiagnosticCollector()
        collector.add(ErrorTemplate.unused_key("k"))
        collector.add(ErrorTemplate.compiler_error("bad"))
        assert collector.has_errors
        assert [d.severity for d in collector] == ["error", "warning"]

    def test_logged_at_severity(self, caplog: pytest.LogCaptureFixture) -> None:
        """Recorded diagnostics are logged once."""
        collector = DiagnosticCollector()
        with caplog.at_level(logging.WARNING, logger="assetlocalizer.diagnostics"):
            collector.add(ErrorTemplate.unused_key("k"))
            collector.add(ErrorTemplate.unused_key("k"))
        assert caplog.messages == ['Unused string key "k"']

    def test_concurrent_adds(self) -> None:
        """Concurrent duplicates are recorded once."""
        collector = DiagnosticCollector()
        with ThreadPoolExecutor(max_workers=8) as executor:
            added = list(
                executor.map(lambda i: collector.add(ErrorTemplate.unused_key(str(i % 4))), range(100))
            )
        assert sum(added) == 4
        assert len(collector.warnings) == 4

    def test_report_lists_errors_first(self) -> None:
        """report() formats every entry with the given formatter."""
        collector = DiagnosticCollector()
        assert collector.report() == ""
        collector.add(ErrorTemplate.unused_key("k"))
        collector.add(ErrorTemplate.compiler_error("bad"))
        text = collector.report(DiagnosticFormatter(output_format=OutputFormat.SIMPLE))
        assert text.splitlines()[-1] == 'UNUSED_KEY: Unused string key "k"'
        assert text.splitlines()[0].startswith("COMPILER_ERROR: ")
