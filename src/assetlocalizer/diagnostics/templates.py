"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable

from .codes import Diagnostic, DiagnosticCode, SourceSpan


def _describe_location(module: str | None, span: SourceSpan | None) -> str:
    if module is None:
        return "<unknown>"
    if span is None:
        return module
    return f"{module}:{span.line}:{span.column}"


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Message text doubles as the deduplication key for build diagnostics, so the
    wording of each template is part of the observable behavior.
    """

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @staticmethod
    def options_required() -> Diagnostic:
        """Plugin constructed without options."""
        return Diagnostic(
            code=DiagnosticCode.OPTIONS_REQUIRED,
            message="Options are required",
            hint="Pass LocalizeOptions(locales=...)",
        )

    @staticmethod
    def locales_required() -> Diagnostic:
        """Options without a locales mapping."""
        return Diagnostic(
            code=DiagnosticCode.LOCALES_REQUIRED,
            message="Locales are required",
            hint="Map each locale name to a table or a JSON file path",
        )

    @staticmethod
    def locales_empty() -> Diagnostic:
        """Locales mapping with no entries."""
        return Diagnostic(
            code=DiagnosticCode.LOCALES_EMPTY,
            message="locales must contain at least one locale",
        )

    @staticmethod
    def locale_table_malformed(locale: str, reason: str) -> Diagnostic:
        """Locale table is not a mapping of string keys.

        Args:
            locale: Locale whose table is malformed
            reason: What is wrong with it
        """
        msg = f"Locale table for '{locale}' is malformed: {reason}"
        return Diagnostic(
            code=DiagnosticCode.LOCALE_TABLE_MALFORMED,
            message=msg,
            locale=locale,
            hint="Locale tables must be JSON objects keyed by string key",
        )

    @staticmethod
    def locale_file_unreadable(locale: str, path: str, reason: str) -> Diagnostic:
        """Locale file could not be read or decoded.

        Args:
            locale: Locale the file belongs to
            path: File path as configured
            reason: Underlying error text
        """
        msg = f"Could not load locale '{locale}' from {path}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.LOCALE_FILE_UNREADABLE,
            message=msg,
            locale=locale,
        )

    @staticmethod
    def source_map_locale_unknown(unknown: Iterable[str]) -> Diagnostic:
        """source_map_for_locales names a locale that is not configured."""
        names = ", ".join(sorted(unknown))
        return Diagnostic(
            code=DiagnosticCode.SOURCE_MAP_LOCALE_UNKNOWN,
            message="sourceMapForLocales must contain valid locales",
            hint=f"Unknown locales: {names}",
        )

    @staticmethod
    def compiler_empty() -> Diagnostic:
        """localize_compiler given but holds no compilers."""
        return Diagnostic(
            code=DiagnosticCode.COMPILER_EMPTY,
            message="localizeCompiler can't be an empty object",
        )

    @staticmethod
    def compiler_conflict() -> Diagnostic:
        """Both localize_compiler and custom function_names configured."""
        return Diagnostic(
            code=DiagnosticCode.COMPILER_CONFLICT,
            message="Can't use localizeCompiler and also specify functionName",
            hint="Compiler names are the function names to intercept",
        )

    @staticmethod
    def filename_missing_locale_token(option_name: str) -> Diagnostic:
        """Multi-locale output template without the [locale] token.

        Args:
            option_name: Template option name (e.g. "output.filename")
        """
        msg = f"{option_name} must include [locale]"
        return Diagnostic(
            code=DiagnosticCode.FILENAME_MISSING_LOCALE_TOKEN,
            message=msg,
            hint="Every locale needs its own output file",
        )

    @staticmethod
    def unknown_locale(locale: str) -> Diagnostic:
        """Configured locale name is not a CLDR locale.

        Args:
            locale: Locale name as configured
        """
        msg = f"Locale '{locale}' is not a recognized CLDR locale"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_LOCALE,
            message=msg,
            locale=locale,
            severity="warning",
            hint="Locale names are used as labels only; check for typos",
        )

    @staticmethod
    def invalid_option(option_name: str, reason: str) -> Diagnostic:
        """Generic option value error.

        Args:
            option_name: Option name
            reason: What is wrong with the value
        """
        msg = f"Invalid option {option_name}: {reason}"
        return Diagnostic(code=DiagnosticCode.INVALID_OPTION, message=msg)

    # ------------------------------------------------------------------
    # String keys
    # ------------------------------------------------------------------

    @staticmethod
    def missing_key(
        key: str,
        missing_locales: Iterable[str],
        *,
        module: str | None = None,
        span: SourceSpan | None = None,
        fatal: bool = False,
    ) -> Diagnostic:
        """String key missing from one or more locale tables.

        Args:
            key: The string key
            missing_locales: Locales lacking the key
            module: Module containing the call site
            span: Call site location
            fatal: True when throw_on_missing is enabled

        Returns:
            Diagnostic for MISSING_KEY
        """
        where = _describe_location(module, span)
        locales = ", ".join(missing_locales)
        msg = f'Missing localization for key "{key}" used in {where} from locales: {locales}'
        return Diagnostic(
            code=DiagnosticCode.MISSING_KEY,
            message=msg,
            span=span,
            module=module,
            severity="error" if fatal else "warning",
            hint="Add the key to every locale table",
        )

    @staticmethod
    def unused_key(key: str) -> Diagnostic:
        """String key present in locale tables but never used.

        Args:
            key: The unused string key
        """
        msg = f'Unused string key "{key}"'
        return Diagnostic(code=DiagnosticCode.UNUSED_KEY, message=msg, severity="warning")

    # ------------------------------------------------------------------
    # Call sites
    # ------------------------------------------------------------------

    @staticmethod
    def confusing_usage(
        function_name: str, *, module: str | None = None, span: SourceSpan | None = None
    ) -> Diagnostic:
        """Translation call whose shape cannot be localized.

        Args:
            function_name: Intercepted function name
            module: Module containing the call site
            span: Call site location
        """
        where = _describe_location(module, span)
        msg = f'Ignoring confusing usage of localization function "{function_name}" in {where}'
        return Diagnostic(
            code=DiagnosticCode.CONFUSING_USAGE,
            message=msg,
            span=span,
            module=module,
            severity="warning",
            hint="Pass a single string literal key",
        )

    @staticmethod
    def confusing_call(call_source: str, *, locale: str | None = None) -> Diagnostic:
        """Default compiler received more than one argument.

        Args:
            call_source: Serialized call expression
            locale: Locale being compiled
        """
        msg = f"Ignoring confusing usage of localization function: {call_source}"
        return Diagnostic(
            code=DiagnosticCode.CONFUSING_USAGE,
            message=msg,
            locale=locale,
            severity="warning",
        )

    @staticmethod
    def call_syntax(reason: str, position: int) -> Diagnostic:
        """Call expression text outside the supported grammar.

        Args:
            reason: What the parser expected
            position: Character offset where parsing failed
        """
        msg = f"Invalid call expression at position {position}: {reason}"
        return Diagnostic(code=DiagnosticCode.CALL_SYNTAX, message=msg)

    # ------------------------------------------------------------------
    # Placeholders and compilers
    # ------------------------------------------------------------------

    @staticmethod
    def placeholder_decode_failed(reason: str) -> Diagnostic:
        """Placeholder text could not be decoded.

        Args:
            reason: Underlying decode failure
        """
        msg = f"Could not decode placeholder: {reason}"
        return Diagnostic(code=DiagnosticCode.PLACEHOLDER_DECODE_FAILED, message=msg)

    @staticmethod
    def compiler_not_found(function_name: str) -> Diagnostic:
        """No compiler registered for a function name.

        Args:
            function_name: Callee name of the placeholder call
        """
        msg = f"No localize compiler registered for '{function_name}'"
        return Diagnostic(
            code=DiagnosticCode.COMPILER_NOT_FOUND,
            message=msg,
            hint="Register a compiler under this exact name",
        )

    @staticmethod
    def compiler_failed(
        function_name: str, reason: str, *, locale: str | None = None
    ) -> Diagnostic:
        """Compiler raised while producing replacement code.

        Args:
            function_name: Compiler name
            reason: Exception text
            locale: Locale being compiled
        """
        msg = f"Localize compiler '{function_name}' failed: {reason}"
        return Diagnostic(code=DiagnosticCode.COMPILER_FAILED, message=msg, locale=locale)

    @staticmethod
    def compiler_returned_non_string(
        function_name: str, type_name: str, *, locale: str | None = None
    ) -> Diagnostic:
        """Compiler returned something other than code text.

        Args:
            function_name: Compiler name
            type_name: Type of the returned value
            locale: Locale being compiled
        """
        msg = f"Localize compiler '{function_name}' must return str, got {type_name}"
        return Diagnostic(code=DiagnosticCode.COMPILER_FAILED, message=msg, locale=locale)

    @staticmethod
    def compiler_warning(message: str, *, locale: str | None = None) -> Diagnostic:
        """Warning emitted by a compiler through its context."""
        return Diagnostic(
            code=DiagnosticCode.COMPILER_WARNING,
            message=message,
            locale=locale,
            severity="warning",
        )

    @staticmethod
    def compiler_error(message: str, *, locale: str | None = None) -> Diagnostic:
        """Error emitted by a compiler through its context."""
        return Diagnostic(code=DiagnosticCode.COMPILER_ERROR, message=message, locale=locale)
