"""Exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from .codes import Diagnostic


class LocalizeError(Exception):
    """Base exception for all assetlocalizer errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LocalizeError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class ConfigurationError(LocalizeError):
    """Invalid options, locale tables or output filename templates.

    Raised before any module is processed; the build cannot start.
    """


class MissingKeyError(LocalizeError):
    """A string key is absent from one or more locale tables.

    Only raised when ``throw_on_missing`` is enabled; otherwise the same
    condition is reported as a warning.

    Attributes:
        key: The missing string key
        missing_locales: Locales whose tables lack the key
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        key: str = "",
        missing_locales: Sequence[str] = (),
    ) -> None:
        """Initialize MissingKeyError.

        Args:
            message: Error message string OR Diagnostic object
            key: The missing string key
            missing_locales: Locales whose tables lack the key
        """
        super().__init__(message)
        self.key = key
        self.missing_locales = tuple(missing_locales)


class CallSyntaxError(LocalizeError):
    """Text is not a call expression in the supported grammar subset."""


class PlaceholderDecodeError(LocalizeError):
    """Placeholder text could not be decoded back into its payload.

    The locator treats this as a skipped occurrence, never as a build failure.
    """


class LocalizeCompilerError(LocalizeError):
    """A localize compiler is unknown, failed, or returned a non-string."""
