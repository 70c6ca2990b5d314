"""Build configuration.

LocalizeOptions holds everything a user configures; OutputTemplates holds
the host's output filename templates the engine has to check. Both are
validated at construction so a bad configuration fails before any module
is processed.

Python 3.13+.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from assetlocalizer.compiler import CompilerRegistry, LocalizeCompiler
from assetlocalizer.constants import (
    DEFAULT_CODE_ASSET_PATTERN,
    DEFAULT_FUNCTION_NAME,
    DEFAULT_LOCALE_VARIABLE,
    DEFAULT_MAX_WORKERS,
)
from assetlocalizer.diagnostics import ConfigurationError, ErrorTemplate
from assetlocalizer.filename import FilenameTemplate, has_locale_token
from assetlocalizer.syntax.lexer import identifier_end
from assetlocalizer.types import LocaleName

__all__ = ["LocalizeOptions", "OutputTemplates"]

type LocalesOption = Mapping[LocaleName, str | Mapping[str, Any]]
type CompilerOption = Mapping[str, LocalizeCompiler] | CompilerRegistry


def _invalid(option_name: str, reason: str) -> ConfigurationError:
    return ConfigurationError(ErrorTemplate.invalid_option(option_name, reason))


@dataclass(frozen=True, slots=True)
class LocalizeOptions:
    """Immutable user configuration for one AssetLocalizer.

    Attributes:
        locales: Locale name -> inline table or path to a JSON table.
            One entry selects single-locale mode.
        function_names: Translation function names intercepted when no
            localize_compiler is configured (default: ``("__",)``).
        throw_on_missing: Missing keys fail the build instead of warning.
        source_map_for_locales: Locales that get source maps (None: all).
        warn_on_unused_string: Warn about keys no module uses.
        localize_compiler: Function name -> compiler; the names double as the
            intercepted function names.
        locale_variable: Free identifier replaced with the locale name.
        max_workers: Threads for the post-build pass (1: sequential).
        code_asset_pattern: Regex over asset names selecting code assets.

    Example:
        >>> options = LocalizeOptions(locales={"en": {"hello-key": "Hello"}})
        >>> options.intercepted_function_names
        ('__',)
    """

    locales: LocalesOption | None
    function_names: Sequence[str] = (DEFAULT_FUNCTION_NAME,)
    throw_on_missing: bool = False
    source_map_for_locales: Sequence[LocaleName] | None = None
    warn_on_unused_string: bool = False
    localize_compiler: CompilerOption | None = None
    locale_variable: str = DEFAULT_LOCALE_VARIABLE
    max_workers: int = DEFAULT_MAX_WORKERS
    code_asset_pattern: str = DEFAULT_CODE_ASSET_PATTERN

    def __post_init__(self) -> None:
        """Validate option values.

        Raises:
            ConfigurationError: Missing locales, empty or conflicting
                localize_compiler, unknown source map locales, or an invalid
                scalar option
        """
        if self.locales is None:
            raise ConfigurationError(ErrorTemplate.locales_required())

        if isinstance(self.function_names, str):
            object.__setattr__(self, "function_names", (self.function_names,))
        else:
            object.__setattr__(self, "function_names", tuple(self.function_names))
        if not self.function_names or not all(self.function_names):
            raise _invalid("function_names", "expected at least one non-empty name")

        if self.localize_compiler is not None:
            if len(self.localize_compiler) == 0:
                raise ConfigurationError(ErrorTemplate.compiler_empty())
            if self.function_names != (DEFAULT_FUNCTION_NAME,):
                raise ConfigurationError(ErrorTemplate.compiler_conflict())

        if self.source_map_for_locales is not None:
            selected = tuple(self.source_map_for_locales)
            unknown = [name for name in selected if name not in self.locales]
            if unknown:
                raise ConfigurationError(ErrorTemplate.source_map_locale_unknown(unknown))
            object.__setattr__(self, "source_map_for_locales", selected)

        variable = self.locale_variable
        if not variable or identifier_end(variable, 0) != len(variable):
            raise _invalid("locale_variable", f"{variable!r} is not an identifier")

        if self.max_workers <= 0:
            raise _invalid("max_workers", "must be positive")

        try:
            re.compile(self.code_asset_pattern)
        except re.error as e:
            raise _invalid("code_asset_pattern", str(e)) from e

    @property
    def compilers(self) -> CompilerRegistry | None:
        """localize_compiler as a registry, or None when not configured."""
        if self.localize_compiler is None:
            return None
        if isinstance(self.localize_compiler, CompilerRegistry):
            return self.localize_compiler.copy()
        return CompilerRegistry.from_mapping(self.localize_compiler)

    @property
    def intercepted_function_names(self) -> tuple[str, ...]:
        """Function names whose calls are localized."""
        if self.localize_compiler is not None:
            return tuple(self.localize_compiler)
        return tuple(self.function_names)

    def wants_source_map(self, locale: LocaleName) -> bool:
        """True when locale's assets keep their source maps."""
        return self.source_map_for_locales is None or locale in self.source_map_for_locales


@dataclass(frozen=True, slots=True)
class OutputTemplates:
    """The host's output filename templates.

    Attributes:
        filename: Template for entry chunks
        chunk_filename: Template for other chunks (None: same as filename)
    """

    filename: FilenameTemplate
    chunk_filename: FilenameTemplate | None = None

    def validate(self, *, multi_locale: bool) -> None:
        """Check that string templates carry ``[locale]`` in multi-locale mode.

        Callable templates are checked when the host computes paths
        (BuildSession.asset_path raises for a path without the token).

        Raises:
            ConfigurationError: A template lacks the locale token
        """
        if not multi_locale:
            return
        for option_name, template in (
            ("output.filename", self.filename),
            ("output.chunkFilename", self.chunk_filename),
        ):
            if isinstance(template, str) and not has_locale_token(template):
                raise ConfigurationError(ErrorTemplate.filename_missing_locale_token(option_name))
