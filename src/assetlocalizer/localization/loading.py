"""Locale table loading.

Locale tables are configured either inline (a mapping of string key to
value) or as a path to a JSON file. Files are read through a loader
protocol so hosts can plug in their own file system.

Components:
    LocaleFileLoader - Protocol for reading one locale file (structural typing)
    JsonLocaleLoader - Disk-based JSON loader
    LocaleData - Immutable, loaded locale tables for one build
    load_locales - Validate configuration and load every table

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

from assetlocalizer.diagnostics import ConfigurationError, ErrorTemplate
from assetlocalizer.locale_utils import is_cldr_locale

if TYPE_CHECKING:
    from assetlocalizer.diagnostics import DiagnosticCollector
    from assetlocalizer.types import LocaleName, LocaleTable, LocalizedValue, StringKey

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "LocaleFileLoader",
    # Concrete loader
    "JsonLocaleLoader",
    # Loaded data
    "LocaleData",
    "load_locales",
]

logger = logging.getLogger(__name__)


class LocaleFileLoader(Protocol):
    """Protocol for reading a locale table from a configured path.

    Example:
        >>> class DictLoader:
        ...     def __init__(self, files): self.files = files
        ...     def resolve(self, path): return path
        ...     def load(self, path): return self.files[path]
    """

    def resolve(self, path: str) -> str:
        """Return the canonical path reported as a file dependency."""

    def load(self, path: str) -> Mapping[str, Any]:
        """Read and decode the table at path.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the content is not valid JSON
        """


@dataclass(frozen=True, slots=True)
class JsonLocaleLoader:
    """Loads UTF-8 JSON locale files from disk.

    Relative paths resolve against root_dir (the build's context directory),
    or the current working directory when root_dir is None.

    Example:
        >>> loader = JsonLocaleLoader("/app")
        >>> loader.resolve("locales/en.json")
        '/app/locales/en.json'
    """

    root_dir: str | None = None

    def resolve(self, path: str) -> str:
        """Absolute path for path."""
        base = Path(self.root_dir) if self.root_dir is not None else Path.cwd()
        return str((base / path).resolve())

    def load(self, path: str) -> Mapping[str, Any]:
        """Read and decode the JSON file at path."""
        resolved = Path(self.resolve(path))
        logger.debug("Reading locale file %s", resolved)
        return json.loads(resolved.read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class LocaleData:
    """Loaded locale tables for one build.

    Immutable once loaded: tables are exposed as read-only views.

    Attributes:
        names: Locale names in configuration order
        tables: Locale name -> key/value table
        file_dependencies: Resolved paths of locale files (for watch mode)
    """

    names: tuple[LocaleName, ...]
    tables: Mapping[LocaleName, LocaleTable]
    file_dependencies: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_multi_locale(self) -> bool:
        """True when more than one locale is configured."""
        return len(self.names) > 1

    @property
    def single_locale(self) -> LocaleName:
        """The first configured locale (the only one in single-locale mode)."""
        return self.names[0]

    def lookup(self, locale: LocaleName, key: StringKey) -> LocalizedValue | None:
        """Value for key in locale's table, or None when absent."""
        return self.tables[locale].get(key)

    def missing_locales(self, key: StringKey) -> tuple[LocaleName, ...]:
        """Locales whose tables lack key, in configuration order."""
        return tuple(name for name in self.names if key not in self.tables[name])

    def all_keys(self) -> set[StringKey]:
        """Union of keys across every table."""
        keys: set[StringKey] = set()
        for table in self.tables.values():
            keys.update(table)
        return keys


def _validate_table(locale: LocaleName, table: object) -> LocaleTable:
    if not isinstance(table, Mapping):
        reason = f"expected an object, got {type(table).__name__}"
        raise ConfigurationError(ErrorTemplate.locale_table_malformed(locale, reason))
    for key in table:
        if not isinstance(key, str):
            reason = f"key {key!r} is not a string"
            raise ConfigurationError(ErrorTemplate.locale_table_malformed(locale, reason))
    return MappingProxyType(table)


def load_locales(
    locales: Mapping[LocaleName, str | Mapping[str, Any]] | None,
    *,
    loader: LocaleFileLoader | None = None,
    diagnostics: DiagnosticCollector | None = None,
) -> LocaleData:
    """Validate the locales option and load every table.

    Args:
        locales: Locale name -> inline table or JSON file path
        loader: File loader for path entries (default: JsonLocaleLoader())
        diagnostics: Receives UNKNOWN_LOCALE warnings for non-CLDR names

    Returns:
        LocaleData with read-only tables

    Raises:
        ConfigurationError: Missing or empty configuration, unreadable file,
            or a table that is not a mapping of string keys
    """
    if locales is None:
        raise ConfigurationError(ErrorTemplate.locales_required())
    if not isinstance(locales, Mapping):
        reason = f"expected a mapping, got {type(locales).__name__}"
        raise ConfigurationError(ErrorTemplate.invalid_option("locales", reason))
    if not locales:
        raise ConfigurationError(ErrorTemplate.locales_empty())

    file_loader = loader if loader is not None else JsonLocaleLoader()
    tables: dict[LocaleName, LocaleTable] = {}
    dependencies: set[str] = set()

    for name, entry in locales.items():
        if isinstance(entry, str):
            try:
                raw = file_loader.load(entry)
            except (OSError, ValueError) as e:
                diagnostic = ErrorTemplate.locale_file_unreadable(name, entry, str(e))
                raise ConfigurationError(diagnostic) from e
            dependencies.add(file_loader.resolve(entry))
            tables[name] = _validate_table(name, raw)
        else:
            tables[name] = _validate_table(name, entry)

        if diagnostics is not None and not is_cldr_locale(name):
            diagnostics.add(ErrorTemplate.unknown_locale(name))

    logger.info("Loaded %d locale(s): %s", len(tables), ", ".join(tables))
    return LocaleData(
        names=tuple(tables),
        tables=MappingProxyType(tables),
        file_dependencies=frozenset(dependencies),
    )
