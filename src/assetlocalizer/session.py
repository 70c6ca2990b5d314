"""Build orchestration.

AssetLocalizer is the plugin object a host creates once from the user's
options. Every build (including each watch rebuild) starts a BuildSession,
which owns all per-build state:

    - Parse time: on_call() and on_locale_variable() produce the text that
      replaces each translation call and locale variable reference.
    - After the bundle is built: localize_assets() turns every asset whose
      name carries the locale placeholder into one asset per locale.
    - At the end: finish() reports unused keys and returns the diagnostics.

In single-locale mode calls are resolved immediately and no post-build pass
is needed. In multi-locale mode calls become placeholders, and each
(asset, locale) pair is an independent unit of work that reads shared
immutable state and writes one output asset.

Python 3.13+.
"""

import json
import logging
import re
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from threading import Lock
from typing import Any

from assetlocalizer.compiler import LocalizeInvoker
from assetlocalizer.config import LocalizeOptions, OutputTemplates
from assetlocalizer.constants import ASSET_NAME_PLACEHOLDER
from assetlocalizer.content_hash import ContentHashMap
from assetlocalizer.diagnostics import (
    CallSyntaxError,
    ConfigurationError,
    DiagnosticCollector,
    ErrorTemplate,
    MissingKeyError,
    SourceSpan,
)
from assetlocalizer.enums import LocalizeMode
from assetlocalizer.filename import (
    AssetPathHook,
    FilenameTemplate,
    localize_asset_info,
    localize_asset_name,
)
from assetlocalizer.localization import LocaleData, LocaleFileLoader, load_locales
from assetlocalizer.locator import AssetTextLocator, PlaceholderOccurrence
from assetlocalizer.placeholder import ExpressionPayload, KeyPayload, PlaceholderCodec
from assetlocalizer.splicer import Edit, TextSplicer
from assetlocalizer.store import AssetRecord, AssetStore
from assetlocalizer.syntax import CallExpression, js_literal, parse_call_expression, serialize
from assetlocalizer.types import AssetName, LocaleName, ModuleId, StringKey
from assetlocalizer.validator import StringKeyValidator

__all__ = ["AssetLocalizer", "BuildSession"]

logger = logging.getLogger(__name__)

_SOURCE_MAP_ASSET = re.compile(r"\.map$")


class AssetLocalizer:
    """Plugin entry point holding validated options.

    Example:
        >>> localizer = AssetLocalizer(LocalizeOptions(locales={"en": {"hi": "Hello"}}))
        >>> session = localizer.begin_build(OutputTemplates("[name].js"))
        >>> session.on_call("__", '__("hi")', None, "index.js")
        '"Hello"'
    """

    __slots__ = ("_loader", "_options")

    def __init__(
        self, options: LocalizeOptions | None, *, loader: LocaleFileLoader | None = None
    ) -> None:
        """Initialize AssetLocalizer.

        Args:
            options: User configuration
            loader: Reads locale tables given as file paths (default: JSON files)

        Raises:
            ConfigurationError: options is None
        """
        if options is None:
            raise ConfigurationError(ErrorTemplate.options_required())
        self._options = options
        self._loader = loader

    @property
    def options(self) -> LocalizeOptions:
        return self._options

    def begin_build(self, output: OutputTemplates | None = None) -> "BuildSession":
        """Start a build: load locale tables and check output templates.

        Tables are reloaded on every call so edits to locale files show up in
        watch rebuilds.

        Args:
            output: The host's output filename templates, if it has any

        Returns:
            Fresh BuildSession

        Raises:
            ConfigurationError: Invalid locales, or a template lacking
                ``[locale]`` in multi-locale mode
        """
        diagnostics = DiagnosticCollector()
        locales = load_locales(self._options.locales, loader=self._loader, diagnostics=diagnostics)
        if output is not None:
            output.validate(multi_locale=locales.is_multi_locale)
        session = BuildSession(self._options, locales, diagnostics)
        logger.info("Build started: %s-locale mode, %d locale(s)", session.mode, len(locales.names))
        return session


@dataclass(frozen=True, slots=True)
class _PreparedAsset:
    """Per-asset work shared by all of its locales."""

    asset: AssetRecord
    code: str
    source_map: Mapping[str, Any] | None
    is_code: bool
    occurrences: tuple[PlaceholderOccurrence, ...] = ()
    # (start, end, original hash or None for the name placeholder)
    static_ranges: tuple[tuple[int, int, str | None], ...] = ()


class BuildSession:
    """State and hooks for one build.

    Thread-safe for localize_assets(); the parse-time hooks may also be
    called from several threads.
    """

    __slots__ = (
        "_code_pattern",
        "_codec",
        "_compilers",
        "_diagnostics",
        "_invoker",
        "_locales",
        "_localized_modules",
        "_locator",
        "_lock",
        "_mode",
        "_options",
        "_path_hook",
        "_used_keys",
        "_validator",
    )

    def __init__(
        self,
        options: LocalizeOptions,
        locales: LocaleData,
        diagnostics: DiagnosticCollector,
        *,
        codec: PlaceholderCodec | None = None,
    ) -> None:
        self._options = options
        self._locales = locales
        self._diagnostics = diagnostics
        self._mode = LocalizeMode.MULTI if locales.is_multi_locale else LocalizeMode.SINGLE
        self._validator = StringKeyValidator(locales)
        self._compilers = options.compilers
        self._invoker = LocalizeInvoker(locales, diagnostics, self._compilers)
        self._codec = codec if codec is not None else PlaceholderCodec()
        self._locator = AssetTextLocator(self._codec)
        self._code_pattern = re.compile(options.code_asset_pattern)
        if self._mode is LocalizeMode.MULTI:
            self._path_hook = AssetPathHook(ASSET_NAME_PLACEHOLDER, require_token=True)
        else:
            self._path_hook = AssetPathHook(locales.single_locale)
        self._used_keys: set[StringKey] = set()
        self._localized_modules: dict[ModuleId, dict[StringKey, list[Any]]] = {}
        self._lock = Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def mode(self) -> LocalizeMode:
        return self._mode

    @property
    def locales(self) -> LocaleData:
        return self._locales

    @property
    def diagnostics(self) -> DiagnosticCollector:
        return self._diagnostics

    @property
    def function_names(self) -> tuple[str, ...]:
        """Function names the host should intercept."""
        return self._options.intercepted_function_names

    @property
    def locale_variable(self) -> str:
        return self._options.locale_variable

    @property
    def file_dependencies(self) -> frozenset[str]:
        """Locale files the host should watch."""
        return self._locales.file_dependencies

    @property
    def used_keys(self) -> frozenset[StringKey]:
        with self._lock:
            return frozenset(self._used_keys)

    # ------------------------------------------------------------------
    # Parse-time hooks
    # ------------------------------------------------------------------

    def on_call(
        self,
        function_name: str,
        call_source: str,
        location: SourceSpan | None,
        module_id: ModuleId,
    ) -> str | None:
        """Replacement for one intercepted translation call.

        Args:
            function_name: Intercepted function name
            call_source: The call expression as source text
            location: Position of the call in its module
            module_id: Module containing the call

        Returns:
            Replacement text, or None to leave the call untouched (confusing
            usage, reported as a warning)

        Raises:
            MissingKeyError: Key missing from a locale and throw_on_missing set
            LocalizeCompilerError: Single-locale compilation failed
        """
        call = self._parse_call(function_name, call_source, location, module_id)
        if call is None:
            return None
        first = call.first_string_argument
        if first is None or (self._compilers is None and len(call.arguments) > 1):
            self._report_confusing(function_name, location, module_id)
            return None

        key = first.value
        if not _encodable(key):
            logger.debug("Key %r in %s is not valid Unicode text", key, module_id)
            self._report_confusing(function_name, location, module_id)
            return None
        self._check_key(key, location, module_id)
        self._mark_used(key)

        if self._mode is LocalizeMode.SINGLE:
            return self._invoker.compile_call(self._locales.single_locale, call)

        with self._lock:
            values = self._localized_modules.setdefault(module_id, {})
            values[key] = [self._locales.lookup(name, key) for name in self._locales.names]
        if self._compilers is None:
            return self._codec.encode_key(key)
        return self._codec.encode_expression(serialize(call))

    def on_locale_variable(self, module_id: ModuleId) -> str:
        """Replacement for a reference to the locale variable."""
        if self._mode is LocalizeMode.SINGLE:
            return js_literal(self._locales.single_locale)
        logger.debug("Locale variable placeholder inserted in %s", module_id)
        return js_literal(ASSET_NAME_PLACEHOLDER)

    def asset_path(
        self, raw_path: FilenameTemplate, context: Mapping[str, Any] | None = None
    ) -> str:
        """Filename templating hook for every output path the host computes."""
        return self._path_hook(raw_path, context)

    def chunk_hash_data(self, module_ids: Iterable[ModuleId]) -> str | None:
        """Localized values used by a chunk's modules, for its chunk hash.

        Placeholders do not change when translations change, so the host
        mixes this into the chunk hash to keep hashes content-addressed.

        Returns:
            JSON text, or None when none of the modules was localized
        """
        with self._lock:
            localized = [
                self._localized_modules[module_id]
                for module_id in module_ids
                if module_id in self._localized_modules
            ]
        if not localized:
            return None
        return json.dumps(localized, ensure_ascii=False, sort_keys=True, default=repr)

    def _parse_call(
        self,
        function_name: str,
        call_source: str,
        location: SourceSpan | None,
        module_id: ModuleId,
    ) -> CallExpression | None:
        try:
            return parse_call_expression(call_source)
        except CallSyntaxError as e:
            logger.debug("Call %r in %s not understood: %s", call_source, module_id, e)
            self._report_confusing(function_name, location, module_id)
            return None

    def _report_confusing(
        self, function_name: str, location: SourceSpan | None, module_id: ModuleId
    ) -> None:
        self._diagnostics.add(
            ErrorTemplate.confusing_usage(function_name, module=module_id, span=location)
        )

    def _check_key(self, key: StringKey, location: SourceSpan | None, module_id: ModuleId) -> None:
        missing = self._validator.validate(key)
        if not missing:
            return
        fatal = self._options.throw_on_missing
        diagnostic = ErrorTemplate.missing_key(
            key, missing, module=module_id, span=location, fatal=fatal
        )
        if fatal:
            raise MissingKeyError(diagnostic, key=key, missing_locales=missing)
        self._diagnostics.add(diagnostic)

    def _mark_used(self, key: StringKey) -> None:
        with self._lock:
            self._used_keys.add(key)

    # ------------------------------------------------------------------
    # Post-build localization
    # ------------------------------------------------------------------

    def localize_assets(self, store: AssetStore) -> dict[AssetName, tuple[AssetName, ...]]:
        """Replace every placeholder-named asset with one asset per locale.

        Args:
            store: The host's asset store

        Returns:
            Original asset name -> localized asset names

        Raises:
            LocalizeCompilerError: A compiler failed for some locale
        """
        if self._mode is LocalizeMode.SINGLE:
            logger.debug("Single-locale build: no assets to localize")
            return {}

        assets = store.list_assets(lambda asset: ASSET_NAME_PLACEHOLDER in asset.name)
        hash_map = ContentHashMap(
            (chash for asset in assets for chash in asset.content_hashes), self._locales.names
        )
        prepared = [self._prepare(store, asset, hash_map) for asset in assets]

        units = [
            (item, locale)
            for item in prepared
            for locale in self._locales_for(item)
        ]
        if self._options.max_workers > 1 and len(units) > 1:
            with ThreadPoolExecutor(max_workers=self._options.max_workers) as executor:
                futures = [
                    executor.submit(self._localize_unit, store, item, locale, hash_map)
                    for item, locale in units
                ]
                emitted = [future.result() for future in futures]
        else:
            emitted = [self._localize_unit(store, item, locale, hash_map) for item, locale in units]

        produced: dict[AssetName, list[AssetName]] = {item.asset.name: [] for item in prepared}
        for (item, _), name in zip(units, emitted, strict=True):
            produced[item.asset.name].append(name)
        for original, names in produced.items():
            store.delete_asset(original, names)

        logger.info("Localized %d asset(s) into %d asset(s)", len(prepared), len(emitted))
        return {original: tuple(names) for original, names in produced.items()}

    def _locales_for(self, item: _PreparedAsset) -> tuple[LocaleName, ...]:
        if not item.is_code and _SOURCE_MAP_ASSET.search(item.asset.name):
            return tuple(
                name for name in self._locales.names if self._options.wants_source_map(name)
            )
        return self._locales.names

    def _prepare(
        self, store: AssetStore, asset: AssetRecord, hash_map: ContentHashMap
    ) -> _PreparedAsset:
        code, source_map = store.get_source_and_map(asset)
        if not self._code_pattern.search(asset.name):
            return _PreparedAsset(asset, code, source_map, is_code=False)

        occurrences = tuple(self._locator.locate(code))
        candidates: list[tuple[int, int, str | None]] = [
            (start, start + len(ASSET_NAME_PLACEHOLDER), None)
            for start in _find_all(code, ASSET_NAME_PLACEHOLDER)
        ]
        candidates.extend(hash_map.find_ranges(code))
        static_ranges = _without_overlaps(candidates, [(o.start, o.end) for o in occurrences])
        logger.debug(
            "%s: %d placeholder(s), %d name/hash reference(s)",
            asset.name,
            len(occurrences),
            len(static_ranges),
        )
        return _PreparedAsset(asset, code, source_map, True, occurrences, tuple(static_ranges))

    def _localize_unit(
        self,
        store: AssetStore,
        item: _PreparedAsset,
        locale: LocaleName,
        hash_map: ContentHashMap,
    ) -> AssetName:
        asset = item.asset
        name = localize_asset_name(asset.name, locale, asset.content_hashes, hash_map)
        info = localize_asset_info(asset.info, locale, hash_map)
        if not item.is_code:
            store.emit_asset(name, item.code, item.source_map, info)
            return name

        splicer = TextSplicer(item.code)
        for occurrence in item.occurrences:
            replacement = occurrence.render(self._invoker.invoke(locale, occurrence.payload))
            splicer.replace(
                occurrence.start,
                occurrence.end,
                replacement.replace(ASSET_NAME_PLACEHOLDER, locale),
            )
            self._track_payload(occurrence)
        splicer.extend(
            Edit(start, end, locale if original is None else hash_map.derived(original, locale))
            for start, end, original in item.static_ranges
        )

        source_map = item.source_map if self._options.wants_source_map(locale) else None
        result = splicer.apply(source_map, file=name)
        store.emit_asset(name, result.text, result.source_map, info)
        logger.debug("Emitted %s (%d edit(s))", name, len(splicer))
        return name

    def _track_payload(self, occurrence: PlaceholderOccurrence) -> None:
        match occurrence.payload:
            case KeyPayload(key=key):
                self._mark_used(key)
            case ExpressionPayload(call=call) if call.first_string_argument is not None:
                self._mark_used(call.first_string_argument.value)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def unused_keys(self) -> list[StringKey]:
        """Keys present in some locale table that no call used, in table order."""
        with self._lock:
            used = set(self._used_keys)
        unused: dict[StringKey, None] = {}
        for table in self._locales.tables.values():
            for key in table:
                if key not in used:
                    unused[key] = None
        return list(unused)

    def finish(self) -> DiagnosticCollector:
        """End the build and return its diagnostics.

        Reports unused keys when warn_on_unused_string is set.
        """
        if self._options.warn_on_unused_string:
            for key in self.unused_keys():
                self._diagnostics.add(ErrorTemplate.unused_key(key))
        if len(self._diagnostics):
            logger.debug("Build diagnostics:\n%s", self._diagnostics.report())
        logger.info(
            "Build finished: %d error(s), %d warning(s)",
            len(self._diagnostics.errors),
            len(self._diagnostics.warnings),
        )
        return self._diagnostics


def _find_all(text: str, needle: str) -> list[int]:
    positions: list[int] = []
    index = text.find(needle)
    while index != -1:
        positions.append(index)
        index = text.find(needle, index + len(needle))
    return positions


def _without_overlaps(
    candidates: list[tuple[int, int, str | None]], blocked: list[tuple[int, int]]
) -> list[tuple[int, int, str | None]]:
    """Candidates sorted by start, minus any overlapping blocked or earlier ranges."""
    kept: list[tuple[int, int, str | None]] = []
    taken = sorted(blocked)
    block_index = 0
    last_end = 0
    for candidate in sorted(candidates, key=lambda item: (item[0], item[1])):
        start, end, _ = candidate
        while block_index < len(taken) and taken[block_index][1] <= start:
            block_index += 1
        if block_index < len(taken) and taken[block_index][0] < end:
            continue
        if start < last_end:
            continue
        kept.append(candidate)
        last_end = end
    return kept


def _encodable(key: StringKey) -> bool:
    """False for keys holding lone surrogates (no UTF-8 form)."""
    try:
        key.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
