"""Output filename templating.

Users put ``[locale]`` in their output filename templates. While the bundle
is built that token becomes ASSET_NAME_PLACEHOLDER (several locales) or the
locale itself (one locale). After localization the placeholder in asset
names and in code is replaced with each locale name.

Python 3.13+.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from assetlocalizer.constants import (
    ASSET_NAME_PLACEHOLDER,
    CONTENTHASH_INFO_KEY,
    LOCALE_INFO_KEY,
    LOCALE_TOKEN,
)
from assetlocalizer.content_hash import ContentHashMap, derive_hash
from assetlocalizer.diagnostics import ConfigurationError, ErrorTemplate
from assetlocalizer.types import AssetName, ContentHash, LocaleName

__all__ = [
    "AssetPathHook",
    "FilenameTemplate",
    "content_hashes_of",
    "has_locale_token",
    "interpolate_filename_template",
    "localize_asset_info",
    "localize_asset_name",
]

# Plain template, or a callable receiving the host's path context.
type FilenameTemplate = str | Callable[[Mapping[str, Any]], str]


def has_locale_token(template: str) -> bool:
    """True if template contains ``[locale]``."""
    return LOCALE_TOKEN in template


def interpolate_filename_template(template: str, replace_with: str) -> str:
    """Replace every ``[locale]`` token in template.

    Example:
        >>> interpolate_filename_template("[name].[locale].js", "en")
        '[name].en.js'
    """
    return template.replace(LOCALE_TOKEN, replace_with)


@dataclass(frozen=True, slots=True)
class AssetPathHook:
    """Pure path hook the host calls for every output path it computes.

    Attributes:
        replace_with: Text substituted for ``[locale]``
        require_token: Raise when a callable template yields a path without
            the token (string templates are checked up front by
            OutputTemplates.validate, and plain asset paths pass through)
    """

    replace_with: str
    require_token: bool = False

    def __call__(self, raw_path: FilenameTemplate, context: Mapping[str, Any] | None = None) -> str:
        """Interpolate the locale into raw_path.

        Raises:
            ConfigurationError: require_token is set and a callable template
                produced a path without the token
        """
        if not callable(raw_path):
            return interpolate_filename_template(raw_path, self.replace_with)
        path = raw_path(context or {})
        if self.require_token and not has_locale_token(path):
            raise ConfigurationError(ErrorTemplate.filename_missing_locale_token("output.filename"))
        return interpolate_filename_template(path, self.replace_with)


def _derived(
    original: ContentHash, locale: LocaleName, hash_map: ContentHashMap | None
) -> ContentHash:
    if hash_map is not None:
        return hash_map.derived(original, locale)
    return derive_hash(original, locale)


def content_hashes_of(info: Mapping[str, Any]) -> tuple[ContentHash, ...]:
    """Content hashes recorded in asset metadata (string or list)."""
    value = info.get(CONTENTHASH_INFO_KEY)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def localize_asset_name(
    name: AssetName,
    locale: LocaleName,
    content_hashes: Iterable[ContentHash] = (),
    hash_map: ContentHashMap | None = None,
) -> AssetName:
    """Per-locale asset name: placeholder -> locale, hashes -> derived hashes.

    Example:
        >>> localize_asset_name(f"index.{ASSET_NAME_PLACEHOLDER}.js", "es")
        'index.es.js'
    """
    localized = name.replace(ASSET_NAME_PLACEHOLDER, locale)
    for original in content_hashes:
        if not original:
            continue
        localized = localized.replace(original, _derived(original, locale, hash_map))
    return localized


def localize_asset_info(
    info: Mapping[str, Any], locale: LocaleName, hash_map: ContentHashMap | None = None
) -> dict[str, Any]:
    """Copy of asset metadata tagged with locale and derived content hashes."""
    localized: dict[str, Any] = dict(info)
    localized[LOCALE_INFO_KEY] = locale
    hashes = content_hashes_of(info)
    if hashes:
        derived = [_derived(original, locale, hash_map) for original in hashes]
        single = isinstance(info[CONTENTHASH_INFO_KEY], str)
        localized[CONTENTHASH_INFO_KEY] = derived[0] if single else derived
    return localized
