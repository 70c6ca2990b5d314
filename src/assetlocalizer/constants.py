"""Centralized constants for assetlocalizer.

This module defines marker tokens, defaults and limits used across the
codebase. Centralizing them keeps the placeholder markers consistent between
the parse-time encoder and the post-build locator.

Marker tokens are derived from SHA-256 digests of fixed seeds. They are
computed once at import, before any call site can be rewritten, and never
change between builds.

Python 3.13+.
"""

import hashlib
from typing import Final

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Defaults
    "DEFAULT_FUNCTION_NAME",
    "DEFAULT_LOCALE_VARIABLE",
    "DEFAULT_CODE_ASSET_PATTERN",
    "DEFAULT_MAX_WORKERS",
    # Filename templating
    "LOCALE_TOKEN",
    "ASSET_NAME_PLACEHOLDER",
    "CONTENTHASH_INFO_KEY",
    "LOCALE_INFO_KEY",
    # Placeholder markers
    "EXPRESSION_MARKER",
    "KEY_PREFIX",
    "KEY_SUFFIX",
    # Parser limits
    "MAX_CALL_NESTING_DEPTH",
]


def _digest8(seed: str) -> str:
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()[:8]


# ============================================================================
# DEFAULTS
# ============================================================================

# Function name intercepted when no custom compiler is configured.
DEFAULT_FUNCTION_NAME: Final[str] = "__"

# Free identifier replaced with the active locale name.
DEFAULT_LOCALE_VARIABLE: Final[str] = "__locale"

# Assets whose names match are spliced as code; other assets are copied.
DEFAULT_CODE_ASSET_PATTERN: Final[str] = r"\.(?:m|c)?js$"

# 1 means (asset, locale) units run sequentially on the calling thread.
DEFAULT_MAX_WORKERS: Final[int] = 1

# ============================================================================
# FILENAME TEMPLATING
# ============================================================================

# Token users write in output filename templates.
LOCALE_TOKEN: Final[str] = "[locale]"

# Stands in for the locale in asset names and code until assets are localized.
ASSET_NAME_PLACEHOLDER: Final[str] = f"[locale:{_digest8('locale-placeholder')}]"

# Asset metadata keys shared with the host.
CONTENTHASH_INFO_KEY: Final[str] = "contenthash"
LOCALE_INFO_KEY: Final[str] = "locale"

# ============================================================================
# PLACEHOLDER MARKERS
# ============================================================================

# Call-expression encoding: MARKER(<serialized call>,MARKER)
EXPRESSION_MARKER: Final[str] = (
    f"assetLocalizerPlaceholder{_digest8('asset-localizer-placeholder')}"
)

# String-literal encoding: "<KEY_PREFIX><base64 key><KEY_SUFFIX>"
# Neither delimiter uses characters from the base64 alphabet.
KEY_PREFIX: Final[str] = f"[i18n:{_digest8('asset-localizer-key')}:"
KEY_SUFFIX: Final[str] = ":i18n]"

# ============================================================================
# PARSER LIMITS
# ============================================================================

# Nested calls inside translation call arguments, e.g. __("k", fmt(x)).
MAX_CALL_NESTING_DEPTH: Final[int] = 32
