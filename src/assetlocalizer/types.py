"""Type aliases shared across assetlocalizer.

Python 3.13+. Uses PEP 695 type aliases.
"""

from collections.abc import Mapping
from typing import Any

__all__ = [
    "AssetName",
    "ContentHash",
    "LocaleName",
    "LocaleTable",
    "LocalizedValue",
    "ModuleId",
    "StringKey",
]

# Locale label as configured by the user (e.g. "en", "pt-BR").
type LocaleName = str

# Translation key passed as the first argument of a translation call.
type StringKey = str

# Translated value; plain strings unless a custom compiler consumes richer data.
type LocalizedValue = Any

# One locale's key -> value table.
type LocaleTable = Mapping[StringKey, LocalizedValue]

# Host module identifier (usually a resource path).
type ModuleId = str

# Output asset name (e.g. "index.en.js").
type AssetName = str

# Hex content hash embedded in asset names.
type ContentHash = str
