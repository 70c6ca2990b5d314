"""Enumerations shared across assetlocalizer.

Python 3.13+. Zero external dependencies.
"""

from enum import StrEnum

__all__ = ["LocalizeMode", "PlaceholderKind"]


class LocalizeMode(StrEnum):
    """How a build resolves translation calls.

    SINGLE: one locale; calls are replaced with final text at parse time
    MULTI: several locales; calls become placeholders resolved per locale
        after the bundle is built
    """

    SINGLE = "single"
    MULTI = "multi"


class PlaceholderKind(StrEnum):
    """Payload carried by a placeholder.

    KEY: a bare string key, resolved by table lookup
    EXPRESSION: a serialized call expression, resolved by a localize compiler
    """

    KEY = "key"
    EXPRESSION = "expression"
