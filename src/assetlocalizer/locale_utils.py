"""Locale utilities backed by Babel.

Locale names in assetlocalizer are labels: they name output files and
select tables, and nothing requires them to be CLDR locales. Recognizing
them through Babel still catches typos early, so unknown names produce a
warning at load time.

Python 3.13+.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "is_cldr_locale",
    "normalize_locale",
]

logger = logging.getLogger(__name__)


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 locale code to POSIX format for Babel.

    Example:
        >>> normalize_locale("pt-BR")
        'pt_BR'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def is_cldr_locale(locale_code: str) -> bool:
    """True if Babel recognizes locale_code.

    Example:
        >>> is_cldr_locale("ja")
        True
        >>> is_cldr_locale("klingon-xx")
        False
    """
    from babel.core import UnknownLocaleError  # noqa: PLC0415

    try:
        get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError, TypeError) as e:
        logger.debug("Locale %r not recognized by Babel: %s", locale_code, e)
        return False
    return True
