"""Locale table loading and lookup.

Python 3.13+.
"""

from .loading import JsonLocaleLoader, LocaleData, LocaleFileLoader, load_locales

__all__ = [
    "JsonLocaleLoader",
    "LocaleData",
    "LocaleFileLoader",
    "load_locales",
]
