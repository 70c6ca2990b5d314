"""String key validation against the loaded locale tables.

Python 3.13+.
"""

import logging
from threading import Lock

from assetlocalizer.localization import LocaleData
from assetlocalizer.types import LocaleName, StringKey

__all__ = ["StringKeyValidator"]

logger = logging.getLogger(__name__)


class StringKeyValidator:
    """Reports which locales lack a key, checking each key once per build.

    The first validate() call for a key scans every locale table. Later calls
    for the same key are no-ops that return an empty tuple, so the cost over
    a build is proportional to the number of distinct keys, not call sites.

    A validator is scoped to one build session; watch rebuilds create a new
    one so missing keys are reported again.

    Example:
        >>> validator = StringKeyValidator(locale_data)
        >>> validator.validate("hello-key")
        ('es',)
        >>> validator.validate("hello-key")
        ()
    """

    __slots__ = ("_locales", "_lock", "_validated")

    def __init__(self, locales: LocaleData) -> None:
        self._locales = locales
        self._validated: set[StringKey] = set()
        self._lock = Lock()

    def validate(self, key: StringKey) -> tuple[LocaleName, ...]:
        """Locales missing key, or () if key was already validated.

        Args:
            key: String key from a translation call

        Returns:
            Missing locale names in configuration order
        """
        with self._lock:
            if key in self._validated:
                return ()
            self._validated.add(key)

        missing = self._locales.missing_locales(key)
        if missing:
            logger.debug("Key %r missing from %s", key, ", ".join(missing))
        return missing

    def is_validated(self, key: StringKey) -> bool:
        """True once key has been checked in this build."""
        with self._lock:
            return key in self._validated

    def __len__(self) -> int:
        with self._lock:
            return len(self._validated)
