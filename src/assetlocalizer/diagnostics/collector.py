"""Build-scoped diagnostic collection.

Warnings and errors raised while a build runs are gathered here instead of
being raised, so the host can report all of them at the end. Entries are
deduplicated by message text: the same missing key used from two locales, or
the same compiler warning emitted once per locale, is reported once.

Thread-safe: asset localization may run on a worker pool.

Python 3.13+.
"""

import logging
from collections.abc import Iterator
from threading import Lock

from .codes import Diagnostic
from .formatter import DiagnosticFormatter

__all__ = ["DiagnosticCollector"]

logger = logging.getLogger(__name__)


class DiagnosticCollector:
    """Deduplicating sink for build warnings and errors."""

    __slots__ = ("_errors", "_lock", "_seen", "_warnings")

    def __init__(self) -> None:
        self._warnings: list[Diagnostic] = []
        self._errors: list[Diagnostic] = []
        self._seen: set[str] = set()
        self._lock = Lock()

    def add(self, diagnostic: Diagnostic) -> bool:
        """Record a diagnostic unless one with the same message exists.

        Args:
            diagnostic: Diagnostic to record

        Returns:
            True if recorded, False if it was a duplicate
        """
        with self._lock:
            if diagnostic.message in self._seen:
                return False
            self._seen.add(diagnostic.message)
            if diagnostic.severity == "warning":
                self._warnings.append(diagnostic)
            else:
                self._errors.append(diagnostic)

        if diagnostic.severity == "warning":
            logger.warning("%s", diagnostic.message)
        else:
            logger.error("%s", diagnostic.message)
        return True

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        """Recorded warnings in emission order."""
        with self._lock:
            return tuple(self._warnings)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        """Recorded errors in emission order."""
        with self._lock:
            return tuple(self._errors)

    @property
    def has_errors(self) -> bool:
        """True when at least one error was recorded."""
        with self._lock:
            return bool(self._errors)

    def report(self, formatter: DiagnosticFormatter | None = None) -> str:
        """Format every recorded diagnostic, errors first.

        Args:
            formatter: Output style (default: compiler-style, no color)

        Returns:
            Formatted text, empty when nothing was recorded
        """
        return (formatter or DiagnosticFormatter()).format_all(self)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.errors + self.warnings)

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors) + len(self._warnings)

    def __repr__(self) -> str:
        return f"DiagnosticCollector(errors={len(self.errors)}, warnings={len(self.warnings)})"
