"""Per-locale content hash derivation.

Every localized asset gets its own content hash, derived deterministically
from the original hash and the locale name. Other assets reference it by
name inside their code (chunk loading tables), so every occurrence of an
original hash in code is rewritten to the same derived value the file name
gets.

Python 3.13+.
"""

import hashlib
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType

from assetlocalizer.types import ContentHash, LocaleName

__all__ = ["ContentHashMap", "derive_hash"]


def derive_hash(original: ContentHash, locale: LocaleName) -> ContentHash:
    """SHA-256 of original + locale, hex, truncated to len(original).

    Example:
        >>> len(derive_hash("1a2b3c4d", "en"))
        8
        >>> derive_hash("1a2b3c4d", "en") == derive_hash("1a2b3c4d", "en")
        True
    """
    digest = hashlib.sha256(f"{original}{locale}".encode()).hexdigest()
    return digest[: len(original)]


class ContentHashMap(Mapping[ContentHash, Mapping[LocaleName, ContentHash]]):
    """Original content hash -> {locale -> derived hash}.

    Built once per build from the ``contenthash`` metadata of every asset
    being localized, then shared read-only by all (asset, locale) units.
    """

    __slots__ = ("_hashes", "_pattern")

    def __init__(self, hashes: Iterable[ContentHash], locales: Sequence[LocaleName]) -> None:
        table: dict[ContentHash, Mapping[LocaleName, ContentHash]] = {}
        for original in hashes:
            if original and original not in table:
                table[original] = MappingProxyType(
                    {locale: derive_hash(original, locale) for locale in locales}
                )
        self._hashes = table
        # Longest first so a hash that prefixes another never wins.
        ordered = sorted(table, key=len, reverse=True)
        self._pattern = re.compile("|".join(re.escape(h) for h in ordered)) if ordered else None

    def __getitem__(self, original: ContentHash) -> Mapping[LocaleName, ContentHash]:
        return self._hashes[original]

    def __iter__(self) -> Iterator[ContentHash]:
        return iter(self._hashes)

    def __len__(self) -> int:
        return len(self._hashes)

    def __repr__(self) -> str:
        return f"ContentHashMap(hashes={len(self._hashes)})"

    def derived(self, original: ContentHash, locale: LocaleName) -> ContentHash:
        """Derived hash for original in locale (computed if not mapped)."""
        mapped = self._hashes.get(original)
        if mapped is not None and locale in mapped:
            return mapped[locale]
        return derive_hash(original, locale)

    def find_ranges(self, text: str) -> list[tuple[int, int, ContentHash]]:
        """Non-overlapping (start, end, original_hash) occurrences in text."""
        if self._pattern is None:
            return []
        return [(m.start(), m.end(), m.group()) for m in self._pattern.finditer(text)]
