"""Asset store interface and an in-memory implementation.

The asset store belongs to the host build: it holds every output asset with
its source map and metadata, and the chunk -> files index used to load
chunks at runtime. The engine reads assets, emits localized copies and then
deletes the originals, naming the copies that supersede them.

Python 3.13+.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from threading import Lock
from types import MappingProxyType
from typing import Any, Protocol

from assetlocalizer.filename import content_hashes_of
from assetlocalizer.types import AssetName, ContentHash

__all__ = ["AssetRecord", "AssetStore", "MemoryAssetStore"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AssetRecord:
    """One output asset.

    Attributes:
        name: Output file name
        code: Asset text
        source_map: v3 source map of code, if the host produced one
        info: Host metadata (``contenthash``, ``locale``, ...)
    """

    name: AssetName
    code: str
    source_map: Mapping[str, Any] | None = None
    info: Mapping[str, Any] = field(default_factory=dict)

    @property
    def content_hashes(self) -> tuple[ContentHash, ...]:
        """Content hashes recorded in info."""
        return content_hashes_of(self.info)


class AssetStore(Protocol):
    """Operations the engine needs from the host's asset store.

    Emits for an asset always happen before the asset is deleted.
    """

    def list_assets(self, predicate: Callable[[AssetRecord], bool]) -> list[AssetRecord]:
        """Assets for which predicate is true."""
        ...

    def get_source_and_map(self, asset: AssetRecord) -> tuple[str, Mapping[str, Any] | None]:
        """Asset text and its source map (None when there is none)."""
        ...

    def emit_asset(
        self,
        name: AssetName,
        code: str,
        source_map: Mapping[str, Any] | None,
        info: Mapping[str, Any],
    ) -> None:
        """Add a new asset."""
        ...

    def delete_asset(self, name: AssetName, superseded_by: Iterable[AssetName]) -> None:
        """Remove an asset, pointing chunk references at its replacements."""
        ...


class MemoryAssetStore:
    """Dict-backed AssetStore with a chunk -> files index.

    Thread-safe: emits may arrive from a worker pool.

    Example:
        >>> store = MemoryAssetStore(chunks={"main": ["main.js"]})
        >>> store.emit_asset("main.js", "x", None, {})
        >>> store.delete_asset("main.js", ["main.en.js"])
        >>> store.chunk_files("main")
        ('main.en.js',)
    """

    __slots__ = ("_assets", "_chunks", "_lock")

    def __init__(
        self,
        assets: Iterable[AssetRecord] = (),
        *,
        chunks: Mapping[str, Iterable[AssetName]] | None = None,
    ) -> None:
        self._assets: dict[AssetName, AssetRecord] = {asset.name: asset for asset in assets}
        self._chunks: dict[str, list[AssetName]] = {
            chunk: list(files) for chunk, files in (chunks or {}).items()
        }
        self._lock = Lock()

    def list_assets(self, predicate: Callable[[AssetRecord], bool]) -> list[AssetRecord]:
        with self._lock:
            snapshot = list(self._assets.values())
        return [asset for asset in snapshot if predicate(asset)]

    def get_source_and_map(self, asset: AssetRecord) -> tuple[str, Mapping[str, Any] | None]:
        return asset.code, asset.source_map

    def emit_asset(
        self,
        name: AssetName,
        code: str,
        source_map: Mapping[str, Any] | None,
        info: Mapping[str, Any],
    ) -> None:
        record = AssetRecord(name, code, source_map, MappingProxyType(dict(info)))
        with self._lock:
            self._assets[name] = record
        logger.debug("Emitted %s", name)

    def delete_asset(self, name: AssetName, superseded_by: Iterable[AssetName]) -> None:
        replacements = list(superseded_by)
        with self._lock:
            self._assets.pop(name, None)
            for files in self._chunks.values():
                if name not in files:
                    continue
                files.remove(name)
                files.extend(new for new in replacements if new not in files)
        logger.debug("Deleted %s (superseded by %s)", name, ", ".join(replacements))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get(self, name: AssetName) -> AssetRecord | None:
        """Asset named name, or None."""
        with self._lock:
            return self._assets.get(name)

    def names(self) -> list[AssetName]:
        """Asset names, sorted."""
        with self._lock:
            return sorted(self._assets)

    def chunk_files(self, chunk: str) -> tuple[AssetName, ...]:
        """Files the chunk index lists for chunk."""
        with self._lock:
            return tuple(self._chunks.get(chunk, ()))

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._assets

    def __len__(self) -> int:
        with self._lock:
            return len(self._assets)

    def __repr__(self) -> str:
        return f"MemoryAssetStore(assets={len(self)}, chunks={len(self._chunks)})"
