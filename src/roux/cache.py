"""Caller-owned cache of pantries keyed by name."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Union

from roux.types import Pantry

logger = logging.getLogger(__name__)

__all__ = ["PantryCache", "CacheEntry"]

CacheEntry = Union[Pantry, str, os.PathLike]


class PantryCache:
    """Cache of pantries keyed by name.

    Entries are either initialized Pantry objects or paths of pantries that
    have not been initialized yet. The cache wraps the caller's dict by
    reference: writes made while resolving are visible through that dict.
    """

    def __init__(self, entries: dict[str, CacheEntry] | None = None) -> None:
        if entries is not None and not isinstance(entries, dict):
            raise TypeError(f"`pantries` must be a dict, not {type(entries).__name__}")
        self._entries: dict[str, CacheEntry] = entries if entries is not None else {}

    @property
    def entries(self) -> dict[str, CacheEntry]:
        """The underlying dict shared with the caller."""
        return self._entries

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> Pantry | None:
        """Return the initialized pantry for ``name``, or None."""
        entry = self._entries.get(name)
        return entry if isinstance(entry, Pantry) else None

    def pending_path(self, name: str) -> Path | None:
        """Return the path registered for ``name`` if it is not initialized yet.

        Raises:
            TypeError: If the entry is neither a Pantry nor a path.
        """
        entry = self._entries.get(name)
        if entry is None or isinstance(entry, Pantry):
            return None
        if not isinstance(entry, (str, os.PathLike)):
            raise TypeError(f"Cache entry for pantry '{name}' must be a Pantry or a path, not {type(entry).__name__}")
        return Path(entry)

    def put(self, name: str, pantry: Pantry) -> None:
        """Store an initialized pantry, replacing any path registered for it."""
        if not isinstance(pantry, Pantry):
            raise TypeError(f"Only Pantry objects can be cached, not {type(pantry).__name__}")
        self._entries[name] = pantry

    async def get_or_init(self, name: str, init: Callable[[], Awaitable[Pantry]]) -> Pantry:
        """Return the cached pantry for ``name``, initializing it with ``init`` on a miss.

        The result is written to the cache only after ``init`` completes.
        """
        cached = self.get(name)
        if cached is not None:
            logger.debug("Pantry '%s' served from cache", name)
            return cached
        pantry = await init()
        self.put(name, pantry)
        return pantry
