"""Directory walk for discovering ingredients inside a pantry."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from roux.types import DiscoveredIngredient

logger = logging.getLogger(__name__)

__all__ = ["MARKER_FILENAME", "discover_ingredients", "find_markers", "is_nested"]

MARKER_FILENAME = "ingredient.md"


def find_markers(root: Path, follow_symlinks: bool = False) -> list[Path]:
    """Recursively find ``ingredient.md`` marker files under ``root``.

    Hidden directories are skipped. A root that does not exist yields no
    markers; any other error while listing a directory propagates.
    """
    root = Path(root)
    if not root.is_dir():
        return []

    markers: list[Path] = []

    def _scan_dir(dir_path: Path) -> None:
        with os.scandir(dir_path) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            if entry.is_dir(follow_symlinks=follow_symlinks):
                if entry.name.startswith("."):
                    continue
                _scan_dir(Path(entry.path))
            elif entry.name == MARKER_FILENAME and entry.is_file():
                markers.append(Path(entry.path))

    _scan_dir(root)
    return markers


def is_nested(candidate: Path, other: Path) -> bool:
    """Return whether ``candidate`` lies strictly inside ``other``.

    The comparison is segment-wise, so ``path/to/foobar`` is not inside
    ``path/to/foo``.
    """
    return other in candidate.parents


async def discover_ingredients(root: Path | str) -> dict[str, DiscoveredIngredient]:
    """Map ingredient names to the ingredient directories found under ``root``.

    Every directory holding a marker file is a candidate. Candidates nested
    inside another candidate belong to that ingredient and are dropped.
    Names are the directory paths relative to ``root``, joined with ``/``.
    """
    root = Path(os.path.abspath(root))
    markers = await asyncio.to_thread(find_markers, root)
    candidates = [marker.parent for marker in markers]

    result: dict[str, DiscoveredIngredient] = {}
    for candidate in candidates:
        if any(is_nested(candidate, other) for other in candidates):
            logger.debug("Skipping nested ingredient at %s", candidate)
            continue
        name = "/".join(candidate.relative_to(root).parts)
        result[name] = DiscoveredIngredient(name=name, path=candidate)

    logger.debug("Discovered %d ingredients under %s", len(result), root)
    return result
