"""Pantry manifest (package.json) reading."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

__all__ = ["MANIFEST_FILENAME", "read_pantry_root"]

MANIFEST_FILENAME = "package.json"


def _load_pantry_root(manifest_path: Path) -> str | None:
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("No usable manifest at %s: %s", manifest_path, e)
        return None

    roux_section = manifest.get("roux") if isinstance(manifest, dict) else None
    pantry_root = roux_section.get("pantryRoot") if isinstance(roux_section, dict) else None
    if not isinstance(pantry_root, str):
        return None
    return pantry_root


async def read_pantry_root(pantry_path: Path) -> str | None:
    """Return the ``roux.pantryRoot`` prefix declared by the pantry's manifest.

    Returns None when the manifest is missing, unreadable, not valid JSON,
    or does not declare a string ``roux.pantryRoot``.
    """
    return await asyncio.to_thread(_load_pantry_root, Path(pantry_path) / MANIFEST_FILENAME)
