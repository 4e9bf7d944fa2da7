"""Resolve pantries, ingredients and entry points by name."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from pathlib import Path
from typing import Any, Awaitable, Mapping, Union

from roux.cache import PantryCache
from roux.config import ResolutionConfig, normalize_config
from roux.errors import (
    ErrorCodes,
    IngredientDoesNotExistError,
    IngredientHasNoSuchEntrypointError,
    PantrySearchError,
)
from roux.naming import is_valid_ingredient_name, is_valid_pantry_name
from roux.pantry import initialize
from roux.types import Ingredient, Pantry

logger = logging.getLogger(__name__)

__all__ = ["resolve", "resolve_sync"]

Resolved = Union[Pantry, Ingredient, Path]
ConfigLike = Union[ResolutionConfig, PantryCache, Mapping[str, Any]]

# A search failure collapses to its first error when every failure has one of these codes.
_COLLAPSIBLE_CODES = (ErrorCodes.PANTRY_NOT_FOUND, ErrorCodes.PANTRY_NOT_A_DIRECTORY)


def _is_config(value: object) -> bool:
    return isinstance(value, (ResolutionConfig, PantryCache, Mapping))


def _to_config(value: ConfigLike | None) -> ResolutionConfig:
    if isinstance(value, PantryCache):
        return normalize_config({"pantries": value})
    return normalize_config(value)


def collapse_search_failures(pantry: str, failures: list[BaseException]) -> BaseException:
    """Reduce the per-search-path failures for ``pantry`` to the error to raise.

    If every failure carries the same collapsible code, the first failure
    is returned on its own; otherwise all of them are wrapped in a
    PantrySearchError.
    """
    codes = {getattr(failure, "code", None) for failure in failures}
    if len(codes) == 1 and codes.pop() in _COLLAPSIBLE_CODES:
        return failures[0]
    return PantrySearchError(pantry, failures)


async def _search_pantry(pantry: str, search_paths: list[Path]) -> Pantry:
    attempts: list[asyncio.Task[Pantry]] = []
    for search_path in search_paths:
        logger.debug("Searching in %s for pantry %s", search_path, pantry)
        attempts.append(asyncio.ensure_future(initialize({"name": pantry, "path": search_path / pantry})))

    pending = set(attempts)
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            # Attempts finishing together are ranked by search-path order.
            winners = [a for a in attempts if a in done and a.exception() is None]
            if winners:
                return winners[0].result()
    finally:
        for attempt in pending:
            attempt.cancel()

    failures = [attempt.exception() for attempt in attempts]
    raise collapse_search_failures(pantry, failures)


async def _load_pantry(pantry: str, config: ResolutionConfig) -> Pantry:
    path = config.pantries.pending_path(pantry)
    if path is not None:
        init = partial(initialize, {"name": pantry, "path": path})
    else:
        init = partial(_search_pantry, pantry, config.pantry_search_paths)
    return await config.pantries.get_or_init(pantry, init)


async def _resolve(
    pantry: str,
    ingredient: str | None,
    entry_point: str | None,
    config: ResolutionConfig,
) -> Resolved:
    try:
        pantry_obj = await _load_pantry(pantry, config)
    except Exception as e:
        logger.debug("Failed to load pantry '%s': %s", pantry, e)
        raise

    if ingredient is None:
        return pantry_obj

    ingredient_obj = pantry_obj.ingredients.get(ingredient)
    if ingredient_obj is None:
        raise IngredientDoesNotExistError(pantry, ingredient)

    if entry_point is None:
        return ingredient_obj

    found = ingredient_obj.entry_points.get(entry_point)
    if not found:
        raise IngredientHasNoSuchEntrypointError(pantry, ingredient, entry_point)
    return ingredient_obj.path / found.filename


def resolve(
    pantry: str,
    ingredient: str | ConfigLike | None = None,
    entry_point: str | ConfigLike | None = None,
    config: ConfigLike | None = None,
) -> Awaitable[Resolved]:
    """Resolve a pantry, an ingredient, or an entry point path.

    With only a pantry name the result is the Pantry; with an ingredient
    name it is the Ingredient; with an entry point name as well it is the
    absolute path of the entry point file. The config may also be passed in
    place of ``ingredient`` or ``entry_point``.

    Pantries not yet in ``config.pantries`` are initialized, from the path
    registered there or else from the first search path that has them, and
    written into ``config.pantries``.

    Arguments are checked immediately; the returned awaitable does the work.

    Raises:
        TypeError: If a name is not a string or the config is malformed.
        ValueError: If a name is not a valid pantry, ingredient or entry point name.
        PantryDoesNotExistError: (when awaited) The pantry was found nowhere.
        PantryNotADirectoryError: (when awaited) Every candidate was a file.
        PantrySearchError: (when awaited) Search paths failed for mixed reasons.
        IngredientDoesNotExistError: (when awaited) No such ingredient.
        IngredientHasNoSuchEntrypointError: (when awaited) No such entry point.
    """
    if not isinstance(pantry, str):
        raise TypeError("`pantry` must be a string")

    if config is None and _is_config(entry_point):
        config, entry_point = entry_point, None
    if config is None and entry_point is None and _is_config(ingredient):
        config, ingredient = ingredient, None

    if ingredient is not None and not isinstance(ingredient, str):
        raise TypeError("`ingredient` must be a string")
    if entry_point is not None and not isinstance(entry_point, str):
        raise TypeError("`entry_point` must be a string")
    if entry_point is not None and ingredient is None:
        raise ValueError("`entry_point` requires an `ingredient`")

    if not is_valid_pantry_name(pantry):
        raise ValueError(f'"{pantry}" is not a valid pantry name')
    if ingredient is not None and not is_valid_ingredient_name(ingredient):
        raise ValueError(f'"{ingredient}" is not a valid ingredient name')
    if entry_point == "":
        raise ValueError("`entry_point` must not be empty")

    resolution_config = _to_config(config)
    return _resolve(pantry, ingredient, entry_point, resolution_config)


def resolve_sync(
    pantry: str,
    ingredient: str | ConfigLike | None = None,
    entry_point: str | ConfigLike | None = None,
    config: ConfigLike | None = None,
) -> Resolved:
    """Blocking form of resolve() for callers without an event loop.

    Raises:
        RuntimeError: If called from inside a running event loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(resolve(pantry, ingredient, entry_point, config))
    raise RuntimeError("resolve_sync() cannot be called from a running event loop; await resolve() instead")
