"""Pantry initialization: locate a pantry, discover its ingredients, detect entry points."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from roux.detection import Predicate, detect_entry_point, merge_predicates
from roux.discovery import discover_ingredients
from roux.errors import PantryDoesNotExistError, PantryNotADirectoryError
from roux.manifest import read_pantry_root
from roux.types import DiscoveredIngredient, Ingredient, Pantry

logger = logging.getLogger(__name__)

__all__ = ["PantryConfig", "initialize"]

InitCallback = Callable[[Optional[BaseException], Optional[Pantry]], Any]


class PantryConfig(BaseModel):
    """Configuration for initializing a single pantry.

    Attributes:
        name: The pantry name.
        path: Path to the pantry directory.
        predicates: Extra or overriding entry point predicates, keyed by
            entry point name. Values are regular expressions, pattern
            strings, or callables returning a bool or an awaitable bool.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    name: str
    path: Union[str, Path]
    predicates: dict[str, Any] = Field(default_factory=dict)


def _coerce_config(config: PantryConfig | Mapping[str, Any] | None) -> PantryConfig:
    if config is None:
        raise TypeError("config is required")
    if isinstance(config, PantryConfig):
        return config
    if not isinstance(config, Mapping):
        raise TypeError(f"config must be a mapping, not {type(config).__name__}")
    data = dict(config)
    if data.get("predicates") is None:
        data.pop("predicates", None)
    if isinstance(data.get("path"), os.PathLike) and not isinstance(data["path"], Path):
        data["path"] = Path(os.fspath(data["path"]))
    return PantryConfig.model_validate(data)


def _stat_pantry(base_path: Path) -> None:
    try:
        is_dir = base_path.is_dir()
        exists = is_dir or base_path.exists()
    except OSError as e:
        raise PantryDoesNotExistError(str(base_path), cause=e) from e
    if not exists:
        raise PantryDoesNotExistError(str(base_path))
    if not is_dir:
        raise PantryNotADirectoryError(str(base_path))


def _join_prefix(base_path: Path, prefix: str) -> Path:
    # The prefix is always relative to the pantry, even when it starts with a separator.
    return Path(os.path.normpath(f"{base_path}{os.sep}{prefix}"))


async def _build_ingredient(
    discovered: DiscoveredIngredient,
    pantry_name: str,
    predicates: Mapping[str, Predicate],
) -> Ingredient:
    names = list(predicates)
    outcomes = await asyncio.gather(*(detect_entry_point(discovered.path, predicates[n]) for n in names))
    return Ingredient(
        name=discovered.name,
        path=discovered.path,
        pantry_name=pantry_name,
        entry_points=dict(zip(names, outcomes)),
    )


async def _initialize(config: PantryConfig, predicates: Mapping[str, Predicate]) -> Pantry:
    base_path = Path(os.path.abspath(config.path))
    await asyncio.to_thread(_stat_pantry, base_path)

    pantry_path = base_path
    prefix = await read_pantry_root(base_path)
    if prefix is not None:
        pantry_path = _join_prefix(base_path, prefix)
        logger.debug("Pantry '%s' remapped to %s", config.name, pantry_path)

    discovered = await discover_ingredients(pantry_path)
    ingredients = await asyncio.gather(
        *(_build_ingredient(d, config.name, predicates) for d in discovered.values())
    )
    return Pantry(
        name=config.name,
        path=pantry_path,
        ingredients={ingredient.name: ingredient for ingredient in ingredients},
    )


def _notify(callback: InitCallback, name: str, error: BaseException | None, pantry: Pantry | None) -> None:
    """Invoke an init callback. Errors are logged and swallowed."""
    try:
        callback(error, pantry)
    except Exception as e:
        logger.error("Init callback error for pantry '%s': %s", name, e)


async def _with_callback(awaitable: Awaitable[Pantry], callback: InitCallback, name: str) -> Pantry:
    try:
        pantry = await awaitable
    except Exception as e:
        _notify(callback, name, e, None)
        raise
    _notify(callback, name, None, pantry)
    return pantry


def _retrieve_exception(task: asyncio.Task) -> None:
    # The error already went to the callback; do not report it as unretrieved.
    if not task.cancelled():
        task.exception()


def initialize(
    config: PantryConfig | Mapping[str, Any],
    callback: InitCallback | None = None,
) -> Awaitable[Pantry]:
    """Initialize a Pantry from a directory of ingredients.

    The config is validated immediately; the returned awaitable does the
    filesystem work. With a callback the work is scheduled on the running
    loop straight away, so the callback fires even if the result is never
    awaited.

    Args:
        config: A PantryConfig, or a mapping with ``name``, ``path`` and
            optional ``predicates``.
        callback: Optional ``callback(error, pantry)`` invoked once the
            pantry is initialized or has failed. The awaitable still returns
            the pantry or raises the error. Errors raised by the callback
            are logged and do not change the outcome.

    Returns:
        Awaitable resolving to the initialized Pantry (an ``asyncio.Task``
        when a callback is given).

    Raises:
        TypeError: If config is missing or not a mapping, or a predicate has
            an unsupported type.
        pydantic.ValidationError: If config fields have the wrong types.
        RuntimeError: If a callback is given outside a running event loop.
        PantryDoesNotExistError: (when awaited) Nothing exists at the path.
        PantryNotADirectoryError: (when awaited) The path is not a directory.
    """
    pantry_config = _coerce_config(config)
    predicates = merge_predicates(pantry_config.predicates)
    logger.debug("Initializing pantry '%s' at %s", pantry_config.name, pantry_config.path)

    if callback is None:
        return _initialize(pantry_config, predicates)

    loop = asyncio.get_running_loop()
    task = loop.create_task(_with_callback(_initialize(pantry_config, predicates), callback, pantry_config.name))
    task.add_done_callback(_retrieve_exception)
    return task
