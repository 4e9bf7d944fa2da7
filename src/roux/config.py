"""Resolution configuration: normalization and YAML loading."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from roux.cache import PantryCache
from roux.errors import ConfigError, ConfigNotFoundError

logger = logging.getLogger(__name__)

__all__ = ["ResolutionConfig", "default_search_paths", "load_config", "normalize_config"]

DEFAULT_SEARCH_DIR = "node_modules"


def default_search_paths() -> list[Path]:
    """The dependency install directory under the current working directory."""
    return [Path(os.path.abspath(DEFAULT_SEARCH_DIR))]


@dataclass
class ResolutionConfig:
    """Where resolve() looks for pantries.

    Attributes:
        pantries: Cache of pantries by name. Resolving writes newly
            initialized pantries into it.
        pantry_search_paths: Directories tried, in order, for pantries that
            are not in the cache.
    """

    pantries: PantryCache = field(default_factory=PantryCache)
    pantry_search_paths: list[Path] = field(default_factory=default_search_paths)


def _pick(key: str, config: Mapping[str, Any], defaults: Mapping[str, Any]) -> Any:
    if config.get(key) is not None:
        return config[key]
    return defaults.get(key)


def normalize_config(
    config: ResolutionConfig | Mapping[str, Any] | None = None,
    defaults: Mapping[str, Any] | None = None,
) -> ResolutionConfig:
    """Validate a resolution config and fill in defaults.

    Values from ``config`` win over ``defaults``, which win over the
    built-in defaults (an empty cache and ``./node_modules``). Neither
    argument is mutated, but a ``pantries`` dict is shared, not copied, so
    pantries cached while resolving show up in it.

    Raises:
        TypeError: If an argument or option has the wrong type.
    """
    if isinstance(config, ResolutionConfig):
        return config
    if config is None:
        config = {}
    if not isinstance(config, Mapping):
        raise TypeError("`config` must be a mapping")
    if defaults is None:
        defaults = {}
    if not isinstance(defaults, Mapping):
        raise TypeError("`defaults` must be a mapping")

    pantries = _pick("pantries", config, defaults)
    if pantries is None:
        pantries = PantryCache()
    elif isinstance(pantries, dict):
        pantries = PantryCache(pantries)
    elif not isinstance(pantries, PantryCache):
        raise TypeError("`config.pantries` must be a dict or a PantryCache")

    search_paths = _pick("pantry_search_paths", config, defaults)
    if search_paths is None:
        search_paths = default_search_paths()
    elif not isinstance(search_paths, (list, tuple)):
        raise TypeError("`config.pantry_search_paths` must be a list")

    return ResolutionConfig(
        pantries=pantries,
        pantry_search_paths=[Path(p) for p in search_paths],
    )


def load_config(config_path: Path | str) -> ResolutionConfig:
    """Load a resolution config from a YAML file.

    The file may contain a ``pantries`` mapping of pantry names to paths and
    a ``pantry_search_paths`` list. Relative paths are resolved against the
    directory containing the file.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigError: If the file is not valid YAML or has the wrong shape.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigNotFoundError(config_path=str(config_path))

    content = config_path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(message=f"Invalid YAML in config file: {config_path}") from e

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ConfigError(message=f"Config file must be a YAML mapping: {config_path}")

    base_dir = config_path.resolve().parent

    pantries_raw = parsed.get("pantries") or {}
    if not isinstance(pantries_raw, dict):
        raise ConfigError(message="'pantries' must be a mapping of pantry names to paths")
    pantries: dict[str, Any] = {}
    for name, path in pantries_raw.items():
        if not isinstance(path, str):
            raise ConfigError(message=f"Path for pantry '{name}' must be a string")
        pantries[str(name)] = base_dir / path

    data: dict[str, Any] = {"pantries": pantries}
    search_raw = parsed.get("pantry_search_paths")
    if search_raw is not None:
        if not isinstance(search_raw, list) or not all(isinstance(p, str) for p in search_raw):
            raise ConfigError(message="'pantry_search_paths' must be a list of paths")
        data["pantry_search_paths"] = [base_dir / p for p in search_raw]

    logger.debug("Loaded config from %s with %d pantries", config_path, len(pantries))
    return normalize_config(data)
