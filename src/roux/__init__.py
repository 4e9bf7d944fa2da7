"""roux - discovery and resolution of pantries, ingredients and entry points."""

from __future__ import annotations

# Core
from roux.pantry import PantryConfig, initialize
from roux.resolver import resolve, resolve_sync
from roux.naming import (
    ParsedIngredientPath,
    is_valid_ingredient_name,
    is_valid_pantry_name,
    parse_ingredient_path,
)

# Types
from roux.types import EntryPoint, Ingredient, Pantry

# Detection
from roux.detection import DEFAULT_PREDICATES, detect_entry_point

# Discovery
from roux.discovery import discover_ingredients

# Config
from roux.cache import PantryCache
from roux.config import ResolutionConfig, load_config, normalize_config

# Errors
from roux.errors import (
    ConfigError,
    ConfigNotFoundError,
    ErrorCodes,
    IngredientDoesNotExistError,
    IngredientHasNoSuchEntrypointError,
    PantryDoesNotExistError,
    PantryNotADirectoryError,
    PantrySearchError,
    RouxError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "initialize",
    "resolve",
    "resolve_sync",
    "parse_ingredient_path",
    "is_valid_pantry_name",
    "is_valid_ingredient_name",
    "ParsedIngredientPath",
    "PantryConfig",
    # Types
    "Pantry",
    "Ingredient",
    "EntryPoint",
    # Detection
    "DEFAULT_PREDICATES",
    "detect_entry_point",
    # Discovery
    "discover_ingredients",
    # Config
    "PantryCache",
    "ResolutionConfig",
    "load_config",
    "normalize_config",
    # Errors
    "ErrorCodes",
    "RouxError",
    "ConfigError",
    "ConfigNotFoundError",
    "PantryDoesNotExistError",
    "PantryNotADirectoryError",
    "PantrySearchError",
    "IngredientDoesNotExistError",
    "IngredientHasNoSuchEntrypointError",
]
