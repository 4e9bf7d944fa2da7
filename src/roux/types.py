"""Roux types: Pantry, Ingredient, EntryPoint, DiscoveredIngredient."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

__all__ = [
    "EntryPoint",
    "Ingredient",
    "Pantry",
    "DiscoveredIngredient",
]


@dataclass(frozen=True)
class EntryPoint:
    """A detected entry point file.

    Attributes:
        filename: Name of the matching file, relative to the ingredient directory.
    """

    filename: str


@dataclass(frozen=True)
class Ingredient:
    """A named unit within a pantry, identified by an ``ingredient.md`` marker.

    Attributes:
        name: Slash-separated path of the ingredient relative to the pantry root.
        path: Absolute path to the ingredient directory.
        pantry_name: Name of the owning pantry.
        entry_points: One outcome per configured predicate name; ``None``
            when no file in the directory satisfied the predicate.
    """

    name: str
    path: Path
    pantry_name: str
    entry_points: Mapping[str, EntryPoint | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entry_points", MappingProxyType(dict(self.entry_points)))


@dataclass(frozen=True)
class Pantry:
    """A named collection of ingredients rooted at a directory.

    Attributes:
        name: The pantry name (an npm-style package name).
        path: Absolute path to the directory ingredients live under.
        ingredients: Ingredients keyed by their name.
    """

    name: str
    path: Path
    ingredients: Mapping[str, Ingredient] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ingredients", MappingProxyType(dict(self.ingredients)))


@dataclass
class DiscoveredIngredient:
    """Intermediate representation of a discovered ingredient directory."""

    name: str
    path: Path
