"""Shared fixtures: pantry directory trees built under tmp_path."""

from __future__ import annotations

from pathlib import Path

import pytest

from pantry_helpers import make_ingredient


@pytest.fixture
def node_modules(tmp_path: Path) -> Path:
    """An empty search path directory."""
    path = tmp_path / "node_modules"
    path.mkdir()
    return path


@pytest.fixture
def sample_pantry(node_modules: Path) -> Path:
    """A pantry named ``sample`` with three ingredients.

    - ``button``: index.js, index.scss, index.hbs
    - ``forms/input``: index.js, preview.hbs
    - ``empty``: no entry points
    """
    root = node_modules / "sample"
    root.mkdir()
    make_ingredient(root, "button", ["index.js", "index.scss", "index.hbs"])
    make_ingredient(root, "forms/input", ["index.js", "preview.hbs"])
    make_ingredient(root, "empty")
    return root
