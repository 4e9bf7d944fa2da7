"""Tests for ingredient discovery: marker walk and nested-ingredient exclusion."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from pantry_helpers import make_ingredient
from roux.discovery import discover_ingredients, find_markers, is_nested


class TestDiscoverIngredients:
    @pytest.mark.asyncio
    async def test_empty_directory(self, tmp_path: Path) -> None:
        assert await discover_ingredients(tmp_path) == {}

    @pytest.mark.asyncio
    async def test_single_ingredient(self, tmp_path: Path) -> None:
        make_ingredient(tmp_path, "button")
        result = await discover_ingredients(tmp_path)
        assert list(result) == ["button"]
        assert result["button"].name == "button"
        assert result["button"].path == tmp_path / "button"

    @pytest.mark.asyncio
    async def test_deep_ingredient_name_uses_slashes(self, tmp_path: Path) -> None:
        make_ingredient(tmp_path, "path/to/ingredient")
        result = await discover_ingredients(tmp_path)
        assert list(result) == ["path/to/ingredient"]

    @pytest.mark.asyncio
    async def test_nested_ingredient_excluded(self, tmp_path: Path) -> None:
        """a/b is inside a, so only a is an ingredient."""
        make_ingredient(tmp_path, "a")
        make_ingredient(tmp_path, "a/b")
        make_ingredient(tmp_path, "a/b/c")
        result = await discover_ingredients(tmp_path)
        assert set(result) == {"a"}

    @pytest.mark.asyncio
    async def test_sibling_prefix_not_nested(self, tmp_path: Path) -> None:
        """prefix and prefixed share a string prefix but are siblings."""
        make_ingredient(tmp_path, "prefix")
        make_ingredient(tmp_path, "prefixed")
        result = await discover_ingredients(tmp_path)
        assert set(result) == {"prefix", "prefixed"}

    @pytest.mark.asyncio
    async def test_directories_without_marker_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "not-an-ingredient").mkdir()
        (tmp_path / "not-an-ingredient" / "index.js").write_text("")
        make_ingredient(tmp_path, "group/real")
        result = await discover_ingredients(tmp_path)
        assert set(result) == {"group/real"}

    @pytest.mark.asyncio
    async def test_missing_root_yields_nothing(self, tmp_path: Path) -> None:
        assert await discover_ingredients(tmp_path / "missing") == {}

    @pytest.mark.asyncio
    async def test_relative_root_is_made_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        make_ingredient(tmp_path, "button")
        monkeypatch.chdir(tmp_path)
        result = await discover_ingredients(".")
        assert result["button"].path == tmp_path / "button"
        assert result["button"].path.is_absolute()


class TestFindMarkers:
    def test_hidden_directories_skipped(self, tmp_path: Path) -> None:
        make_ingredient(tmp_path, ".git/hooks")
        make_ingredient(tmp_path, "visible")
        assert find_markers(tmp_path) == [tmp_path / "visible" / "ingredient.md"]

    def test_marker_directory_named_like_marker_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "ingredient.md").mkdir()
        assert find_markers(tmp_path) == []

    def test_symlinked_directories_not_followed(self, tmp_path: Path) -> None:
        real = make_ingredient(tmp_path / "real", "thing")
        (tmp_path / "link").symlink_to(real.parent)
        assert find_markers(tmp_path) == [real / "ingredient.md"]

    def test_listing_error_propagates(self, tmp_path: Path) -> None:
        make_ingredient(tmp_path, "forbidden/thing")
        original_scandir = os.scandir

        def mock_scandir(path):
            if str(path).endswith("forbidden"):
                raise PermissionError("Access denied")
            return original_scandir(path)

        with patch("os.scandir", side_effect=mock_scandir):
            with pytest.raises(PermissionError):
                find_markers(tmp_path)


class TestIsNested:
    def test_child_is_nested(self) -> None:
        assert is_nested(Path("/p/a/b"), Path("/p/a")) is True

    def test_deep_descendant_is_nested(self) -> None:
        assert is_nested(Path("/p/a/b/c"), Path("/p/a")) is True

    def test_self_is_not_nested(self) -> None:
        assert is_nested(Path("/p/a"), Path("/p/a")) is False

    def test_string_prefix_sibling_is_not_nested(self) -> None:
        assert is_nested(Path("/p/foobar"), Path("/p/foo")) is False

    def test_parent_is_not_nested_in_child(self) -> None:
        assert is_nested(Path("/p/a"), Path("/p/a/b")) is False
