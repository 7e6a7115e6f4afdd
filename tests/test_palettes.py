"""
Tests for vecgen/core/palettes.py
Palette loading and the resolution fallback chain
"""

import json

from vecgen.core.palettes import (
    FALLBACK_COLORS,
    NO_DATA_COLORS,
    SAFETY_COLORS,
    ULTIMATE_COLORS,
    category_colors,
    is_valid_hex,
    load_palettes,
    palette_names,
    resolve_palette,
)
from vecgen.core.seeding import LcgRandom


class TestLoadPalettes:
    """Reading the palette library from disk."""

    def test_bundled_library(self, palettes):
        assert "default" in palettes
        assert len(palettes) >= 5

    def test_bundled_colors_valid(self, palettes):
        for category in palettes:
            colors = category_colors(palettes, category)
            assert colors, f"{category} is empty"
            for color in colors:
                assert is_valid_hex(color), f"{category}: {color}"

    def test_missing_file(self, tmp_path):
        assert load_palettes(str(tmp_path / "missing.json")) == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops")
        assert load_palettes(str(path)) == {}

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps(["#FFFFFF"]))
        assert load_palettes(str(path)) == {}


class TestCategoryColors:
    def test_dict_entries(self):
        data = {"a": [{"name": "Red", "hex": "#FF0000"}]}
        assert category_colors(data, "a") == ["#FF0000"]

    def test_string_entries(self):
        assert category_colors({"a": ["#00FF00"]}, "a") == ["#00FF00"]

    def test_missing_category(self):
        assert category_colors({"a": []}, "b") == []

    def test_palette_names(self, palettes):
        assert palette_names(palettes) == list(palettes)
        assert palette_names(None) == []


class TestResolvePalette:
    """Every selection resolves to a non-empty list of uppercase hex strings."""

    def test_named_category(self, palettes):
        colors = resolve_palette(palettes, "ocean", "", LcgRandom(1))
        assert colors == [c.upper() for c in category_colors(palettes, "ocean")]

    def test_missing_category_uses_default(self, palettes):
        colors = resolve_palette(palettes, "no-such-category", "", LcgRandom(1))
        assert colors == [c.upper() for c in category_colors(palettes, "default")]

    def test_empty_selection_uses_default(self, palettes):
        colors = resolve_palette(palettes, "", "", LcgRandom(1))
        assert colors == [c.upper() for c in category_colors(palettes, "default")]

    def test_missing_default_uses_first_valid(self):
        data = {"broken": ["nothex"], "good": ["#123456"]}
        assert resolve_palette(data, "nope", "", LcgRandom(1)) == ["#123456"]

    def test_no_data(self):
        assert resolve_palette({}, "default", "", LcgRandom(1)) == NO_DATA_COLORS
        assert resolve_palette(None, "default", "", LcgRandom(1)) == NO_DATA_COLORS

    def test_fallback_palette(self, palettes):
        assert resolve_palette(palettes, "", "fallback", LcgRandom(1)) == FALLBACK_COLORS

    def test_random_palette_is_a_category(self, palettes):
        colors = resolve_palette(palettes, "", "random_palette", LcgRandom(3))
        candidates = [
            [c.upper() for c in category_colors(palettes, name)] for name in palettes
        ]
        assert colors in candidates

    def test_random_category(self, palettes):
        colors = resolve_palette(palettes, "random_category", "", LcgRandom(9))
        assert colors
        assert all(is_valid_hex(c) for c in colors)

    def test_random_in_category_subset(self, palettes):
        source = {c.upper() for c in category_colors(palettes, "pastel")}
        colors = resolve_palette(palettes, "pastel", "random_in_category", LcgRandom(5))
        assert 5 <= len(colors) <= min(10, len(source))
        assert set(colors) <= source

    def test_random_in_category_is_seeded(self, palettes):
        a = resolve_palette(palettes, "pastel", "random_in_category", LcgRandom(5))
        b = resolve_palette(palettes, "pastel", "random_in_category", LcgRandom(5))
        assert a == b

    def test_empty_category_uses_safety(self):
        data = {"default": [], "empty": []}
        assert resolve_palette(data, "empty", "", LcgRandom(1)) == SAFETY_COLORS

    def test_invalid_hex_uses_ultimate(self):
        data = {"default": ["red", "#12345", "#GGGGGG"]}
        assert resolve_palette(data, "default", "", LcgRandom(1)) == ULTIMATE_COLORS

    def test_invalid_entries_dropped(self):
        data = {"default": ["#abcdef", "blue", "#123456"]}
        assert resolve_palette(data, "default", "", LcgRandom(1)) == ["#ABCDEF", "#123456"]
