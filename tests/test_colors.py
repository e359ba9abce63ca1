"""Tests for memorymatch.ui.colors – palette lookup and color blending."""

from __future__ import annotations

import pytest

from memorymatch.ui.colors import CARD_PALETTE, GameColors, blend_hex, card_color


# ===========================================================================
# Palette and theme constants
# ===========================================================================

class TestPalette:
    def test_palette_colors_are_hex(self):
        for color in CARD_PALETTE:
            assert color.startswith("#")
            assert len(color) == 7

    def test_palette_colors_are_distinct(self):
        assert len(set(CARD_PALETTE)) == len(CARD_PALETTE)

    def test_palette_size(self):
        assert len(CARD_PALETTE) == 12

    @pytest.mark.parametrize("name", ["BG_TOP", "BG_BOTTOM", "CARD_BACK", "CARD_BONUS", "WIN", "LOSS"])
    def test_theme_colors_are_hex(self, name: str):
        value = getattr(GameColors, name)
        assert value.startswith("#")
        assert len(value) == 7


# ===========================================================================
# card_color
# ===========================================================================

class TestCardColor:
    def test_index_lookup(self):
        assert card_color(0) == CARD_PALETTE[0]
        assert card_color(3) == CARD_PALETTE[3]

    def test_wraps_around(self):
        assert card_color(len(CARD_PALETTE)) == CARD_PALETTE[0]

    def test_bonus_index(self):
        assert card_color(-1) == GameColors.CARD_BONUS


# ===========================================================================
# blend_hex
# ===========================================================================

class TestBlendHex:
    def test_endpoints(self):
        assert blend_hex("#FF0000", "#0000FF", 0.0) == "#FF0000"
        assert blend_hex("#FF0000", "#0000FF", 1.0) == "#0000FF"

    def test_half_way_to_white(self):
        assert blend_hex("#000000", "#FFFFFF", 0.5) == "#7F7F7F"

    def test_t_is_clamped(self):
        assert blend_hex("#FF0000", "#0000FF", -1.0) == "#FF0000"
        assert blend_hex("#FF0000", "#0000FF", 2.0) == "#0000FF"

    def test_strips_whitespace(self):
        assert blend_hex("  #FF0000  ", " #0000FF ", 0.0) == "#FF0000"

    @pytest.mark.parametrize(
        "a, b",
        [("FF0000", "#0000FF"), ("#FF0000", "0000FF"), ("#FFF", "#000000"), ("#GGHHII", "#000000"), ("", "")],
    )
    def test_invalid_input_returns_first_color(self, a: str, b: str):
        assert blend_hex(a, b, 0.5) == a
