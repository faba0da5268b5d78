"""
Unit tests for style resolution
"""

import pytest

from burner.styles import THEMES, ass_color, list_styles, resolve_position, resolve_style


class TestAssColor:
    """Test suite for ASS color encoding"""

    def test_byte_order_reversed(self):
        assert ass_color("#FFD700") == "&H00D7FF&"

    def test_without_hash(self):
        assert ass_color("ff4500") == "&H0045FF&"

    @pytest.mark.parametrize("value", ["#FFF", "#GGGGGG", ""])
    def test_invalid_color(self, value):
        with pytest.raises(ValueError):
            ass_color(value)


class TestResolveStyle:
    """Test suite for resolve_style"""

    def test_unknown_style_falls_back_to_default(self):
        """Test that an unknown name resolves to the default profile"""
        assert resolve_style("glimmer", 1080, 1920) == resolve_style("modern", 1080, 1920)

    def test_empty_style_falls_back_to_default(self):
        assert resolve_style("", 1080, 1920).name == "modern"

    def test_case_insensitive(self):
        profile = resolve_style("NEON", 1080, 1920)

        assert profile.name == "neon"
        assert profile.primary_color == "&H00FFFF&"
        assert profile.active_color == "&HFFFF00&"

    def test_sizes_scale_with_frame(self):
        profile = resolve_style("modern", 1080, 1920)

        assert profile.base_font_size == 69
        assert profile.active_font_size == 79
        assert profile.margin_left == profile.margin_right == 59
        assert profile.margin_vertical == 192
        assert profile.alignment == 2

    def test_active_size_not_smaller_than_base(self):
        profile = resolve_style("modern", 16, 16)
        assert profile.active_font_size >= profile.base_font_size >= 1

    def test_elegant_theme(self):
        profile = resolve_style("elegant", 1920, 1080)

        assert profile.font_family == "Georgia"
        assert profile.bold is False
        assert profile.outline_width == 1
        assert profile.shadow_depth == 1

    def test_force_style(self):
        force_style = resolve_style("elegant", 1920, 1080).to_force_style()

        assert "FontName=Georgia" in force_style
        assert "Bold=0" in force_style
        assert "PrimaryColour=&HF5F5F5&" in force_style
        assert "Alignment=2" in force_style


class TestResolvePosition:
    """Test suite for resolve_position"""

    def test_top(self):
        assert resolve_position("top", 1000) == (8, 100)

    def test_center_has_no_margin(self):
        assert resolve_position("center", 1000) == (5, 0)

    def test_unknown_means_bottom(self):
        assert resolve_position("sideways", 1000) == (2, 100)


def test_list_styles_default_first():
    styles = list_styles()

    assert styles[0] == "modern"
    assert set(styles) == set(THEMES)
