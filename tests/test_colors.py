"""Color parsing and HSLA conversion."""

from mapboxgl2vectortiles.src.colors import (
    Color,
    color_as_hsla_components,
    parse_color,
    parse_color_string,
)


class TestParseColor:
    """Tests for CSS-like color strings."""

    def test_hex(self):
        assert parse_color_string("#0000ff") == Color(0, 0, 255, 255)

    def test_short_hex(self):
        assert parse_color_string("#f00") == Color(255, 0, 0, 255)

    def test_named(self):
        assert parse_color_string("red") == Color(255, 0, 0, 255)

    def test_rgba_fraction_alpha(self):
        assert parse_color_string("rgba(255, 0, 0, 0.5)") == Color(255, 0, 0, 128)

    def test_rgba_percent_alpha(self):
        assert parse_color_string("rgba(0, 0, 0, 100%)") == Color(0, 0, 0, 255)

    def test_hsla(self):
        assert parse_color_string("hsla(120, 100%, 50%, 1)") == Color(0, 255, 0, 255)

    def test_invalid_string(self, context):
        assert parse_color("not-a-color", context) is None
        assert context.warnings() == ["Could not parse color not-a-color, skipping"]

    def test_non_string(self, context):
        assert parse_color(5, context) is None
        assert context.warnings() == ["Could not parse non-string color 5, skipping"]

    def test_name_round_trip(self):
        color = Color(12, 34, 56, 78)
        assert parse_color_string(color.name()) == color


class TestColor:
    """Tests for Color helpers."""

    def test_name_opaque(self):
        assert Color(255, 0, 0).name() == "#ff0000"

    def test_name_translucent(self):
        assert Color(255, 0, 0, 128).name() == "#ff000080"


class TestHslaComponents:
    """Tests for integer HSLA components."""

    def test_white(self):
        assert color_as_hsla_components(Color(255, 255, 255)) == (0, 0, 100, 255)

    def test_black(self):
        assert color_as_hsla_components(Color(0, 0, 0)) == (0, 0, 0, 255)

    def test_blue(self):
        assert color_as_hsla_components(Color(0, 0, 255)) == (240, 100, 50, 255)

    def test_alpha_kept(self):
        assert color_as_hsla_components(Color(255, 0, 0, 10)) == (0, 100, 50, 10)
