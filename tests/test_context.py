"""Conversion context configuration and feedback."""

import pytest

from mapboxgl2vectortiles.src.context import ConversionContext, Feedback
from mapboxgl2vectortiles.src.styles import RenderUnit


class TestConfiguration:
    """Tests for context defaults and validation."""

    def test_defaults(self):
        context = ConversionContext(feedback=Feedback())
        assert context.target_unit == RenderUnit.PIXELS
        assert context.pixel_size_conversion_factor == 1.0
        assert context.sprite_image is None

    def test_unit_by_name(self):
        assert ConversionContext(target_unit="Millimeters").target_unit == RenderUnit.MILLIMETERS

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            ConversionContext(target_unit="furlongs")

    @pytest.mark.parametrize("factor", [0, -0.5])
    def test_non_positive_factor(self, factor):
        with pytest.raises(ValueError):
            ConversionContext(pixel_size_conversion_factor=factor)

    def test_font_catalogue(self):
        context = ConversionContext(fonts={"Noto Sans": ["Regular", "Italic"]})
        assert context.font_family_has_style("Noto Sans", "Italic")
        assert not context.font_family_has_style("Noto Sans", "Bold")
        assert not context.font_family_has_style("Noto", "Sans Italic")


class TestWarnings:
    """Tests for warning bookkeeping."""

    def test_collect_and_clear(self, context):
        context.push_warning("first")
        context.push_warning("second")
        assert context.warnings() == ["first", "second"]
        context.clear_warnings()
        assert context.warnings() == []

    def test_warnings_are_copied(self, context):
        context.push_warning("first")
        context.warnings().clear()
        assert context.warnings() == ["first"]

    def test_debug_echo(self, capsys):
        ConversionContext(feedback=Feedback(debug=True)).push_warning("loud")
        ConversionContext(feedback=Feedback()).push_warning("quiet")
        out = capsys.readouterr().out
        assert "loud" in out
        assert "quiet" not in out
