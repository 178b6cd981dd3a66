"""End to end style document conversion."""

import json

import pytest

from mapboxgl2vectortiles import convert
from mapboxgl2vectortiles.src.colors import Color
from mapboxgl2vectortiles.src.context import ConversionContext, Feedback
from mapboxgl2vectortiles.src.gl2vectortiles import MapBoxGlStyleConverter, Result
from mapboxgl2vectortiles.src.styles import GeometryType, PenStyle, RenderUnit

WATER = {"id": "water", "type": "fill", "source-layer": "water", "paint": {"fill-color": "#0000ff"}}


@pytest.fixture
def converter():
    return MapBoxGlStyleConverter(Feedback())


class TestDocument:
    """Tests for document level handling."""

    def test_no_layers(self, converter):
        result = converter.convert({"version": 8})
        assert result.result == Result.NO_LAYER_LIST
        assert result.error == "Could not find layers list in JSON"
        assert result.renderer_styles == []

    def test_layers_not_a_list(self, converter):
        assert converter.convert({"layers": {}}).result == Result.NO_LAYER_LIST

    def test_invalid_json_text(self, converter):
        result = converter.convert("{not json")
        assert result.result == Result.NO_LAYER_LIST

    def test_json_text(self, converter):
        result = converter.convert(json.dumps({"layers": [WATER]}))
        assert result.result == Result.SUCCESS
        assert len(result.renderer_styles) == 1

    def test_empty_layers(self, converter):
        result = converter.convert({"layers": []})
        assert result.result == Result.SUCCESS
        assert result.error is None
        assert result.warnings == []

    @pytest.mark.parametrize("layer, warning", [
        (dict(WATER, filter=["has"]), "Skipping non-supported expression: has"),
        (dict(WATER, filter=["!has"]), "Skipping non-supported expression: !has"),
        (dict(WATER, filter=["in"]), "Skipping non-supported expression: in"),
        (dict(WATER, filter=["all", ["get"]]), "Skipping non-supported expression: get"),
        (dict(WATER, paint={"fill-color": {"stops": 5}}), "Skipping non-implemented fill-color expression"),
        (dict(WATER, paint={"fill-color": {"type": "identity", "property": "c"}}),
         "Skipping non-implemented fill-color expression"),
        (dict(WATER, paint={"fill-color": {"stops": []}}), "Skipping empty stops table"),
        ({"id": "roads", "type": "line", "paint": {"line-width": {"stops": 3}}},
         "Skipping non-implemented line-width expression"),
    ])
    def test_malformed_content_warns(self, converter, layer, warning):
        result = converter.convert({"layers": [layer]})
        assert result.result == Result.SUCCESS
        assert len(result.renderer_styles) == 1
        assert warning in result.warnings

    def test_non_finite_zoom_bounds(self, converter):
        text = '{"layers": [{"id": "water", "type": "fill", "minzoom": Infinity, "maxzoom": NaN, "paint": {}}]}'
        rule = converter.convert(text).renderer_styles[0]
        assert (rule.min_zoom, rule.max_zoom) == (-1, -1)

    def test_module_level_convert(self):
        context = ConversionContext(feedback=Feedback())
        assert len(convert({"layers": [WATER]}, context).renderer_styles) == 1


class TestLayers:
    """Tests for per layer dispatch."""

    def test_water_fill(self, converter):
        result = converter.convert({"layers": [WATER]})
        assert result.result == Result.SUCCESS
        assert result.labeling_styles == []
        assert result.warnings == []

        rule = result.renderer_styles[0]
        assert rule.style_name == "water"
        assert rule.layer_name == "water"
        assert rule.geometry_type == GeometryType.POLYGON
        assert (rule.min_zoom, rule.max_zoom) == (-1, -1)
        assert rule.enabled
        assert rule.filter_expression == ""

        fill = rule.symbol.symbol_layer(0)
        assert fill.fill_color == Color(0, 0, 255)
        # outline follows the fill color
        assert fill.stroke_color == Color(0, 0, 255)
        assert fill.stroke_style == PenStyle.SOLID

    def test_background_is_skipped(self, converter):
        result = converter.convert({"layers": [{"id": "bg", "type": "background",
                                                "paint": {"background-color": "#fff"}}]})
        assert result.renderer_styles == []
        assert result.warnings == []

    def test_unknown_type(self, converter):
        result = converter.convert({"layers": [{"id": "hills", "type": "hillshade"}, WATER]})
        assert result.warnings == ["Skipping unknown layer type: hillshade"]
        assert len(result.renderer_styles) == 1

    def test_invalid_layer(self, converter):
        result = converter.convert({"layers": ["water"]})
        assert result.warnings == ["Skipping invalid style layer: water"]

    def test_metadata(self, converter):
        layer = dict(WATER, minzoom=5, maxzoom=14.5, visibility="none", filter=["==", "class", "lake"])
        rule = converter.convert({"layers": [layer]}).renderer_styles[0]
        assert (rule.min_zoom, rule.max_zoom) == (5, 14)
        assert not rule.enabled
        assert rule.filter_expression == "\"class\" IS 'lake'"

    def test_stops_fill_default(self, converter):
        layer = dict(WATER, paint={"fill-color": {"stops": [[0, "#ffffff"], [10, "#000000"]]}})
        rule = converter.convert({"layers": [layer]}).renderer_styles[0]
        assert rule.symbol.symbol_layer(0).fill_color == Color(255, 255, 255)

    def test_layer_order(self, converter):
        roads = {"id": "roads", "type": "line", "source-layer": "transportation", "paint": {"line-color": "#000"}}
        result = converter.convert({"layers": [WATER, roads]})
        assert [rule.style_name for rule in result.renderer_styles] == ["water", "roads"]

    def test_label_and_icon(self, sprite_context):
        layer = {"id": "poi", "type": "symbol", "source-layer": "poi", "minzoom": 12,
                 "layout": {"text-field": "{name}", "icon-image": "dot"}, "paint": {}}
        result = MapBoxGlStyleConverter(Feedback()).convert({"layers": [layer]}, sprite_context)
        assert len(result.labeling_styles) == 1
        assert len(result.renderer_styles) == 1
        assert result.labeling_styles[0].min_zoom == 12
        assert result.renderer_styles[0].style_name == "poi"

    def test_icon_only_point_placement(self, sprite_context):
        layer = {"id": "poi", "type": "symbol", "layout": {"icon-image": "dot"}}
        result = MapBoxGlStyleConverter(Feedback()).convert({"layers": [layer]}, sprite_context)
        assert result.renderer_styles == []
        assert result.labeling_styles == []

    def test_units_from_context(self, converter):
        context = ConversionContext(target_unit="millimeters", pixel_size_conversion_factor=0.25,
                                    feedback=Feedback())
        layer = {"id": "roads", "type": "line", "paint": {"line-width": 4}}
        line = converter.convert({"layers": [layer]}, context).renderer_styles[0].symbol.symbol_layer(0)
        assert line.width == 1
        assert line.output_unit == RenderUnit.MILLIMETERS


class TestWarnings:
    """Tests for warning collection."""

    def test_warnings_in_layer_order(self, converter):
        layers = [
            {"id": "a", "type": "fill", "paint": {"fill-color": "nope"}},
            {"id": "b", "type": "line"},
        ]
        result = converter.convert({"layers": layers})
        assert result.warnings == [
            "Could not parse color nope, skipping",
            "Style layer b has no paint property, skipping",
        ]

    def test_context_is_cleared(self, converter, context):
        converter.convert({"layers": [{"id": "a", "type": "fill", "paint": {"fill-color": "nope"}}]}, context)
        assert context.warnings() == []

    def test_repeated_conversion(self, converter, context):
        style = {"layers": [{"id": "a", "type": "fill", "paint": {"fill-color": "nope"}}, WATER]}
        first = converter.convert(style, context).to_dict()
        second = converter.convert(style, context).to_dict()
        assert first == second
        assert len(second["warnings"]) == 1


class TestOutput:
    """Tests for the JSON style model."""

    def test_to_dict(self, converter):
        data = converter.convert({"layers": [WATER]}).to_dict()
        assert data["result"] == "success"
        assert data["error"] is None
        symbol_layer = data["renderer"][0]["symbol"]["symbol_layers"][0]
        assert symbol_layer["layer_type"] == "SimpleFill"
        assert symbol_layer["fill_color"] == "#0000ff"
        assert data["renderer"][0]["geometry_type"] == "Polygon"

    def test_to_json(self, converter):
        converter.convert({"layers": [WATER]})
        assert json.loads(converter.to_json())["renderer"][0]["style_name"] == "water"

    def test_label_json(self, converter):
        layer = {"id": "place", "type": "symbol", "layout": {"text-field": "{name}", "text-anchor": "top"},
                 "paint": {}}
        data = converter.convert({"layers": [layer]}).to_dict()
        settings = data["labeling"][0]["label_settings"]
        assert settings["field_name"] == "name"
        assert settings["quad_offset"] == "BELOW"

    def test_save_to_file(self, converter, tmp_path):
        converter.convert({"layers": [WATER]})
        path = tmp_path / "style.json"
        converter.save_to_file(str(path))
        with open(path, encoding="utf8") as f:
            assert json.load(f)["renderer"][0]["layer_name"] == "water"
