"""
Convert MapBox GL fill, line and symbol layers into rendering and labeling rules.

Every paint/layout property may hold a literal value, a stops table or an
expression list. Literal values become static symbol or label settings,
zoom functions become data defined properties. Anything the converter can't
translate is skipped with a warning pushed to the conversion context.
"""

from typing import Any, Dict, List, Optional, Tuple

from .colors import Color, parse_color
from .expressions import (parse_expression, process_label_field, quoted_column_ref,
                          quoted_value)
from .interpolation import (PropertyType, parse_interpolate_by_zoom,
                            parse_interpolate_color_by_zoom,
                            parse_interpolate_list_by_zoom,
                            parse_interpolate_opacity_by_zoom,
                            parse_interpolate_point_by_zoom,
                            parse_interpolate_string_by_zoom, parse_string_stops)
from .settings import _CONVERSION_CONF
from .sprites import retrieve_sprite_as_base64
from .styles import (BlurEffect, BrushStyle, CoordinateMode, DataDefinedProperty,
                     EffectStack, Font, GeometryType, LabelingRule, LabelPlacement,
                     LabelSettings, LinePlacementFlag, MarkerLinePlacement,
                     MarkerLineSymbolLayer, PenCapStyle, PenJoinStyle, PenStyle,
                     Property, PropertyCollection, Quadrant, RasterFillSymbolLayer,
                     RasterMarkerSymbolLayer, RenderingRule, Symbol, SymbolType, TextFormat)
from .values import ExpressionList, Scalar, StopsTable, classify

# text-anchor value -> Quadrant position of the label around its anchor
_TEXT_ANCHOR_QUADRANTS = {
    "center": Quadrant.OVER.value,
    "left": Quadrant.RIGHT.value,
    "right": Quadrant.LEFT.value,
    "top": Quadrant.BELOW.value,
    "bottom": Quadrant.ABOVE.value,
    "top-left": Quadrant.BELOW_RIGHT.value,
    "top-right": Quadrant.BELOW_LEFT.value,
    "bottom-left": Quadrant.ABOVE_RIGHT.value,
    "bottom-right": Quadrant.ABOVE_LEFT.value,
}


class PropertyParser:
    """Dispatch a style property on its value shape."""

    @staticmethod
    def set_property(properties: PropertyCollection, key: Property, prop: DataDefinedProperty) -> None:
        """Store prop only when it compiled to an active expression."""
        if prop.is_active():
            properties.set_property(key, prop)

    @staticmethod
    def get_color(json: Dict[str, Any], name: str, properties: PropertyCollection,
                  key: Property, context) -> Optional[Color]:
        """Return the static color of a color property, storing zoom functions under key."""
        value = classify(json[name])
        if isinstance(value, StopsTable):
            prop, color = parse_interpolate_color_by_zoom(value, context)
            PropertyParser.set_property(properties, key, prop)
            return color
        if isinstance(value, ExpressionList):
            prop, color = parse_interpolate_list_by_zoom(value.items, PropertyType.COLOR, context)
            PropertyParser.set_property(properties, key, prop)
            return color
        if isinstance(value, Scalar) and value.is_string():
            return parse_color(value.value, context)

        context.push_warning(f"Skipping non-implemented {name} expression")
        return None

    @staticmethod
    def get_number(json: Dict[str, Any], name: str, properties: PropertyCollection, key: Property,
                   context, multiplier: float = 1, static_multiplier: Optional[float] = None
                   ) -> Optional[float]:
        """
        Return the static value of a numeric property.

        Literal numbers are scaled by static_multiplier (defaults to
        multiplier). Zoom functions are compiled with multiplier and stored
        under key; their first stop value is returned.
        """
        if static_multiplier is None:
            static_multiplier = multiplier

        value = classify(json[name])
        if isinstance(value, Scalar) and value.is_number():
            return value.value * static_multiplier
        if isinstance(value, StopsTable):
            prop, default = parse_interpolate_by_zoom(value, context, multiplier)
            PropertyParser.set_property(properties, key, prop)
            return default
        if isinstance(value, ExpressionList):
            prop, default = parse_interpolate_list_by_zoom(value.items, PropertyType.NUMERIC, context, multiplier)
            PropertyParser.set_property(properties, key, prop)
            return default

        context.push_warning(f"Skipping non-implemented {name} expression")
        return None

    @staticmethod
    def get_point(json: Dict[str, Any], name: str, properties: PropertyCollection, key: Property,
                  context, multiplier: float = 1) -> Optional[Tuple[float, float]]:
        """Return the static [x, y] value of a point property, storing zoom functions under key."""
        value = classify(json[name])
        if isinstance(value, StopsTable):
            prop, default = parse_interpolate_point_by_zoom(value, context, multiplier)
            PropertyParser.set_property(properties, key, prop)
            return default
        if isinstance(value, ExpressionList):
            if value.is_number_array(2):
                return value.items[0] * multiplier, value.items[1] * multiplier
            if value.operator in ("interpolate", "step"):
                prop, default = parse_interpolate_list_by_zoom(value.items, PropertyType.POINT, context, multiplier)
                PropertyParser.set_property(properties, key, prop)
                return default

        context.push_warning(f"Skipping non-implemented {name} expression")
        return None

    @staticmethod
    def get_opacity(json: Dict[str, Any], name: str, context, max_opacity: int
                    ) -> Tuple[Optional[float], DataDefinedProperty]:
        """
        Return (static opacity, alpha expression) of an opacity property.

        Literal opacities are returned as is; zoom functions compile to an
        expression replacing the alpha channel of the symbol color.
        """
        value = classify(json[name])
        if isinstance(value, Scalar) and value.is_number():
            return float(value.value), DataDefinedProperty()
        if isinstance(value, StopsTable):
            return None, parse_interpolate_opacity_by_zoom(value, max_opacity, context)
        if isinstance(value, ExpressionList):
            prop, _ = parse_interpolate_list_by_zoom(value.items, PropertyType.OPACITY, context, 1, max_opacity)
            return None, prop

        context.push_warning(f"Skipping non-implemented {name} expression")
        return None, DataDefinedProperty()


class FillLayerParser:
    """Paint properties of fill layers."""

    @staticmethod
    def get_fill_opacity(json_layer: Dict[str, Any], json_paint: Dict[str, Any], properties: PropertyCollection,
                         raster_properties: PropertyCollection, fill_color: Optional[Color],
                         outline_color: Optional[Color], context) -> Optional[float]:
        """Apply fill-opacity, returning the static opacity when there is one."""
        value = classify(json_paint["fill-opacity"])
        if isinstance(value, Scalar) and value.is_number():
            return float(value.value)
        if not isinstance(value, (StopsTable, ExpressionList)):
            context.push_warning("Skipping non-implemented fill-opacity expression")
            return None

        if properties.is_active(Property.FILL_COLOR):
            context.push_warning(f"Could not set opacity of layer {json_layer.get('id')}, "
                                 f"opacity already defined in fill color")
            return None

        _, fill_prop = PropertyParser.get_opacity(json_paint, "fill-opacity", context,
                                                  fill_color.alpha if fill_color else 255)
        _, stroke_prop = PropertyParser.get_opacity(json_paint, "fill-opacity", context,
                                                    outline_color.alpha if outline_color else 255)
        PropertyParser.set_property(properties, Property.FILL_COLOR, fill_prop)
        PropertyParser.set_property(properties, Property.STROKE_COLOR, stroke_prop)
        PropertyParser.get_number(json_paint, "fill-opacity", raster_properties, Property.OPACITY, context, 100)
        return None

    @staticmethod
    def get_fill_pattern(json_paint: Dict[str, Any], raster_properties: PropertyCollection,
                         opacity: Optional[float], context) -> Optional[RasterFillSymbolLayer]:
        """Build the raster fill drawing the fill-pattern sprite."""
        value = classify(json_paint["fill-pattern"])
        if isinstance(value, StopsTable):
            context.push_warning("Skipping non-implemented fill-pattern stops")
            return None
        if not (isinstance(value, Scalar) and value.is_string()):
            context.push_warning("Skipping non-implemented fill-pattern expression")
            return None

        sprite, _ = retrieve_sprite_as_base64(value.value, context)
        if sprite is None:
            return None

        raster_fill = RasterFillSymbolLayer(image_file_path=sprite, coordinate_mode=CoordinateMode.VIEWPORT,
                                            data_defined_properties=raster_properties)
        if opacity is not None and opacity >= 0:
            raster_fill.opacity = opacity
        return raster_fill


class LineLayerParser:
    """Paint and layout properties of line layers."""

    @staticmethod
    def get_line_opacity(json_layer: Dict[str, Any], json_paint: Dict[str, Any], properties: PropertyCollection,
                         line_color: Optional[Color], context) -> Optional[float]:
        """Apply line-opacity, returning the static opacity when there is one."""
        value = classify(json_paint["line-opacity"])
        if isinstance(value, (StopsTable, ExpressionList)) and properties.is_active(Property.STROKE_COLOR):
            context.push_warning(f"Could not set opacity of layer {json_layer.get('id')}, "
                                 f"opacity already defined in stroke color")
            return None

        opacity, prop = PropertyParser.get_opacity(json_paint, "line-opacity", context,
                                                   line_color.alpha if line_color else 255)
        PropertyParser.set_property(properties, Property.STROKE_COLOR, prop)
        return opacity

    @staticmethod
    def get_line_dasharray(json_paint: Dict[str, Any], context) -> List[float]:
        """Return the dash pattern scaled to output units."""
        factor = context.pixel_size_conversion_factor
        value = classify(json_paint["line-dasharray"])
        if isinstance(value, StopsTable):
            # only the last stop is used
            if value.stops:
                _, dashes = value.last
                dashes = classify(dashes)
                if isinstance(dashes, ExpressionList) and dashes.is_number_array():
                    return [dash * factor for dash in dashes.items]
            context.push_warning("Skipping malformed line-dasharray stops")
            return []
        if isinstance(value, ExpressionList) and value.is_number_array():
            return [dash * factor for dash in value.items]

        context.push_warning("Skipping non-implemented line-dasharray expression")
        return []


def parse_cap_style(style: str) -> PenCapStyle:
    if style == "round":
        return PenCapStyle.ROUND
    if style == "square":
        return PenCapStyle.SQUARE
    return PenCapStyle.FLAT


def parse_join_style(style: str) -> PenJoinStyle:
    if style == "bevel":
        return PenJoinStyle.BEVEL
    if style == "round":
        return PenJoinStyle.ROUND
    return PenJoinStyle.MITER


def parse_fill_layer(json_layer: Dict[str, Any], context) -> Optional[RenderingRule]:
    """Convert a fill layer into a polygon rendering rule."""
    json_paint = json_layer.get("paint")
    if not isinstance(json_paint, dict):
        context.push_warning(f"Style layer {json_layer.get('id')} has no paint property, skipping")
        return None

    properties = PropertyCollection()
    raster_properties = PropertyCollection()
    factor = context.pixel_size_conversion_factor

    fill_color = None
    if "fill-color" in json_paint:
        fill_color = PropertyParser.get_color(json_paint, "fill-color", properties, Property.FILL_COLOR, context)

    outline_color = None
    if "fill-outline-color" in json_paint:
        outline_color = PropertyParser.get_color(json_paint, "fill-outline-color", properties,
                                                 Property.STROKE_COLOR, context)
    elif fill_color is not None:
        outline_color = fill_color
    elif properties.is_active(Property.FILL_COLOR):
        properties.set_property(Property.STROKE_COLOR, properties.property(Property.FILL_COLOR))

    fill_opacity = None
    if "fill-opacity" in json_paint:
        fill_opacity = FillLayerParser.get_fill_opacity(json_layer, json_paint, properties, raster_properties,
                                                        fill_color, outline_color, context)

    fill_translate = None
    if "fill-translate" in json_paint:
        fill_translate = PropertyParser.get_point(json_paint, "fill-translate", properties, Property.OFFSET,
                                                  context, factor)

    symbol = Symbol.default_symbol(GeometryType.POLYGON)
    symbol.output_unit = context.target_unit
    fill_symbol = symbol.symbol_layer(0)
    fill_symbol.output_unit = context.target_unit
    fill_symbol.offset_unit = context.target_unit
    if fill_translate:
        fill_symbol.offset = fill_translate

    if "fill-pattern" in json_paint:
        raster_fill = FillLayerParser.get_fill_pattern(json_paint, raster_properties, fill_opacity, context)
        if raster_fill is not None:
            symbol.append_symbol_layer(raster_fill)

    fill_symbol.data_defined_properties = properties
    if fill_opacity is not None:
        symbol.opacity = fill_opacity

    if outline_color is not None:
        fill_symbol.stroke_color = outline_color
    else:
        fill_symbol.stroke_style = PenStyle.NO_PEN

    if fill_color is not None:
        fill_symbol.fill_color = fill_color
    else:
        fill_symbol.brush_style = BrushStyle.NO_BRUSH

    return RenderingRule(geometry_type=GeometryType.POLYGON, symbol=symbol)


def parse_line_layer(json_layer: Dict[str, Any], context) -> Optional[RenderingRule]:
    """Convert a line layer into a line rendering rule."""
    json_paint = json_layer.get("paint")
    if not isinstance(json_paint, dict):
        context.push_warning(f"Style layer {json_layer.get('id')} has no paint property, skipping")
        return None

    properties = PropertyCollection()
    factor = context.pixel_size_conversion_factor

    line_color = None
    if "line-color" in json_paint:
        line_color = PropertyParser.get_color(json_paint, "line-color", properties, Property.FILL_COLOR, context)
        if properties.is_active(Property.FILL_COLOR):
            properties.set_property(Property.STROKE_COLOR, properties.property(Property.FILL_COLOR))

    line_width = 1.0 * factor
    if "line-width" in json_paint:
        line_width = PropertyParser.get_number(json_paint, "line-width", properties, Property.STROKE_WIDTH,
                                               context, factor)
        if line_width is None and not properties.is_active(Property.STROKE_WIDTH):
            line_width = 1.0 * factor

    line_offset = 0.0
    if "line-offset" in json_paint:
        # positive offsets are to the right of the line direction
        line_offset = PropertyParser.get_number(json_paint, "line-offset", properties, Property.OFFSET,
                                                context, -factor) or 0.0

    line_opacity = None
    if "line-opacity" in json_paint:
        line_opacity = LineLayerParser.get_line_opacity(json_layer, json_paint, properties, line_color, context)

    dash_vector = []
    if "line-dasharray" in json_paint:
        dash_vector = LineLayerParser.get_line_dasharray(json_paint, context)

    pen_cap_style = PenCapStyle.FLAT
    pen_join_style = PenJoinStyle.MITER
    json_layout = json_layer.get("layout")
    if isinstance(json_layout, dict):
        if "line-cap" in json_layout:
            pen_cap_style = parse_cap_style(json_layout["line-cap"])
        if "line-join" in json_layout:
            pen_join_style = parse_join_style(json_layout["line-join"])

    symbol = Symbol.default_symbol(GeometryType.LINE)
    symbol.output_unit = context.target_unit
    line_symbol = symbol.symbol_layer(0)
    line_symbol.output_unit = context.target_unit
    line_symbol.pen_cap_style = pen_cap_style
    line_symbol.pen_join_style = pen_join_style
    line_symbol.data_defined_properties = properties
    line_symbol.offset = line_offset
    line_symbol.offset_unit = context.target_unit

    if line_opacity is not None:
        symbol.opacity = line_opacity
    if line_color is not None:
        line_symbol.color = line_color
    if line_width is not None:
        line_symbol.width = line_width
    if dash_vector:
        line_symbol.use_custom_dash_pattern = True
        line_symbol.custom_dash_vector = dash_vector

    return RenderingRule(geometry_type=GeometryType.LINE, symbol=symbol)


class SymbolLayerParser:
    """Layout and paint properties of symbol layers."""

    @staticmethod
    def get_font(json_layout: Dict[str, Any], context) -> Optional[Font]:
        """Match text-font against the font catalogue, splitting it into family and style."""
        value = classify(json_layout["text-font"])
        if isinstance(value, ExpressionList) and value.items:
            font_name = str(value.items[0])
        elif isinstance(value, Scalar) and value.is_string():
            font_name = value.value
        else:
            context.push_warning("Skipping non-implemented text-font expression")
            return None

        parts = font_name.split(" ")
        for i in range(1, len(parts)):
            family, style = " ".join(parts[:i]), " ".join(parts[i:])
            if context.font_family_has_style(family, style):
                return Font(family, style)
        # unknown font, the renderer may still resolve the full name
        return Font(font_name)

    @staticmethod
    def get_text_field(json_layout: Dict[str, Any], context) -> Tuple[str, bool]:
        """Return (field name or expression, is_expression) of text-field."""
        value = classify(json_layout["text-field"])
        if isinstance(value, Scalar) and value.is_string():
            return process_label_field(value.value)

        if isinstance(value, ExpressionList) and value.operator == "format" and len(value.items) > 2:
            # ["format", "foo", {"font-scale": 1.2}, ["get", "bar"], {...}]
            parts = []
            for segment in value.items[1::2]:
                if isinstance(segment, list):
                    part = parse_expression(segment, context)
                elif isinstance(segment, str):
                    part, is_expression = process_label_field(segment)
                    if not is_expression:
                        part = quoted_column_ref(part) if segment.startswith("{") else quoted_value(segment)
                else:
                    part = ""
                if part:
                    parts.append(part)
            return "concat({})".format(",".join(parts)), True

        if isinstance(value, ExpressionList):
            return parse_expression(value.items, context), True

        context.push_warning("Skipping non-implemented text-field expression")
        return "", False

    @staticmethod
    def get_text_anchor(json_layout: Dict[str, Any], properties: PropertyCollection, context) -> Optional[str]:
        """Return the static text-anchor, storing zoom dependent anchors as OffsetQuad."""
        value = classify(json_layout["text-anchor"])
        if isinstance(value, Scalar) and value.is_string():
            return value.value
        if isinstance(value, StopsTable):
            prop, anchor = parse_interpolate_string_by_zoom(value, context, _TEXT_ANCHOR_QUADRANTS)
            PropertyParser.set_property(properties, Property.OFFSET_QUAD, prop)
            return anchor
        if isinstance(value, ExpressionList) and all(isinstance(stop, list) for stop in value.items):
            expression, anchor = parse_string_stops(value.items, context, _TEXT_ANCHOR_QUADRANTS)
            PropertyParser.set_property(properties, Property.OFFSET_QUAD, DataDefinedProperty.from_expression(expression))
            return anchor

        context.push_warning("Skipping non-implemented text-anchor expression")
        return None

    @staticmethod
    def get_halo_blur(json_paint: Dict[str, Any], context) -> float:
        value = classify(json_paint["text-halo-blur"])
        if isinstance(value, Scalar) and value.is_number():
            return value.value * context.pixel_size_conversion_factor

        context.push_warning("Skipping non-implemented text-halo-blur expression")
        return 0.0

    @staticmethod
    def get_icon_marker(json_layout: Dict[str, Any], json_paint: Dict[str, Any], context,
                        with_opacity: bool = True) -> RasterMarkerSymbolLayer:
        """Build the raster marker drawing the icon-image sprite."""
        factor = context.pixel_size_conversion_factor
        marker = RasterMarkerSymbolLayer()
        sprite, size = retrieve_sprite_as_base64(str(json_layout.get("icon-image", "")), context)
        if sprite is not None:
            marker.path = sprite
            marker.size = factor * size[0]
            marker.size_unit = context.target_unit

        properties = PropertyCollection()
        if "icon-rotate" in json_layout:
            rotation = PropertyParser.get_number(json_layout, "icon-rotate", properties, Property.ANGLE,
                                                 context, factor, static_multiplier=1)
            marker.angle = rotation or 0.0

        if with_opacity and "icon-opacity" in json_paint:
            opacity = PropertyParser.get_number(json_paint, "icon-opacity", properties, Property.OPACITY,
                                                context, 100, static_multiplier=1)
            if opacity is not None and properties.is_active(Property.OPACITY):
                opacity /= 100
            if opacity is not None and opacity >= 0:
                marker.opacity = opacity

        marker.data_defined_properties = properties
        return marker


def parse_symbol_layer(json_layer: Dict[str, Any], context
                       ) -> Tuple[Optional[RenderingRule], Optional[LabelingRule]]:
    """
    Convert a symbol layer into (rendering rule, labeling rule).

    Layers with a text-field produce label settings, plus a point marker
    rule when they also draw an icon. Layers without text-field are handed
    to parse_symbol_layer_as_renderer.
    """
    json_layout = json_layer.get("layout")
    if not isinstance(json_layout, dict):
        context.push_warning(f"Style layer {json_layer.get('id')} has no layout property, skipping")
        return None, None
    if "text-field" not in json_layout:
        return parse_symbol_layer_as_renderer(json_layer, context), None

    json_paint = json_layer.get("paint")
    if not isinstance(json_paint, dict):
        context.push_warning(f"Style layer {json_layer.get('id')} has no paint property, skipping")
        return None, None

    properties = PropertyCollection()
    factor = context.pixel_size_conversion_factor
    em_to_chars = _CONVERSION_CONF['EM_TO_CHARS']

    text_size = _CONVERSION_CONF['DEFAULT_TEXT_SIZE'] * factor
    if "text-size" in json_layout:
        text_size = PropertyParser.get_number(json_layout, "text-size", properties, Property.SIZE, context, factor)

    text_max_width = None
    if "text-max-width" in json_layout:
        text_max_width = PropertyParser.get_number(json_layout, "text-max-width", properties,
                                                   Property.AUTO_WRAP_LENGTH, context, em_to_chars)

    letter_spacing = None
    if "text-letter-spacing" in json_layout:
        letter_spacing = PropertyParser.get_number(json_layout, "text-letter-spacing", properties,
                                                   Property.FONT_LETTER_SPACING, context)

    font = None
    if "text-font" in json_layout:
        font = SymbolLayerParser.get_font(json_layout, context)

    text_color = None
    if "text-color" in json_paint:
        text_color = PropertyParser.get_color(json_paint, "text-color", properties, Property.COLOR, context)

    buffer_color = None
    if "text-halo-color" in json_paint:
        buffer_color = PropertyParser.get_color(json_paint, "text-halo-color", properties,
                                                Property.BUFFER_COLOR, context)

    buffer_size = 0.0
    if "text-halo-width" in json_paint:
        buffer_size = PropertyParser.get_number(json_paint, "text-halo-width", properties,
                                                Property.BUFFER_SIZE, context, factor)
        if buffer_size is None:
            buffer_size = 1.0 if properties.is_active(Property.BUFFER_SIZE) else 0.0

    halo_blur = 0.0
    if "text-halo-blur" in json_paint:
        halo_blur = SymbolLayerParser.get_halo_blur(json_paint, context)

    label_format = _text_format(context, text_size, font, letter_spacing, text_color,
                                buffer_size, buffer_color, halo_blur)

    label_settings = LabelSettings()
    if text_max_width is not None and text_max_width > 0:
        label_settings.auto_wrap_length = text_max_width

    label_settings.field_name, label_settings.is_expression = SymbolLayerParser.get_text_field(json_layout, context)

    if "text-transform" in json_layout:
        text_transform = json_layout["text-transform"]
        if text_transform in ("uppercase", "lowercase"):
            field_name = label_settings.field_name
            if not label_settings.is_expression:
                field_name = quoted_column_ref(field_name)
            function = "upper" if text_transform == "uppercase" else "lower"
            label_settings.field_name = f"{function}({field_name})"
            label_settings.is_expression = True

    geometry_type = GeometryType.POINT
    if json_layout.get("symbol-placement") == "line":
        label_settings.placement = LabelPlacement.CURVED
        label_settings.line_placement_flags = LinePlacementFlag.ON_LINE
        geometry_type = GeometryType.LINE

    if label_settings.placement == LabelPlacement.OVER_POINT:
        if "text-anchor" in json_layout:
            text_anchor = SymbolLayerParser.get_text_anchor(json_layout, properties, context)
            if text_anchor in _TEXT_ANCHOR_QUADRANTS:
                label_settings.quad_offset = Quadrant(_TEXT_ANCHOR_QUADRANTS[text_anchor])

        if "text-offset" in json_layout:
            # offsets are in ems
            em_size = text_size if text_size is not None else _CONVERSION_CONF['DEFAULT_TEXT_SIZE'] * factor
            text_offset = PropertyParser.get_point(json_layout, "text-offset", properties, Property.OFFSET_XY,
                                                   context, em_size)
            if text_offset and text_offset != (0, 0):
                label_settings.offset_units = context.target_unit
                label_settings.x_offset, label_settings.y_offset = text_offset

    if text_size is not None and text_size >= 0:
        label_settings.priority = min(text_size / (factor * 3), _CONVERSION_CONF['MAX_LABEL_PRIORITY'])

    label_settings.format = label_format
    label_settings.obstacle_factor = _CONVERSION_CONF['LABEL_OBSTACLE_FACTOR']
    label_settings.data_defined_properties = properties

    labeling_rule = LabelingRule(geometry_type=geometry_type, label_settings=label_settings)

    rendering_rule = None
    if "icon-image" in json_layout:
        marker = SymbolLayerParser.get_icon_marker(json_layout, json_paint, context)
        if marker.path:
            rendering_rule = RenderingRule(geometry_type=GeometryType.POINT,
                                           symbol=Symbol(SymbolType.MARKER, [marker]))

    return rendering_rule, labeling_rule


def parse_symbol_layer_as_renderer(json_layer: Dict[str, Any], context) -> Optional[RenderingRule]:
    """Convert an icon-only symbol layer placed along lines into a marker line rule."""
    json_layout = json_layer.get("layout")
    if not isinstance(json_layout, dict):
        context.push_warning(f"Style layer {json_layer.get('id')} has no layout property, skipping")
        return None
    if json_layout.get("symbol-placement") != "line":
        return None

    properties = PropertyCollection()
    factor = context.pixel_size_conversion_factor

    spacing = -1.0
    if "symbol-spacing" in json_layout:
        spacing = PropertyParser.get_number(json_layout, "symbol-spacing", properties, Property.INTERVAL,
                                            context, factor)
        if spacing is None:
            spacing = -1.0

    rotate_markers = True
    if json_layout.get("icon-rotation-alignment") == "viewport":
        rotate_markers = False

    line_symbol = MarkerLineSymbolLayer(rotate_markers=rotate_markers, interval=spacing if spacing > 0 else 1.0,
                                        output_unit=context.target_unit, data_defined_properties=properties)
    if spacing <= 0:
        # without spacing only one marker is drawn at the middle of the line
        line_symbol.placement = MarkerLinePlacement.CENTRAL_POINT

    marker = SymbolLayerParser.get_icon_marker(json_layout, json_layer.get("paint") or {}, context,
                                               with_opacity=False)
    line_symbol.sub_symbol = Symbol(SymbolType.MARKER, [marker], output_unit=context.target_unit)

    symbol = Symbol(SymbolType.LINE, [line_symbol], output_unit=context.target_unit)
    return RenderingRule(geometry_type=GeometryType.LINE, symbol=symbol)


def _text_format(context, text_size: Optional[float], font: Optional[Font], letter_spacing: Optional[float],
                 text_color: Optional[Color], buffer_size: float, buffer_color: Optional[Color],
                 halo_blur: float) -> TextFormat:
    """Assemble the text format of a label."""
    label_format = TextFormat()
    label_format.size_unit = context.target_unit
    if text_color is not None:
        label_format.color = text_color
    if text_size is not None and text_size >= 0:
        label_format.size = text_size
    if font is not None:
        label_format.font = font
    if letter_spacing is not None and letter_spacing > 0:
        label_format.font.letter_spacing = letter_spacing

    if buffer_size > 0:
        label_format.buffer.enabled = True
        label_format.buffer.size = buffer_size
        label_format.buffer.size_unit = context.target_unit
        if buffer_color is not None:
            label_format.buffer.color = buffer_color
        if halo_blur > 0:
            blur = BlurEffect(blur_unit=context.target_unit, blur_level=halo_blur)
            label_format.buffer.paint_effect = EffectStack([blur])
    return label_format
