"""
Compile zoom functions into data defined property expressions.

Stops tables ({"base": b, "stops": [[zoom, value], ...]}) and "interpolate"
or "step" expression lists are turned into CASE expressions over the
@zoom_level variable. Between two stops, values are eased with
scale_linear() (base 1) or scale_exp() (any other base). Colors are
interpolated channel by channel in HSLA space, opacities are applied to the
current @symbol_color alpha channel and points are compiled per axis into
array(x, y).
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .colors import Color, color_as_hsla_components, parse_color
from .expressions import quoted_value
from .styles import DataDefinedProperty
from .values import StopsTable, format_number, is_number, to_number


class PropertyType(Enum):
    """Kind of value compiled from an expression list."""
    COLOR = "color"
    NUMERIC = "numeric"
    OPACITY = "opacity"
    POINT = "point"


def interpolate_expression(zoom_min: float, zoom_max: float, value_min: float, value_max: float,
                           base: float, multiplier: float = 1) -> str:
    """Return the easing expression between two stops."""
    # equal values would make the scale functions divide by zero
    if abs(value_min - value_max) < 1e-8:
        return format_number(value_min * multiplier)

    args = ",".join(format_number(v) for v in (zoom_min, zoom_max, value_min, value_max))
    if base == 1:
        expression = f"scale_linear(@zoom_level,{args})"
    else:
        expression = f"scale_exp(@zoom_level,{args},{format_number(base)})"

    if multiplier != 1:
        return f"{expression} * {format_number(multiplier)}"
    return expression


def parse_interpolate_by_zoom(json: StopsTable, context, multiplier: float = 1
                              ) -> Tuple[DataDefinedProperty, Optional[float]]:
    """Compile a numeric stops table, returning (property, first stop value)."""
    stops = _numeric_stops(json, context)
    if not stops:
        return DataDefinedProperty(), None

    (first_zoom, first_value), (last_zoom, last_value) = stops[0], stops[-1]
    if len(stops) <= 2:
        expression = interpolate_expression(first_zoom, last_zoom, first_value, last_value,
                                            json.base, multiplier)
    else:
        expression = parse_stops(json.base, stops, multiplier, context)

    return DataDefinedProperty.from_expression(expression), first_value * multiplier


def parse_stops(base: float, stops: List[Any], multiplier: float, context) -> str:
    """
    Compile three or more numeric stops into one CASE expression.

    Each (bottom, top] zoom bracket gets its own easing curve. Zooms below
    the first stop and above the last stop clamp to the first and last stop
    values.
    """
    pairs = _numeric_pairs(stops, context)
    if not pairs:
        return ""

    first_zoom, first_value = pairs[0]
    case_string = (f"CASE WHEN @zoom_level <= {format_number(first_zoom)} "
                   f"THEN {format_number(first_value * multiplier)} ")
    for (bottom_zoom, bottom_value), (top_zoom, top_value) in zip(pairs, pairs[1:]):
        case_string += (f"WHEN @zoom_level > {format_number(bottom_zoom)} AND @zoom_level <= {format_number(top_zoom)} "
                        f"THEN {interpolate_expression(bottom_zoom, top_zoom, bottom_value, top_value, base, multiplier)} ")

    last_zoom, last_value = pairs[-1]
    case_string += (f"WHEN @zoom_level > {format_number(last_zoom)} "
                    f"THEN {format_number(last_value * multiplier)} END")
    return case_string


def parse_interpolate_color_by_zoom(json: StopsTable, context) -> Tuple[DataDefinedProperty, Optional[Color]]:
    """Compile a color stops table, returning (property, first stop color)."""
    if not json.stops:
        context.push_warning("Skipping empty stops table")
        return DataDefinedProperty(), None

    stops = []
    for zoom, value in json.pairs():
        if not is_number(zoom):
            context.push_warning("Expressions in interpolation function are not supported, skipping.")
            return DataDefinedProperty(), None
        color = parse_color(value, context)
        if color is None:
            return DataDefinedProperty(), None
        stops.append((zoom, color_as_hsla_components(color), color))

    first_zoom, first_hsla, first_color = stops[0]
    case_string = f"CASE WHEN @zoom_level < {format_number(first_zoom)} THEN {_color_hsla(first_hsla)} "
    for (bottom_zoom, bottom_hsla, _), (top_zoom, top_hsla, _) in zip(stops, stops[1:]):
        channels = ", ".join(
            interpolate_expression(bottom_zoom, top_zoom, bottom, top, json.base)
            for bottom, top in zip(bottom_hsla, top_hsla))
        case_string += (f"WHEN @zoom_level >= {format_number(bottom_zoom)} AND @zoom_level < {format_number(top_zoom)} "
                        f"THEN color_hsla({channels}) ")

    last_zoom, last_hsla, _ = stops[-1]
    case_string += (f"WHEN @zoom_level >= {format_number(last_zoom)} THEN {_color_hsla(last_hsla)} "
                    f"ELSE {_color_hsla(last_hsla)} END")
    return DataDefinedProperty.from_expression(case_string), first_color


def parse_interpolate_opacity_by_zoom(json: StopsTable, max_opacity: int, context) -> DataDefinedProperty:
    """Compile opacity stops into an expression replacing the alpha of @symbol_color."""
    stops = _numeric_stops(json, context)
    if not stops:
        return DataDefinedProperty()

    if len(stops) <= 2:
        (first_zoom, first_value), (last_zoom, last_value) = stops[0], stops[-1]
        expression = _set_alpha(interpolate_expression(first_zoom, last_zoom, first_value * max_opacity,
                                                        last_value * max_opacity, json.base))
    else:
        expression = parse_opacity_stops(json.base, stops, max_opacity)
    return DataDefinedProperty.from_expression(expression)


def parse_opacity_stops(base: float, stops: List[Tuple[float, float]], max_opacity: int) -> str:
    """Compile three or more opacity stops into one CASE expression."""
    first_zoom, first_value = stops[0]
    case_string = (f"CASE WHEN @zoom_level < {format_number(first_zoom)} "
                   f"THEN {_set_alpha(format_number(first_value * max_opacity))}")
    for (bottom_zoom, bottom_value), (top_zoom, top_value) in zip(stops, stops[1:]):
        alpha = interpolate_expression(bottom_zoom, top_zoom, bottom_value * max_opacity,
                                       top_value * max_opacity, base)
        case_string += (f" WHEN @zoom_level >= {format_number(bottom_zoom)} AND @zoom_level < {format_number(top_zoom)} "
                        f"THEN {_set_alpha(alpha)}")

    last_zoom, last_value = stops[-1]
    case_string += (f" WHEN @zoom_level >= {format_number(last_zoom)} "
                    f"THEN {_set_alpha(format_number(last_value * max_opacity))} END")
    return case_string


def parse_interpolate_point_by_zoom(json: StopsTable, context, multiplier: float = 1
                                    ) -> Tuple[DataDefinedProperty, Optional[Tuple[float, float]]]:
    """Compile [x, y] stops, returning (property, first stop point)."""
    if not json.stops:
        context.push_warning("Skipping empty stops table")
        return DataDefinedProperty(), None

    stops = []
    for zoom, value in json.pairs():
        if not is_number(zoom) or not _is_point(value):
            context.push_warning("Could not convert offset interpolation, skipping.")
            return DataDefinedProperty(), None
        stops.append((zoom, value))

    (first_zoom, first_point), (last_zoom, last_point) = stops[0], stops[-1]
    if len(stops) <= 2:
        expression = "array({},{})".format(
            interpolate_expression(first_zoom, last_zoom, first_point[0], last_point[0], json.base, multiplier),
            interpolate_expression(first_zoom, last_zoom, first_point[1], last_point[1], json.base, multiplier))
    else:
        expression = parse_point_stops(json.base, stops, multiplier)

    default_point = (first_point[0] * multiplier, first_point[1] * multiplier)
    return DataDefinedProperty.from_expression(expression), default_point


def parse_point_stops(base: float, stops: List[Tuple[float, List[float]]], multiplier: float = 1) -> str:
    """Compile three or more point stops into one CASE expression."""
    first_zoom, first_point = stops[0]
    case_string = f"CASE WHEN @zoom_level <= {format_number(first_zoom)} THEN {_array(first_point, multiplier)} "
    for (bottom_zoom, bottom_point), (top_zoom, top_point) in zip(stops, stops[1:]):
        x = interpolate_expression(bottom_zoom, top_zoom, bottom_point[0], top_point[0], base, multiplier)
        y = interpolate_expression(bottom_zoom, top_zoom, bottom_point[1], top_point[1], base, multiplier)
        case_string += (f"WHEN @zoom_level > {format_number(bottom_zoom)} AND @zoom_level <= {format_number(top_zoom)} "
                        f"THEN array({x},{y}) ")

    last_zoom, last_point = stops[-1]
    case_string += f"WHEN @zoom_level > {format_number(last_zoom)} THEN {_array(last_point, multiplier)} END"
    return case_string


def parse_string_stops(stops: List[Any], context, conversion_map: Dict[str, Any]
                       ) -> Tuple[str, Optional[str]]:
    """
    Compile (zoom, string) stops into a CASE expression of mapped values.

    Returns the expression and the last stop's raw string, used as the
    static value.
    """
    pairs = [tuple(stop[:2]) if isinstance(stop, (list, tuple)) and len(stop) >= 2 else (None, None)
             for stop in stops]
    if not pairs:
        context.push_warning("Skipping empty stops table")
        return "", None

    case_string = "CASE "
    for (bottom_zoom, bottom_value), (top_zoom, _) in zip(pairs, pairs[1:]):
        if not is_number(bottom_zoom) or not is_number(top_zoom):
            context.push_warning("Expressions in interpolation function are not supported, skipping.")
            return "", None
        mapped = conversion_map.get(str(bottom_value), bottom_value)
        case_string += (f"WHEN @zoom_level > {format_number(bottom_zoom)} AND @zoom_level <= {format_number(top_zoom)} "
                        f"THEN {quoted_value(mapped)} ")

    last_value = pairs[-1][1]
    case_string += f"ELSE {quoted_value(conversion_map.get(str(last_value), last_value))} END"
    return case_string, None if last_value is None else str(last_value)


def parse_interpolate_string_by_zoom(json: StopsTable, context, conversion_map: Dict[str, Any]
                                     ) -> Tuple[DataDefinedProperty, Optional[str]]:
    """Compile a string stops table, returning (property, last stop string)."""
    if not json.stops:
        context.push_warning("Skipping empty stops table")
        return DataDefinedProperty(), None

    expression, default_string = parse_string_stops(json.stops, context, conversion_map)
    return DataDefinedProperty.from_expression(expression), default_string


def parse_interpolate_list_by_zoom(json: List[Any], property_type: PropertyType, context,
                                   multiplier: float = 1, max_opacity: int = 255
                                   ) -> Tuple[DataDefinedProperty, Any]:
    """
    Compile an ["interpolate", [technique, ...], ["zoom"], z0, v0, ...] expression.

    The list is reshaped into a stops table and compiled per property_type.
    Returns (property, default value); the default is None for opacities.
    """
    operator = json[0] if json else None
    if operator == "step":
        return parse_step_list_by_zoom(json, property_type, context, multiplier, max_opacity)
    if operator != "interpolate":
        context.push_warning("Could not interpret value list")
        return DataDefinedProperty(), None

    technique_json = json[1] if len(json) > 1 and isinstance(json[1], list) else []
    technique = technique_json[0] if technique_json else None
    if technique == "linear":
        base = 1.0
    elif technique == "exponential":
        base = to_number(technique_json[1] if len(technique_json) > 1 else 1, 1.0)
    elif technique == "cubic-bezier":
        context.push_warning("Cubic-bezier interpolation is not supported, linear used instead.")
        base = 1.0
    else:
        context.push_warning(f"Skipping not implemented interpolation method {technique}")
        return DataDefinedProperty(), None

    if not _is_zoom_input(json[2] if len(json) > 2 else None):
        context.push_warning(f"Skipping not implemented interpolation input {json[2] if len(json) > 2 else None}")
        return DataDefinedProperty(), None

    stops = [[json[i], json[i + 1]] for i in range(3, len(json) - 1, 2)]
    props = StopsTable(base, stops)
    if property_type == PropertyType.COLOR:
        return parse_interpolate_color_by_zoom(props, context)
    if property_type == PropertyType.NUMERIC:
        return parse_interpolate_by_zoom(props, context, multiplier)
    if property_type == PropertyType.OPACITY:
        return parse_interpolate_opacity_by_zoom(props, max_opacity, context), None
    return parse_interpolate_point_by_zoom(props, context, multiplier)


def parse_step_list_by_zoom(json: List[Any], property_type: PropertyType, context,
                            multiplier: float = 1, max_opacity: int = 255
                            ) -> Tuple[DataDefinedProperty, Any]:
    """
    Compile a ["step", ["zoom"], v0, z1, v1, ...] expression.

    Values switch at each zoom threshold without easing. Returns (property,
    default value) where the default is the value below the first threshold.
    """
    if len(json) < 3 or not _is_zoom_input(json[1]):
        context.push_warning(f"Skipping not implemented step input {json[1] if len(json) > 1 else None}")
        return DataDefinedProperty(), None

    outputs = [json[2]] + [json[i + 1] for i in range(3, len(json) - 1, 2)]
    thresholds = [json[i] for i in range(3, len(json) - 1, 2)]
    if not all(is_number(zoom) for zoom in thresholds):
        context.push_warning("Expressions in interpolation function are not supported, skipping.")
        return DataDefinedProperty(), None

    rendered = []
    for output in outputs:
        value, default = _step_output(output, property_type, context, multiplier, max_opacity)
        if value is None:
            return DataDefinedProperty(), None
        rendered.append((value, default))

    if not thresholds:
        return DataDefinedProperty.from_expression(rendered[0][0]), rendered[0][1]

    case_string = f"CASE WHEN @zoom_level < {format_number(thresholds[0])} THEN {rendered[0][0]} "
    for index, zoom in enumerate(thresholds):
        if index + 1 < len(thresholds):
            case_string += (f"WHEN @zoom_level >= {format_number(zoom)} AND "
                            f"@zoom_level < {format_number(thresholds[index + 1])} THEN {rendered[index + 1][0]} ")
        else:
            case_string += f"WHEN @zoom_level >= {format_number(zoom)} THEN {rendered[index + 1][0]} END"

    default = None if property_type == PropertyType.OPACITY else rendered[0][1]
    return DataDefinedProperty.from_expression(case_string), default


def _step_output(value: Any, property_type: PropertyType, context, multiplier: float,
                 max_opacity: int) -> Tuple[Optional[str], Any]:
    """Render one constant step output as (expression, static value)."""
    if property_type == PropertyType.COLOR:
        color = parse_color(value, context)
        if color is None:
            return None, None
        return _color_hsla(color_as_hsla_components(color)), color

    if property_type == PropertyType.POINT:
        if not _is_point(value):
            context.push_warning("Could not convert offset interpolation, skipping.")
            return None, None
        return _array(value, multiplier), (value[0] * multiplier, value[1] * multiplier)

    if not is_number(value):
        context.push_warning("Expressions in interpolation function are not supported, skipping.")
        return None, None
    if property_type == PropertyType.OPACITY:
        return _set_alpha(format_number(value * max_opacity)), None
    return format_number(value * multiplier), value * multiplier


def _numeric_stops(json: StopsTable, context) -> List[Tuple[float, float]]:
    """Validated (zoom, value) number pairs of a stops table, empty on failure."""
    if not json.stops:
        context.push_warning("Skipping empty stops table")
        return []
    return _numeric_pairs(json.stops, context)


def _numeric_pairs(stops: List[Any], context) -> List[Tuple[float, float]]:
    pairs = []
    for stop in stops:
        if isinstance(stop, tuple) and len(stop) == 2:
            zoom, value = stop
        elif isinstance(stop, (list, tuple)) and len(stop) >= 2:
            zoom, value = stop[0], stop[1]
        else:
            context.push_warning(f"Skipping malformed stop {stop}")
            return []
        if not is_number(zoom) or not is_number(value):
            context.push_warning("Expressions in interpolation function are not supported, skipping.")
            return []
        pairs.append((zoom, value))
    return pairs


def _is_zoom_input(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and value[0] == "zoom"


def _is_point(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) >= 2 and is_number(value[0]) and is_number(value[1])


def _color_hsla(hsla: Tuple[int, int, int, int]) -> str:
    return "color_hsla({}, {}, {}, {})".format(*hsla)


def _set_alpha(alpha: str) -> str:
    return f"set_color_part(@symbol_color, 'alpha', {alpha})"


def _array(point: List[float], multiplier: float) -> str:
    return f"array({format_number(point[0] * multiplier)},{format_number(point[1] * multiplier)})"
