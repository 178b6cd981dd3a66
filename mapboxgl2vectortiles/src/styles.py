"""
Vector tile style model produced by the converter.

Rendering rules carry a symbol (fill, line or marker symbol layers) and
labeling rules carry label settings. Both share the same matching contract:
a rule applies to features of its source layer when it is enabled, when the
current zoom level falls within [min_zoom, max_zoom] (-1 means unbounded on
that side) and when its filter expression evaluates true. Rules are drawn in
list order.

Zoom and data dependent values are attached to symbol layers and label
settings as data defined properties: expression strings evaluated by the
renderer at draw time.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from .colors import Color


class GeometryType(Enum):
    POINT = "Point"
    LINE = "Line"
    POLYGON = "Polygon"


class SymbolType(Enum):
    MARKER = "Marker"
    LINE = "Line"
    FILL = "Fill"


class RenderUnit(Enum):
    MILLIMETERS = "millimeters"
    PIXELS = "pixels"
    POINTS = "points"
    INCHES = "inches"
    MAP_UNITS = "map_units"


class PenCapStyle(Enum):
    FLAT = "flat"
    SQUARE = "square"
    ROUND = "round"


class PenJoinStyle(Enum):
    MITER = "miter"
    BEVEL = "bevel"
    ROUND = "round"


class PenStyle(Enum):
    SOLID = "solid"
    NO_PEN = "no_pen"


class BrushStyle(Enum):
    SOLID = "solid"
    NO_BRUSH = "no_brush"


class CoordinateMode(Enum):
    FEATURE = "feature"
    VIEWPORT = "viewport"


class MarkerLinePlacement(Enum):
    INTERVAL = "interval"
    CENTRAL_POINT = "central_point"


class LabelPlacement(Enum):
    OVER_POINT = "over_point"
    CURVED = "curved"


class LinePlacementFlag(Enum):
    ON_LINE = "on_line"
    ABOVE_LINE = "above_line"
    BELOW_LINE = "below_line"


class Quadrant(IntEnum):
    """Label position relative to its anchor point."""
    ABOVE_LEFT = 0
    ABOVE = 1
    ABOVE_RIGHT = 2
    LEFT = 3
    OVER = 4
    RIGHT = 5
    BELOW_LEFT = 6
    BELOW = 7
    BELOW_RIGHT = 8


class Property(Enum):
    """Keys of data defined symbol layer and label properties."""
    # symbol layers
    FILL_COLOR = "fillColor"
    STROKE_COLOR = "strokeColor"
    STROKE_WIDTH = "strokeWidth"
    OFFSET = "offset"
    ANGLE = "angle"
    OPACITY = "opacity"
    INTERVAL = "interval"
    # labels
    SIZE = "size"
    COLOR = "color"
    BUFFER_COLOR = "bufferColor"
    BUFFER_SIZE = "bufferSize"
    AUTO_WRAP_LENGTH = "autoWrapLength"
    FONT_LETTER_SPACING = "fontLetterSpacing"
    OFFSET_QUAD = "offsetQuad"
    OFFSET_XY = "offsetXY"


def serialize(value: Any) -> Any:
    """Convert model objects to JSON compatible structures."""
    if isinstance(value, Color):
        return value.name()
    if isinstance(value, Enum):
        return value.value if not isinstance(value, IntEnum) else value.name
    if isinstance(value, PropertyCollection):
        return value.to_dict()
    if is_dataclass(value):
        data = {f.name: serialize(getattr(value, f.name)) for f in fields(value)}
        if isinstance(value, SymbolLayer):
            data["layer_type"] = value.layer_type
        return data
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    return value


@dataclass
class DataDefinedProperty:
    """Expression evaluated per feature and zoom level."""
    expression_string: str = ""
    active: bool = False

    @classmethod
    def from_expression(cls, expression: Optional[str]) -> "DataDefinedProperty":
        """Active property for a non empty expression, inactive otherwise."""
        return cls(expression or "", bool(expression))

    def is_active(self) -> bool:
        return self.active and bool(self.expression_string)


class PropertyCollection:
    """Data defined properties of one symbol layer or label settings object."""

    def __init__(self):
        self._properties: Dict[Property, DataDefinedProperty] = {}

    def set_property(self, key: Property, prop: Optional[DataDefinedProperty]) -> None:
        """Store a property, ignoring None."""
        if prop is None:
            return
        self._properties[key] = prop

    def property(self, key: Property) -> DataDefinedProperty:
        """Return the stored property, or an inactive one."""
        return self._properties.get(key, DataDefinedProperty())

    def is_active(self, key: Property) -> bool:
        return key in self._properties and self._properties[key].is_active()

    def to_dict(self) -> Dict[str, Any]:
        return {key.value: serialize(prop) for key, prop in self._properties.items()}

    def __eq__(self, other) -> bool:
        if not isinstance(other, PropertyCollection):
            return NotImplemented
        return self._properties == other._properties

    def __repr__(self) -> str:
        return f"PropertyCollection({self.to_dict()!r})"


@dataclass
class SymbolLayer:
    """Base of all symbol layers."""
    data_defined_properties: PropertyCollection = field(default_factory=PropertyCollection, kw_only=True)

    @property
    def layer_type(self) -> str:
        return type(self).__name__.replace("SymbolLayer", "")


@dataclass
class SimpleFillSymbolLayer(SymbolLayer):
    fill_color: Color = Color(190, 178, 151)
    stroke_color: Color = Color(35, 35, 35)
    brush_style: BrushStyle = BrushStyle.SOLID
    stroke_style: PenStyle = PenStyle.SOLID
    stroke_width: float = 0.26
    offset: tuple = (0.0, 0.0)
    offset_unit: RenderUnit = RenderUnit.MILLIMETERS
    output_unit: RenderUnit = RenderUnit.MILLIMETERS


@dataclass
class RasterFillSymbolLayer(SymbolLayer):
    image_file_path: str = ""
    coordinate_mode: CoordinateMode = CoordinateMode.FEATURE
    opacity: float = 1.0


@dataclass
class SimpleLineSymbolLayer(SymbolLayer):
    color: Color = Color(35, 35, 35)
    width: float = 0.26
    offset: float = 0.0
    offset_unit: RenderUnit = RenderUnit.MILLIMETERS
    output_unit: RenderUnit = RenderUnit.MILLIMETERS
    pen_cap_style: PenCapStyle = PenCapStyle.FLAT
    pen_join_style: PenJoinStyle = PenJoinStyle.MITER
    use_custom_dash_pattern: bool = False
    custom_dash_vector: List[float] = field(default_factory=list)


@dataclass
class RasterMarkerSymbolLayer(SymbolLayer):
    path: str = ""
    size: float = 2.0
    size_unit: RenderUnit = RenderUnit.MILLIMETERS
    angle: float = 0.0
    opacity: float = 1.0


@dataclass
class MarkerLineSymbolLayer(SymbolLayer):
    rotate_markers: bool = True
    interval: float = 3.0
    placement: MarkerLinePlacement = MarkerLinePlacement.INTERVAL
    output_unit: RenderUnit = RenderUnit.MILLIMETERS
    sub_symbol: Optional["Symbol"] = None


@dataclass
class Symbol:
    """Ordered stack of symbol layers of a single symbol type."""
    symbol_type: SymbolType
    symbol_layers: List[SymbolLayer] = field(default_factory=list)
    output_unit: RenderUnit = RenderUnit.MILLIMETERS
    opacity: float = 1.0

    @classmethod
    def default_symbol(cls, geometry_type: GeometryType) -> "Symbol":
        """Symbol with the default simple layer for the geometry type."""
        if geometry_type == GeometryType.POLYGON:
            return cls(SymbolType.FILL, [SimpleFillSymbolLayer()])
        if geometry_type == GeometryType.LINE:
            return cls(SymbolType.LINE, [SimpleLineSymbolLayer()])
        return cls(SymbolType.MARKER, [RasterMarkerSymbolLayer()])

    def symbol_layer(self, index: int) -> SymbolLayer:
        return self.symbol_layers[index]

    def append_symbol_layer(self, layer: SymbolLayer) -> None:
        self.symbol_layers.append(layer)


@dataclass
class Font:
    family: str = ""
    style_name: str = ""
    letter_spacing: float = 0.0


@dataclass
class BlurEffect:
    enabled: bool = True
    blur_unit: RenderUnit = RenderUnit.MILLIMETERS
    blur_level: float = 2.0
    blur_method: str = "StackBlur"


@dataclass
class EffectStack:
    effects: List[BlurEffect] = field(default_factory=list)
    enabled: bool = True


@dataclass
class TextBufferSettings:
    """Halo drawn around label text."""
    enabled: bool = False
    size: float = 1.0
    size_unit: RenderUnit = RenderUnit.MILLIMETERS
    color: Color = Color(255, 255, 255)
    paint_effect: Optional[EffectStack] = None


@dataclass
class TextFormat:
    font: Font = field(default_factory=Font)
    size: float = 10.0
    size_unit: RenderUnit = RenderUnit.POINTS
    color: Color = Color(0, 0, 0)
    buffer: TextBufferSettings = field(default_factory=TextBufferSettings)


@dataclass
class LabelSettings:
    field_name: str = ""
    is_expression: bool = False
    placement: LabelPlacement = LabelPlacement.OVER_POINT
    line_placement_flags: Optional[LinePlacementFlag] = None
    quad_offset: Quadrant = Quadrant.OVER
    x_offset: float = 0.0
    y_offset: float = 0.0
    offset_units: RenderUnit = RenderUnit.MILLIMETERS
    priority: float = 5.0
    auto_wrap_length: float = 0
    format: TextFormat = field(default_factory=TextFormat)
    obstacle_factor: float = 1.0
    data_defined_properties: PropertyCollection = field(default_factory=PropertyCollection)


@dataclass
class RenderingRule:
    """Renderer style: a symbol matched against one source layer."""
    style_name: str = ""
    layer_name: str = ""
    filter_expression: str = ""
    min_zoom: int = -1
    max_zoom: int = -1
    enabled: bool = True
    geometry_type: Optional[GeometryType] = None
    symbol: Optional[Symbol] = None

    def to_dict(self) -> Dict[str, Any]:
        return serialize(self)


@dataclass
class LabelingRule:
    """Labeling style: label settings matched against one source layer."""
    style_name: str = ""
    layer_name: str = ""
    filter_expression: str = ""
    min_zoom: int = -1
    max_zoom: int = -1
    enabled: bool = True
    geometry_type: Optional[GeometryType] = None
    label_settings: Optional[LabelSettings] = None

    def to_dict(self) -> Dict[str, Any]:
        return serialize(self)


@dataclass
class StyleModel:
    """Renderer and labeling rules, both in drawing order."""
    renderer_styles: List[RenderingRule] = field(default_factory=list)
    labeling_styles: List[LabelingRule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "renderer": [style.to_dict() for style in self.renderer_styles],
            "labeling": [style.to_dict() for style in self.labeling_styles],
        }
