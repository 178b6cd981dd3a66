"""
Style property values.

Every paint/layout property of a MapBox GL style layer holds one of four
shapes. classify() wraps the raw JSON value into the matching arm so that
property handlers can dispatch on the shape with isinstance checks:

  - Scalar: a literal number, string or boolean
  - StopsTable: a legacy zoom function {"base": 1.2, "stops": [[z, v], ...]}
  - ExpressionList: a list, either an expression ["interpolate", ...] or a
    literal array such as a dash pattern or an offset
  - Other: anything else (null, function objects without a stops list)
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Scalar:
    """Literal number, string or boolean value."""
    value: Union[int, float, str, bool]

    def is_number(self) -> bool:
        """Return True for ints and floats (booleans excluded)."""
        return isinstance(self.value, (int, float)) and not isinstance(self.value, bool)

    def is_string(self) -> bool:
        """Return True for string values."""
        return isinstance(self.value, str)


@dataclass(frozen=True)
class StopsTable:
    """Zoom function made of a base and an ordered list of (zoom, value) stops."""
    base: float = 1.0
    stops: List[Any] = field(default_factory=list)

    @property
    def last(self) -> Tuple[Any, Any]:
        """Last (zoom, value) pair."""
        return stop_pair(self.stops[-1])

    def pairs(self) -> List[Tuple[Any, Any]]:
        """Return all stops as (zoom, value) tuples."""
        return [stop_pair(stop) for stop in self.stops]


@dataclass(frozen=True)
class ExpressionList:
    """List value: an expression or a literal array."""
    items: List[Any] = field(default_factory=list)

    @property
    def operator(self) -> Optional[str]:
        """Expression operator name, None for literal arrays."""
        if self.items and isinstance(self.items[0], str):
            return self.items[0]
        return None

    def is_number_array(self, length: Optional[int] = None) -> bool:
        """Return True if this list is a literal array of numbers."""
        if length is not None and len(self.items) != length:
            return False
        return bool(self.items) and all(is_number(item) for item in self.items)


@dataclass(frozen=True)
class Other:
    """Unsupported value shape."""
    value: Any = None


ValueExpr = Union[Scalar, StopsTable, ExpressionList, Other]


def classify(value: Any) -> ValueExpr:
    """Wrap a raw JSON value into its ValueExpr arm."""
    if isinstance(value, (bool, int, float, str)):
        return Scalar(value)
    if isinstance(value, dict) and isinstance(value.get("stops"), list):
        return StopsTable(to_number(value.get("base", 1), 1.0), list(value["stops"]))
    if isinstance(value, (list, tuple)):
        items = list(value)
        # ["literal", [...]] wraps a plain array
        if len(items) == 2 and items[0] == "literal" and isinstance(items[1], (list, tuple)):
            items = list(items[1])
        return ExpressionList(items)
    return Other(value)


def is_number(value: Any) -> bool:
    """Return True for ints and floats, booleans excluded."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any, default: float = 0.0) -> float:
    """Convert a JSON scalar to float, returning default when not numeric."""
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def stop_pair(stop: Any) -> Tuple[Any, Any]:
    """Split a [zoom, value] stop, returning (None, None) for malformed stops."""
    if isinstance(stop, (list, tuple)) and len(stop) >= 2:
        return stop[0], stop[1]
    return None, None


def format_number(value: Union[int, float]) -> str:
    """Render a number for an expression string, dropping trailing '.0'."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:.10g}"
