"""Parse MapBox GL color strings and convert colors to HSLA components."""

import re
from colorsys import rgb_to_hls
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from PIL import ImageColor


_CSS_ALPHA_RX = re.compile(r"^\s*(rgba|hsla)\s*\((.*)\)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class Color:
    """RGBA color with 0-255 channels."""
    red: int
    green: int
    blue: int
    alpha: int = 255

    def name(self) -> str:
        """Return #rrggbb, or #rrggbbaa for translucent colors."""
        rgb = f"#{self.red:02x}{self.green:02x}{self.blue:02x}"
        return rgb if self.alpha == 255 else f"{rgb}{self.alpha:02x}"


def parse_color_string(color: str) -> Optional[Color]:
    """Parse a CSS-like color string (hex, rgb[a], hsl[a], named) or return None."""
    alpha = None
    text = color.strip()
    match = _CSS_ALPHA_RX.match(text)
    if match:
        # CSS alpha is a 0-1 fraction, Pillow reads a fourth rgba() part as 0-255
        function, arguments = match.group(1).lower(), match.group(2).split(",")
        if len(arguments) == 4:
            alpha = _parse_alpha(arguments[3])
            if alpha is None:
                return None
            arguments = arguments[:3]
        text = f"{function[:3]}({','.join(part.strip() for part in arguments)})"

    try:
        channels = ImageColor.getrgb(text)
    except ValueError:
        return None

    red, green, blue = channels[:3]
    if alpha is None:
        alpha = channels[3] if len(channels) > 3 else 255
    return Color(red, green, blue, alpha)


def parse_color(color: Any, context) -> Optional[Color]:
    """Parse a style color value, warning and returning None for anything unusable."""
    if not isinstance(color, str):
        context.push_warning(f"Could not parse non-string color {color}, skipping")
        return None

    parsed = parse_color_string(color)
    if parsed is None:
        context.push_warning(f"Could not parse color {color}, skipping")
    return parsed


def color_as_hsla_components(color: Color) -> Tuple[int, int, int, int]:
    """
    Split a color into integer HSLA components used by interpolation expressions.

    Hue is reported in whole degrees (achromatic colors get 0), saturation and
    lightness are truncated percentages going through an 8 bit intermediate
    step, alpha stays in the 0-255 range.
    """
    hue, lightness, saturation = rgb_to_hls(color.red / 255.0, color.green / 255.0, color.blue / 255.0)
    if max(color.red, color.green, color.blue) == min(color.red, color.green, color.blue):
        hue_degrees = 0
    else:
        hue_degrees = (int(round(hue * 36000)) // 100) % 360

    saturation_8bit = int(round(saturation * 65535)) >> 8
    lightness_8bit = int(round(lightness * 65535)) >> 8
    return (
        max(0, hue_degrees),
        int(saturation_8bit / 255.0 * 100),
        int(lightness_8bit / 255.0 * 100),
        color.alpha,
    )


def _parse_alpha(text: str) -> Optional[int]:
    """Convert a CSS alpha token (0.5 or 50%) to 0-255."""
    text = text.strip()
    try:
        if text.endswith("%"):
            value = float(text[:-1]) / 100.0
        else:
            value = float(text)
    except ValueError:
        return None
    return int(round(_clamp(value, 0.0, 1.0) * 255))


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
