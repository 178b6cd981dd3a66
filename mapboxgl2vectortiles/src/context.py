"""Conversion context shared by every parsing routine of a single conversion."""

from io import BytesIO
from json import JSONDecodeError, loads
from typing import Any, Dict, List, Optional, Union

from PIL import Image

from .settings import _CONVERSION_CONF, _FONTS_CONF
from .styles import RenderUnit


class Feedback:
    """Console feedback used when the caller provides no feedback object."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def push_info(self, message: str) -> None:
        print(message)

    def push_warning(self, message: str) -> None:
        print(f"✗ {message}")

    def push_debug_info(self, message: str) -> None:
        if self.debug:
            print(message)


class ConversionContext:
    """
    Mutable state of one conversion: output units, sprites and warnings.

    The context is not thread safe; every conversion needs its own instance
    (or exclusive use of a shared one while it runs).
    """

    def __init__(self, target_unit: Union[RenderUnit, str, None] = None,
                 pixel_size_conversion_factor: Optional[float] = None,
                 fonts: Optional[Dict[str, List[str]]] = None,
                 feedback: Optional[Feedback] = None):
        self.target_unit = target_unit if target_unit is not None else _CONVERSION_CONF['TARGET_UNIT']
        self.pixel_size_conversion_factor = (
            pixel_size_conversion_factor if pixel_size_conversion_factor is not None
            else _CONVERSION_CONF['PIXEL_SIZE_CONVERSION_FACTOR'])
        self.fonts = fonts if fonts is not None else _FONTS_CONF
        self.feedback = feedback or Feedback()
        self.sprite_image: Optional[Image.Image] = None
        self.sprite_definitions: Dict[str, Any] = {}
        self._warnings: List[str] = []

    @property
    def target_unit(self) -> RenderUnit:
        return self._target_unit

    @target_unit.setter
    def target_unit(self, unit: Union[RenderUnit, str]) -> None:
        """Accept a RenderUnit or its name; unknown names raise ValueError."""
        self._target_unit = unit if isinstance(unit, RenderUnit) else RenderUnit(str(unit).lower())

    @property
    def pixel_size_conversion_factor(self) -> float:
        return self._pixel_size_conversion_factor

    @pixel_size_conversion_factor.setter
    def pixel_size_conversion_factor(self, factor: float) -> None:
        factor = float(factor)
        if factor <= 0:
            raise ValueError(f"Pixel size conversion factor must be positive, got {factor}")
        self._pixel_size_conversion_factor = factor

    def push_warning(self, warning: str) -> None:
        """Record a conversion warning."""
        self.feedback.push_debug_info(warning)
        self._warnings.append(warning)

    def warnings(self) -> List[str]:
        return list(self._warnings)

    def clear_warnings(self) -> None:
        self._warnings.clear()

    def set_sprites(self, image: Union[Image.Image, bytes, None],
                    definitions: Union[Dict[str, Any], str, None]) -> None:
        """
        Set the sprite atlas.

        Args:
            image: decoded PIL image or raw PNG bytes of the atlas
            definitions: sprite index (name -> {x, y, width, height}), as a
                mapping or as raw JSON text
        """
        self.sprite_image = self._decode_image(image)
        self.sprite_definitions = self._decode_definitions(definitions)

    def font_family_has_style(self, family: str, style: str) -> bool:
        """Return True if the font catalogue lists style for family."""
        return style in self.fonts.get(family, [])

    def _decode_image(self, image: Union[Image.Image, bytes, None]) -> Optional[Image.Image]:
        """Return an RGBA image or None if the data can't be decoded."""
        if image is None:
            return None
        if isinstance(image, Image.Image):
            return image if image.mode == "RGBA" else image.convert("RGBA")
        try:
            return Image.open(BytesIO(image)).convert("RGBA")
        except (OSError, ValueError, TypeError) as e:
            self.feedback.push_warning(f"Could not decode sprite image: {e}")
            return None

    def _decode_definitions(self, definitions: Union[Dict[str, Any], str, None]) -> Dict[str, Any]:
        """Return the sprite index as a dict, empty if it can't be decoded."""
        if definitions is None:
            return {}
        if isinstance(definitions, (str, bytes)):
            try:
                definitions = loads(definitions)
            except JSONDecodeError as e:
                self.feedback.push_warning(f"Could not decode sprite definitions: {e}")
                return {}
        return definitions if isinstance(definitions, dict) else {}
