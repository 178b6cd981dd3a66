"""
Sprite atlas lookup.

Icons and fill patterns reference sprites by name. The atlas index maps each
name to a pixel rectangle of the atlas image; the rectangle is cropped and
embedded into the style as a base64 PNG path.
"""
from base64 import b64encode
from dataclasses import dataclass, field
from io import BytesIO
from math import isfinite
from typing import Any, Optional, TypeAlias

from PIL import Image

from .settings import _SPRITES_CONF
from .values import is_number

Img: TypeAlias = Image.Image
SpriteSize: TypeAlias = tuple[int, int]


@dataclass
class SpriteDefinition:
    """Pixel rectangle of one sprite within the atlas."""
    name: str
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_json(cls, name: str, definition: Any) -> Optional["SpriteDefinition"]:
        """Read an atlas index entry, None if it is not a usable rectangle."""
        if not isinstance(definition, dict) or not definition:
            return None
        coords = [definition.get(key) for key in ("x", "y", "width", "height")]
        if not all(is_number(value) and isfinite(value) for value in coords):
            return None
        return cls(name, *(int(value) for value in coords))

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Crop box as (left, upper, right, lower)."""
        return self.x, self.y, self.x + self.width, self.y + self.height


@dataclass
class EmbeddedSprite:
    """Cropped sprite and its embeddable base64 path."""
    definition: SpriteDefinition
    img: Img
    path: str = field(init=False)

    def __post_init__(self):
        self.path = self._encode()

    @property
    def size(self) -> SpriteSize:
        return self.img.width, self.img.height

    def _encode(self) -> str:
        """Save the sprite as PNG and prefix its base64 text with the path scheme."""
        bio = BytesIO()
        self.img.save(bio, format=_SPRITES_CONF['IMAGE_FORMAT'])
        return _SPRITES_CONF['PATH_PREFIX'] + b64encode(bio.getvalue()).decode("ascii")


def retrieve_sprite(name: str, context) -> Optional[Img]:
    """Crop the named sprite from the context atlas, warning when it can't be found."""
    if context.sprite_image is None:
        context.push_warning(f"Could not retrieve sprite '{name}'")
        return None

    definition = SpriteDefinition.from_json(name, context.sprite_definitions.get(name))
    if definition is None or not _test_coordinates(definition, context.sprite_image):
        context.push_warning(f"Could not retrieve sprite '{name}'")
        return None

    return context.sprite_image.crop(definition.box)


def retrieve_sprite_as_base64(name: str, context) -> tuple[Optional[str], Optional[SpriteSize]]:
    """Return (base64 path, (width, height)) of the named sprite, (None, None) on failure."""
    img = retrieve_sprite(name, context)
    if img is None:
        return None, None

    definition = SpriteDefinition.from_json(name, context.sprite_definitions[name])
    sprite = EmbeddedSprite(definition, img)
    return sprite.path, sprite.size


def _test_coordinates(definition: SpriteDefinition, sprite: Img) -> bool:
    x, y, w, h = definition.x, definition.y, definition.width, definition.height
    return x >= 0 and y >= 0 and w > 0 and h > 0 and x + w <= sprite.width and y + h <= sprite.height
