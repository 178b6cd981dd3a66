"""Sprite atlas lookup and embedding."""

from base64 import b64decode
from io import BytesIO
from json import dumps

from PIL import Image

from mapboxgl2vectortiles.src.context import ConversionContext, Feedback
from mapboxgl2vectortiles.src.sprites import (
    SpriteDefinition,
    retrieve_sprite,
    retrieve_sprite_as_base64,
)


class TestRetrieveSprite:
    """Tests for cropping sprites out of the atlas."""

    def test_crop(self, sprite_context):
        img = retrieve_sprite("dot", sprite_context)
        assert img.size == (16, 16)
        assert img.getpixel((0, 0)) == (255, 0, 0, 255)
        assert sprite_context.warnings() == []

    def test_unknown_name(self, sprite_context):
        assert retrieve_sprite("missing", sprite_context) is None
        assert sprite_context.warnings() == ["Could not retrieve sprite 'missing'"]

    def test_out_of_bounds(self, sprite_context):
        assert retrieve_sprite("broken", sprite_context) is None
        assert sprite_context.warnings() == ["Could not retrieve sprite 'broken'"]

    def test_no_atlas(self, context):
        assert retrieve_sprite("dot", context) is None
        assert context.warnings() == ["Could not retrieve sprite 'dot'"]


class TestBase64:
    """Tests for embeddable sprite paths."""

    def test_path_and_size(self, sprite_context):
        path, size = retrieve_sprite_as_base64("bar", sprite_context)
        assert path.startswith("base64:")
        assert size == (32, 32)

        img = Image.open(BytesIO(b64decode(path[len("base64:"):])))
        assert img.format == "PNG"
        assert img.size == (32, 32)

    def test_failure(self, sprite_context):
        assert retrieve_sprite_as_base64("missing", sprite_context) == (None, None)


class TestSpriteInput:
    """Tests for the sprite data accepted by the context."""

    def test_raw_png_and_json(self, sprite_atlas):
        img, definitions = sprite_atlas
        bio = BytesIO()
        img.save(bio, format="PNG")

        context = ConversionContext(feedback=Feedback())
        context.set_sprites(bio.getvalue(), dumps(definitions))
        assert context.sprite_image.size == (64, 32)
        assert retrieve_sprite("dot", context).size == (16, 16)

    def test_undecodable_input(self):
        context = ConversionContext(feedback=Feedback())
        context.set_sprites(b"not a png", "{not json")
        assert context.sprite_image is None
        assert context.sprite_definitions == {}

    def test_definition_requires_rectangle(self):
        assert SpriteDefinition.from_json("a", {"x": 0, "y": 0}) is None
        assert SpriteDefinition.from_json("a", {"x": 1, "y": 2, "width": 3, "height": 4}).box == (1, 2, 4, 6)

    def test_definition_rejects_non_finite_coordinates(self):
        assert SpriteDefinition.from_json("a", {"x": float("inf"), "y": 0, "width": 3, "height": 4}) is None
