"""Shared fixtures: conversion contexts and an in-memory sprite atlas."""

import pytest
from PIL import Image

from mapboxgl2vectortiles.src.context import ConversionContext, Feedback


@pytest.fixture
def context():
    return ConversionContext(feedback=Feedback())


@pytest.fixture
def sprite_atlas():
    """64x32 atlas: a red 16px 'dot', a blue 32px 'bar' and an out of bounds entry."""
    img = Image.new("RGBA", (64, 32), (0, 0, 0, 0))
    img.paste((255, 0, 0, 255), (0, 0, 16, 16))
    img.paste((0, 0, 255, 255), (16, 0, 48, 32))
    definitions = {
        "dot": {"x": 0, "y": 0, "width": 16, "height": 16, "pixelRatio": 1},
        "bar": {"x": 16, "y": 0, "width": 32, "height": 32, "pixelRatio": 1},
        "broken": {"x": 60, "y": 0, "width": 16, "height": 16, "pixelRatio": 1},
    }
    return img, definitions


@pytest.fixture
def sprite_context(context, sprite_atlas):
    context.set_sprites(*sprite_atlas)
    return context
