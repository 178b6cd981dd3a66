"""MapBoxGL2VectorTiles: MapBox GL styles to vector tile renderer and labeling rules"""

from .src.colors import Color
from .src.context import ConversionContext, Feedback
from .src.gl2vectortiles import ConversionResult, MapBoxGlStyleConverter, Result
from .src.styles import LabelingRule, RenderingRule, RenderUnit, StyleModel


def convert(style, context=None):
    """Convert a style document (mapping or JSON text) with a fresh converter."""
    return MapBoxGlStyleConverter(context.feedback if context else None).convert(style, context)


__all__ = [
    "Color",
    "ConversionContext",
    "ConversionResult",
    "Feedback",
    "LabelingRule",
    "MapBoxGlStyleConverter",
    "RenderUnit",
    "RenderingRule",
    "Result",
    "StyleModel",
    "convert",
]
