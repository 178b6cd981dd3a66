"""Convert MapBox GL style documents to vector tile rendering and labeling rules."""

import json
from dataclasses import dataclass, field
from enum import Enum
from time import perf_counter
from typing import Any, Dict, List, Optional, Union

from .context import ConversionContext, Feedback
from .expressions import parse_expression
from .layers import parse_fill_layer, parse_line_layer, parse_symbol_layer
from .styles import LabelingRule, RenderingRule, StyleModel


class Result(Enum):
    SUCCESS = "success"
    NO_LAYER_LIST = "no_layer_list"


@dataclass
class ConversionResult:
    """Outcome of one conversion: the produced rules and every warning raised."""
    result: Result = Result.SUCCESS
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    renderer_styles: List[RenderingRule] = field(default_factory=list)
    labeling_styles: List[LabelingRule] = field(default_factory=list)

    @property
    def style_model(self) -> StyleModel:
        return StyleModel(self.renderer_styles, self.labeling_styles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result.value,
            "error": self.error,
            "warnings": list(self.warnings),
            **self.style_model.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert the result to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


class MapBoxGlStyleConverter:
    """
    Convert the layers of a MapBox GL style into rendering and labeling rules.

    Layers are converted in document order. Problems with single layers or
    properties never stop the conversion; they are collected as warnings.
    Only a document without a layers list fails.
    """

    def __init__(self, feedback: Optional[Feedback] = None):
        self.feedback = feedback or Feedback()
        self.result = ConversionResult()

    def convert(self, style: Union[Dict[str, Any], str], context: Optional[ConversionContext] = None
                ) -> ConversionResult:
        """
        Convert a style document.

        Args:
            style: decoded style document or raw JSON text
            context: conversion context holding units and sprites; a fresh
                one is created when omitted

        Returns:
            ConversionResult: rules, warnings and the result code
        """
        self.result = ConversionResult()
        if isinstance(style, (str, bytes)):
            try:
                style = json.loads(style)
            except json.JSONDecodeError as e:
                self._log(f". Could not decode style JSON: {e}")
                style = None

        layers = style.get("layers") if isinstance(style, dict) else None
        if not isinstance(layers, list):
            self.result.result = Result.NO_LAYER_LIST
            self.result.error = "Could not find layers list in JSON"
            self._log(f". {self.result.error}")
            return self.result

        if context is None:
            context = ConversionContext(feedback=self.feedback)

        self._log(f". Converting {len(layers)} style layers...")
        start_time = perf_counter()
        self._parse_layers(layers, context)
        self._log(f". Successfully converted {len(self.result.renderer_styles)} renderer styles and "
                  f"{len(self.result.labeling_styles)} labeling styles with {len(self.result.warnings)} warnings "
                  f"({self._elapsed_seconds(start_time, perf_counter())} seconds).")
        return self.result

    def _parse_layers(self, layers: List[Any], context: ConversionContext) -> None:
        for json_layer in layers:
            if not isinstance(json_layer, dict):
                self._push_warning(f"Skipping invalid style layer: {json_layer}")
                continue

            layer_type = json_layer.get("type")
            if layer_type == "background":
                continue

            filter_expression = ""
            if "filter" in json_layer:
                filter_expression = parse_expression(json_layer["filter"], context)

            rendering_rule = labeling_rule = None
            if layer_type == "fill":
                rendering_rule = parse_fill_layer(json_layer, context)
            elif layer_type == "line":
                rendering_rule = parse_line_layer(json_layer, context)
            elif layer_type == "symbol":
                rendering_rule, labeling_rule = parse_symbol_layer(json_layer, context)
            else:
                self._push_warning(f"Skipping unknown layer type: {layer_type}")
                self._collect_warnings(context)
                continue

            if rendering_rule is not None:
                self._setup_base_style_properties(rendering_rule, json_layer, filter_expression)
                self.result.renderer_styles.append(rendering_rule)
            if labeling_rule is not None:
                self._setup_base_style_properties(labeling_rule, json_layer, filter_expression)
                self.result.labeling_styles.append(labeling_rule)

            self._collect_warnings(context)

    @staticmethod
    def _setup_base_style_properties(style: Union[RenderingRule, LabelingRule], json_layer: Dict[str, Any],
                                     filter_expression: str) -> None:
        """Copy the layer metadata shared by renderer and labeling styles."""
        style.style_name = str(json_layer.get("id", ""))
        style.layer_name = str(json_layer.get("source-layer", ""))
        style.filter_expression = filter_expression
        style.min_zoom = _zoom_level(json_layer.get("minzoom"))
        style.max_zoom = _zoom_level(json_layer.get("maxzoom"))
        style.enabled = json_layer.get("visibility") != "none"

    def _push_warning(self, warning: str) -> None:
        self.feedback.push_debug_info(warning)
        self.result.warnings.append(warning)

    def _collect_warnings(self, context: ConversionContext) -> None:
        """Move the warnings of the last layer from the context to the result."""
        self.result.warnings.extend(context.warnings())
        context.clear_warnings()

    def to_json(self, indent: int = 2) -> str:
        """Convert the last conversion result to JSON string."""
        return self.result.to_json(indent)

    def save_to_file(self, filename: str = "style_model.json", indent: int = 2) -> None:
        """Save the last conversion result as JSON."""
        with open(filename, "w", encoding="utf8") as f:
            json.dump(self.result.to_dict(), f, indent=indent)
        self._log(f". Style model written to {filename}")

    def _log(self, message: str) -> None:
        """Log message to feedback or console."""
        self.feedback.push_info(message)

    @staticmethod
    def _elapsed_seconds(start: float, end: float) -> str:
        return f"{round(end - start, 3)}"


def _zoom_level(value: Any) -> int:
    """Integer zoom level, -1 when unbounded or not numeric."""
    if isinstance(value, bool) or value is None:
        return -1
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return -1
