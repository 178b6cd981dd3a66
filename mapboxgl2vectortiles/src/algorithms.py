import argparse
import sys
from os.path import exists
from typing import Any, Dict, List, Optional

from .context import ConversionContext, Feedback
from .gl2vectortiles import MapBoxGlStyleConverter, Result
from .styles import RenderUnit


class MapBoxGl2VectorTilesAlgorithm:
    """
    Command line algorithm converting a MapBox GL style file to a vector tile
    style model. The produced rules are printed as a summary and optionally
    written to a JSON file.
    """

    # Parameter names (constants for consistency)
    STYLE = "style"
    SPRITE_JSON = "sprite_json"
    SPRITE_IMAGE = "sprite_image"
    UNIT = "unit"
    PIXEL_FACTOR = "pixel_factor"
    OUTPUT = "output"
    DEBUG = "debug"

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="mapboxgl2vectortiles",
            description="Converts a MapBox GL style JSON into vector tile rendering and labeling rules.")
        self.init_algorithm()

    def init_algorithm(self) -> None:
        """Define the inputs and outputs of the algorithm."""
        self.parser.add_argument(self.STYLE, help="MapBox GL style JSON file")
        self.parser.add_argument("--sprite-json", dest=self.SPRITE_JSON, help="Sprite atlas index JSON file")
        self.parser.add_argument("--sprite-image", dest=self.SPRITE_IMAGE, help="Sprite atlas PNG file")
        self.parser.add_argument("--unit", dest=self.UNIT, default=None,
                                 choices=[unit.value for unit in RenderUnit],
                                 help="Output unit of sizes and offsets")
        self.parser.add_argument("--pixel-factor", dest=self.PIXEL_FACTOR, type=float, default=None,
                                 help="Factor converting style pixels to output units")
        self.parser.add_argument("--output", "-o", dest=self.OUTPUT, help="Write the style model JSON here")
        self.parser.add_argument("--debug", dest=self.DEBUG, action="store_true",
                                 help="Print each warning as it is raised")

    def check_parameter_values(self, parameters: Dict[str, Any]) -> tuple[bool, str]:
        """Validate parameter values before processing."""
        if not exists(parameters[self.STYLE]):
            return False, f"Style file {parameters[self.STYLE]} does not exist"

        sprite_files = (parameters[self.SPRITE_JSON], parameters[self.SPRITE_IMAGE])
        if any(sprite_files) and not all(sprite_files):
            return False, "Sprite JSON and sprite image must be given together"
        for path in sprite_files:
            if path and not exists(path):
                return False, f"Sprite file {path} does not exist"

        factor = parameters[self.PIXEL_FACTOR]
        if factor is not None and factor <= 0:
            return False, "Pixel factor must be greater than zero"
        return True, ""

    def process_algorithm(self, parameters: Dict[str, Any], feedback: Feedback) -> int:
        """Run the conversion, returning the process exit status."""
        with open(parameters[self.STYLE], encoding="utf8") as f:
            style = f.read()

        context = ConversionContext(target_unit=parameters[self.UNIT],
                                    pixel_size_conversion_factor=parameters[self.PIXEL_FACTOR],
                                    feedback=feedback)
        if parameters[self.SPRITE_JSON]:
            with open(parameters[self.SPRITE_JSON], encoding="utf8") as f:
                definitions = f.read()
            with open(parameters[self.SPRITE_IMAGE], "rb") as f:
                image = f.read()
            context.set_sprites(image, definitions)

        converter = MapBoxGlStyleConverter(feedback)
        result = converter.convert(style, context)
        if result.result != Result.SUCCESS:
            feedback.push_warning(result.error)
            return 1

        feedback.push_info(f"✓ {len(result.renderer_styles)} renderer styles, "
                           f"{len(result.labeling_styles)} labeling styles")
        for warning in result.warnings:
            feedback.push_warning(warning)

        if parameters[self.OUTPUT]:
            converter.save_to_file(parameters[self.OUTPUT])
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        parameters = vars(self.parser.parse_args(argv))
        feedback = Feedback(debug=parameters[self.DEBUG])

        valid, message = self.check_parameter_values(parameters)
        if not valid:
            feedback.push_warning(message)
            return 2
        return self.process_algorithm(parameters, feedback)


def main(argv: Optional[List[str]] = None) -> int:
    return MapBoxGl2VectorTilesAlgorithm().run(argv)


if __name__ == "__main__":
    sys.exit(main())
