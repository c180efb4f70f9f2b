from .colormap import (build_gradient, classic_gradient, color_for, colorize,
                       gradient_for, palette_name)
from .palettes import BAND_WIDTH, BLACK, CLASSIC, pack_argb, palettes

__all__ = [
    "BAND_WIDTH",
    "BLACK",
    "CLASSIC",
    "build_gradient",
    "classic_gradient",
    "color_for",
    "colorize",
    "gradient_for",
    "pack_argb",
    "palette_name",
    "palettes",
]
