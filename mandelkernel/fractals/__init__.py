from .base import Fractal, RenderRequest, RenderSettings, Viewport
from .errors import (BufferTooSmall, InvalidViewport, NullOutput,
                     PixelCountOverflow, RenderError)
from .mandelbrot import MandelbrotFractal
from .validate import required_pixels, validate_request

__all__ = [
    "BufferTooSmall",
    "Fractal",
    "InvalidViewport",
    "MandelbrotFractal",
    "NullOutput",
    "PixelCountOverflow",
    "RenderError",
    "RenderRequest",
    "RenderSettings",
    "Viewport",
    "required_pixels",
    "validate_request",
]
