from .ffi import (PROBE_VALUE, RENDER_MANDELBROT_CFUNC, probe,
                  render_mandelbrot, render_mandelbrot_address)
from .render_api import RenderAPI

__all__ = [
    "PROBE_VALUE",
    "RENDER_MANDELBROT_CFUNC",
    "RenderAPI",
    "probe",
    "render_mandelbrot",
    "render_mandelbrot_address",
]
