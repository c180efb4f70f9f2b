"""Mandelbrot escape-time render kernel."""

from .api import RenderAPI, probe, render_mandelbrot
from .coloring import color_for
from .fractals import MandelbrotFractal, RenderSettings, Viewport
from .rendering.core import Renderer

__version__ = "0.1.0"

__all__ = [
    "MandelbrotFractal",
    "RenderAPI",
    "RenderSettings",
    "Renderer",
    "Viewport",
    "color_for",
    "probe",
    "render_mandelbrot",
]
