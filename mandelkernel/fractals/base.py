from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import numpy as np
from abc import ABC, abstractmethod

from mandelkernel.coloring.colormap import palette_name


@dataclass(frozen=True)
class Viewport:
    """
    Holds the viewport parameters for rendering a fractal.
    Center is the world point under the middle of the image, stored in single
    precision like the foreign entry point receives it.
    Zoom is pixels per world unit, so one pixel spans 1/zoom world units.
    Width and Height determine the size of the resulting image in pixels.
    """
    center_x: float
    center_y: float
    zoom: int
    width: int
    height: int

    def __post_init__(self):
        object.__setattr__(self, "center_x", float(np.float32(self.center_x)))
        object.__setattr__(self, "center_y", float(np.float32(self.center_y)))
        object.__setattr__(self, "zoom", int(self.zoom))
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width


@dataclass(frozen=True)
class RenderSettings:
    """
    Holds the rendering settings for a fractal.
    Max_iter is the escape-time iteration cap; a negative value is taken by
    magnitude.
    Palette names one of ``coloring.palettes``; None leaves the choice to the
    render executor's configuration.
    """
    max_iter: int = 256
    palette: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "max_iter", abs(int(self.max_iter)))
        if self.palette is not None:
            try:
                object.__setattr__(self, "palette", palette_name(self.palette))
            except KeyError as e:
                raise ValueError(e.args[0]) from None


@dataclass
class RenderRequest:
    """
    A viewport, its settings and the caller's output buffer (flat uint32,
    row-major, at least width*height long).
    """
    viewport: Viewport
    settings: RenderSettings
    out: np.ndarray = field(repr=False)


class Fractal(ABC):
    """
    An abstract base class for fractal types.
    """
    name: str

    @abstractmethod
    def build_arg_values(self, vp: Viewport, st: RenderSettings) -> Dict[
        str, Any]:
        ...

    @abstractmethod
    def get_kernel(self, backend_name: str, op_name: str) -> Dict[str, Any]:
        ...
