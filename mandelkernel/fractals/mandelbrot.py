from dataclasses import dataclass
from typing import Dict, Any

from mandelkernel.fractals.base import Fractal, Viewport, RenderSettings
from mandelkernel.kernel_sources import load_kernel


@dataclass
class MandelbrotFractal(Fractal):
    name: str = "mandelbrot"
    precision: str = "f64"

    def build_arg_values(self, vp: Viewport, st: RenderSettings) -> Dict[str, Any]:
        return {
            "center_x": float(vp.center_x),
            "center_y": float(vp.center_y),
            # world units per pixel
            "inv_zoom": 1.0 / float(vp.zoom),
            "width": int(vp.width),
            "height": int(vp.height),
            "max_iter": int(st.max_iter),
        }

    def get_kernel(self, backend_name: str, op_name: str) -> Dict[str, Any]:
        return load_kernel(backend_name, self.name, op_name, self.precision)
