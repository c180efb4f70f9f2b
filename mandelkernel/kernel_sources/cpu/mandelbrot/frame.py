from numba import njit, prange

from mandelkernel.kernel_sources.cpu.mandelbrot.iter import render_rows
from mandelkernel.kernel_sources.registry import register_kernel

ARG_SCALARS = [
    "center_x", "center_y", "inv_zoom",
    "width", "height", "max_iter",
]
ARG_BUFFERS_IN = ["gradient"]
ARG_BUFFERS_OUT = ["out"]

ARG_ORDER = ARG_SCALARS + ARG_BUFFERS_IN + ARG_BUFFERS_OUT


@njit(cache=True, parallel=True)
def render_frame(center_x, center_y, inv_zoom,
                 width, height, max_iter,
                 gradient, out):
    for py in prange(height):
        start = py * width
        render_rows(center_x, center_y, inv_zoom,
                    width, height, max_iter,
                    py, py + 1,
                    gradient, out[start:start + width])


register_kernel(
    fractal="mandelbrot",
    op_name="frame",
    backend="CPU",
    precision="f64",
    func=render_frame,
    arg_order=ARG_ORDER,
    scalars=ARG_SCALARS,
    produces=ARG_BUFFERS_OUT,
    consumes=ARG_BUFFERS_IN,
    buffers=ARG_BUFFERS_IN + ARG_BUFFERS_OUT,
)
