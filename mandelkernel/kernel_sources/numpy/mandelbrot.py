import numpy as np

from mandelkernel.coloring.colormap import colorize
from mandelkernel.kernel_sources.registry import register_kernel

ARG_SCALARS = [
    "center_x", "center_y", "inv_zoom",
    "width", "height", "max_iter",
]
ARG_BUFFERS_IN = ["gradient"]
ARG_BUFFERS_OUT = ["out"]

ARG_ORDER = ARG_SCALARS + ARG_BUFFERS_IN + ARG_BUFFERS_OUT


def escape_counts(x0: np.ndarray, y0: np.ndarray, max_iter: int) -> np.ndarray:
    """
    Vectorised escape-time iteration over flat arrays of world coordinates.
    Only the points still inside the escape radius are advanced each step.
    """
    x = np.zeros_like(x0, dtype=np.float64)
    y = np.zeros_like(y0, dtype=np.float64)
    counts = np.zeros(x0.shape, dtype=np.int64)
    active = np.arange(x0.size)

    for _ in range(max_iter):
        if active.size == 0:
            break
        xa = x[active]
        ya = y[active]
        xx = xa * xa - ya * ya + x0[active]
        yy = 2.0 * xa * ya + y0[active]
        x[active] = xx
        y[active] = yy
        stay = ~(xx * xx + yy * yy > 4.0)
        active = active[stay]
        counts[active] += 1
    return counts


def render_frame(center_x, center_y, inv_zoom, width, height, max_iter, gradient, out):
    half_w = width * 0.5
    half_h = height * 0.5
    xs = center_x + (np.arange(width, dtype=np.float64) - half_w) * inv_zoom
    ys = center_y - (np.arange(height, dtype=np.float64) - half_h) * inv_zoom
    x0 = np.broadcast_to(xs[None, :], (height, width)).ravel()
    y0 = np.broadcast_to(ys[:, None], (height, width)).ravel()
    counts = escape_counts(x0, y0, max_iter)
    out[:] = colorize(counts, max_iter, gradient)


register_kernel(
    fractal="mandelbrot",
    op_name="frame",
    backend="NUMPY",
    precision="f64",
    func=render_frame,
    arg_order=ARG_ORDER,
    scalars=ARG_SCALARS,
    produces=ARG_BUFFERS_OUT,
    consumes=ARG_BUFFERS_IN,
    buffers=ARG_BUFFERS_IN + ARG_BUFFERS_OUT,
)
