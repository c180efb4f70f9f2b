from numba import njit

from mandelkernel.coloring.palettes import BLACK
from mandelkernel.kernel_sources.registry import register_kernel


ARG_SCALARS = [
    "center_x", "center_y", "inv_zoom",
    "width", "height", "max_iter",
    "row_start", "row_stop",
]
ARG_BUFFERS_IN = ["gradient"]
ARG_BUFFERS_OUT = ["out"]

ARG_ORDER = ARG_SCALARS + ARG_BUFFERS_IN + ARG_BUFFERS_OUT


# No fastmath anywhere below: every backend must agree bit for bit.
@njit(cache=True, nogil=True)
def escape_count(x0, y0, max_iter):
    x = 0.0
    y = 0.0
    i = 0
    while i < max_iter:
        xx = x * x - y * y + x0
        yy = 2.0 * x * y + y0
        x = xx
        y = yy
        # |z| > 2 compared on the squared magnitude
        if x * x + y * y > 4.0:
            break
        i += 1
    return i


@njit(cache=True, nogil=True)
def render_rows(center_x, center_y, inv_zoom,
                width, height, max_iter,
                row_start, row_stop,
                gradient, out):
    """
    Fill ``out`` with rows ``[row_start, row_stop)`` of the frame.

    ``out`` holds exactly ``(row_stop - row_start) * width`` slots; pixel
    ``(px, py)`` lands at ``(py - row_start) * width + px``.
    """
    half_w = width * 0.5
    half_h = height * 0.5
    n_grad = gradient.shape[0]
    for py in range(row_start, row_stop):
        # screen Y down, world Y up
        y_world = center_y - (py - half_h) * inv_zoom
        base = (py - row_start) * width
        for px in range(width):
            x_world = center_x + (px - half_w) * inv_zoom
            n = escape_count(x_world, y_world, max_iter)
            if n >= max_iter:
                out[base + px] = BLACK
            else:
                out[base + px] = gradient[n % n_grad]


register_kernel(
    fractal="mandelbrot",
    op_name="iter",
    backend="CPU",
    precision="f64",
    func=escape_count,
    arg_order=["x0", "y0", "max_iter"],
    scalars=["x0", "y0", "max_iter"],
    produces=[],
    consumes=[],
)

register_kernel(
    fractal="mandelbrot",
    op_name="rows",
    backend="CPU",
    precision="f64",
    func=render_rows,
    arg_order=ARG_ORDER,
    scalars=ARG_SCALARS,
    produces=ARG_BUFFERS_OUT,
    consumes=ARG_BUFFERS_IN,
    buffers=ARG_BUFFERS_IN + ARG_BUFFERS_OUT,
)
