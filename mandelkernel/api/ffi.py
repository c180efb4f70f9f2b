"""
C-callable entry points.

``render_mandelbrot`` follows C calling semantics: arguments are narrowed to
their C types, the destination is a raw ``uint32_t*`` plus a slot count, and
every rejected request returns without writing anything and without raising.
``RENDER_MANDELBROT_CFUNC`` is the same function as a ctypes function pointer
that foreign code can call directly.
"""
import ctypes
import logging
import threading
from typing import Optional

import numpy as np

from mandelkernel.fractals.base import RenderSettings, Viewport
from mandelkernel.fractals.errors import RenderError
from mandelkernel.fractals.mandelbrot import MandelbrotFractal
from mandelkernel.fractals.validate import validate_request
from mandelkernel.rendering.executor import RenderExecutor
from mandelkernel.utils.config import RenderConfig, available_cpus

logger = logging.getLogger(__name__)

PROBE_VALUE = 6

c_uint32_p = ctypes.POINTER(ctypes.c_uint32)

RENDER_MANDELBROT_PROTO = ctypes.CFUNCTYPE(
    None,
    ctypes.c_float,   # center_x
    ctypes.c_float,   # center_y
    ctypes.c_uint64,  # zoom
    ctypes.c_int32,   # width_px
    ctypes.c_int32,   # height_px
    ctypes.c_int32,   # max_iter
    c_uint32_p,       # dst
    ctypes.c_size_t,  # dst_len
)
PROBE_PROTO = ctypes.CFUNCTYPE(ctypes.c_uint32)

_FRACTAL = MandelbrotFractal()
_executor: Optional[RenderExecutor] = None
_executor_lock = threading.Lock()


def _get_executor() -> RenderExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            try:
                config = RenderConfig.from_env()
            except ValueError as e:
                # the C caller cannot see the error
                logger.warning("Ignoring render environment settings: %s", e)
                config = RenderConfig(workers=available_cpus())
            ex = RenderExecutor(config=config)
            ex.compile(_FRACTAL, RenderSettings())
            _executor = ex
        return _executor


def shutdown() -> None:
    """Release the worker pool behind the entry point, if one was started."""
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.close()
            _executor = None


def _as_pointer(dst) -> Optional[c_uint32_p]:
    if dst is None:
        return None
    ptr = ctypes.cast(dst, c_uint32_p)
    return ptr if ptr else None


def probe() -> int:
    """Liveness probe for load/link checks."""
    return PROBE_VALUE


def render_mandelbrot(center_x, center_y, zoom, width_px, height_px,
                      max_iter, dst, dst_len) -> None:
    """
    Render the viewport into ``dst[0 : width_px * height_px]`` as ARGB8888,
    row-major from the top-left pixel.

    ``dst`` may be a ctypes pointer or array, a ``c_void_p``, an integer
    address or ``None``. A negative ``max_iter`` is used by magnitude.
    """
    cx = ctypes.c_float(center_x).value
    cy = ctypes.c_float(center_y).value
    zoom = ctypes.c_uint64(zoom).value
    width = ctypes.c_int32(width_px).value
    height = ctypes.c_int32(height_px).value
    iterations = abs(ctypes.c_int32(max_iter).value)
    capacity = ctypes.c_size_t(dst_len).value

    vp = Viewport(cx, cy, zoom, width, height)
    ptr = _as_pointer(dst)
    try:
        expected = validate_request(vp, capacity, has_output=ptr is not None)
    except RenderError as e:
        logger.debug("render_mandelbrot ignored: %s", e)
        return

    # The view lives only for this call; the memory stays the caller's.
    pixels = np.ctypeslib.as_array(ptr, shape=(expected,))
    try:
        _get_executor().render_into(_FRACTAL, vp, RenderSettings(iterations), pixels)
    finally:
        del pixels


RENDER_MANDELBROT_CFUNC = RENDER_MANDELBROT_PROTO(render_mandelbrot)
PROBE_CFUNC = PROBE_PROTO(probe)


def render_mandelbrot_address() -> int:
    """Address of the C-callable render entry point."""
    return ctypes.cast(RENDER_MANDELBROT_CFUNC, ctypes.c_void_p).value


def probe_address() -> int:
    return ctypes.cast(PROBE_CFUNC, ctypes.c_void_p).value
