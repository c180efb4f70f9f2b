from __future__ import annotations
import ctypes
from typing import Optional

from mandelkernel.fractals.base import Viewport
from mandelkernel.fractals.errors import (BufferTooSmall, InvalidViewport,
                                          NullOutput, PixelCountOverflow)

SIZE_MAX = (1 << (8 * ctypes.sizeof(ctypes.c_size_t))) - 1


def required_pixels(width: int, height: int) -> int:
    """
    Number of output slots for a width x height image.
    Raises PixelCountOverflow if it does not fit in a size_t.
    """
    n = int(width) * int(height)
    if n > SIZE_MAX:
        raise PixelCountOverflow(f"{width} x {height} pixels overflows size_t")
    return n


def validate_request(vp: Viewport, out_len: Optional[int], *, has_output: bool = True) -> int:
    """
    Checks a render request before any work is done, in this order: image
    size, zoom, destination present, pixel count overflow, destination
    capacity. Returns the required pixel count.
    """
    if vp.width <= 0 or vp.height <= 0:
        raise InvalidViewport(f"Image size must be positive, got {vp.width} x {vp.height}")
    if vp.zoom <= 0:
        raise InvalidViewport(f"Zoom must be at least 1, got {vp.zoom}")
    if not has_output or out_len is None:
        raise NullOutput("No output buffer supplied")

    expected = required_pixels(vp.width, vp.height)
    if out_len < expected:
        raise BufferTooSmall(f"Output holds {out_len} pixels, {expected} required")
    return expected
