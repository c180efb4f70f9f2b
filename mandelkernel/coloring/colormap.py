"""
Escape count -> ARGB colour mapping.

Escaped points walk a cyclic piecewise-linear gradient: every ``band_width``
iterations move one entry further along an 8-colour palette, wrapping from the
last entry back to the first. Points that never escaped are opaque black.
"""
from functools import lru_cache
from typing import Optional

import numpy as np

from mandelkernel.coloring.palettes import BAND_WIDTH, BLACK, CLASSIC, pack_argb, palettes


def _lerp_channel(lower: int, higher: int, t: float) -> int:
    if t <= 0.0:
        return lower
    if t >= 1.0:
        return higher
    # Truncating cast, not round-to-nearest.
    v = int(float(lower) + (float(higher) - float(lower)) * t)
    return min(max(v, 0), 255)


def _band_color(palette: np.ndarray, band_width: int, iteration: int) -> int:
    n = len(palette)
    band, offset = divmod(iteration, band_width)
    t = offset / float(band_width)
    start = band % n
    end = (band + 1) % n
    lo = palette[start]
    hi = palette[end]
    return pack_argb(_lerp_channel(int(lo[0]), int(hi[0]), t),
                     _lerp_channel(int(lo[1]), int(hi[1]), t),
                     _lerp_channel(int(lo[2]), int(hi[2]), t))


def color_for(iteration: int, max_iteration: int) -> int:
    """
    Colour of a point that stopped after ``iteration`` steps out of ``max_iteration``.

    Returns a packed 0xAARRGGBB value with alpha always 0xFF.
    """
    if max_iteration == 0 or iteration >= max_iteration:
        return BLACK
    return _band_color(CLASSIC, BAND_WIDTH, iteration)


def build_gradient(palette: np.ndarray = CLASSIC, band_width: int = BAND_WIDTH) -> np.ndarray:
    """
    Precomputes one full cycle of the gradient.

    Entry ``i`` is the colour of an escaped point with escape count ``i``;
    counts past the cycle wrap, so ``table[n % len(table)]`` colours any
    escaped count ``n``.
    """
    if band_width <= 0:
        raise ValueError(f"band_width must be positive, got {band_width}")
    palette = np.asarray(palette, dtype=np.uint8)
    size = len(palette) * band_width
    table = np.empty(size, dtype=np.uint32)
    for i in range(size):
        table[i] = _band_color(palette, band_width, i)
    table.setflags(write=False)
    return table


@lru_cache(maxsize=None)
def classic_gradient() -> np.ndarray:
    return build_gradient(CLASSIC, BAND_WIDTH)


def palette_name(name: str) -> str:
    """
    Canonical key in ``palettes`` for ``name``, matched case-insensitively.
    Raises KeyError for unknown names.
    """
    for key in palettes:
        if key.lower() == name.strip().lower():
            return key
    raise KeyError(f"Unknown palette '{name}', expected one of {list(palettes)}")


@lru_cache(maxsize=None)
def gradient_for(name: Optional[str] = None) -> np.ndarray:
    """Cached gradient table of a named palette; None is Classic."""
    if name is None:
        return classic_gradient()
    key = palette_name(name)
    if key == "Classic":
        return classic_gradient()
    return build_gradient(palettes[key], BAND_WIDTH)


def colorize(counts: np.ndarray, max_iter: int, gradient: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Vectorised :func:`color_for` over an array of escape counts.
    """
    lut = classic_gradient() if gradient is None else gradient
    counts = np.asarray(counts)
    if max_iter == 0:
        return np.full(counts.shape, BLACK, dtype=np.uint32)
    escaped = counts < max_iter
    idx = np.where(escaped, counts, 0).astype(np.int64) % len(lut)
    return np.where(escaped, lut[idx], np.uint32(BLACK)).astype(np.uint32)
