import numpy as np

OPAQUE = 0xFF000000
BLACK = OPAQUE

# Iterations spanned by one palette band.
BAND_WIDTH = 50


def pack_argb(r, g, b, a=0xFF):
    """
    Packs 8-bit channels into a 0xAARRGGBB integer.
    """
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def _frozen(colors):
    arr = np.array(colors, dtype=np.uint8)
    if arr.shape != (8, 3):
        raise ValueError(f"Palette must have 8 RGB entries, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


CLASSIC = _frozen([
    (0, 0, 0), (0, 0, 255), (0, 128, 255), (0, 255, 128),
    (128, 128, 0), (255, 128, 0), (255, 255, 128), (255, 255, 255)])

# Define base palettes
base_palettes = {
    "Classic": CLASSIC,

    "Fire": _frozen([
        (0, 0, 0), (128, 0, 0), (255, 0, 0), (255, 85, 0),
        (255, 170, 0), (255, 255, 0), (255, 255, 128), (255, 255, 255)]),

    "Ocean": _frozen([
        (0, 0, 0), (0, 32, 64), (0, 64, 128), (0, 96, 192),
        (0, 128, 255), (64, 160, 255), (128, 192, 255), (224, 240, 255)]),

    "Grayscale": _frozen([
        (0, 0, 0), (36, 36, 36), (73, 73, 73), (109, 109, 109),
        (146, 146, 146), (182, 182, 182), (219, 219, 219), (255, 255, 255)]),
}

# Export palettes dictionary
keys = list(base_palettes.keys())
keys.sort()
palettes = {i: base_palettes[i] for i in keys}
