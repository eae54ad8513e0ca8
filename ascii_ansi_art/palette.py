"""
ASCII/ANSI Art Converter - Palettes
===================================
Terminal color palettes and nearest-color search.
"""

import math
from functools import lru_cache
from typing import Sequence, Tuple

import numpy as np

from ascii_ansi_art.constants import ANSI_16_COLORS, PaletteName

RGB = Tuple[int, int, int]
Palette = Tuple[RGB, ...]


@lru_cache(maxsize=None)
def generate_ansi256_palette() -> Palette:
    """
    Build the xterm 256-color palette.

    16 standard colors, then a 6x6x6 color cube, then a 24-step gray ramp.
    """
    palette = list(ANSI_16_COLORS)

    levels = [0] + [55 + i * 40 for i in range(1, 6)]
    for r in levels:
        for g in levels:
            for b in levels:
                palette.append((r, g, b))

    for i in range(24):
        gray = 8 + i * 10
        palette.append((gray, gray, gray))

    return tuple(palette)


def get_palette(name: PaletteName) -> Palette:
    """Return the palette table for ``name``."""
    name = PaletteName.from_name(name)
    if name == PaletteName.ANSI_256:
        return generate_ansi256_palette()
    return ANSI_16_COLORS


def find_closest_ansi_color(r: float, g: float, b: float, palette: Sequence[RGB]) -> int:
    """
    Index of the palette entry nearest to (r, g, b) by Euclidean distance.

    Ties go to the lowest index.
    """
    min_distance = float('inf')
    closest_index = 0

    for i, (pr, pg, pb) in enumerate(palette):
        distance = math.sqrt((r - pr) ** 2 + (g - pg) ** 2 + (b - pb) ** 2)
        if distance < min_distance:
            min_distance = distance
            closest_index = i

    return closest_index


def find_closest_ansi_colors(rgb: np.ndarray, palette: Sequence[RGB]) -> np.ndarray:
    """
    Vectorized :func:`find_closest_ansi_color` over an ``(..., 3)`` array.

    Returns:
        Integer array of palette indices with shape ``rgb.shape[:-1]``
    """
    table = np.asarray(palette, dtype=np.float64)
    colors = np.asarray(rgb, dtype=np.float64)

    diff = colors[..., None, :] - table
    distances = np.sqrt(diff[..., 0] ** 2 + diff[..., 1] ** 2 + diff[..., 2] ** 2)

    # argmin returns the first minimum, matching the scalar tie rule
    return np.argmin(distances, axis=-1)
