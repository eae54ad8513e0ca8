"""
ASCII/ANSI Art Converter - Dithering
====================================
Pre-quantization passes run on the RGBA buffer before character mapping.

Every algorithm quantizes R, G and B independently to 0 or 255 and leaves
alpha untouched. Writes back into the working buffer behave like an 8-bit
clamped store: values are rounded half-to-even and clamped to [0, 255], so
error already pushed onto a neighbor is visible when that neighbor is visited.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy import ndimage

from ascii_ansi_art.constants import (
    ArtStyle,
    DitherAlgorithm,
    ORDERED_2X2,
    ORDERED_4X4,
    ORDERED_8X8,
)
from ascii_ansi_art.errors import InvalidOptionError
from ascii_ansi_art.pixels import PixelBuffer

logger = logging.getLogger(__name__)

Kernel = Tuple[Tuple[int, int, float], ...]

MIDPOINT = 128
BLUE_NOISE_ITERATIONS = 10


@dataclass(frozen=True)
class DitherOptions:
    """Dithering configuration."""
    algorithm: DitherAlgorithm = DitherAlgorithm.NONE
    strength: float = 0.5                    # 0.0 (off) to 1.0 (full)

    def __post_init__(self):
        object.__setattr__(self, 'algorithm', DitherAlgorithm.from_name(self.algorithm))
        if not 0.0 <= self.strength <= 1.0:
            raise InvalidOptionError(f"Dithering strength must be in [0, 1], got {self.strength}")

    @property
    def is_identity(self) -> bool:
        return self.algorithm == DitherAlgorithm.NONE or self.strength == 0


DITHERING_ALGORITHMS: Dict[DitherAlgorithm, Tuple[str, str]] = {
    DitherAlgorithm.NONE: ('None', 'No dithering'),
    DitherAlgorithm.FLOYD_STEINBERG: ('Floyd-Steinberg', 'Classic 4-tap error diffusion'),
    DitherAlgorithm.FLOYD_STEINBERG_SERPENTINE: (
        'Floyd-Steinberg (serpentine)', 'Floyd-Steinberg with alternating row direction'),
    DitherAlgorithm.JARVIS_JUDICE_NINKE: ('Jarvis-Judice-Ninke', 'Wide 12-tap error diffusion'),
    DitherAlgorithm.ATKINSON: ('Atkinson', 'Diffuses 3/4 of the error; higher contrast'),
    DitherAlgorithm.STUCKI: ('Stucki', '12-tap error diffusion, sharper than JJN'),
    DitherAlgorithm.BURKES: ('Burkes', '7-tap two-row error diffusion'),
    DitherAlgorithm.SIERRA: ('Sierra', '10-tap three-row error diffusion'),
    DitherAlgorithm.SIERRA_LITE: ('Sierra Lite', 'Fast 3-tap error diffusion'),
    DitherAlgorithm.ORDERED_2X2: ('Ordered 2x2', 'Bayer threshold matrix, 2x2'),
    DitherAlgorithm.ORDERED_4X4: ('Ordered', 'Bayer threshold matrix, 4x4'),
    DitherAlgorithm.ORDERED_8X8: ('Ordered 8x8', 'Bayer threshold matrix, 8x8'),
    DitherAlgorithm.BLUE_NOISE: ('Blue Noise', 'Randomized void-and-cluster threshold map'),
    DitherAlgorithm.ADAPTIVE_HYBRID: ('Adaptive Hybrid', 'Picks a strategy per region from local contrast'),
}


# =============================================================================
# KERNELS
# =============================================================================

def _kernel(divisor: int, taps: Sequence[Tuple[int, int, int]]) -> Kernel:
    return tuple((dx, dy, weight / divisor) for dx, dy, weight in taps)


FLOYD_STEINBERG_KERNEL = _kernel(16, [
    (1, 0, 7),
    (-1, 1, 3), (0, 1, 5), (1, 1, 1),
])

JARVIS_JUDICE_NINKE_KERNEL = _kernel(48, [
    (1, 0, 7), (2, 0, 5),
    (-2, 1, 3), (-1, 1, 5), (0, 1, 7), (1, 1, 5), (2, 1, 3),
    (-2, 2, 1), (-1, 2, 3), (0, 2, 5), (1, 2, 3), (2, 2, 1),
])

STUCKI_KERNEL = _kernel(42, [
    (1, 0, 8), (2, 0, 4),
    (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
    (-2, 2, 1), (-1, 2, 2), (0, 2, 4), (1, 2, 2), (2, 2, 1),
])

BURKES_KERNEL = _kernel(32, [
    (1, 0, 8), (2, 0, 4),
    (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
])

SIERRA_KERNEL = _kernel(32, [
    (1, 0, 5), (2, 0, 3),
    (-2, 1, 2), (-1, 1, 4), (0, 1, 5), (1, 1, 4), (2, 1, 2),
    (-1, 2, 2), (0, 2, 3), (1, 2, 2),
])

SIERRA_LITE_KERNEL = _kernel(4, [
    (1, 0, 2),
    (-1, 1, 1), (0, 1, 1),
])

# Only 6/8 of the error is diffused
ATKINSON_KERNEL = _kernel(8, [
    (1, 0, 1), (2, 0, 1),
    (-1, 1, 1), (0, 1, 1), (1, 1, 1),
    (0, 2, 1),
])

# algorithm -> (kernel, serpentine)
ERROR_DIFFUSION: Dict[DitherAlgorithm, Tuple[Kernel, bool]] = {
    DitherAlgorithm.FLOYD_STEINBERG: (FLOYD_STEINBERG_KERNEL, False),
    DitherAlgorithm.FLOYD_STEINBERG_SERPENTINE: (FLOYD_STEINBERG_KERNEL, True),
    DitherAlgorithm.JARVIS_JUDICE_NINKE: (JARVIS_JUDICE_NINKE_KERNEL, False),
    DitherAlgorithm.STUCKI: (STUCKI_KERNEL, False),
    DitherAlgorithm.BURKES: (BURKES_KERNEL, False),
    DitherAlgorithm.SIERRA: (SIERRA_KERNEL, False),
    DitherAlgorithm.SIERRA_LITE: (SIERRA_LITE_KERNEL, False),
    DitherAlgorithm.ATKINSON: (ATKINSON_KERNEL, False),
}

ORDERED_MATRICES: Dict[DitherAlgorithm, np.ndarray] = {
    DitherAlgorithm.ORDERED_2X2: np.array(ORDERED_2X2, dtype=np.float64),
    DitherAlgorithm.ORDERED_4X4: np.array(ORDERED_4X4, dtype=np.float64),
    DitherAlgorithm.ORDERED_8X8: np.array(ORDERED_8X8, dtype=np.float64),
}


def kernel_for(algorithm: DitherAlgorithm) -> Kernel:
    """Return the ``(dx, dy, weight)`` table of an error-diffusion algorithm."""
    algorithm = DitherAlgorithm.from_name(algorithm)
    if algorithm not in ERROR_DIFFUSION:
        raise InvalidOptionError(f"{algorithm.value} is not an error-diffusion algorithm")
    return ERROR_DIFFUSION[algorithm][0]


# =============================================================================
# HELPERS
# =============================================================================

def _store(value: float) -> int:
    """Round half-to-even and clamp to a byte, like a clamped 8-bit array."""
    return min(255, max(0, round(value)))


def _quantize(value: int) -> int:
    return 0 if value < MIDPOINT else 255


def _threshold(data: np.ndarray, thresholds: np.ndarray) -> np.ndarray:
    """Set each RGB channel to 255 where it exceeds the per-pixel threshold."""
    result = data.copy()
    rgb = result[:, :, :3]
    result[:, :, :3] = np.where(rgb > thresholds[:, :, None], 255, 0).astype(np.uint8)
    return result


# =============================================================================
# ERROR DIFFUSION
# =============================================================================

def error_diffusion_dither(buffer: PixelBuffer,
                           strength: float,
                           kernel: Kernel,
                           serpentine: bool = False) -> PixelBuffer:
    """
    Generic error diffusion.

    Args:
        buffer: Source pixels
        strength: Fraction of the quantization error to diffuse (0-1)
        kernel: ``(dx, dy, weight)`` offsets relative to the current pixel
        serpentine: Scan odd rows right to left, mirroring ``dx``

    Returns:
        New PixelBuffer with R, G and B quantized to 0 or 255
    """
    result = buffer.data.copy()
    height, width = buffer.height, buffer.width

    # Each channel's error only ever lands on the same channel
    for channel in range(3):
        plane: List[List[int]] = result[:, :, channel].tolist()

        for y in range(height):
            right_to_left = serpentine and y % 2 == 1
            xs = range(width - 1, -1, -1) if right_to_left else range(width)
            row = plane[y]

            for x in xs:
                old_pixel = row[x]
                new_pixel = _quantize(old_pixel)
                error = (old_pixel - new_pixel) * strength
                row[x] = new_pixel

                for dx, dy, weight in kernel:
                    nx = x - dx if right_to_left else x + dx
                    ny = y + dy
                    if 0 <= nx < width and ny < height:
                        plane[ny][nx] = _store(plane[ny][nx] + error * weight)

        result[:, :, channel] = np.array(plane, dtype=np.uint8).reshape((height, width))

    return PixelBuffer(result)


# =============================================================================
# ORDERED AND BLUE NOISE
# =============================================================================

def ordered_dither(buffer: PixelBuffer, matrix: np.ndarray, strength: float) -> PixelBuffer:
    """Threshold each pixel against a tiled Bayer matrix scaled by ``strength``."""
    size = matrix.shape[0]
    max_value = size * size - 1
    height, width = buffer.height, buffer.width

    ys = np.arange(height) % size
    xs = np.arange(width) % size
    thresholds = (matrix[ys[:, None], xs[None, :]] / max_value) * 255 * strength

    return PixelBuffer(_threshold(buffer.data, thresholds))


def generate_blue_noise_map(width: int, height: int,
                            rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Simplified void-and-cluster threshold map in [0, 1).

    Starts from uniform noise, then repeatedly halves the interior pixel whose
    eight neighbors carry the most energy.

    Args:
        width: Map width
        height: Map height
        rng: Random source; a fresh unseeded generator when omitted

    Returns:
        Array of shape ``(height, width)``
    """
    if rng is None:
        rng = np.random.default_rng()

    noise = rng.random((height, width))
    if noise.size == 0:
        return noise

    for _ in range(BLUE_NOISE_ITERATIONS):
        if height < 3 or width < 3:
            void_y, void_x = 0, 0
        else:
            energy = np.zeros((height - 2, width - 2))
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    if dx == 0 and dy == 0:
                        continue
                    energy += noise[1 + dy:height - 1 + dy, 1 + dx:width - 1 + dx]
            # argmax keeps the first maximum in raster order
            iy, ix = np.unravel_index(np.argmax(energy), energy.shape)
            void_y, void_x = int(iy) + 1, int(ix) + 1

        noise[void_y, void_x] *= 0.5

    return noise


def blue_noise_dither(buffer: PixelBuffer, strength: float,
                      rng: Optional[np.random.Generator] = None) -> PixelBuffer:
    """Threshold against a per-image blue noise map. Not bit-reproducible without ``rng``."""
    noise = generate_blue_noise_map(buffer.width, buffer.height, rng)
    thresholds = noise * 255 * strength
    return PixelBuffer(_threshold(buffer.data, thresholds))


# =============================================================================
# ADAPTIVE HYBRID
# =============================================================================

def local_contrast_map(buffer: PixelBuffer) -> np.ndarray:
    """
    Largest absolute brightness difference to any in-bounds 8-neighbor, in [0, 1].

    Brightness here is the plain RGB mean.
    """
    rgb = buffer.data[:, :, :3].astype(np.int64)
    brightness = (rgb[:, :, 0] + rgb[:, :, 1] + rgb[:, :, 2]) / 3

    # 'nearest' pads with pixels already inside the 3x3 window
    upper = ndimage.maximum_filter(brightness, size=3, mode='nearest')
    lower = ndimage.minimum_filter(brightness, size=3, mode='nearest')
    max_diff = np.maximum(upper - brightness, brightness - lower)

    return max_diff / 255


def adaptive_hybrid_dither(buffer: PixelBuffer, strength: float) -> PixelBuffer:
    """
    Choose a dithering strategy per pixel from the local contrast.

    - contrast > 0.3: plain midpoint quantization, keeps edges crisp
    - contrast > 0.1: partial error diffusion at 70% strength
    - otherwise: 4x4 ordered threshold pattern for flat areas
    """
    contrast_map = local_contrast_map(buffer)
    result = buffer.data.copy()
    height, width = buffer.height, buffer.width

    for channel in range(3):
        plane: List[List[int]] = result[:, :, channel].tolist()

        for y in range(height):
            for x in range(width):
                old_pixel = plane[y][x]
                contrast = contrast_map[y, x]

                if contrast > 0.3:
                    new_pixel = _quantize(old_pixel)
                elif contrast > 0.1:
                    new_pixel = _quantize(old_pixel)
                    error = (old_pixel - new_pixel) * strength * 0.7

                    if x + 1 < width:
                        plane[y][x + 1] = _store(plane[y][x + 1] + error * 0.4)
                    if y + 1 < height and x > 0:
                        plane[y + 1][x - 1] = _store(plane[y + 1][x - 1] + error * 0.2)
                    if y + 1 < height:
                        plane[y + 1][x] = _store(plane[y + 1][x] + error * 0.3)
                else:
                    threshold = ((x % 4) * 4 + (y % 4)) / 16 * 255 * strength
                    new_pixel = 255 if old_pixel > threshold else 0

                plane[y][x] = new_pixel

        result[:, :, channel] = np.array(plane, dtype=np.uint8).reshape((height, width))

    return PixelBuffer(result)


# =============================================================================
# DISPATCH
# =============================================================================

def apply_dithering(buffer: PixelBuffer,
                    options: DitherOptions,
                    rng: Optional[np.random.Generator] = None) -> PixelBuffer:
    """
    Apply the configured dithering algorithm.

    Args:
        buffer: Source pixels (not modified)
        options: Algorithm and strength
        rng: Random source for blue noise; ignored by the other algorithms

    Returns:
        The input itself when dithering is a no-op, otherwise a new buffer
    """
    algorithm, strength = options.algorithm, options.strength

    if options.is_identity:
        return buffer
    if buffer.is_empty:
        return buffer.copy()

    logger.debug("Dithering %dx%d with %s at strength %.2f",
                 buffer.width, buffer.height, algorithm.value, strength)

    if algorithm in ERROR_DIFFUSION:
        kernel, serpentine = ERROR_DIFFUSION[algorithm]
        return error_diffusion_dither(buffer, strength, kernel, serpentine)
    elif algorithm in ORDERED_MATRICES:
        return ordered_dither(buffer, ORDERED_MATRICES[algorithm], strength)
    elif algorithm == DitherAlgorithm.BLUE_NOISE:
        return blue_noise_dither(buffer, strength, rng)
    elif algorithm == DitherAlgorithm.ADAPTIVE_HYBRID:
        return adaptive_hybrid_dither(buffer, strength)
    else:
        raise ValueError(f"Unhandled dithering algorithm: {algorithm}")


def get_recommended_dithering(art_style: ArtStyle,
                              character_count: int,
                              use_colors: bool = False) -> DitherAlgorithm:
    """
    Suggest a default algorithm for a style and ramp length.

    Characters already provide texture, so most combinations look best
    without dithering.
    """
    art_style = ArtStyle.from_name(art_style)

    if art_style == ArtStyle.ANSI:
        if use_colors:
            return DitherAlgorithm.NONE
        return DitherAlgorithm.NONE if character_count <= 5 else DitherAlgorithm.ORDERED_2X2

    if character_count >= 50:
        return DitherAlgorithm.FLOYD_STEINBERG_SERPENTINE
    return DitherAlgorithm.NONE
