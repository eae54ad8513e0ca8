"""
ASCII/ANSI Art Converter - Pixel Buffers
========================================
RGBA pixel buffers, the Pillow image source and the nearest-neighbor resampler.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np
from PIL import Image

from ascii_ansi_art.errors import InvalidDimensionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Row-major RGBA8 pixel grid.

    ``data`` has shape ``(height, width, 4)`` and dtype ``uint8``. Stages never
    modify a buffer they receive; they return a new one.
    """
    data: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.data)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise InvalidDimensionError(
                f"Pixel data must have shape (height, width, 4), got {arr.shape}"
            )
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        object.__setattr__(self, 'data', arr)

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @classmethod
    def empty(cls, width: int = 0, height: int = 0) -> 'PixelBuffer':
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @classmethod
    def from_bytes(cls, width: int, height: int, data: Union[bytes, bytearray, memoryview]) -> 'PixelBuffer':
        """
        Build a buffer from a flat RGBA byte sequence.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            data: ``width * height * 4`` bytes, R,G,B,A per pixel

        Returns:
            PixelBuffer owning a copy of the data
        """
        if width < 0 or height < 0:
            raise InvalidDimensionError(f"Negative dimensions: {width}x{height}")
        expected = width * height * 4
        if len(data) != expected:
            raise InvalidDimensionError(
                f"Buffer length {len(data)} does not match {width}x{height}x4 = {expected}"
            )
        arr = np.frombuffer(bytes(data), dtype=np.uint8).reshape((height, width, 4))
        return cls(arr.copy())

    @classmethod
    def from_image(cls, image: Image.Image) -> 'PixelBuffer':
        """Convert a Pillow image of any mode to an RGBA buffer."""
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        return cls(np.array(image, dtype=np.uint8).reshape((image.height, image.width, 4)))

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data, mode='RGBA')

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer(self.data.copy())

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.data.shape == other.data.shape and np.array_equal(self.data, other.data)


def load_image(path: str) -> PixelBuffer:
    """Open an image file with Pillow and decode it into a PixelBuffer."""
    with Image.open(path) as image:
        image.load()
        logger.debug("Loaded %s: %dx%d mode=%s", path, image.width, image.height, image.mode)
        return PixelBuffer.from_image(image)


# =============================================================================
# RESAMPLING
# =============================================================================

def calculate_dimensions(original_width: int,
                         original_height: int,
                         target_width: int,
                         maintain_aspect_ratio: bool,
                         char_aspect_ratio: float = 0.5) -> Tuple[int, int]:
    """
    Calculate the character grid for a source image.

    Glyph cells are taller than they are wide, so with the aspect ratio
    maintained the row count is scaled down by ``char_aspect_ratio``.

    Returns:
        Tuple of (columns, rows)
    """
    if not maintain_aspect_ratio:
        return target_width, math.floor(target_width * 0.5)

    if original_width <= 0 or original_height <= 0:
        raise InvalidDimensionError(
            f"Cannot preserve aspect ratio of a {original_width}x{original_height} image"
        )

    image_aspect_ratio = original_width / original_height
    target_height = math.floor((target_width / image_aspect_ratio) * char_aspect_ratio)

    return target_width, target_height


def resize_pixels(buffer: PixelBuffer, target_width: int, target_height: int) -> PixelBuffer:
    """
    Nearest-neighbor resample to ``target_width`` x ``target_height``.

    No filtering is applied; each destination pixel copies the source pixel at
    ``(floor(x * sw / tw), floor(y * sh / th))``.
    """
    if target_width < 0 or target_height < 0:
        raise InvalidDimensionError(
            f"Target dimensions must be non-negative, got {target_width}x{target_height}"
        )
    if target_width == 0 or target_height == 0:
        return PixelBuffer.empty(target_width, target_height)
    if buffer.is_empty:
        raise InvalidDimensionError(
            f"Cannot resample an empty {buffer.width}x{buffer.height} buffer "
            f"to {target_width}x{target_height}"
        )

    scale_x = buffer.width / target_width
    scale_y = buffer.height / target_height

    source_x = np.floor(np.arange(target_width) * scale_x).astype(np.intp)
    source_y = np.floor(np.arange(target_height) * scale_y).astype(np.intp)

    return PixelBuffer(buffer.data[source_y[:, None], source_x[None, :]].copy())
