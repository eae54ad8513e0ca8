"""
ASCII/ANSI Art Converter - Conversion
=====================================
Tone mapping, glyph/cell selection and the full conversion pipeline.

Monochrome output is a newline-terminated string. Colored ANSI output is a grid
of Cells, each carrying a glyph plus palette indices for foreground and
background.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image

from ascii_ansi_art.constants import (
    ArtStyle,
    ColorScheme,
    DARK_CELL_GLYPH,
    DitherAlgorithm,
    PaletteName,
    get_ascii_set,
)
from ascii_ansi_art.dithering import DitherOptions, apply_dithering
from ascii_ansi_art.errors import InvalidDimensionError, InvalidOptionError, UnknownOptionError
from ascii_ansi_art.palette import Palette, find_closest_ansi_colors, get_palette
from ascii_ansi_art.pixels import PixelBuffer, calculate_dimensions, resize_pixels

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class ConversionOptions:
    """Configuration for a single conversion."""

    # Size parameters
    width: int = 80                          # Target columns
    height: Optional[int] = None             # Explicit rows (computed if None)
    maintain_aspect_ratio: bool = True
    char_aspect_ratio: float = 0.5           # Glyph cell width/height

    # Character set and style
    ascii_set: str = 'minimal'
    art_style: ArtStyle = ArtStyle.ASCII

    # Tone
    contrast: float = 1.0                    # 1.0 = neutral
    brightness: float = 0.0                  # -100 to +100
    color_scheme: ColorScheme = ColorScheme.WHITE_ON_BLACK

    # Color
    use_colors: bool = False
    color_palette: PaletteName = PaletteName.ANSI_16

    # Presentation only
    font_size: int = 10

    def __post_init__(self):
        object.__setattr__(self, 'art_style', ArtStyle.from_name(self.art_style))
        object.__setattr__(self, 'color_scheme', ColorScheme.from_name(self.color_scheme))
        object.__setattr__(self, 'color_palette', PaletteName.from_name(self.color_palette))
        get_ascii_set(self.ascii_set)

        if self.width <= 0:
            raise InvalidDimensionError(f"Target width must be positive, got {self.width}")
        if self.height is not None and self.height <= 0:
            raise InvalidDimensionError(f"Target height must be positive, got {self.height}")
        if self.char_aspect_ratio <= 0:
            raise InvalidOptionError(
                f"Character aspect ratio must be positive, got {self.char_aspect_ratio}"
            )
        if self.contrast <= 0:
            raise InvalidOptionError(f"Contrast must be positive, got {self.contrast}")

    @property
    def characters(self) -> str:
        return get_ascii_set(self.ascii_set)

    @property
    def invert_brightness(self) -> bool:
        return self.color_scheme == ColorScheme.BLACK_ON_WHITE

    @property
    def is_colored(self) -> bool:
        return self.art_style == ArtStyle.ANSI and self.use_colors

    def target_dimensions(self, source_width: int, source_height: int) -> Tuple[int, int]:
        """Character grid (columns, rows) for a source of the given size."""
        columns, rows = calculate_dimensions(
            source_width, source_height, self.width,
            self.maintain_aspect_ratio, self.char_aspect_ratio
        )
        if self.height is not None:
            rows = self.height
        return columns, rows


@dataclass(frozen=True)
class Cell:
    """One character position of colored output."""
    char: str
    fg: Optional[int] = None                 # Palette index
    bg: Optional[int] = None                 # Palette index
    rgb: Optional[Tuple[int, int, int]] = None


@dataclass
class ConversionResult:
    """Result of a conversion; exactly one of ``text`` and ``cells`` is set."""
    text: Optional[str] = None
    cells: Optional[List[List[Cell]]] = None
    palette: Palette = ()
    width: int = 0
    height: int = 0
    original_size: Tuple[int, int] = (0, 0)
    dither_algorithm: DitherAlgorithm = DitherAlgorithm.NONE
    color_scheme: ColorScheme = ColorScheme.WHITE_ON_BLACK

    @property
    def is_colored(self) -> bool:
        return self.cells is not None

    @property
    def lines(self) -> List[str]:
        if self.cells is not None:
            return [''.join(cell.char for cell in row) for row in self.cells]
        if self.text is None:
            return []
        return self.text.splitlines()

    def to_plain_text(self) -> str:
        """Characters only; colors are discarded."""
        if self.cells is not None:
            return '\n'.join(self.lines)
        return self.text or ''


# =============================================================================
# TONE MAPPING
# =============================================================================

def get_pixel_brightness(r: float, g: float, b: float) -> int:
    """Perceived luminance (ITU-R BT.601 weights), rounded half up."""
    return math.floor(0.299 * r + 0.587 * g + 0.114 * b + 0.5)


def adjust_brightness(value, contrast: float, brightness: float):
    """Apply contrast around mid-gray, then a brightness offset; clamps to [0, 255]."""
    adjusted = ((value - 128) * contrast) + 128
    adjusted = adjusted + brightness
    return np.clip(adjusted, 0, 255)


def brightness_to_ascii(brightness: float, ascii_set: str, invert_brightness: bool = False) -> str:
    """
    Map a brightness value (0-255) to a character of the ramp.

    Args:
        brightness: Tone value; clamped to [0, 255]
        ascii_set: Ramp ordered darkest to lightest
        invert_brightness: Use ``255 - brightness`` (black-on-white display)

    Returns:
        The selected character
    """
    normalized = max(0, min(255, brightness))
    if invert_brightness:
        normalized = 255 - normalized

    index = math.floor((normalized / 255) * (len(ascii_set) - 1))
    return ascii_set[index]


def _luminance(rgb: np.ndarray) -> np.ndarray:
    return np.floor(0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2] + 0.5)


def _ramp_indices(values: np.ndarray, length: int, invert_brightness: bool) -> np.ndarray:
    normalized = np.clip(values, 0, 255)
    if invert_brightness:
        normalized = 255 - normalized
    return np.floor((normalized / 255) * (length - 1)).astype(np.intp)


# =============================================================================
# GLYPH / CELL SELECTION
# =============================================================================

def _generate_text(buffer: PixelBuffer, options: ConversionOptions) -> str:
    chars = options.characters
    rgb = buffer.data[:, :, :3].astype(np.float64)

    luminance = adjust_brightness(_luminance(rgb), options.contrast, options.brightness)
    indices = _ramp_indices(luminance, len(chars), options.invert_brightness)

    return ''.join(''.join(chars[i] for i in row) + '\n' for row in indices.tolist())


def _generate_cells(buffer: PixelBuffer, options: ConversionOptions) -> List[List[Cell]]:
    chars = options.characters
    palette = get_palette(options.color_palette)
    rgb = buffer.data[:, :, :3].astype(np.float64)

    luminance = _luminance(rgb)
    adjusted = adjust_brightness(luminance, options.contrast, options.brightness)

    # Rescale RGB by the tone change; black pixels and zero ratios keep their color
    factor = np.divide(adjusted, luminance, out=np.ones_like(adjusted), where=luminance != 0)
    factor[factor == 0] = 1.0
    scaled = np.clip(rgb * factor[..., None], 0, 255)

    indices = _ramp_indices(_luminance(scaled), len(chars), options.invert_brightness)
    color_indices = find_closest_ansi_colors(scaled, palette)
    dark = (scaled[..., 0] + scaled[..., 1] + scaled[..., 2]) / 3 < 128
    rounded = np.rint(scaled).astype(int)

    cells = []
    for y in range(buffer.height):
        row = []
        for x in range(buffer.width):
            char = chars[indices[y, x]]
            color = int(color_indices[y, x])
            r, g, b = rounded[y, x].tolist()

            if dark[y, x]:
                # Color carries the tone as background behind a dense glyph
                row.append(Cell(
                    char=' ' if char == ' ' else DARK_CELL_GLYPH,
                    fg=0,
                    bg=color,
                    rgb=(r, g, b),
                ))
            else:
                row.append(Cell(char=char, fg=color, bg=None, rgb=(r, g, b)))
        cells.append(row)

    return cells


def _map_pixels(buffer: PixelBuffer, options: ConversionOptions) -> Union[str, List[List[Cell]]]:
    if options.is_colored:
        return _generate_cells(buffer, options)
    return _generate_text(buffer, options)


def convert_to_ascii(buffer: PixelBuffer, options: ConversionOptions) -> Union[str, List[List[Cell]]]:
    """
    Resample and map a buffer to text art.

    Returns:
        A newline-terminated string, or a grid of Cells for colored ANSI art
    """
    columns, rows = options.target_dimensions(buffer.width, buffer.height)
    resized = resize_pixels(buffer, columns, rows)
    return _map_pixels(resized, options)


# =============================================================================
# PIPELINE
# =============================================================================

class AsciiArtGenerator:
    """Runs resample, dither, tone mapping and glyph selection for one set of options."""

    def __init__(self,
                 options: Optional[ConversionOptions] = None,
                 dither: Optional[DitherOptions] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            options: Conversion options (defaults if None)
            dither: Dithering options (none if None)
            rng: Random source handed to blue noise dithering
        """
        self.options = options or ConversionOptions()
        self.dither = dither or DitherOptions()
        self.rng = rng

    def should_dither(self) -> bool:
        """Dithering destroys color information, so colored ANSI art skips it."""
        return not self.dither.is_identity and not self.options.is_colored

    def generate(self, buffer: PixelBuffer) -> ConversionResult:
        """
        Convert a pixel buffer.

        Args:
            buffer: Source RGBA pixels

        Returns:
            ConversionResult with the text or cell grid, palette and dimensions
        """
        columns, rows = self.options.target_dimensions(buffer.width, buffer.height)
        logger.debug("Converting %dx%d source to %dx%d characters",
                     buffer.width, buffer.height, columns, rows)

        resized = resize_pixels(buffer, columns, rows)

        applied = DitherAlgorithm.NONE
        if self.should_dither():
            resized = apply_dithering(resized, self.dither, self.rng)
            applied = self.dither.algorithm
        elif not self.dither.is_identity:
            logger.debug("Skipping %s dithering for colored ANSI output",
                         self.dither.algorithm.value)

        body = _map_pixels(resized, self.options)

        result = ConversionResult(
            width=columns,
            height=rows,
            original_size=buffer.size,
            dither_algorithm=applied,
            color_scheme=self.options.color_scheme,
        )
        if isinstance(body, str):
            result.text = body
        else:
            result.cells = body
            result.palette = get_palette(self.options.color_palette)
            logger.debug("Mapped cells onto %d-color palette", len(result.palette))

        return result


def generate(buffer: PixelBuffer,
             options: Optional[ConversionOptions] = None,
             dither: Optional[DitherOptions] = None,
             rng: Optional[np.random.Generator] = None) -> ConversionResult:
    """Functional form of :meth:`AsciiArtGenerator.generate`."""
    return AsciiArtGenerator(options, dither, rng).generate(buffer)


def image_to_ascii(image: Image.Image,
                   width: int = 80,
                   ascii_set: str = 'minimal',
                   art_style: Union[str, ArtStyle] = 'ascii',
                   use_colors: bool = False,
                   dither: Union[str, DitherAlgorithm] = 'none',
                   dither_strength: float = 0.5,
                   **kwargs) -> ConversionResult:
    """
    Convenience function to convert a Pillow image.

    Args:
        image: PIL Image
        width: Output width in characters
        ascii_set: Character set key
        art_style: 'ascii' or 'ansi'
        use_colors: Colored cells (ANSI style only)
        dither: Dithering algorithm name
        dither_strength: Dithering strength (0-1)
        **kwargs: Additional ConversionOptions fields

    Returns:
        ConversionResult
    """
    options = ConversionOptions(
        width=width,
        ascii_set=ascii_set,
        art_style=art_style,
        use_colors=use_colors,
        **kwargs
    )
    dither_options = DitherOptions(algorithm=dither, strength=dither_strength)
    return AsciiArtGenerator(options, dither_options).generate(PixelBuffer.from_image(image))


# =============================================================================
# PRESET CONFIGURATIONS
# =============================================================================

class Presets:
    """Predefined conversion options."""

    @staticmethod
    def classic_terminal() -> ConversionOptions:
        """Bold 10-character ramp at terminal width."""
        return ConversionOptions(width=80, ascii_set='minimal')

    @staticmethod
    def detailed_photo() -> ConversionOptions:
        """Long ramp and extra contrast for photographs."""
        return ConversionOptions(width=160, ascii_set='smooth', contrast=1.2)

    @staticmethod
    def colored_blocks() -> ConversionOptions:
        """BBS-style colored block art on the 256-color palette."""
        return ConversionOptions(
            width=100,
            ascii_set='blocks',
            art_style=ArtStyle.ANSI,
            use_colors=True,
            color_palette=PaletteName.ANSI_256,
        )

    @staticmethod
    def print_friendly() -> ConversionOptions:
        """Dark ink on a light page."""
        return ConversionOptions(
            width=100,
            ascii_set='classic',
            color_scheme=ColorScheme.BLACK_ON_WHITE,
        )

    @classmethod
    def names(cls) -> List[str]:
        return ['classic_terminal', 'detailed_photo', 'colored_blocks', 'print_friendly']

    @classmethod
    def get(cls, name: str) -> ConversionOptions:
        key = name.lower().replace('-', '_')
        if key not in cls.names():
            raise UnknownOptionError(f"Unknown preset: {name!r}")
        return getattr(cls, key)()
