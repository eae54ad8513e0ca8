"""
ASCII/ANSI Art Converter
========================
Convert RGBA pixel buffers to monochrome ASCII art or colored ANSI block art.

Features:
- Nearest-neighbor resampling with glyph aspect-ratio correction
- Error-diffusion, ordered, blue noise and adaptive dithering
- Contrast/brightness shaping and inverted color schemes
- 16- and 256-color ANSI cell output with HTML and escape-code formatters
"""

from ascii_ansi_art.constants import (
    ANSI_16_COLORS,
    ASCII_SETS,
    ArtStyle,
    ColorScheme,
    DitherAlgorithm,
    PaletteName,
    get_ascii_set,
)
from ascii_ansi_art.converter import (
    AsciiArtGenerator,
    Cell,
    ConversionOptions,
    ConversionResult,
    Presets,
    adjust_brightness,
    brightness_to_ascii,
    convert_to_ascii,
    generate,
    get_pixel_brightness,
    image_to_ascii,
)
from ascii_ansi_art.dithering import (
    DITHERING_ALGORITHMS,
    DitherOptions,
    apply_dithering,
    get_recommended_dithering,
)
from ascii_ansi_art.errors import (
    ConversionError,
    InvalidDimensionError,
    InvalidOptionError,
    UnknownAlgorithmError,
    UnknownOptionError,
    UnknownRampError,
)
from ascii_ansi_art.formatters import AnsiColorFormatter, HtmlFormatter, to_plain_text
from ascii_ansi_art.palette import (
    find_closest_ansi_color,
    generate_ansi256_palette,
    get_palette,
)
from ascii_ansi_art.pixels import PixelBuffer, calculate_dimensions, load_image, resize_pixels

__version__ = '1.0.0'

__all__ = [
    # Enums and tables
    'ArtStyle',
    'ColorScheme',
    'DitherAlgorithm',
    'PaletteName',
    'ASCII_SETS',
    'ANSI_16_COLORS',
    'DITHERING_ALGORITHMS',
    'get_ascii_set',

    # Data
    'PixelBuffer',
    'ConversionOptions',
    'DitherOptions',
    'Cell',
    'ConversionResult',
    'Presets',

    # Pipeline
    'AsciiArtGenerator',
    'generate',
    'convert_to_ascii',
    'image_to_ascii',
    'load_image',
    'calculate_dimensions',
    'resize_pixels',
    'apply_dithering',
    'get_recommended_dithering',

    # Tone and color
    'get_pixel_brightness',
    'adjust_brightness',
    'brightness_to_ascii',
    'generate_ansi256_palette',
    'get_palette',
    'find_closest_ansi_color',

    # Formatters
    'AnsiColorFormatter',
    'HtmlFormatter',
    'to_plain_text',

    # Errors
    'ConversionError',
    'InvalidDimensionError',
    'InvalidOptionError',
    'UnknownOptionError',
    'UnknownRampError',
    'UnknownAlgorithmError',
]
