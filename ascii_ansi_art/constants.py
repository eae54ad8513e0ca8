"""
ASCII/ANSI Art Converter - Constants
====================================
Enums, character ramps, the fixed ANSI palette and ordered dithering matrices.
"""

from enum import Enum
from typing import Dict, Tuple

from ascii_ansi_art.errors import UnknownAlgorithmError, UnknownOptionError, UnknownRampError


# =============================================================================
# ENUMS
# =============================================================================

class _NamedEnum(Enum):
    """Enum whose members are looked up by their kebab-case value."""

    @classmethod
    def from_name(cls, name):
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace('_', '-')
        for member in cls:
            if member.value == key:
                return member
        raise cls._unknown_error()(
            f"Unknown {cls.__name__}: {name!r} (expected one of: "
            f"{', '.join(m.value for m in cls)})"
        )

    @classmethod
    def _unknown_error(cls):
        return UnknownOptionError


class ArtStyle(_NamedEnum):
    """Output style."""
    ASCII = 'ascii'
    ANSI = 'ansi'


class ColorScheme(_NamedEnum):
    """Display scheme; black-on-white inverts the brightness mapping."""
    WHITE_ON_BLACK = 'white-on-black'
    BLACK_ON_WHITE = 'black-on-white'


class PaletteName(_NamedEnum):
    """Terminal color palette used for colored ANSI output."""
    ANSI_16 = 'ansi-16'
    ANSI_256 = 'ansi-256'


class DitherAlgorithm(_NamedEnum):
    """Dithering algorithm applied before character mapping."""
    NONE = 'none'
    FLOYD_STEINBERG = 'floyd-steinberg'
    FLOYD_STEINBERG_SERPENTINE = 'floyd-steinberg-serpentine'
    JARVIS_JUDICE_NINKE = 'jarvis-judice-ninke'
    ATKINSON = 'atkinson'
    STUCKI = 'stucki'
    BURKES = 'burkes'
    SIERRA = 'sierra'
    SIERRA_LITE = 'sierra-lite'
    ORDERED_2X2 = 'ordered-2x2'
    ORDERED_4X4 = 'ordered-4x4'
    ORDERED_8X8 = 'ordered-8x8'
    BLUE_NOISE = 'blue-noise'
    ADAPTIVE_HYBRID = 'adaptive-hybrid'

    @classmethod
    def _unknown_error(cls):
        return UnknownAlgorithmError


# =============================================================================
# CHARACTER SETS
# =============================================================================

# Ordered darkest to lightest
ASCII_SETS: Dict[str, str] = {
    # ASCII art ramps
    'minimal': " .:-=+*#%@",
    'smooth': " .'`^\",:;Il!i~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$",
    'classic': " .,:;ox%#@",
    'dense': " `.-':_,^=;><+!rc*/z?sLTv)J7(|Fi{}C3tlf1unxzjY5V2wqkoahd0ep9gy6Pb4km8RDZXUBO#MW&8%B@$",

    # ANSI art ramps (CP437 block characters)
    'blocks': " ░▒▓█",
    'ansi-safe': " .:-=#@",
    'ansi-half': " ▄█",
    'ansi-simple': " ▒█",
    'ansi-classic': " .▒▓█",
    'ansi-minimal': " █",
}

ASCII_SET_NAMES: Dict[str, str] = {
    'minimal': 'Minimal Ramp (fast + bold)',
    'smooth': '12-Step Smooth Ramp',
    'classic': 'Classic 10-Char Gradient',
    'dense': 'Dense Ramp with Strong Contrast',
    'blocks': 'CP437 Blocks',
    'ansi-safe': 'ANSI Safe (ASCII fallback)',
    'ansi-half': 'Half and Full Blocks',
    'ansi-simple': 'Medium and Full Blocks',
    'ansi-classic': 'ASCII and Blocks Mix',
    'ansi-minimal': 'Full Block Only',
}


def get_ascii_set(key: str) -> str:
    """Return the character ramp registered under ``key``."""
    try:
        return ASCII_SETS[key]
    except KeyError:
        raise UnknownRampError(
            f"Unknown character set: {key!r} (expected one of: {', '.join(ASCII_SETS)})"
        ) from None


# Glyph drawn over the background color of dark cells
DARK_CELL_GLYPH = '▓'


# =============================================================================
# COLOR PALETTES
# =============================================================================

ANSI_16_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (0, 0, 0),        # Black
    (128, 0, 0),      # Dark Red
    (0, 128, 0),      # Dark Green
    (128, 128, 0),    # Dark Yellow
    (0, 0, 128),      # Dark Blue
    (128, 0, 128),    # Dark Magenta
    (0, 128, 128),    # Dark Cyan
    (192, 192, 192),  # Light Gray
    (128, 128, 128),  # Dark Gray
    (255, 0, 0),      # Red
    (0, 255, 0),      # Green
    (255, 255, 0),    # Yellow
    (0, 0, 255),      # Blue
    (255, 0, 255),    # Magenta
    (0, 255, 255),    # Cyan
    (255, 255, 255),  # White
)


# =============================================================================
# ORDERED DITHERING MATRICES
# =============================================================================

ORDERED_2X2 = (
    (0, 2),
    (3, 1),
)

ORDERED_4X4 = (
    (0, 8, 2, 10),
    (12, 4, 14, 6),
    (3, 11, 1, 9),
    (15, 7, 13, 5),
)

ORDERED_8X8 = (
    (0, 32, 8, 40, 2, 34, 10, 42),
    (48, 16, 56, 24, 50, 18, 58, 26),
    (12, 44, 4, 36, 14, 46, 6, 38),
    (60, 28, 52, 20, 62, 30, 54, 22),
    (3, 35, 11, 43, 1, 33, 9, 41),
    (51, 19, 59, 27, 49, 17, 57, 25),
    (15, 47, 7, 39, 13, 45, 5, 37),
    (63, 31, 55, 23, 61, 29, 53, 21),
)
