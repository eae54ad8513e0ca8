"""Exceptions raised by the conversion pipeline."""


class ConversionError(ValueError):
    """Base class for caller-contract violations."""


class InvalidDimensionError(ConversionError):
    """Target or source dimensions are unusable."""


class InvalidOptionError(ConversionError):
    """An option value is out of its allowed range."""


class UnknownOptionError(ConversionError):
    """An option references a key outside the known set."""


class UnknownRampError(UnknownOptionError):
    """Unknown character-set key."""


class UnknownAlgorithmError(UnknownOptionError):
    """Unknown dithering algorithm."""
