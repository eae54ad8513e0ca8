"""
ASCII/ANSI Art Converter - Command Line Interface
=================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

from ascii_ansi_art.constants import ASCII_SET_NAMES, ASCII_SETS, DitherAlgorithm
from ascii_ansi_art.converter import AsciiArtGenerator, ConversionOptions, Presets
from ascii_ansi_art.dithering import DITHERING_ALGORITHMS, DitherOptions, get_recommended_dithering
from ascii_ansi_art.errors import ConversionError
from ascii_ansi_art.formatters import AnsiColorFormatter, HtmlFormatter, to_plain_text
from ascii_ansi_art.pixels import load_image

LOG = logging.getLogger("ascii_ansi_art")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Send package log records to stderr."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    LOG.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    LOG.handlers[:] = [handler]
    LOG.propagate = False


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='ascii-ansi-art',
        description='Convert images to ASCII or colored ANSI art',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s image.png                              # 80 columns, minimal ramp
  %(prog)s image.png -w 120 --charset smooth      # Wider, smoother ramp
  %(prog)s image.png --dither atkinson            # Atkinson dithering
  %(prog)s image.png --style ansi -c --palette ansi-256
  %(prog)s image.png --style ansi -c -o art.html  # Colored HTML output
        """
    )

    # Input/Output
    parser.add_argument('input', nargs='?', help='Input image file')
    parser.add_argument('-o', '--output', help='Output file (txt, html, or ansi)')

    # Size options
    parser.add_argument('-w', '--width', type=int, default=80, help='Output width in characters')
    parser.add_argument('-H', '--height', type=int, help='Output height in characters')
    parser.add_argument('--no-aspect', action='store_true',
                        help='Do not preserve the image aspect ratio')
    parser.add_argument('--char-ratio', type=float, default=0.5,
                        help='Character aspect ratio (width/height)')

    # Style options
    parser.add_argument('--charset', choices=list(ASCII_SETS), default='minimal',
                        help='Character set')
    parser.add_argument('--style', choices=['ascii', 'ansi'], default='ascii', help='Art style')
    parser.add_argument('--preset', choices=Presets.names(),
                        help='Start from a preset (other options are ignored)')

    # Tone options
    parser.add_argument('--contrast', type=float, default=1.0,
                        help='Contrast factor (1.0 = unchanged)')
    parser.add_argument('--brightness', type=float, default=0.0,
                        help='Brightness offset (-100 to 100)')
    parser.add_argument('-i', '--invert', action='store_true',
                        help='Black-on-white color scheme')

    # Color options
    parser.add_argument('-c', '--colors', action='store_true',
                        help='Colored cells (ANSI style only)')
    parser.add_argument('--palette', choices=['ansi-16', 'ansi-256'], default='ansi-16',
                        help='Color palette')

    # Dithering options
    parser.add_argument('--dither', choices=[a.value for a in DitherAlgorithm], default='none',
                        help='Dithering algorithm')
    parser.add_argument('--dither-strength', type=float, default=0.5,
                        help='Dithering strength (0-1)')
    parser.add_argument('--auto-dither', action='store_true',
                        help='Use the recommended dithering for the style and charset')

    # Other options
    parser.add_argument('--list-charsets', action='store_true', help='List character sets')
    parser.add_argument('--list-dithering', action='store_true', help='List dithering algorithms')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    parser.add_argument('--debug', action='store_true', help='Debug logging')

    return parser


def build_options(args: argparse.Namespace) -> ConversionOptions:
    """Map parsed arguments onto ConversionOptions."""
    if args.preset:
        return Presets.get(args.preset)

    return ConversionOptions(
        width=args.width,
        height=args.height,
        maintain_aspect_ratio=not args.no_aspect,
        char_aspect_ratio=args.char_ratio,
        ascii_set=args.charset,
        art_style=args.style,
        contrast=args.contrast,
        brightness=args.brightness,
        color_scheme='black-on-white' if args.invert else 'white-on-black',
        use_colors=args.colors,
        color_palette=args.palette,
    )


def build_dither_options(args: argparse.Namespace, options: ConversionOptions) -> DitherOptions:
    """Map parsed arguments onto DitherOptions."""
    algorithm = DitherAlgorithm.from_name(args.dither)
    if args.auto_dither:
        algorithm = get_recommended_dithering(
            options.art_style, len(options.characters), options.use_colors
        )
        LOG.info("Recommended dithering: %s", algorithm.value)
    return DitherOptions(algorithm=algorithm, strength=args.dither_strength)


def _print_listings(args: argparse.Namespace) -> None:
    if args.list_charsets:
        for key, chars in ASCII_SETS.items():
            print(f"{key:<14} {ASCII_SET_NAMES[key]:<34} {chars!r}")
    if args.list_dithering:
        for algorithm, (label, description) in DITHERING_ALGORITHMS.items():
            print(f"{algorithm.value:<28} {label:<30} {description}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command line usage."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.debug)

    if args.list_charsets or args.list_dithering:
        _print_listings(args)
        return 0

    if not args.input:
        parser.print_help()
        return 0

    try:
        buffer = load_image(args.input)
    except OSError as e:
        LOG.error("Error loading image %s: %s", args.input, e)
        return 1
    LOG.info("Loaded image: %s (%dx%d)", args.input, buffer.width, buffer.height)

    try:
        options = build_options(args)
        dither = build_dither_options(args, options)
        result = AsciiArtGenerator(options, dither).generate(buffer)
    except ConversionError as e:
        LOG.error("Conversion failed: %s", e)
        return 1

    LOG.info("Output size: %dx%d", result.width, result.height)

    if args.output:
        ext = args.output.lower().rsplit('.', 1)[-1]
        if ext == 'html':
            content = HtmlFormatter.format_result(result, font_size=options.font_size)
        elif ext == 'ansi':
            content = AnsiColorFormatter.format_result(result)
        else:
            content = to_plain_text(result)

        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            LOG.error("Error writing %s: %s", args.output, e)
            return 1
        LOG.info("Saved to %s", args.output)
    else:
        output = AnsiColorFormatter.format_result(result)
        print(output, end='' if output.endswith('\n') else '\n')

    return 0


if __name__ == '__main__':
    sys.exit(main())
