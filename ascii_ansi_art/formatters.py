"""
ASCII/ANSI Art Converter - Formatters
=====================================
Render a ConversionResult for terminals and browsers, or flatten it to text.
"""

import html
from typing import List, Optional

from ascii_ansi_art.constants import ColorScheme
from ascii_ansi_art.converter import Cell, ConversionResult


def to_plain_text(result: ConversionResult) -> str:
    """Characters only; colored cells lose their colors."""
    return result.to_plain_text()


# =============================================================================
# ANSI COLOR OUTPUT
# =============================================================================

class AnsiColorFormatter:
    """Format colored cells with ANSI SGR escape codes for terminal output."""

    RESET = "\033[0m"

    @staticmethod
    def color_code(index: int, palette_size: int, foreground: bool = True) -> str:
        """
        SGR parameter for a palette index.

        The 16-color palette maps to the classic 30-37/90-97 (foreground) and
        40-47/100-107 (background) codes; larger palettes use 256-color codes.
        """
        if palette_size <= 16:
            base = 30 if foreground else 40
            if index >= 8:
                base += 60
                index -= 8
            return str(base + index)
        return f"{38 if foreground else 48};5;{index}"

    @classmethod
    def _sgr(cls, cell: Cell, palette_size: int) -> str:
        params = ['0']
        if cell.fg is not None:
            params.append(cls.color_code(cell.fg, palette_size, True))
        if cell.bg is not None:
            params.append(cls.color_code(cell.bg, palette_size, False))
        return f"\033[{';'.join(params)}m"

    @classmethod
    def format_cells(cls, cells: List[List[Cell]], palette_size: int = 16) -> str:
        """Render a cell grid; escapes are only emitted when the color pair changes."""
        output_lines = []

        for row in cells:
            output = ""
            prev_colors = None

            for cell in row:
                colors = (cell.fg, cell.bg)
                if colors != prev_colors:
                    output += cls._sgr(cell, palette_size)
                    prev_colors = colors
                output += cell.char

            output += cls.RESET
            output_lines.append(output)

        return '\n'.join(output_lines)

    @classmethod
    def format_result(cls, result: ConversionResult) -> str:
        """
        Format a conversion result with ANSI colors.

        Monochrome results are returned unchanged.
        """
        if result.cells is None:
            return result.text
        return cls.format_cells(result.cells, len(result.palette))


# =============================================================================
# HTML OUTPUT
# =============================================================================

class HtmlFormatter:
    """Format text art as an HTML page."""

    # color scheme -> (background, foreground) for monochrome pages
    PAGE_COLORS = {
        ColorScheme.WHITE_ON_BLACK: ("#1a1a1a", "#ffffff"),
        ColorScheme.BLACK_ON_WHITE: ("#ffffff", "#000000"),
    }

    @staticmethod
    def _span_style(cell: Cell, result: ConversionResult) -> Optional[str]:
        styles = []
        if cell.fg is not None:
            r, g, b = result.palette[cell.fg]
            styles.append(f"color:rgb({r}, {g}, {b})")
        if cell.bg is not None:
            r, g, b = result.palette[cell.bg]
            styles.append(f"background-color:rgb({r}, {g}, {b})")
        return ';'.join(styles) or None

    @classmethod
    def format_result(cls,
                      result: ConversionResult,
                      font_size: int = 10,
                      font_family: str = '"Courier New", Courier, monospace',
                      background_color: Optional[str] = None,
                      foreground_color: Optional[str] = None) -> str:
        """
        Format a conversion result as HTML.

        Args:
            result: Monochrome or colored result
            font_size: Font size in pixels
            font_family: CSS font family
            background_color: Page background (follows the color scheme if None)
            foreground_color: Text color for monochrome output (follows the
                color scheme if None)

        Returns:
            HTML string
        """
        # Colored cells carry their own colors and stay on the dark page
        scheme = result.color_scheme if result.cells is None else ColorScheme.WHITE_ON_BLACK
        default_background, default_foreground = cls.PAGE_COLORS[scheme]
        background_color = background_color or default_background
        foreground_color = foreground_color or default_foreground

        page = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>
        .ascii-art {{
            font-family: {font_family};
            font-size: {font_size}px;
            line-height: 1.1;
            background-color: {background_color};
            color: {foreground_color};
            white-space: pre;
            display: inline-block;
            padding: 10px;
            letter-spacing: 0px;
        }}
    </style>
</head>
<body>
<div class="ascii-art">
"""

        if result.cells is None:
            page += html.escape(result.text, quote=False)
        else:
            for row in result.cells:
                for cell in row:
                    char = html.escape(cell.char, quote=False)
                    style = cls._span_style(cell, result)
                    if style is None:
                        page += char
                    else:
                        page += f'<span style="{style}">{char}</span>'
                page += '\n'

        page += """</div>
</body>
</html>"""

        return page
