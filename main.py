#!/usr/bin/env python3
"""
Image to ASCII/ANSI Art Converter
=================================
Command line entry point; see ``ascii_ansi_art.cli`` for the options.
"""

import sys

from ascii_ansi_art.cli import main


if __name__ == '__main__':
    sys.exit(main())
