"""Tests for tone mapping, glyph/cell selection and the conversion pipeline."""

import numpy as np
import pytest
from PIL import Image

from ascii_ansi_art.constants import ASCII_SETS, DARK_CELL_GLYPH, DitherAlgorithm
from ascii_ansi_art.converter import (
    AsciiArtGenerator,
    Cell,
    ConversionOptions,
    ConversionResult,
    Presets,
    adjust_brightness,
    brightness_to_ascii,
    convert_to_ascii,
    get_pixel_brightness,
    image_to_ascii,
)
from ascii_ansi_art.dithering import DitherOptions
from ascii_ansi_art.errors import (
    InvalidDimensionError,
    InvalidOptionError,
    UnknownOptionError,
    UnknownRampError,
)
from ascii_ansi_art.pixels import PixelBuffer

MINIMAL = ASCII_SETS['minimal']


def solid(width, height, rgb):
    data = np.empty((height, width, 4), dtype=np.uint8)
    data[..., :3] = rgb
    data[..., 3] = 255
    return PixelBuffer(data)


def colored(**kwargs):
    return ConversionOptions(art_style='ansi', use_colors=True, **kwargs)


class TestToneMapping:
    def test_pixel_brightness(self):
        assert get_pixel_brightness(0, 0, 0) == 0
        assert get_pixel_brightness(255, 255, 255) == 255
        assert get_pixel_brightness(255, 0, 0) == 76
        assert get_pixel_brightness(0, 255, 0) == 150

    def test_adjust_brightness(self):
        assert adjust_brightness(128, 2.0, 0) == 128
        assert adjust_brightness(200, 2.0, 0) == 255
        assert adjust_brightness(100, 1.0, -20) == 80
        assert adjust_brightness(10, 1.0, -50) == 0
        assert adjust_brightness(100, 0.5, 0) == 114

    def test_brightness_clamped_before_indexing(self):
        assert brightness_to_ascii(-10, MINIMAL) == ' '
        assert brightness_to_ascii(300, MINIMAL) == '@'

    def test_inversion(self):
        assert brightness_to_ascii(255, MINIMAL, invert_brightness=True) == ' '
        assert brightness_to_ascii(0, MINIMAL, invert_brightness=True) == '@'

    @pytest.mark.parametrize('length', [2, 5, 10, 70, 92])
    def test_ramp_indexing_is_monotonic(self, length):
        ramp = ''.join(chr(0x100 + i) for i in range(length))
        indices = [ramp.index(brightness_to_ascii(v, ramp)) for v in range(256)]
        assert indices == sorted(indices)
        assert indices[0] == 0
        assert indices[-1] == length - 1

        inverted = [ramp.index(brightness_to_ascii(v, ramp, True)) for v in range(256)]
        assert inverted == sorted(inverted, reverse=True)


class TestOptions:
    def test_parses_enum_names(self):
        options = ConversionOptions(art_style='ansi', color_scheme='black-on-white',
                                    color_palette='ansi-256')
        assert options.invert_brightness
        assert not options.is_colored
        assert options.characters == MINIMAL

    def test_unknown_ramp(self):
        with pytest.raises(UnknownRampError):
            ConversionOptions(ascii_set='braille')

    def test_unknown_style(self):
        with pytest.raises(UnknownOptionError):
            ConversionOptions(art_style='html')

    @pytest.mark.parametrize('kwargs', [{'width': 0}, {'width': -5}, {'height': 0}])
    def test_invalid_dimensions(self, kwargs):
        with pytest.raises(InvalidDimensionError):
            ConversionOptions(**kwargs)

    def test_invalid_contrast(self):
        with pytest.raises(InvalidOptionError):
            ConversionOptions(contrast=0)

    def test_explicit_height_overrides_computed_rows(self):
        options = ConversionOptions(width=80, height=33)
        assert options.target_dimensions(200, 100) == (80, 33)
        assert ConversionOptions(width=80).target_dimensions(200, 100) == (80, 20)


class TestMonochrome:
    def test_mid_gray(self):
        options = ConversionOptions(width=10, height=10, ascii_set='minimal')
        text = convert_to_ascii(solid(10, 10, (128, 128, 128)), options)
        assert text == ('=' * 10 + '\n') * 10

    def test_black_uses_darkest_glyph(self):
        for key, ramp in ASCII_SETS.items():
            text = convert_to_ascii(solid(8, 8, (0, 0, 0)), ConversionOptions(width=8, ascii_set=key))
            assert set(text.replace('\n', '')) == {ramp[0]}

    def test_white_inverted_uses_darkest_glyph(self):
        options = ConversionOptions(width=6, color_scheme='black-on-white')
        text = convert_to_ascii(solid(6, 6, (255, 255, 255)), options)
        assert set(text.replace('\n', '')) == {' '}

    def test_white_uses_lightest_glyph(self):
        text = convert_to_ascii(solid(6, 6, (255, 255, 255)), ConversionOptions(width=6))
        assert set(text.replace('\n', '')) == {'@'}

    def test_trailing_newline_per_row(self):
        text = convert_to_ascii(solid(40, 20, (90, 90, 90)), ConversionOptions(width=12))
        lines = text.split('\n')
        assert lines[-1] == ''
        assert len(lines) - 1 == 3
        assert all(len(line) == 12 for line in lines[:-1])

    def test_zero_rows_gives_empty_output(self):
        assert convert_to_ascii(solid(100, 1, (50, 50, 50)), ConversionOptions(width=10)) == ''

    @pytest.mark.parametrize('invert', [False, True])
    def test_matches_per_pixel_mapping(self, invert):
        rng = np.random.default_rng(2)
        buffer = PixelBuffer(rng.integers(0, 256, size=(6, 9, 4), dtype=np.uint8))
        options = ConversionOptions(
            width=9, height=6, ascii_set='smooth', contrast=1.3, brightness=-12,
            color_scheme='black-on-white' if invert else 'white-on-black',
        )
        ramp = ASCII_SETS['smooth']

        expected = ''
        for y in range(6):
            for x in range(9):
                r, g, b, _ = buffer.data[y, x].tolist()
                value = adjust_brightness(get_pixel_brightness(r, g, b), 1.3, -12)
                expected += brightness_to_ascii(value, ramp, invert)
            expected += '\n'

        assert convert_to_ascii(buffer, options) == expected


class TestColored:
    def test_saturated_red_is_dark_cell(self):
        cells = convert_to_ascii(solid(1, 1, (255, 0, 0)), colored(width=1, height=1))
        assert cells == [[Cell(DARK_CELL_GLYPH, fg=0, bg=9, rgb=(255, 0, 0))]]

    def test_white_is_foreground_cell(self):
        cells = convert_to_ascii(solid(1, 1, (255, 255, 255)), colored(width=1, height=1))
        assert cells == [[Cell('@', fg=15, bg=None, rgb=(255, 255, 255))]]

    def test_black_keeps_space(self):
        cells = convert_to_ascii(solid(1, 1, (0, 0, 0)), colored(width=1, height=1, brightness=40))
        assert cells == [[Cell(' ', fg=0, bg=0, rgb=(0, 0, 0))]]

    def test_brightness_rescales_rgb(self):
        cells = convert_to_ascii(solid(1, 1, (100, 100, 100)), colored(width=1, height=1, brightness=50))
        assert cells == [[Cell('+', fg=8, bg=None, rgb=(150, 150, 150))]]

    def test_zero_ratio_keeps_original_color(self):
        cells = convert_to_ascii(solid(1, 1, (100, 100, 100)), colored(width=1, height=1, brightness=-100))
        assert cells == [[Cell(DARK_CELL_GLYPH, fg=0, bg=8, rgb=(100, 100, 100))]]

    def test_grid_is_rectangular(self):
        rng = np.random.default_rng(4)
        buffer = PixelBuffer(rng.integers(0, 256, size=(30, 40, 4), dtype=np.uint8))
        cells = convert_to_ascii(buffer, colored(width=20, color_palette='ansi-256'))
        assert len(cells) == 7
        assert all(len(row) == 20 for row in cells)
        assert all(0 <= cell.bg < 256 for row in cells for cell in row if cell.bg is not None)

    def test_monochrome_ansi_returns_text(self):
        options = ConversionOptions(width=4, height=2, art_style='ansi', ascii_set='blocks')
        assert convert_to_ascii(solid(4, 4, (255, 255, 255)), options) == '████\n████\n'


class TestGenerator:
    def test_result_metadata(self):
        result = AsciiArtGenerator(ConversionOptions(width=80)).generate(solid(200, 100, (10, 10, 10)))
        assert (result.width, result.height) == (80, 20)
        assert result.original_size == (200, 100)
        assert not result.is_colored
        assert result.palette == ()
        assert len(result.lines) == 20

    def test_dithering_applied_to_monochrome(self):
        generator = AsciiArtGenerator(
            ConversionOptions(width=8, height=8),
            DitherOptions(DitherAlgorithm.FLOYD_STEINBERG, 1.0),
        )
        result = generator.generate(solid(8, 8, (128, 128, 128)))
        assert result.dither_algorithm == DitherAlgorithm.FLOYD_STEINBERG
        assert set(result.text.replace('\n', '')) == {' ', '@'}

    def test_dithering_runs_after_resampling(self):
        # Sampling keeps columns 0 and 2; diffusing over [100, 100] pushes
        # 43.75 onto the second cell, while the full row would leave both dark
        row = [100, 255, 100, 255]
        data = np.empty((2, 4, 4), dtype=np.uint8)
        data[..., :3] = np.array([row, row], dtype=np.uint8)[..., None]
        data[..., 3] = 255
        generator = AsciiArtGenerator(
            ConversionOptions(width=2, height=1),
            DitherOptions(DitherAlgorithm.FLOYD_STEINBERG, 1.0),
        )
        assert generator.generate(PixelBuffer(data)).text == ' @\n'

    def test_dithering_skipped_for_colored_ansi(self):
        generator = AsciiArtGenerator(colored(width=8, height=8), DitherOptions(DitherAlgorithm.ATKINSON, 1.0))
        result = generator.generate(solid(8, 8, (128, 128, 128)))
        assert result.dither_algorithm == DitherAlgorithm.NONE
        assert result.is_colored
        assert len(result.palette) == 16
        assert {cell.fg for row in result.cells for cell in row} == {8}

    def test_source_not_modified(self):
        buffer = solid(16, 16, (120, 60, 200))
        before = buffer.data.copy()
        AsciiArtGenerator(ConversionOptions(width=16), DitherOptions('stucki', 1.0)).generate(buffer)
        assert np.array_equal(buffer.data, before)

    def test_empty_result(self):
        result = ConversionResult()
        assert result.lines == []
        assert result.to_plain_text() == ''

    def test_plain_text_export_of_cells(self):
        result = AsciiArtGenerator(colored(width=3, height=2)).generate(solid(3, 2, (255, 255, 255)))
        assert result.to_plain_text() == '@@@\n@@@'

    def test_blue_noise_uses_injected_rng(self):
        options = ConversionOptions(width=12, height=6)
        dither = DitherOptions(DitherAlgorithm.BLUE_NOISE, 1.0)
        buffer = solid(12, 6, (140, 140, 140))
        first = AsciiArtGenerator(options, dither, np.random.default_rng(9)).generate(buffer)
        second = AsciiArtGenerator(options, dither, np.random.default_rng(9)).generate(buffer)
        assert first.text == second.text


class TestConvenience:
    def test_image_to_ascii(self):
        result = image_to_ascii(Image.new('RGB', (20, 10), (255, 255, 255)), width=10)
        assert result.text == '@' * 10 + '\n' + '@' * 10 + '\n'

    def test_presets(self):
        for name in Presets.names():
            assert isinstance(Presets.get(name), ConversionOptions)
        assert Presets.get('colored-blocks').is_colored
        assert Presets.print_friendly().invert_brightness

    def test_unknown_preset(self):
        with pytest.raises(UnknownOptionError):
            Presets.get('vaporwave')
