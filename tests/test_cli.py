"""Tests for the command line interface."""

import pytest
from PIL import Image

from ascii_ansi_art import cli
from ascii_ansi_art.constants import DitherAlgorithm


@pytest.fixture
def white_png(tmp_path):
    path = tmp_path / 'white.png'
    Image.new('RGB', (20, 10), (255, 255, 255)).save(path)
    return str(path)


@pytest.fixture
def red_png(tmp_path):
    path = tmp_path / 'red.png'
    Image.new('RGB', (4, 4), (255, 0, 0)).save(path)
    return str(path)


class TestMain:
    def test_prints_to_stdout(self, white_png, capsys):
        assert cli.main([white_png, '-w', '10']) == 0
        assert capsys.readouterr().out == '@' * 10 + '\n' + '@' * 10 + '\n'

    def test_writes_text_file(self, white_png, tmp_path):
        output = tmp_path / 'art.txt'
        assert cli.main([white_png, '-w', '10', '-o', str(output)]) == 0
        assert output.read_text(encoding='utf-8') == ('@' * 10 + '\n') * 2

    def test_writes_html_file(self, red_png, tmp_path):
        output = tmp_path / 'art.html'
        assert cli.main([red_png, '-w', '4', '--style', 'ansi', '-c', '-o', str(output)]) == 0
        assert '<span style=' in output.read_text(encoding='utf-8')

    def test_writes_ansi_file(self, red_png, tmp_path):
        output = tmp_path / 'art.ansi'
        assert cli.main([red_png, '-w', '4', '--style', 'ansi', '-c', '-o', str(output)]) == 0
        assert '\033[0;30;101m' in output.read_text(encoding='utf-8')

    def test_inverted_scheme(self, white_png, capsys):
        assert cli.main([white_png, '-w', '10', '--invert']) == 0
        assert capsys.readouterr().out == (' ' * 10 + '\n') * 2

    def test_unwritable_output(self, white_png, tmp_path):
        output = tmp_path / 'missing-dir' / 'art.txt'
        assert cli.main([white_png, '-w', '10', '-o', str(output)]) == 1
        assert not output.exists()

    def test_missing_file(self, tmp_path):
        assert cli.main([str(tmp_path / 'missing.png')]) == 1

    def test_not_an_image(self, tmp_path):
        path = tmp_path / 'notes.png'
        path.write_text('not an image')
        assert cli.main([str(path)]) == 1

    def test_invalid_width(self, white_png):
        assert cli.main([white_png, '-w', '0']) == 1

    def test_unknown_charset_is_usage_error(self, white_png):
        with pytest.raises(SystemExit) as exc:
            cli.main([white_png, '--charset', 'nope'])
        assert exc.value.code == 2

    def test_no_input_prints_help(self, capsys):
        assert cli.main([]) == 0
        assert 'usage:' in capsys.readouterr().out

    def test_listings(self, capsys):
        assert cli.main(['--list-charsets', '--list-dithering']) == 0
        out = capsys.readouterr().out
        assert 'minimal' in out
        assert 'jarvis-judice-ninke' in out


class TestBuildOptions:
    def test_auto_dither(self):
        args = cli.create_argument_parser().parse_args(['x.png', '--charset', 'smooth', '--auto-dither'])
        options = cli.build_options(args)
        assert cli.build_dither_options(args, options).algorithm == DitherAlgorithm.FLOYD_STEINBERG_SERPENTINE

    def test_explicit_dither(self):
        args = cli.create_argument_parser().parse_args(['x.png', '--dither', 'sierra', '--dither-strength', '0.3'])
        dither = cli.build_dither_options(args, cli.build_options(args))
        assert dither.algorithm == DitherAlgorithm.SIERRA
        assert dither.strength == 0.3

    def test_preset(self):
        args = cli.create_argument_parser().parse_args(['x.png', '--preset', 'colored_blocks'])
        assert cli.build_options(args).is_colored
