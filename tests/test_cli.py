"""
Tests for the command-line interface.
"""

import json

from click.testing import CliRunner
from PIL import Image

from fractals_playground.cli.main import main


def run(*args):
    return CliRunner().invoke(main, list(args))


class TestListCommand:

    def test_lists_fractals_and_zoom_levels(self):
        result = run('list')

        assert result.exit_code == 0
        for name in ('julia', 'apollonian', 'koch'):
            assert name in result.output
        assert "4: 0.01" in result.output


class TestClickCommand:

    def test_converts_click(self):
        result = run('click', '450', '150')

        assert result.exit_code == 0
        assert result.output.strip() == "1.0,-1.0"

    def test_custom_canvas(self):
        result = run('click', '50', '25', '--width', '100', '--height', '100')

        assert result.exit_code == 0
        assert result.output.strip() == "0.0,-1.0"

    def test_invalid_canvas(self):
        result = run('click', '1', '1', '--width', '0')

        assert result.exit_code == 1
        assert "Error" in result.output


class TestRenderCommand:

    def test_render_koch(self, tmp_path):
        output = tmp_path / "koch.png"
        result = run('render', 'koch', str(output), '--width', '64', '--height', '64',
                     '--zoom-level', '2')

        assert result.exit_code == 0, result.output
        assert "Saved" in result.output
        with Image.open(output) as image:
            assert image.size == (64, 64)
            metadata = json.loads(image.text['FractalMetadata'])
        assert metadata['fractal_type'] == 'koch'
        assert metadata['radius'] == 0.5

    def test_render_julia_with_radius(self, tmp_path):
        output = tmp_path / "julia.png"
        result = run('render', 'julia', str(output), '-w', '40', '-h', '30',
                     '--focus-x', '0.1', '--radius', '0.25', '--no-numba')

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            metadata = json.loads(image.text['FractalMetadata'])
        assert metadata['focus'] == [0.1, 0.0]
        assert metadata['radius'] == 0.25

    def test_invalid_radius(self, tmp_path):
        result = run('render', 'apollonian', str(tmp_path / "a.png"), '--radius', '0')

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_unknown_fractal(self, tmp_path):
        result = run('render', 'mandelbrot', str(tmp_path / "m.png"))

        assert result.exit_code != 0

    def test_config_file(self, tmp_path):
        config = tmp_path / "render.json"
        config.write_text(json.dumps({'width': 48, 'height': 32, 'use_numba': False}))
        output = tmp_path / "apollonian.png"

        result = run('--config', str(config), 'render', 'apollonian', str(output))

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.size == (48, 32)


class TestThumbnailsCommand:

    def test_writes_one_file_per_fractal(self, tmp_path):
        result = run('thumbnails', str(tmp_path / "thumbs"))

        assert result.exit_code == 0, result.output
        for name in ('julia', 'apollonian', 'koch'):
            with Image.open(tmp_path / "thumbs" / f"{name}.png") as image:
                assert image.size == (120, 80)
