"""
Command-line interface for the fractals playground.

This module renders fractal views and thumbnails to image files and exposes
the click-to-focus conversion used by interactive front ends.
"""

import click
import sys
from pathlib import Path
import logging
import time

from .. import __version__
from ..api import FractalRenderer, ZOOM_LEVELS
from ..core.fractal_types import FractalKind, FractalRegistry
from ..core.math_functions import click_to_focus
from ..io.config import load_config_from_args
from ..rendering.surface import ImageSurface
from ..rendering.image_output import ImageExporter, RenderMetadata
from ..acceleration.numba_backend import is_numba_available

logger = logging.getLogger(__name__)

FRACTAL_CHOICES = [kind.value for kind in FractalKind]


def _fail(ctx, error: Exception):
    click.echo(f"Error: {error}", err=True)
    if ctx.obj.get('verbose'):
        import traceback
        traceback.print_exc()
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='Configuration file path (JSON)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, verbose, quiet):
    """
    Fractals Playground - Julia set, Apollonian gasket and Koch star renderer.

    Render fractal views around a focus point at one of the fixed zoom
    levels, or generate preview thumbnails.
    """
    # Setup logging
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"Fractals Playground v{__version__}")
        click.echo(f"Python: {sys.version}")
        click.echo(f"Numba acceleration: {'Available' if is_numba_available() else 'Not available'}")

        if ctx.invoked_subcommand is None:
            sys.exit(0)

    # Store global options in context
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose


@main.command()
@click.argument('fractal_type', type=click.Choice(FRACTAL_CHOICES))
@click.argument('output', type=click.Path())
@click.option('--focus-x', type=float, default=0.0, show_default=True, help='Focus point X in [-2, 2]')
@click.option('--focus-y', type=float, default=0.0, show_default=True, help='Focus point Y in [-2, 2]')
@click.option('--radius', type=float, help='Zoom radius (overrides --zoom-level)')
@click.option('--zoom-level', type=click.IntRange(0, len(ZOOM_LEVELS) - 1), default=0,
              show_default=True, help=f'Index into the zoom levels {list(ZOOM_LEVELS)}')
@click.option('--width', '-w', type=int, help='Canvas width')
@click.option('--height', '-h', type=int, help='Canvas height')
@click.option('--no-numba', is_flag=True, help='Disable Numba acceleration')
@click.option('--no-multiprocessing', is_flag=True, help='Disable parallel Julia rendering')
@click.option('--processes', type=int, help='Number of processes for parallel rendering')
@click.pass_context
def render(ctx, fractal_type, output, focus_x, focus_y, radius, zoom_level,
           width, height, no_numba, no_multiprocessing, processes):
    """
    Render a single fractal view.

    FRACTAL_TYPE: Type of fractal (julia, apollonian, koch)
    OUTPUT: Output image file path (.png, .jpg)
    """
    try:
        render_config = load_config_from_args(ctx.obj.get('config_file'))

        # Apply command-line overrides
        if width is not None:
            render_config.width = width
        if height is not None:
            render_config.height = height
        if no_numba:
            render_config.use_numba = False
        if no_multiprocessing:
            render_config.use_multiprocessing = False
        if processes is not None:
            render_config.num_processes = processes
            render_config.use_multiprocessing = True

        if radius is None:
            radius = ZOOM_LEVELS[zoom_level]

        renderer = FractalRenderer(render_config)
        surface = ImageSurface(render_config.width, render_config.height)

        click.echo(f"Rendering {fractal_type} fractal...")
        start_time = time.time()

        renderer.render(fractal_type, surface, focus_x, focus_y, radius)

        render_time = time.time() - start_time
        metadata = RenderMetadata(
            fractal_type=fractal_type,
            focus=(focus_x, focus_y),
            radius=radius,
            resolution=(render_config.width, render_config.height),
            render_time_seconds=render_time,
            fractal_parameters=renderer.get_fractal(fractal_type).parameters.to_dict(),
        )
        ImageExporter().save_surface(surface, Path(output), metadata)

        click.echo(f"Render complete: {render_time:.2f}s")
        click.echo(f"Saved: {output}")

    except Exception as e:
        _fail(ctx, e)


@main.command()
@click.argument('output_dir', type=click.Path())
@click.option('--width', '-w', type=int, help='Thumbnail width')
@click.option('--height', '-h', type=int, help='Thumbnail height')
@click.pass_context
def thumbnails(ctx, output_dir, width, height):
    """
    Generate preview thumbnails for every fractal.

    OUTPUT_DIR: Directory receiving <fractal>.png files
    """
    try:
        render_config = load_config_from_args(ctx.obj.get('config_file'))
        renderer = FractalRenderer(render_config)

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        exporter = ImageExporter()
        for kind, surface in renderer.generate_thumbnails(width, height).items():
            metadata = RenderMetadata(
                fractal_type=kind.value,
                focus=(0.0, 0.0),
                radius=1.0,
                resolution=(surface.width, surface.height),
                thumbnail=True,
            )
            filepath = exporter.save_surface(surface, output_path / f"{kind.value}.png", metadata)
            click.echo(f"Saved: {filepath}")

    except Exception as e:
        _fail(ctx, e)


@main.command(name='click')
@click.argument('px', type=float)
@click.argument('py', type=float)
@click.option('--width', '-w', type=int, default=600, show_default=True, help='Canvas width')
@click.option('--height', '-h', type=int, default=600, show_default=True, help='Canvas height')
@click.pass_context
def click_focus(ctx, px, py, width, height):
    """
    Convert a canvas click at (PX, PY) into a focus point.
    """
    try:
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive")
        focus = click_to_focus(px, py, width, height)
        click.echo(f"{focus.x},{focus.y}")
    except Exception as e:
        _fail(ctx, e)


@main.command(name='list')
def list_fractals():
    """List available fractal types and zoom levels."""
    click.echo("Available fractal types:")
    for name, description in FractalRegistry.list_fractals().items():
        click.echo(f"  {name}: {description}")

    click.echo("\nZoom levels (radius):")
    for level, radius in enumerate(ZOOM_LEVELS):
        click.echo(f"  {level}: {radius}")


if __name__ == '__main__':
    main()
