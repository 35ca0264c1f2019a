"""
Multiprocessing backend for parallel escape-time computation.

The Julia raster has no dependency between pixels, so it is split into
horizontal bands of rows that are iterated in separate processes and stitched
back together. Every band maps its pixels with the full-raster viewport, so
the assembled result is identical to a serial computation.
"""

import numpy as np
from typing import List, Optional
import multiprocessing as mp
import logging
import time
from dataclasses import dataclass
from concurrent.futures import ProcessPoolExecutor

from ..core.math_functions import IterationResult, Viewport, FractalIterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BandSpec:
    """A band of full-width rows rendered by one worker."""
    band_id: int
    row_start: int
    row_end: int

    @property
    def rows(self) -> int:
        return self.row_end - self.row_start


@dataclass
class BandResult:
    """Result from processing a single band."""
    band_id: int
    row_start: int
    iterations: np.ndarray
    processing_time: float


def create_band_grid(height: int, band_height: int = 64) -> List[BandSpec]:
    """
    Split a raster of the given height into bands of rows.

    Args:
        height: Total image height
        band_height: Target rows per band

    Returns:
        List of BandSpec objects covering every row exactly once
    """
    if band_height <= 0:
        raise ValueError("band_height must be positive")

    bands = []
    for band_id, row_start in enumerate(range(0, height, band_height)):
        bands.append(BandSpec(band_id, row_start, min(row_start + band_height, height)))

    logger.debug(f"Created {len(bands)} bands of up to {band_height} rows")
    return bands


def process_julia_band(args) -> BandResult:
    """
    Iterate one band of the Julia raster in a worker process.

    Args:
        args: Tuple of (viewport_params, band, c_real, c_imag, max_iter)
    """
    viewport_params, band, c_real, c_imag, max_iter = args
    start_time = time.time()

    viewport = Viewport(**viewport_params)
    z_real, z_imag = viewport.create_coordinate_arrays(band.row_start, band.row_end)
    result = FractalIterator(max_iter).julia_iteration(z_real, z_imag, complex(c_real, c_imag))

    return BandResult(band.band_id, band.row_start, result.iterations,
                      time.time() - start_time)


def assemble_bands(band_results: List[BandResult], width: int, height: int,
                   max_iter: int) -> IterationResult:
    """Stitch band results back into a full-raster IterationResult."""
    iterations = np.zeros((height, width), dtype=np.int32)
    for band in band_results:
        rows = band.iterations.shape[0]
        iterations[band.row_start:band.row_start + rows, :] = band.iterations
    return IterationResult(iterations, max_iter)


class MultiprocessingAccelerator:
    """Process-pool backend for the Julia raster."""

    def __init__(self, num_processes: Optional[int] = None, band_height: int = 64):
        """
        Initialize multiprocessing accelerator.

        Args:
            num_processes: Worker count (defaults to get_optimal_process_count())
            band_height: Rows per band
        """
        self.num_processes = num_processes or get_optimal_process_count()
        self.band_height = band_height

    def julia_iteration(self, viewport: Viewport, c: complex, max_iter: int) -> IterationResult:
        """
        Compute Julia set iterations for the whole viewport in parallel.

        Args:
            viewport: Full-raster pixel mapping
            c: Julia constant
            max_iter: Maximum iterations

        Returns:
            IterationResult for the full raster
        """
        start_time = time.time()
        bands = create_band_grid(viewport.height, self.band_height)
        viewport_params = {
            'focus_x': viewport.focus_x,
            'focus_y': viewport.focus_y,
            'radius': viewport.radius,
            'width': viewport.width,
            'height': viewport.height,
        }
        work = [(viewport_params, band, float(c.real), float(c.imag), max_iter) for band in bands]

        with ProcessPoolExecutor(max_workers=self.num_processes) as executor:
            band_results = list(executor.map(process_julia_band, work))

        result = assemble_bands(band_results, viewport.width, viewport.height, max_iter)
        logger.debug(f"Parallel Julia render: {len(bands)} bands on "
                     f"{self.num_processes} processes in {time.time() - start_time:.2f}s")
        return result


def get_optimal_process_count() -> int:
    """Get optimal number of processes for escape-time computation."""
    # Leave one core for system
    return max(1, mp.cpu_count() - 1)
