"""
Tests for the parallel and JIT escape-time backends.
"""

import numpy as np
import pytest

from fractals_playground.acceleration.multiprocessing import (
    BandSpec, MultiprocessingAccelerator, assemble_bands, create_band_grid,
    get_optimal_process_count, process_julia_band,
)
from fractals_playground.acceleration.numba_backend import (
    NumbaAccelerator, is_numba_available,
)
from fractals_playground.core.math_functions import FractalIterator, Viewport

C = complex(-0.8, 0.156)


def serial_iterations(viewport, max_iter=100):
    real, imag = viewport.create_coordinate_arrays()
    return FractalIterator(max_iter).julia_iteration(real, imag, C).iterations


def viewport_params(viewport):
    return {
        'focus_x': viewport.focus_x,
        'focus_y': viewport.focus_y,
        'radius': viewport.radius,
        'width': viewport.width,
        'height': viewport.height,
    }


class TestBandGrid:
    """Row band partitioning."""

    def test_covers_every_row_once(self):
        bands = create_band_grid(600, 64)

        assert len(bands) == 10
        assert bands[0] == BandSpec(0, 0, 64)
        assert bands[-1] == BandSpec(9, 576, 600)
        assert sum(band.rows for band in bands) == 600
        for previous, current in zip(bands, bands[1:]):
            assert previous.row_end == current.row_start

    def test_band_taller_than_image(self):
        assert create_band_grid(10, 64) == [BandSpec(0, 0, 10)]

    def test_invalid_band_height(self):
        with pytest.raises(ValueError):
            create_band_grid(100, 0)


class TestBandProcessing:
    """Band iteration and assembly without a process pool."""

    def test_assembled_bands_match_serial(self):
        viewport = Viewport(0.1, -0.2, 0.5, 30, 23)
        work = [(viewport_params(viewport), band, C.real, C.imag, 100)
                for band in create_band_grid(viewport.height, 5)]
        results = [process_julia_band(args) for args in work]

        assembled = assemble_bands(results, viewport.width, viewport.height, 100)

        np.testing.assert_array_equal(assembled.iterations, serial_iterations(viewport))
        assert assembled.max_iter == 100

    def test_band_order_does_not_matter(self):
        viewport = Viewport(0.0, 0.0, 1.0, 12, 12)
        work = [(viewport_params(viewport), band, C.real, C.imag, 50)
                for band in create_band_grid(viewport.height, 4)]
        results = [process_julia_band(args) for args in reversed(work)]

        assembled = assemble_bands(results, 12, 12, 50)
        np.testing.assert_array_equal(assembled.iterations, serial_iterations(viewport, 50))


class TestMultiprocessingAccelerator:
    """Process pool backend."""

    def test_matches_serial(self):
        viewport = Viewport(0.0, 0.0, 0.5, 64, 48)
        accelerator = MultiprocessingAccelerator(num_processes=2, band_height=16)

        result = accelerator.julia_iteration(viewport, C, 100)

        np.testing.assert_array_equal(result.iterations, serial_iterations(viewport))

    def test_default_process_count(self):
        assert get_optimal_process_count() >= 1
        assert MultiprocessingAccelerator().num_processes >= 1


class TestNumbaAccelerator:
    """JIT backend, only when numba is installed."""

    @pytest.mark.skipif(not is_numba_available(), reason="numba not installed")
    def test_matches_numpy(self):
        viewport = Viewport(0.0, 0.0, 0.1, 40, 30)
        real, imag = viewport.create_coordinate_arrays()

        result = NumbaAccelerator().julia_iteration(real, imag, C, 100)

        np.testing.assert_array_equal(result.iterations, serial_iterations(viewport))

    @pytest.mark.skipif(is_numba_available(), reason="numba installed")
    def test_unavailable_raises(self):
        with pytest.raises(RuntimeError):
            NumbaAccelerator().julia_iteration(np.zeros((2, 2)), np.zeros((2, 2)), C, 10)
