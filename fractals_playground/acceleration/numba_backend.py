"""
Numba JIT compilation backend for escape-time computation.

This module provides a JIT-compiled Julia set kernel using Numba. Numba is an
optional dependency (the `numba` extra); without it the renderer keeps using
the NumPy iterator in core.math_functions.
"""

import numpy as np
import logging

from ..core.math_functions import IterationResult

logger = logging.getLogger(__name__)

# Check for Numba availability
try:
    import numba
    NUMBA_AVAILABLE = True
    logger.debug(f"Numba available: {numba.__version__}")
except ImportError:
    numba = None
    NUMBA_AVAILABLE = False
    logger.debug("Numba not available - JIT acceleration disabled")


def _julia_rows(z_real, z_imag, c_real, c_imag, max_iter):
    """
    Julia set kernel over a 2D grid of starting points.

    Args:
        z_real: Real components of initial z values
        z_imag: Imaginary components of initial z values
        c_real: Real component of Julia constant
        c_imag: Imaginary component of Julia constant
        max_iter: Maximum iterations

    Returns:
        int32 array of iteration counts
    """
    height, width = z_real.shape
    iterations = np.zeros((height, width), dtype=np.int32)

    for i in numba.prange(height):
        for j in range(width):
            zx = z_real[i, j]
            zy = z_imag[i, j]
            n = 0
            while zx * zx + zy * zy < 4.0 and n < max_iter:
                xtemp = zx * zx - zy * zy + c_real
                zy = 2.0 * zx * zy + c_imag
                zx = xtemp
                n += 1
            iterations[i, j] = n

    return iterations


if NUMBA_AVAILABLE:
    julia_kernel = numba.njit(parallel=True, cache=True)(_julia_rows)
else:
    julia_kernel = None


class NumbaAccelerator:
    """Numba-accelerated escape-time backend."""

    def __init__(self):
        """Initialize Numba accelerator."""
        self.available = NUMBA_AVAILABLE
        if not self.available:
            logger.warning("Numba not available - acceleration disabled")

    def julia_iteration(self, z_real: np.ndarray, z_imag: np.ndarray,
                        c: complex, max_iter: int) -> IterationResult:
        """
        Accelerated Julia set computation.

        Args:
            z_real: Real parts of the starting points
            z_imag: Imaginary parts of the starting points
            c: Julia constant
            max_iter: Maximum iterations

        Returns:
            IterationResult
        """
        if not self.available:
            raise RuntimeError("Numba not available")

        iterations = julia_kernel(
            np.ascontiguousarray(z_real, dtype=np.float64),
            np.ascontiguousarray(z_imag, dtype=np.float64),
            float(c.real), float(c.imag), int(max_iter)
        )
        return IterationResult(iterations, max_iter)


_numba_accelerator = None


def get_numba_accelerator():
    """Get the global Numba accelerator instance."""
    global _numba_accelerator
    if _numba_accelerator is None:
        _numba_accelerator = NumbaAccelerator()
    return _numba_accelerator


def is_numba_available():
    """Check if Numba acceleration is available."""
    return NUMBA_AVAILABLE
