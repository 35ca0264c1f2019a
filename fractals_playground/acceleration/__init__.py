"""Optional escape-time accelerators (Numba, process pool)."""
