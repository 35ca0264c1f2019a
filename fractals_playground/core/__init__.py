"""Fractal definitions, coordinate mapping and geometry generators."""
