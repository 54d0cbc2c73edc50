"""Plasma fractal exceptions.

Everything here marks a programming error: a correct subdivision never
raises any of them, so nothing inside the package catches them.
"""

from typing import Optional, Tuple


class PlasmaFractalError(Exception):
    """Base plasma fractal error."""
    pass


class GridBoundsError(PlasmaFractalError, IndexError):
    """Raised when a pixel is read or written outside the grid."""

    def __init__(self, x: int, y: int, shape: Tuple[int, int]):
        super().__init__(f"Coordinate ({x}, {y}) is outside grid of shape {shape}")
        self.x = x
        self.y = y
        self.shape = shape


class QuadrantAlignmentError(PlasmaFractalError, ValueError):
    """Raised when the four corners of a quadrant are not axis-aligned."""
    pass


class SeamConflictError(PlasmaFractalError):
    """Raised when a written cell is overwritten with a different pixel."""

    def __init__(self, message: str, coordinate: Optional[Tuple[int, int]] = None):
        super().__init__(message)
        self.coordinate = coordinate
