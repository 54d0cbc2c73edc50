"""
Pixel grid storage for plasma fractal generation.

The grid keeps channel values in a single NumPy array indexed ``[x, y]``
so consumers can read the whole field at once, plus a mask recording
which cells the subdivision has already written.
"""

import numpy as np
import structlog
from typing import List, Tuple

from ..exceptions import GridBoundsError, SeamConflictError
from .pixel import CHANNELS, Pixel

logger = structlog.get_logger()


class PixelGrid:
    """
    Fixed-size 2D grid of ARGB pixels.

    Cells start as placeholders (zero channels, not opaque) and are
    replaced by the terminal steps of the subdivision.
    """

    def __init__(self, width: int, height: int):
        """
        Allocate the grid.

        Args:
            width: Number of columns
            height: Number of rows
        """
        self.initialize(width, height)

    def initialize(self, width: int, height: int) -> None:
        """Allocate storage and reset every cell to the placeholder."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self._width = width
        self._height = height

        # Every cell is independent, so one vectorized fill covers them all
        self._data = np.zeros((width, height, len(CHANNELS)), dtype=np.int64)
        self._written = np.zeros((width, height), dtype=bool)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def written(self) -> np.ndarray:
        """Copy of the mask of cells written so far."""
        return self._written.copy()

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            logger.error("Grid access out of bounds", x=x, y=y, shape=self.shape)
            raise GridBoundsError(x, y, self.shape)

    def write(self, pixel: Pixel) -> None:
        """
        Store a pixel at its own coordinate.

        Cells on an edge shared by neighbouring quadrants are written by
        both of them. That is allowed only when the two pixels agree
        exactly; a mismatch means the quadrants did not share their
        boundary samples.

        Args:
            pixel: Pixel to store

        Raises:
            GridBoundsError: If the coordinate lies outside the grid
            SeamConflictError: If the cell already holds a different pixel
        """
        x, y = pixel.x, pixel.y
        self._check_bounds(x, y)

        values = np.array(pixel.channels, dtype=np.int64)
        if self._written[x, y]:
            if not np.array_equal(self._data[x, y], values):
                logger.error(
                    "Conflicting write on shared edge",
                    x=x,
                    y=y,
                    existing=self._data[x, y].tolist(),
                    incoming=list(pixel.channels),
                )
                raise SeamConflictError(
                    f"Cell ({x}, {y}) already holds {self._data[x, y].tolist()}, "
                    f"cannot overwrite with {list(pixel.channels)}",
                    coordinate=(x, y),
                )
            return

        self._data[x, y] = values
        self._written[x, y] = True

    def get(self, x: int, y: int) -> Pixel:
        """Return the pixel at ``(x, y)``."""
        self._check_bounds(x, y)
        a, r, g, b = (int(v) for v in self._data[x, y])
        return Pixel(x, y, a, r, g, b)

    def __getitem__(self, key: Tuple[int, int]) -> Pixel:
        x, y = key
        return self.get(x, y)

    def is_written(self, x: int, y: int) -> bool:
        self._check_bounds(x, y)
        return bool(self._written[x, y])

    def is_complete(self) -> bool:
        """True once every cell has been written."""
        return bool(np.all(self._written))

    def missing(self) -> List[Tuple[int, int]]:
        """Coordinates that still hold the placeholder."""
        xs, ys = np.nonzero(~self._written)
        return [(int(x), int(y)) for x, y in zip(xs, ys)]

    def channel(self, name: str) -> np.ndarray:
        """
        Copy of a single channel as a 2D ``[x, y]`` array.

        Args:
            name: One of ``"a"``, ``"r"``, ``"g"``, ``"b"``
        """
        if name not in CHANNELS:
            raise ValueError(f"Unknown channel '{name}', expected one of {CHANNELS}")
        return self._data[:, :, CHANNELS.index(name)].copy()

    def to_array(self) -> np.ndarray:
        """Copy of all channels, shape ``(width, height, 4)`` in a, r, g, b order."""
        return self._data.copy()

    def __repr__(self) -> str:
        return (
            f"PixelGrid(width={self._width}, height={self._height}, "
            f"written={int(self._written.sum())})"
        )
