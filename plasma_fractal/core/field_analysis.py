"""
Statistics and normalization over generated plasma fields.

Channels are not clamped during generation, so consumers that need byte
values rescale them here.
"""

from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from .grid import PixelGrid
from .pixel import CHANNELS


@dataclass
class ChannelStats:
    """Summary of one channel."""

    minimum: int
    maximum: int
    mean: float
    out_of_byte_range: int  # Values outside 0-255


@dataclass
class FieldStats:
    """Summary of a whole grid."""

    width: int
    height: int
    written_cells: int
    channels: Dict[str, ChannelStats] = field(default_factory=dict)

    @property
    def total_cells(self) -> int:
        return self.width * self.height

    @property
    def coverage(self) -> float:
        return self.written_cells / self.total_cells


def summarize_grid(grid: PixelGrid) -> FieldStats:
    """Compute per-channel statistics over every cell of the grid."""
    data = grid.to_array()
    stats = FieldStats(
        width=grid.width,
        height=grid.height,
        written_cells=int(grid.written.sum()),
    )

    for index, name in enumerate(CHANNELS):
        values = data[:, :, index]
        stats.channels[name] = ChannelStats(
            minimum=int(values.min()),
            maximum=int(values.max()),
            mean=float(values.mean()),
            out_of_byte_range=int(np.sum((values < 0) | (values > 255))),
        )

    return stats


def normalize_channels(grid: PixelGrid) -> np.ndarray:
    """
    Rescale each channel linearly onto 0-255.

    A flat channel (min == max) maps to zeros.

    Returns:
        uint8 array of shape ``(width, height, 4)`` in a, r, g, b order
    """
    data = grid.to_array().astype(np.float64)
    out = np.zeros(data.shape, dtype=np.uint8)

    for index in range(len(CHANNELS)):
        values = data[:, :, index]
        low, high = values.min(), values.max()
        if high > low:
            scaled = (values - low) / (high - low) * 255.0
            out[:, :, index] = np.round(scaled).astype(np.uint8)

    return out
