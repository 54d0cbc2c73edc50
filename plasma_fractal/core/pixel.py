"""
Pixel value type and channel averaging helpers.

A pixel carries its grid position plus four colour intensity channels
(alpha, red, green, blue). Channels are plain signed ints and are never
clamped here; consumers normalize later if they need bytes.
"""

from dataclasses import dataclass
from typing import Tuple

CHANNELS = ("a", "r", "g", "b")


def trunc_div(total: int, divisor: int) -> int:
    """Integer division rounding toward zero, so -3 / 2 gives -1."""
    quotient = abs(total) // divisor
    return quotient if total >= 0 else -quotient


@dataclass(frozen=True)
class Pixel:
    """A positioned ARGB sample."""

    x: int = 0
    y: int = 0
    a: int = 0
    r: int = 0
    g: int = 0
    b: int = 0

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def channels(self) -> Tuple[int, int, int, int]:
        """Channel values in a, r, g, b order."""
        return (self.a, self.r, self.g, self.b)


def average_colour(first: Pixel, second: Pixel) -> Pixel:
    """
    Average the channels of two pixels.

    The coordinate is taken from ``first``; only the colour is blended.

    Args:
        first: Pixel supplying the position and half of each channel
        second: Pixel supplying the other half of each channel

    Returns:
        New pixel at ``first``'s position
    """
    return Pixel(
        first.x,
        first.y,
        trunc_div(first.a + second.a, 2),
        trunc_div(first.r + second.r, 2),
        trunc_div(first.g + second.g, 2),
        trunc_div(first.b + second.b, 2),
    )
