"""
Plasma fractal generation module.

Implements recursive midpoint displacement: the four corners of a square
are seeded with random colours, then every quadrant derives its centre and
edge midpoints from its corners plus a random perturbation and recurses
until it collapses to adjacent pixel columns, at which point its corners
are written into the grid.
"""

import math
import numbers
import time
from dataclasses import dataclass
from typing import Optional, Union

import structlog

from ..exceptions import QuadrantAlignmentError
from ..utils.random import create_prng, random_colour
from .alea_prng import AleaPRNG
from .grid import PixelGrid
from .pixel import Pixel, trunc_div

logger = structlog.get_logger()

# Floor for the perturbation bound once subdivision is under way
MIN_MAX_DIFF = 0.0125


@dataclass(frozen=True)
class PlasmaConfig:
    """Configuration for plasma fractal generation."""

    roughness: float = 0.28  # Roughness factor, passed down unchanged
    intensity: float = 255.0  # Maximum magnitude of a random perturbation
    size: int = 256  # Grid is (size + 1) x (size + 1)

    def __post_init__(self):
        if not math.isfinite(self.intensity) or self.intensity <= 0:
            raise ValueError(f"intensity must be positive and finite, got {self.intensity}")
        if (
            not isinstance(self.size, numbers.Integral)
            or isinstance(self.size, bool)
            or self.size < 1
        ):
            raise ValueError(f"size must be a positive integer, got {self.size}")
        # Halving must keep every quadrant square down to single-pixel spans
        if self.size & (self.size - 1):
            raise ValueError(f"size must be a power of two, got {self.size}")

    @property
    def width(self) -> int:
        return self.size + 1

    @property
    def height(self) -> int:
        return self.size + 1

    @classmethod
    def from_settings(cls, settings, **overrides) -> "PlasmaConfig":
        """
        Build a config from application settings.

        Args:
            settings: Settings instance providing the defaults
            **overrides: roughness, intensity or size to use instead

        Returns:
            Validated PlasmaConfig
        """
        unknown = set(overrides) - {"roughness", "intensity", "size"}
        if unknown:
            raise ValueError(f"Unknown config overrides: {sorted(unknown)}")

        config = cls(
            roughness=overrides.get("roughness", settings.default_roughness),
            intensity=overrides.get("intensity", settings.default_intensity),
            size=overrides.get("size", settings.default_size),
        )
        if config.size > settings.max_size:
            raise ValueError(f"size {config.size} exceeds max_size {settings.max_size}")
        return config


def next_max_diff(max_diff: float, intensity: float) -> float:
    """
    Perturbation bound for the next subdivision level.

    Above the floor the bound becomes ``2 ** -intensity``; at or below it
    the bound is pinned to the floor. The result therefore settles after
    the first level and does not depend on depth or roughness.
    """
    if max_diff > MIN_MAX_DIFF:
        return 2 ** -intensity
    return MIN_MAX_DIFF


class PlasmaFractalGenerator:
    """
    Generates a plasma fractal into an owned PixelGrid.

    The random source is an explicit Alea PRNG handle: pass one in, or
    pass a seed and one is created. Identical seeds and configs produce
    identical grids.
    """

    def __init__(
        self,
        config: PlasmaConfig,
        seed: Optional[Union[str, int]] = None,
        prng: Optional[AleaPRNG] = None,
    ):
        """
        Initialize the generator.

        Args:
            config: Generation parameters
            seed: Seed used to create the PRNG when ``prng`` is not given
            prng: Ready PRNG handle; takes precedence over ``seed``
        """
        self.config = config
        self.width = config.width
        self.height = config.height

        self.prng = prng if prng is not None else create_prng(seed)
        self.seed = self.prng.seed

        self.initialise_data()

    def initialise_data(self) -> None:
        """Allocate a fresh grid of placeholder pixels."""
        self.grid: PixelGrid = PixelGrid(self.width, self.height)

    def generate(self) -> bool:
        """
        Generate the fractal.

        Seeds the four corners with random colours in ``[0, intensity)``
        and subdivides the whole grid. Any previous result is discarded.

        Returns:
            True once every quadrant has been written
        """
        logger.info(
            "Starting plasma generation",
            size=self.config.size,
            roughness=self.config.roughness,
            intensity=self.config.intensity,
            seed=self.seed,
        )
        start = time.time()

        if self.grid.written.any():
            self.initialise_data()

        max_diff = self.config.intensity
        right = self.width - 1
        bottom = self.height - 1

        tl = self._random_pixel(0, 0, max_diff)
        tr = self._random_pixel(right, 0, max_diff)
        bl = self._random_pixel(0, bottom, max_diff)
        br = self._random_pixel(right, bottom, max_diff)

        result = self.subdivide(tl, tr, br, bl, max_diff, self.config.roughness)

        logger.info(
            "Plasma generation completed",
            success=result,
            complete=self.grid.is_complete(),
            random_draws=self.prng.call_count,
            elapsed=round(time.time() - start, 3),
        )
        return result

    def subdivide(
        self,
        tl: Pixel,
        tr: Pixel,
        br: Pixel,
        bl: Pixel,
        max_diff: float,
        rough: float,
    ) -> bool:
        """
        Recursively subdivide a quadrant and write its pixels.

        The centre and edge midpoints computed here are handed to both
        sub-quadrants that share them, which keeps their boundaries
        identical.

        Args:
            tl: Top-left corner
            tr: Top-right corner
            br: Bottom-right corner
            bl: Bottom-left corner
            max_diff: Perturbation bound for midpoints at this level
            rough: Roughness factor

        Returns:
            True if every sub-quadrant succeeded
        """
        if tl.y != tr.y or bl.y != br.y or tl.x != bl.x or tr.x != br.x:
            logger.error(
                "Quadrant corners not axis-aligned",
                tl=tl.position,
                tr=tr.position,
                br=br.position,
                bl=bl.position,
            )
            raise QuadrantAlignmentError(
                f"Quadrant corners are not axis-aligned: "
                f"tl={tl.position} tr={tr.position} br={br.position} bl={bl.position}"
            )

        m = self.calc_mid4(tl, tr, br, bl, max_diff)
        lm = self.calc_mid(tl, bl, max_diff)
        rm = self.calc_mid(tr, br, max_diff)
        tm = self.calc_mid(tl, tr, max_diff)
        bm = self.calc_mid(bl, br, max_diff)

        max_diff = next_max_diff(max_diff, self.config.intensity)

        if tr.x - tl.x >= 2:
            r1 = self.subdivide(tl, tm, m, lm, max_diff, rough)
            r2 = self.subdivide(tm, tr, rm, m, max_diff, rough)
            r3 = self.subdivide(lm, m, bm, bl, max_diff, rough)
            r4 = self.subdivide(m, rm, br, bm, max_diff, rough)
            return r1 and r2 and r3 and r4

        self._write_corners(tl, tr, br, bl)
        return True

    def calc_mid(self, first: Pixel, second: Pixel, max_diff: float) -> Pixel:
        """Midpoint of two pixels with a random perturbation per channel."""
        return Pixel(
            trunc_div(first.x + second.x, 2),
            trunc_div(first.y + second.y, 2),
            trunc_div(first.a + second.a, 2) + random_colour(self.prng, max_diff),
            trunc_div(first.r + second.r, 2) + random_colour(self.prng, max_diff),
            trunc_div(first.g + second.g, 2) + random_colour(self.prng, max_diff),
            trunc_div(first.b + second.b, 2) + random_colour(self.prng, max_diff),
        )

    def calc_mid4(
        self, a: Pixel, b: Pixel, c: Pixel, d: Pixel, max_diff: float
    ) -> Pixel:
        """Geometric midpoint of four pixels with a random perturbation per channel."""
        corners = (a, b, c, d)
        return Pixel(
            trunc_div(sum(p.x for p in corners), 4),
            trunc_div(sum(p.y for p in corners), 4),
            trunc_div(sum(p.a for p in corners), 4) + random_colour(self.prng, max_diff),
            trunc_div(sum(p.r for p in corners), 4) + random_colour(self.prng, max_diff),
            trunc_div(sum(p.g for p in corners), 4) + random_colour(self.prng, max_diff),
            trunc_div(sum(p.b for p in corners), 4) + random_colour(self.prng, max_diff),
        )

    def _random_pixel(self, x: int, y: int, max_diff: float) -> Pixel:
        return Pixel(
            x,
            y,
            random_colour(self.prng, max_diff),
            random_colour(self.prng, max_diff),
            random_colour(self.prng, max_diff),
            random_colour(self.prng, max_diff),
        )

    def _write_corners(self, tl: Pixel, tr: Pixel, br: Pixel, bl: Pixel) -> None:
        for pixel in (tl, tr, br, bl):
            self.grid.write(pixel)


def generate_plasma(
    config: PlasmaConfig, seed: Optional[Union[str, int]] = None
) -> PixelGrid:
    """
    Generate a plasma fractal and return its grid.

    Args:
        config: Generation parameters
        seed: Optional seed for reproducible output

    Returns:
        Fully written PixelGrid
    """
    generator = PlasmaFractalGenerator(config, seed=seed)
    generator.generate()
    return generator.grid
