"""
Tests for plasma fractal generation module.
"""

import dataclasses
import pytest
import numpy as np
from collections import defaultdict

from plasma_fractal.core.pixel import Pixel, trunc_div
from plasma_fractal.core.alea_prng import AleaPRNG
from plasma_fractal.core.grid import PixelGrid
from plasma_fractal.core.plasma_generator import (
    PlasmaConfig, PlasmaFractalGenerator, generate_plasma, next_max_diff, MIN_MAX_DIFF
)
from plasma_fractal.exceptions import QuadrantAlignmentError


class TestPlasmaConfig:
    """Test configuration validation."""

    def test_defaults(self):
        config = PlasmaConfig()
        assert config.roughness == 0.28
        assert config.intensity == 255.0
        assert config.width == config.size + 1
        assert config.height == config.size + 1

    @pytest.mark.parametrize("size", [0, -4, 3, 6, 100, 4.0, True])
    def test_invalid_size(self, size):
        with pytest.raises(ValueError):
            PlasmaConfig(size=size)

    @pytest.mark.parametrize("intensity", [0, -1.0, float("nan"), float("inf")])
    def test_invalid_intensity(self, intensity):
        with pytest.raises(ValueError):
            PlasmaConfig(intensity=intensity, size=4)

    def test_config_is_immutable(self):
        config = PlasmaConfig(size=4)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.size = 8

    def test_invalid_size_fails_at_construction(self):
        """A float size never reaches grid allocation."""
        with pytest.raises(ValueError):
            PlasmaFractalGenerator(PlasmaConfig(size=4.0), seed="x")

    def test_generator_allocates_grid(self):
        generator = PlasmaFractalGenerator(PlasmaConfig(size=4), seed="x")
        assert isinstance(generator.grid, PixelGrid)
        assert generator.grid.shape == (5, 5)


class TestMaxDiffDecay:
    """Test the perturbation bound update between levels."""

    def test_above_floor_becomes_power_of_intensity(self):
        assert next_max_diff(8.0, 8.0) == 2 ** -8.0
        assert next_max_diff(255.0, 255.0) == 2 ** -255.0

    def test_at_or_below_floor_is_pinned(self):
        assert next_max_diff(MIN_MAX_DIFF, 8.0) == MIN_MAX_DIFF
        assert next_max_diff(0.001, 8.0) == MIN_MAX_DIFF

    def test_settles_after_first_level(self):
        """Every level after the first uses the same bound."""
        bounds = [8.0]
        for _ in range(6):
            bounds.append(next_max_diff(bounds[-1], 8.0))
        assert bounds[1] == 2 ** -8.0
        assert set(bounds[2:]) == {MIN_MAX_DIFF}

    def test_small_intensity_keeps_power_value(self):
        # 2 ** -1 stays above the floor, so it is recomputed every level
        assert next_max_diff(next_max_diff(1.0, 1.0), 1.0) == 0.5


class TestGeneration:
    """Test full generation runs."""

    @pytest.mark.parametrize("size", [1, 2, 4, 8, 16, 32, 64])
    def test_full_coverage(self, size):
        """Every coordinate in [0, size] x [0, size] is written."""
        generator = PlasmaFractalGenerator(PlasmaConfig(size=size), seed="coverage")
        assert generator.generate() is True

        assert generator.grid.shape == (size + 1, size + 1)
        assert generator.grid.is_complete()
        assert generator.grid.missing() == []

    @pytest.mark.parametrize("intensity", [8.0, 255.0])
    def test_corner_channels_in_range(self, intensity):
        config = PlasmaConfig(intensity=intensity, size=8)
        generator = PlasmaFractalGenerator(config, seed="corners")
        generator.generate()

        last = config.size
        for x, y in [(0, 0), (last, 0), (0, last), (last, last)]:
            pixel = generator.grid[x, y]
            for value in pixel.channels:
                assert 0 <= value < intensity

    def test_shared_edges_identical(self):
        """Cells written by more than one quadrant always get the same pixel."""
        generator = PlasmaFractalGenerator(PlasmaConfig(size=16), seed="seams")
        writes = defaultdict(list)
        original_write = generator.grid.write

        def recording_write(pixel):
            writes[pixel.position].append(pixel)
            original_write(pixel)

        generator.grid.write = recording_write
        generator.generate()

        shared = [pixels for pixels in writes.values() if len(pixels) > 1]
        assert shared  # interior edges are written by several quadrants
        for pixels in shared:
            assert all(p == pixels[0] for p in pixels)

    def test_seeded_generation_is_deterministic(self):
        config = PlasmaConfig(roughness=0.28, intensity=64.0, size=16)
        first = generate_plasma(config, seed="repeat")
        second = generate_plasma(config, seed="repeat")

        np.testing.assert_array_equal(first.to_array(), second.to_array())

    def test_different_seeds_differ(self):
        config = PlasmaConfig(size=16)
        first = generate_plasma(config, seed="seed1")
        second = generate_plasma(config, seed="seed2")

        assert not np.array_equal(first.to_array(), second.to_array())

    def test_explicit_prng_handle(self):
        """A passed-in PRNG is used and advanced by generation."""
        config = PlasmaConfig(size=4)
        prng = AleaPRNG("handle")
        generator = PlasmaFractalGenerator(config, prng=prng)
        generator.generate()

        assert generator.prng is prng
        assert generator.seed == "handle"
        assert prng.call_count > 0

        expected = generate_plasma(config, seed="handle")
        np.testing.assert_array_equal(generator.grid.to_array(), expected.to_array())

    def test_unseeded_generator_records_seed(self):
        generator = PlasmaFractalGenerator(PlasmaConfig(size=4))
        generator.generate()

        replay = generate_plasma(PlasmaConfig(size=4), seed=generator.seed)
        np.testing.assert_array_equal(generator.grid.to_array(), replay.to_array())

    def test_regenerate_resets_grid(self):
        generator = PlasmaFractalGenerator(PlasmaConfig(size=8), seed="twice")
        generator.generate()
        first = generator.grid.to_array()

        assert generator.generate() is True
        assert generator.grid.is_complete()
        # The PRNG has moved on, so the second field is new
        assert not np.array_equal(first, generator.grid.to_array())

    def test_size_one_skips_recursion(self):
        """A 2x2 grid is written directly by the first subdivision call."""
        generator = PlasmaFractalGenerator(PlasmaConfig(size=1), seed="tiny")
        calls = []
        original_subdivide = generator.subdivide

        def counting_subdivide(*args):
            calls.append(args)
            return original_subdivide(*args)

        generator.subdivide = counting_subdivide
        assert generator.generate() is True

        assert len(calls) == 1
        assert generator.grid.is_complete()
        tl, tr, br, bl = calls[0][:4]
        assert generator.grid[0, 0] == tl
        assert generator.grid[1, 0] == tr
        assert generator.grid[1, 1] == br
        assert generator.grid[0, 1] == bl

    def test_centre_is_perturbed_corner_average(self):
        """roughness 0.28, intensity 8, size 2: the centre blends the corners."""
        config = PlasmaConfig(roughness=0.28, intensity=8.0, size=2)
        generator = PlasmaFractalGenerator(config, seed="centre")
        generator.generate()
        grid = generator.grid

        assert grid.shape == (3, 3)
        corners = [grid[0, 0], grid[2, 0], grid[0, 2], grid[2, 2]]
        centre = grid[1, 1]

        for index in range(4):
            average = trunc_div(sum(p.channels[index] for p in corners), 4)
            perturbation = centre.channels[index] - average
            assert 0 <= perturbation < config.intensity

    def test_deeper_levels_have_no_perturbation(self):
        """Below the first level the bound is under 1, so draws truncate to 0."""
        config = PlasmaConfig(intensity=8.0, size=4)
        generator = PlasmaFractalGenerator(config, seed="deep")
        generator.generate()
        grid = generator.grid

        # (1, 0) is the top edge midpoint of the top-left level-two quadrant
        expected = trunc_div(grid[0, 0].r + grid[2, 0].r, 2)
        assert grid[1, 0].r == expected

    def test_roughness_does_not_change_output(self):
        first = generate_plasma(PlasmaConfig(roughness=0.1, size=8), seed="rough")
        second = generate_plasma(PlasmaConfig(roughness=0.9, size=8), seed="rough")

        np.testing.assert_array_equal(first.to_array(), second.to_array())


class TestMidpoints:
    """Test midpoint calculations."""

    @pytest.fixture
    def generator(self):
        return PlasmaFractalGenerator(PlasmaConfig(size=4), seed="mid")

    def test_calc_mid_without_perturbation(self, generator):
        a = Pixel(0, 0, 10, 20, 30, 41)
        b = Pixel(4, 0, 20, 40, 60, 80)

        mid = generator.calc_mid(a, b, 1.0)

        assert mid == Pixel(2, 0, 15, 30, 45, 60)

    def test_calc_mid_perturbation_bounded(self, generator):
        a = Pixel(0, 0, 0, 0, 0, 0)
        b = Pixel(0, 4, 0, 0, 0, 0)

        for _ in range(50):
            mid = generator.calc_mid(a, b, 5.0)
            assert mid.position == (0, 2)
            assert all(0 <= v < 5 for v in mid.channels)

    def test_calc_mid4_truncates(self, generator):
        corners = [
            Pixel(0, 0, 1, 0, 0, -5),
            Pixel(4, 0, 1, 0, 0, 0),
            Pixel(4, 4, 1, 0, 0, 0),
            Pixel(0, 4, 0, 3, 0, 0),
        ]

        mid = generator.calc_mid4(*corners, 0.5)

        assert mid == Pixel(2, 2, 0, 0, 0, -1)

    def test_draw_count_per_subdivision(self, generator):
        """Five derived pixels with four channels each."""
        tl, tr = Pixel(0, 0), Pixel(1, 0)
        br, bl = Pixel(1, 1), Pixel(0, 1)
        before = generator.prng.call_count

        generator.subdivide(tl, tr, br, bl, 1.0, 0.28)

        assert generator.prng.call_count - before == 20


class TestQuadrantChecks:
    """Test the corner alignment check."""

    @pytest.fixture
    def generator(self):
        return PlasmaFractalGenerator(PlasmaConfig(size=4), seed="align")

    def test_misaligned_rows(self, generator):
        with pytest.raises(QuadrantAlignmentError):
            generator.subdivide(
                Pixel(0, 0), Pixel(4, 1), Pixel(4, 4), Pixel(0, 4), 8.0, 0.28
            )

    def test_misaligned_columns(self, generator):
        with pytest.raises(QuadrantAlignmentError):
            generator.subdivide(
                Pixel(0, 0), Pixel(4, 0), Pixel(4, 4), Pixel(1, 4), 8.0, 0.28
            )

    def test_alignment_error_is_value_error(self, generator):
        with pytest.raises(ValueError):
            generator.subdivide(
                Pixel(0, 0), Pixel(4, 0), Pixel(3, 4), Pixel(0, 4), 8.0, 0.28
            )
