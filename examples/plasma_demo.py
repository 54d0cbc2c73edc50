#!/usr/bin/env python3
"""
Simple demo script showing plasma fractal generation.
"""

import numpy as np
from plasma_fractal.config import settings
from plasma_fractal.log_config import configure_logging
from plasma_fractal.core import (
    PlasmaConfig, PlasmaFractalGenerator, summarize_grid, normalize_channels
)


def main():
    """Demonstrate plasma generation."""
    configure_logging(settings.log_level, "console")

    print("Plasma Fractal Demo")
    print("=" * 40)

    seed = settings.seed or "demo123"
    for size in (2, 16, 64):
        config = PlasmaConfig.from_settings(settings, size=size)
        print(f"\nSize {size} ({config.width}x{config.height}), seed '{seed}':")
        print("-" * 30)

        generator = PlasmaFractalGenerator(config, seed=seed)
        generator.generate()

        stats = summarize_grid(generator.grid)
        print(f"  Coverage: {stats.coverage * 100:.1f}%")
        for name, channel in stats.channels.items():
            print(
                f"  {name}: {channel.minimum}-{channel.maximum} "
                f"(mean {channel.mean:.1f}, {channel.out_of_byte_range} outside 0-255)"
            )

        # Coarse preview of the red channel
        red = normalize_channels(generator.grid)[:, :, 1]
        step = max(1, config.width // 16)
        shades = " .:-=+*#%@"
        print("  Red channel preview:")
        for y in range(0, config.height, step):
            row = red[::step, y]
            print("    " + "".join(shades[int(v) * (len(shades) - 1) // 255] for v in row))

        print(f"  Mean brightness: {np.mean(red):.1f}")


if __name__ == "__main__":
    main()
