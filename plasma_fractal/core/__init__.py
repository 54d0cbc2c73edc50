"""
Core plasma fractal generation functionality.
"""

from .pixel import Pixel, average_colour
from .grid import PixelGrid
from .alea_prng import AleaPRNG
from .plasma_generator import PlasmaFractalGenerator, PlasmaConfig, generate_plasma
from .field_analysis import FieldStats, summarize_grid, normalize_channels

__all__ = ['Pixel', 'average_colour', 'PixelGrid', 'AleaPRNG',
           'PlasmaFractalGenerator', 'PlasmaConfig', 'generate_plasma',
           'FieldStats', 'summarize_grid', 'normalize_channels']
