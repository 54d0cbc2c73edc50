"""
Plasma fractal generation using recursive midpoint displacement.
"""

__version__ = "0.1.0"
