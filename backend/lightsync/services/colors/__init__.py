"""
LightSync Colors Module

Provides palette extraction, accent color selection, and brightness
normalization for album artwork. The selector and normalizer are pure
functions over RGB triples; only extraction touches image data.
"""

from typing import Tuple

__version__ = "1.0.0"

# 8-bit display-space color, each channel in [0, 255]
RGB = Tuple[int, int, int]

# Hue in [0, 1), saturation and lightness in [0, 1]
HSL = Tuple[float, float, float]
