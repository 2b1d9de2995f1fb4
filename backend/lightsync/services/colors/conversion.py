"""
Color Space Conversion

RGB <-> HSL mapping, sRGB relative luminance, and small channel helpers
used by the selector and the brightness normalizer.
"""

import math
from typing import Sequence

from . import HSL, RGB

# Rec. 709 / sRGB luminance weights
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)


def clamp8(x: float) -> int:
    """Round half up to an integer and clamp to the 8-bit range."""
    return max(0, min(255, math.floor(x + 0.5)))


def as_rgb(color: Sequence) -> RGB:
    """Coerce any 3-element sequence (list, tuple, numpy row) into an RGB tuple of ints."""
    if len(color) != 3:
        raise ValueError(f"Expected 3 channels, got {len(color)}")
    r, g, b = (int(c) for c in color)
    return (r, g, b)


def rgb_to_hex(rgb: Sequence) -> str:
    """Convert an RGB triple to a hex color string."""
    r, g, b = as_rgb(rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert a hex color string to an RGB tuple."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Invalid hex color: #{hex_color}")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def rgb_to_hsl(r: int, g: int, b: int) -> HSL:
    """
    Convert 8-bit RGB channels to normalized HSL.

    Lightness is the midpoint of the max and min normalized channels. Hue is
    measured from whichever channel is largest, one sixth of the circle per
    channel wedge, and wrapped into [0, 1). True grays (max == min) map to
    hue 0 and saturation 0.

    Args:
        r: Red channel [0, 255]
        g: Green channel [0, 255]
        b: Blue channel [0, 255]

    Returns:
        Tuple of (hue, saturation, lightness)
    """
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    c_max = max(r, g, b)
    c_min = min(r, g, b)
    lightness = (c_max + c_min) / 2
    delta = c_max - c_min

    if delta == 0:
        return 0.0, 0.0, lightness

    if lightness > 0.5:
        saturation = delta / (2 - c_max - c_min)
    else:
        saturation = delta / (c_max + c_min)

    if c_max == r:
        hue = (g - b) / delta + (6 if g < b else 0)
    elif c_max == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4
    hue /= 6

    # keep hue in [0, 1)
    if hue >= 1.0:
        hue -= 1.0

    return hue, saturation, lightness


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """Convert normalized HSL back to an 8-bit RGB triple."""
    if s == 0:
        v = clamp8(l * 255)
        return (v, v, v)

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    return (
        clamp8(_hue_to_channel(p, q, h + 1 / 3) * 255),
        clamp8(_hue_to_channel(p, q, h) * 255),
        clamp8(_hue_to_channel(p, q, h - 1 / 3) * 255),
    )


def srgb_to_linear(v: int) -> float:
    """Linearize one gamma-encoded 8-bit channel."""
    v = v / 255.0
    if v <= 0.04045:
        return v / 12.92
    return ((v + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: Sequence) -> float:
    """
    Perceptual luminance of an sRGB color.

    Each channel is linearized and combined with the Rec. 709 weights.

    Returns:
        Luminance in [0, 1]
    """
    r, g, b = as_rgb(rgb)
    wr, wg, wb = LUMA_WEIGHTS
    return wr * srgb_to_linear(r) + wg * srgb_to_linear(g) + wb * srgb_to_linear(b)
