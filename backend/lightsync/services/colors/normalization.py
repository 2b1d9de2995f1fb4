"""
Brightness Normalization

Rescales an accent color toward a target perceived luminance so that dark
and bright album covers drive the light at a consistent brightness.

The scale factor comes from linear-light luminance but is applied to the
gamma-encoded channels directly. That mix of domains is inexact, and it is
the look the lights were tuned against, so it stays.
"""

from typing import Sequence

from loguru import logger

from . import RGB
from .conversion import as_rgb, clamp8, relative_luminance, rgb_to_hex

DEFAULT_TARGET_LUMA = 0.55

# Returned for pure black so the light is never driven fully off
ZERO_LUMINANCE_FALLBACK: RGB = (60, 60, 60)


def normalize_brightness(color: Sequence, target_luma: float = DEFAULT_TARGET_LUMA) -> RGB:
    """
    Scale a color so its relative luminance approaches target_luma.

    Args:
        color: RGB triple to rescale
        target_luma: Desired luminance in (0, 1]

    Returns:
        New RGB triple; channels rounded and clamped to [0, 255]

    Raises:
        ValueError: If target_luma is outside (0, 1]
    """
    if not 0.0 < target_luma <= 1.0:
        raise ValueError(f"target_luma must be in (0, 1], got {target_luma}")

    r, g, b = as_rgb(color)
    luminance = relative_luminance((r, g, b))
    if luminance == 0:
        logger.debug("Zero luminance input, using neutral fallback")
        return ZERO_LUMINANCE_FALLBACK

    scale = target_luma / luminance
    normalized = (clamp8(r * scale), clamp8(g * scale), clamp8(b * scale))

    logger.debug(f"Normalized {rgb_to_hex((r, g, b))} (Y={luminance:.3f}) "
                 f"x{scale:.3f} -> {rgb_to_hex(normalized)}")
    return normalized


def is_clipped(color: Sequence, target_luma: float = DEFAULT_TARGET_LUMA) -> bool:
    """Whether scaling toward target_luma pushes any channel past 255."""
    r, g, b = as_rgb(color)
    luminance = relative_luminance((r, g, b))
    if luminance == 0:
        return False
    scale = target_luma / luminance
    return max(r, g, b) * scale > 255.5
