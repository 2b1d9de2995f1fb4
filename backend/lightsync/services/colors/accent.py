"""
Accent Color Pipeline

Image bytes -> palette -> best candidate -> brightness-normalized color.
Never raises for bad image data: an extraction failure is treated as an
empty palette, which resolves to the white fallback.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger

from lightsync.config import config
from lightsync.errors import PaletteExtractionError
from lightsync.utils.ids import generate_request_id
from lightsync.utils.metrics import get_metrics

from . import RGB
from .conversion import relative_luminance, rgb_to_hex
from .extraction import extract_palette_with_ratios
from .normalization import normalize_brightness, is_clipped
from .selection import ScoreBreakdown, select_with_scores


@dataclass
class AccentResult:
    """Everything the pipeline decided for one image."""
    color: RGB
    candidate: RGB
    palette: List[RGB] = field(default_factory=list)
    ratios: List[float] = field(default_factory=list)
    scores: List[ScoreBreakdown] = field(default_factory=list)
    fallback: Optional[str] = None
    clipped: bool = False
    duration_ms: float = 0.0

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hex": self.hex,
            "rgb": list(self.color),
            "candidate": {"hex": rgb_to_hex(self.candidate), "rgb": list(self.candidate)},
            "palette": [
                {"hex": rgb_to_hex(c), "rgb": list(c), "ratio": r}
                for c, r in zip(self.palette, self.ratios)
            ],
            "scores": [s.to_dict() for s in self.scores],
            "fallback": self.fallback,
            "clipped": self.clipped,
            "duration_ms": self.duration_ms,
        }


def analyze_accent(image_bytes: bytes, color_count: Optional[int] = None,
                   target_luma: Optional[float] = None) -> AccentResult:
    """
    Run the full accent pipeline and keep the intermediate results.

    Args:
        image_bytes: Encoded album art
        color_count: Palette size (default from config, 8)
        target_luma: Target luminance (default from config, 0.55)

    Returns:
        AccentResult; ``fallback`` names the reason when no candidate was used

    Raises:
        ValueError: If target_luma is outside (0, 1]
    """
    if target_luma is None:
        target_luma = config.TARGET_LUMA
    if not config.validate_target_luma(target_luma):
        raise ValueError(f"target_luma must be in (0, 1], got {target_luma}")

    request_id = generate_request_id("accent")
    metrics = get_metrics()
    metrics.increment_accent_pick()
    start_time = time.time()

    try:
        palette, ratios = extract_palette_with_ratios(image_bytes, color_count)
    except PaletteExtractionError as e:
        logger.bind(request_id=request_id).warning(f"Palette extraction failed: {e}")
        metrics.increment_fallback("extraction_failed")
        palette, ratios, fallback = [], [], "extraction_failed"
    else:
        fallback = None if palette else "empty_palette"
        if fallback:
            metrics.increment_fallback(fallback)

    candidate, scores = select_with_scores(palette)
    if not palette:
        # Fallback white skips brightness normalization
        result = AccentResult(color=candidate, candidate=candidate, fallback=fallback)
    else:
        color = normalize_brightness(candidate, target_luma)
        if relative_luminance(candidate) == 0:
            fallback = "zero_luminance"
            metrics.increment_fallback(fallback)
        result = AccentResult(
            color=color,
            candidate=candidate,
            palette=palette,
            ratios=ratios,
            scores=scores,
            fallback=fallback,
            clipped=is_clipped(candidate, target_luma),
        )

    result.duration_ms = (time.time() - start_time) * 1000
    metrics.record_timing("accent_pick", result.duration_ms)

    logger.bind(request_id=request_id).info(
        f"Accent {result.hex} from candidate {rgb_to_hex(result.candidate)} "
        f"({len(result.palette)} colors, fallback={result.fallback}, "
        f"{result.duration_ms:.1f}ms)"
    )
    return result


def pick_accent_color(image_bytes: bytes, color_count: Optional[int] = None,
                      target_luma: Optional[float] = None) -> RGB:
    """
    Derive the light color for a piece of album art.

    Args:
        image_bytes: Encoded album art
        color_count: Palette size (default 8)
        target_luma: Target luminance (default 0.55)

    Returns:
        RGB triple ready for the light
    """
    return analyze_accent(image_bytes, color_count, target_luma).color
