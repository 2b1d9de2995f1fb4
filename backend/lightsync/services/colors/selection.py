"""
Accent Color Selection Module

Scores palette candidates for perceptual pleasantness and picks the best one.
Saturated, mid-lightness colors win; near-gray, near-black, and near-white
candidates are pushed down by additive penalties.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Sequence, Tuple

from loguru import logger

from . import RGB
from .conversion import as_rgb, rgb_to_hsl, rgb_to_hex

# Returned when the palette is empty: "no strong signal"
FALLBACK_COLOR: RGB = (255, 255, 255)

SATURATION_WEIGHT = 1.0
MID_LIGHTNESS_WEIGHT = 0.7

GRAY_SATURATION_LT = 0.12
GRAY_PENALTY = 0.6
BLACK_LIGHTNESS_LT = 0.12
BLACK_PENALTY = 0.6
WHITE_LIGHTNESS_GT = 0.88
WHITE_PENALTY = 0.4


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-candidate scoring terms, kept for logging and debug payloads."""
    rgb: RGB
    saturation: float
    lightness: float
    mid_lightness_bonus: float
    penalty: float
    score: float

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["rgb"] = list(self.rgb)
        data["hex"] = self.hex
        return data


def mid_lightness_bonus(lightness: float) -> float:
    """1.0 at lightness 0.5, falling linearly to 0 at either extreme."""
    return 1 - 2 * abs(lightness - 0.5)


def neutral_penalty(saturation: float, lightness: float) -> float:
    """
    Sum of penalties for near-gray, near-black, and near-white colors.

    Thresholds are strict: a saturation of exactly 0.12 is not gray.
    """
    penalty = 0.0
    if saturation < GRAY_SATURATION_LT:
        penalty += GRAY_PENALTY
    if lightness < BLACK_LIGHTNESS_LT:
        penalty += BLACK_PENALTY
    if lightness > WHITE_LIGHTNESS_GT:
        penalty += WHITE_PENALTY
    return penalty


def score_candidate(color: Sequence) -> ScoreBreakdown:
    """
    Score a single candidate color.

    score = saturation * 1.0 + mid_lightness_bonus * 0.7 - penalties

    Args:
        color: RGB triple (any 3-element sequence of ints)

    Returns:
        ScoreBreakdown with every term of the score
    """
    rgb = as_rgb(color)
    _, saturation, lightness = rgb_to_hsl(*rgb)
    bonus = mid_lightness_bonus(lightness)
    penalty = neutral_penalty(saturation, lightness)
    score = saturation * SATURATION_WEIGHT + bonus * MID_LIGHTNESS_WEIGHT - penalty

    return ScoreBreakdown(
        rgb=rgb,
        saturation=saturation,
        lightness=lightness,
        mid_lightness_bonus=bonus,
        penalty=penalty,
        score=score,
    )


def rank_candidates(candidates: Sequence[Sequence]) -> List[ScoreBreakdown]:
    """Score every candidate, preserving input order."""
    return [score_candidate(c) for c in candidates]


def best_of(breakdowns: Sequence[ScoreBreakdown]) -> ScoreBreakdown:
    """Highest-scoring breakdown; strictly greater keeps the first of equal scores."""
    best = breakdowns[0]
    for breakdown in breakdowns[1:]:
        if breakdown.score > best.score:
            best = breakdown
    return best


def select_with_scores(candidates: Sequence[Sequence]) -> Tuple[RGB, List[ScoreBreakdown]]:
    """
    Choose the best candidate and keep every candidate's score breakdown.

    Args:
        candidates: Palette colors in extractor order

    Returns:
        Tuple of (chosen color, breakdowns in input order); white and an
        empty list for an empty palette
    """
    if len(candidates) == 0:
        logger.info("Empty palette, using fallback white")
        return FALLBACK_COLOR, []

    breakdowns = rank_candidates(candidates)
    best = best_of(breakdowns)

    for i, breakdown in enumerate(breakdowns):
        logger.debug(f"Candidate {i}: {breakdown.hex} s={breakdown.saturation:.3f} "
                     f"l={breakdown.lightness:.3f} penalty={breakdown.penalty:.1f} "
                     f"score={breakdown.score:.3f}")
    logger.debug(f"Selected {best.hex} with score {best.score:.3f}")

    return best.rgb, breakdowns


def select_best_color(candidates: Sequence[Sequence]) -> RGB:
    """
    Choose the most pleasant accent color from a palette.

    Args:
        candidates: Palette colors in extractor order

    Returns:
        The highest-scoring candidate unchanged, or white for an empty palette
    """
    color, _ = select_with_scores(candidates)
    return color
