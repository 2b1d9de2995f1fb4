"""
Unit tests for accent color selection.

Tests the selection logic:
- score terms and neutral penalties
- strict threshold boundaries
- tie-breaking and determinism
- empty palette fallback
"""

from unittest.mock import patch

import numpy as np
import pytest

from lightsync.services.colors.selection import (
    FALLBACK_COLOR, mid_lightness_bonus, neutral_penalty, score_candidate,
    rank_candidates, best_of, select_best_color, select_with_scores
)

ALBUM_CANDIDATES = [
    (200, 30, 30),     # saturated mid-light red
    (10, 10, 10),      # near-black
    (240, 240, 235),   # near-white
    (120, 120, 120),   # gray
]


class TestScoreTerms:
    """Test individual scoring terms"""

    def test_mid_lightness_bonus_peaks_at_half(self):
        assert mid_lightness_bonus(0.5) == 1.0
        assert mid_lightness_bonus(0.0) == 0.0
        assert mid_lightness_bonus(1.0) == 0.0
        assert mid_lightness_bonus(0.25) == pytest.approx(0.5)

    def test_no_penalty_for_vivid_mid_color(self):
        assert neutral_penalty(0.8, 0.5) == 0.0

    def test_penalties_are_additive(self):
        # Dark gray: gray + black
        assert neutral_penalty(0.0, 0.05) == pytest.approx(1.2)
        # Off-white: gray + white
        assert neutral_penalty(0.05, 0.95) == pytest.approx(1.0)

    def test_thresholds_are_strict(self):
        assert neutral_penalty(0.12, 0.5) == 0.0
        assert neutral_penalty(0.5, 0.12) == 0.0
        assert neutral_penalty(0.5, 0.88) == 0.0
        assert neutral_penalty(0.1199, 0.5) == pytest.approx(0.6)
        assert neutral_penalty(0.5, 0.1199) == pytest.approx(0.6)
        assert neutral_penalty(0.5, 0.8801) == pytest.approx(0.4)

    def test_boundary_candidate_gets_full_bonus_and_no_gray_penalty(self):
        """Saturation exactly 0.12 and lightness exactly 0.5"""
        with patch("lightsync.services.colors.selection.rgb_to_hsl",
                   return_value=(0.0, 0.12, 0.5)):
            breakdown = score_candidate((135, 120, 120))

        assert breakdown.penalty == 0.0
        assert breakdown.mid_lightness_bonus == 1.0
        assert breakdown.score == pytest.approx(0.12 + 0.7)

    def test_score_formula(self):
        breakdown = score_candidate((200, 30, 30))
        expected = (breakdown.saturation * 1.0
                    + breakdown.mid_lightness_bonus * 0.7
                    - breakdown.penalty)
        assert breakdown.score == pytest.approx(expected)
        assert breakdown.penalty == 0.0

    def test_scores_can_be_negative(self):
        assert score_candidate((10, 10, 10)).score < 0

    def test_breakdown_to_dict(self):
        data = score_candidate((200, 30, 30)).to_dict()
        assert data["hex"] == "#C81E1E"
        assert data["rgb"] == [200, 30, 30]
        for key in ("saturation", "lightness", "mid_lightness_bonus", "penalty", "score"):
            assert key in data


class TestSelectBestColor:
    """Test complete selection"""

    def test_empty_palette_returns_white(self):
        assert select_best_color([]) == (255, 255, 255)
        assert select_best_color([]) == FALLBACK_COLOR

    def test_album_scenario_picks_red(self):
        assert select_best_color(ALBUM_CANDIDATES) == (200, 30, 30)

    def test_penalties_reject_neutral_candidates(self):
        scores = {b.rgb: b.score for b in rank_candidates(ALBUM_CANDIDATES)}
        red = scores[(200, 30, 30)]
        for neutral in ALBUM_CANDIDATES[1:]:
            assert scores[neutral] < red

    @pytest.mark.parametrize("order", [
        [0, 1, 2, 3], [3, 2, 1, 0], [1, 3, 0, 2], [2, 0, 3, 1],
    ])
    def test_order_does_not_change_winner(self, order):
        candidates = [ALBUM_CANDIDATES[i] for i in order]
        assert select_best_color(candidates) == (200, 30, 30)

    def test_result_is_member_of_input(self):
        candidates = [(31, 78, 121), (211, 181, 143), (45, 117, 96), (10, 42, 67)]
        assert select_best_color(candidates) in candidates

    def test_single_candidate_returned_even_if_penalized(self):
        assert select_best_color([(0, 0, 0)]) == (0, 0, 0)

    def test_ties_prefer_first_encountered(self):
        # Mirror-image hues share saturation and lightness, so their scores tie
        red = (200, 30, 30)
        blue = (30, 30, 200)
        assert score_candidate(red).score == score_candidate(blue).score
        assert select_best_color([red, blue]) == red
        assert select_best_color([blue, red]) == blue

    def test_deterministic_across_calls(self):
        first = select_best_color(ALBUM_CANDIDATES)
        for _ in range(10):
            assert select_best_color(ALBUM_CANDIDATES) == first

    def test_accepts_lists_and_numpy_rows(self):
        as_lists = [list(c) for c in ALBUM_CANDIDATES]
        assert select_best_color(as_lists) == (200, 30, 30)

        as_array = np.array(ALBUM_CANDIDATES, dtype=np.uint8)
        assert select_best_color(as_array) == (200, 30, 30)

    def test_input_not_mutated(self):
        candidates = list(ALBUM_CANDIDATES)
        select_best_color(candidates)
        assert candidates == ALBUM_CANDIDATES

    def test_best_of_keeps_first_on_tie(self):
        breakdowns = rank_candidates([(200, 30, 30), (30, 30, 200)])
        assert best_of(breakdowns).rgb == (200, 30, 30)

    def test_select_with_scores_returns_all_breakdowns(self):
        color, breakdowns = select_with_scores(ALBUM_CANDIDATES)
        assert color == select_best_color(ALBUM_CANDIDATES)
        assert [b.rgb for b in breakdowns] == ALBUM_CANDIDATES

    def test_select_with_scores_empty_palette(self):
        assert select_with_scores([]) == (FALLBACK_COLOR, [])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
