"""
Adaptive step computation.

Each side of a comparison gets its own K-factor:

    K = base_K * experience * (1 + volatility*0.4) * (1 + surprise*0.3)

with an extra x1.1 for the underdog (by unadjusted rating), clamped to
[8, 80]. Raw deltas K * (actual - expected) are then scaled by the rating
gap: upsets are amplified logarithmically, clear favourite wins are damped
(never below 0.3x). A 0.98 deflation factor keeps the rating pool from
creeping upward, and finally each delta is clamped so a single comparison
moves a rating by at least 2 and at most 100 points.

Order: gap scaling -> deflation -> clamp.
"""

import math
from dataclasses import dataclass

from jokerank.elo.constants import STEP_DEFAULTS


@dataclass
class StepResult:
    """
    Final signed deltas for one comparison.

    Attributes:
        winner_delta: Points added to the winner (always in [2, 100])
        loser_delta: Points added to the loser (always in [-100, -2])
        gap_multiplier: Upset/favourite scaling that was applied
    """
    winner_delta: float
    loser_delta: float
    gap_multiplier: float


def k_factor(
    base_k: float,
    experience: float,
    volatility: float,
    surprise: float,
    is_underdog: bool,
) -> float:
    """
    Effective K-factor for one side of a comparison.

    is_underdog marks whichever side had the lower unadjusted rating.
    Between equal ratings neither side is the underdog, so both
    K-factors stay symmetric.

    Examples:
        # Established joke, volatility 0.5, even match
        k_factor(32, 1.0, 0.5, 0.5, False)  # → 44.16
    """
    k = base_k * experience
    k *= 1.0 + volatility * STEP_DEFAULTS["volatility_weight"]
    k *= 1.0 + surprise * STEP_DEFAULTS["surprise_weight"]
    if is_underdog:
        k *= STEP_DEFAULTS["underdog_boost"]
    return _clamp(k, STEP_DEFAULTS["k_min"], STEP_DEFAULTS["k_max"])


def gap_multiplier(rating_gap: float) -> float:
    """
    Non-linear scaling from the unadjusted rating gap (winner - loser).

    - Underdog won (gap < 0): 1 + log10(1 + |gap|/100) * 0.4
    - Clear favourite won (gap > 100): max(0.3, 1 - log10(1 + gap/150) * 0.3)
    - Otherwise: 1.0
    """
    if rating_gap < 0:
        return 1.0 + math.log10(1.0 + abs(rating_gap) / STEP_DEFAULTS["upset_scale"]) * STEP_DEFAULTS["upset_weight"]
    if rating_gap > STEP_DEFAULTS["favorite_gap"]:
        damping = 1.0 - math.log10(1.0 + rating_gap / STEP_DEFAULTS["favorite_scale"]) * STEP_DEFAULTS["favorite_weight"]
        return max(STEP_DEFAULTS["favorite_floor"], damping)
    return 1.0


def compute_deltas(
    winner_k: float,
    loser_k: float,
    expected_winner: float,
    expected_loser: float,
    rating_gap: float,
) -> StepResult:
    """
    Turn K-factors and expectations into final, clamped rating deltas.

    Args:
        winner_k: Winner's effective K-factor
        loser_k: Loser's effective K-factor
        expected_winner: Winner's expected score
        expected_loser: Loser's expected score
        rating_gap: winner_rating - loser_rating (unadjusted)

    Returns:
        StepResult with signed deltas
    """
    win_delta = winner_k * (1.0 - expected_winner)
    lose_delta = loser_k * (0.0 - expected_loser)

    multiplier = gap_multiplier(rating_gap)
    win_delta *= multiplier
    lose_delta *= multiplier

    # Deflation before clamping
    win_delta *= STEP_DEFAULTS["deflation"]
    lose_delta *= STEP_DEFAULTS["deflation"]

    low, high = STEP_DEFAULTS["delta_min"], STEP_DEFAULTS["delta_max"]
    win_delta = _clamp(win_delta, low, high)
    lose_delta = -_clamp(abs(lose_delta), low, high)

    return StepResult(
        winner_delta=win_delta,
        loser_delta=lose_delta,
        gap_multiplier=multiplier,
    )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
