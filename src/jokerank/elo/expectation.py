"""
Expectation model.

Expected score uses the standard logistic ELO curve on form-adjusted
ratings:
  E_winner = 1 / (1 + 10^((R_loser' - R_winner') / 400))

where R' = R + form * 15, so a hot streak is worth up to 15 points of
perceived strength. The surprise factor measures how unexpected the actual
result was and is amplified for big upsets.
"""

from jokerank.elo.constants import EXPECTATION_DEFAULTS, SPREAD


def adjusted_rating(rating: float, form_value: float) -> float:
    """Rating plus the momentum bonus (form in [-1, 1])."""
    return rating + form_value * EXPECTATION_DEFAULTS["form_points"]


def expected_score(rating_a: float, rating_b: float) -> float:
    """
    Probability that A beats B.

    Args:
        rating_a: Rating of A (already form-adjusted if wanted)
        rating_b: Rating of B

    Returns:
        Expected score between 0 and 1
    """
    try:
        return 1.0 / (1.0 + 10.0 ** ((rating_b - rating_a) / SPREAD))
    except OverflowError:
        return 0.0


def surprise_factor(rating_gap: float, expected_winner: float) -> float:
    """
    How unexpected the result was for the winner.

    Args:
        rating_gap: winner_rating - loser_rating, using unadjusted ratings
        expected_winner: Winner's expected score

    Returns:
        1 - expected_winner, scaled by 1 + |gap|/500 for upsets
        beyond 200 points
    """
    surprise = 1.0 - expected_winner
    if rating_gap < EXPECTATION_DEFAULTS["big_upset_gap"]:
        surprise *= 1.0 + abs(rating_gap) / EXPECTATION_DEFAULTS["big_upset_scale"]
    return surprise
