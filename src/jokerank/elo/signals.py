"""
Signal extraction: the per-joke inputs to the step computation.

Three signals are derived from a joke's history:

- Experience multiplier: new jokes move faster until they have played
  `min_games` comparisons. Linearly fades from 1.5 at zero games to 1.0.
- Volatility: uncertainty about the true rating. Shrinks with games played
  and grows when recent results are erratic.
- Form: recency-weighted win rate mapped to [-1, 1]. Positive is a hot
  streak, negative a cold one.
"""

from __future__ import annotations

import math
from statistics import pvariance
from typing import TYPE_CHECKING, Sequence

from jokerank.elo.constants import SIGNAL_DEFAULTS

if TYPE_CHECKING:
    from jokerank.elo.history import ParticipantStats


def experience_multiplier(games: int, min_games: int) -> float:
    """
    K multiplier for jokes with few comparisons.

    Examples:
        experience_multiplier(0, 20)   # → 1.5
        experience_multiplier(10, 20)  # → 1.25
        experience_multiplier(25, 20)  # → 1.0
    """
    if games >= min_games:
        return 1.0
    boost = SIGNAL_DEFAULTS["experience_max_boost"]
    return 1.0 + (min_games - games) / min_games * boost


def volatility(stats: "ParticipantStats") -> float:
    """
    Uncertainty estimate for a joke's rating.

    A stored volatility is returned unchanged. Otherwise the base value
    1 / sqrt(1 + games/10) is inflated by the population variance of the
    recent form (max 0.25 for a 50/50 split) once more than three recent
    results are known.

    Examples:
        volatility(ParticipantStats(games=0))   # → 1.0
        volatility(ParticipantStats(games=30))  # → 0.5
    """
    if stats.volatility is not None:
        return stats.volatility

    base = 1.0 / math.sqrt(1.0 + stats.games / SIGNAL_DEFAULTS["volatility_games_scale"])

    if len(stats.recent_form) > SIGNAL_DEFAULTS["volatility_form_min_len"]:
        spread = pvariance(stats.recent_form)
        base *= 1.0 + spread * SIGNAL_DEFAULTS["volatility_form_weight"]

    return base


def form(recent_form: Sequence[int] | None) -> float:
    """
    Momentum in [-1, 1] from recent outcomes (most recent last).

    The i-th result counting back from the latest gets weight 0.85^i.
    """
    if not recent_form:
        return 0.0

    decay = SIGNAL_DEFAULTS["form_decay"]
    weighted = 0.0
    total_weight = 0.0
    for i, outcome in enumerate(reversed(recent_form)):
        weight = decay ** i
        weighted += outcome * weight
        total_weight += weight

    win_rate = weighted / total_weight
    return (win_rate - 0.5) * 2.0
