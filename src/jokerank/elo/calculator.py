"""
Adaptive ELO calculator for pairwise joke comparisons.

Runs the four stages in a fixed order for one comparison:
  1. Signals: experience, volatility and form for each joke
  2. Expectation: form-adjusted win probability and surprise factor
  3. Step: per-joke K-factors and clamped deltas
  4. Update: rounded new ratings plus a confidence score

The calculator is a pure function. It reads the stats it is given and
returns an UpdateResult; storing new ratings and advancing history
(see jokerank.elo.history) is up to the caller. Callers must serialise
read-compute-write per joke themselves.

Updates are not invertible: replaying a comparison with the roles
reversed does not restore the original ratings.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, NamedTuple, Union

from jokerank.elo.constants import CONFIDENCE_DEFAULTS, ENGINE_DEFAULTS, NEUTRAL_GAMES
from jokerank.elo.expectation import adjusted_rating, expected_score, surprise_factor
from jokerank.elo.history import ParticipantStats
from jokerank.elo.params import EloConfig, InvalidInputError, validate_rating
from jokerank.elo.signals import experience_multiplier, form, volatility
from jokerank.elo.step import compute_deltas, k_factor

logger = logging.getLogger(__name__)

StatsLike = Union[ParticipantStats, Mapping[str, Any], None]


@dataclass
class UpdateResult:
    """
    Result of one pairwise comparison.

    Contains the new ratings plus everything needed to understand
    what happened in the calculation.
    """
    # Ratings before and after
    winner_before: float
    loser_before: float
    new_winner_rating: int
    new_loser_rating: int

    # Trust in this update, in [0, 1]
    confidence: float

    # Momentum of each side, in [-1, 1]
    winner_form: float
    loser_form: float

    # Diagnostics
    winner_k: float
    loser_k: float
    expected_winner: float
    expected_loser: float
    surprise: float
    winner_delta: float
    loser_delta: float

    confidence_threshold: float = ENGINE_DEFAULTS["confidence_threshold"]

    @property
    def winner_change(self) -> float:
        """Rating change for the winner after rounding."""
        return self.new_winner_rating - self.winner_before

    @property
    def loser_change(self) -> float:
        """Rating change for the loser after rounding."""
        return self.new_loser_rating - self.loser_before

    @property
    def was_upset(self) -> bool:
        """Whether the lower-rated joke won."""
        return self.winner_before < self.loser_before

    @property
    def is_confident(self) -> bool:
        """Whether confidence meets the configured threshold."""
        return self.confidence >= self.confidence_threshold

    def __repr__(self) -> str:
        return (
            f"<UpdateResult(winner: {self.winner_before:.0f} -> {self.new_winner_rating}, "
            f"loser: {self.loser_before:.0f} -> {self.new_loser_rating}, "
            f"confidence={self.confidence:.2f})>"
        )


class SimpleUpdate(NamedTuple):
    """New ratings only, for callers that do not track stats."""
    new_winner_rating: int
    new_loser_rating: int


def confidence(
    winner_games: int,
    loser_games: int,
    winner_vol: float,
    loser_vol: float,
    min_games: int,
) -> float:
    """
    Blend sample size and volatility into a trust score for an update.

    gameConfidence = min(winner_games/min_games, loser_games/min_games, 1)
    volConfidence  = 1 - (winner_vol + loser_vol) / 2
    result         = gameConfidence*0.6 + volConfidence*0.4

    The raw blend can leave [0, 1] for extreme volatility inputs; it is
    returned unclamped here and clamped in UpdateResult.
    """
    if not _is_positive_count(min_games):
        raise InvalidInputError(f"min_games must be a positive integer, got {min_games!r}")
    game_confidence = min(winner_games / min_games, loser_games / min_games, 1.0)
    vol_confidence = 1.0 - (winner_vol + loser_vol) / 2.0
    return (
        game_confidence * CONFIDENCE_DEFAULTS["games_weight"]
        + vol_confidence * CONFIDENCE_DEFAULTS["volatility_weight"]
    )


def update(
    winner_rating: float,
    loser_rating: float,
    winner_stats: StatsLike = None,
    loser_stats: StatsLike = None,
    config: Union[EloConfig, Mapping[str, Any], None] = None,
) -> UpdateResult:
    """
    Calculate new ratings after the winner beat the loser.

    Args:
        winner_rating: Winner's rating before the comparison
        loser_rating: Loser's rating before the comparison
        winner_stats: Winner's history (ParticipantStats, a mapping, or None)
        loser_stats: Loser's history (ParticipantStats, a mapping, or None)
        config: EloConfig, a partial mapping of its fields, or None for defaults

    Returns:
        UpdateResult with new ratings, confidence and diagnostics

    Raises:
        InvalidInputError: If a rating, stats record or config value is
            out of domain

    Ratings must lie within +/-RATING_LIMIT (1e15). The underdog x1.1 K
    boost goes to whichever side is rated lower; with equal ratings
    neither side gets it.

    Example:
        result = update(1500, 1500, {"games": 30}, {"games": 30})
        # result.new_winner_rating == 1522, result.new_loser_rating == 1478
    """
    winner_rating = validate_rating(winner_rating, "winner_rating")
    loser_rating = validate_rating(loser_rating, "loser_rating")
    w_stats = ParticipantStats.coerce(winner_stats)
    l_stats = ParticipantStats.coerce(loser_stats)
    cfg = config if isinstance(config, EloConfig) else EloConfig.merged(config)

    # --- Stage 1: signals ---
    w_experience = experience_multiplier(w_stats.games, cfg.min_games)
    l_experience = experience_multiplier(l_stats.games, cfg.min_games)
    w_vol = volatility(w_stats)
    l_vol = volatility(l_stats)
    w_form = form(w_stats.recent_form)
    l_form = form(l_stats.recent_form)

    # --- Stage 2: expectation ---
    rating_gap = winner_rating - loser_rating
    expected_winner = expected_score(
        adjusted_rating(winner_rating, w_form),
        adjusted_rating(loser_rating, l_form),
    )
    expected_loser = 1.0 - expected_winner
    surprise = surprise_factor(rating_gap, expected_winner)

    # --- Stage 3: step sizes and deltas ---
    # Equal ratings have no underdog; neither side gets the x1.1 boost
    winner_k = k_factor(cfg.base_k, w_experience, w_vol, surprise, is_underdog=rating_gap < 0)
    loser_k = k_factor(cfg.base_k, l_experience, l_vol, surprise, is_underdog=rating_gap > 0)
    step = compute_deltas(winner_k, loser_k, expected_winner, expected_loser, rating_gap)

    # --- Stage 4: ratings and confidence ---
    raw_confidence = confidence(w_stats.games, l_stats.games, w_vol, l_vol, cfg.min_games)

    result = UpdateResult(
        winner_before=winner_rating,
        loser_before=loser_rating,
        new_winner_rating=_round_rating(winner_rating + step.winner_delta),
        new_loser_rating=_round_rating(loser_rating + step.loser_delta),
        confidence=max(0.0, min(1.0, raw_confidence)),
        winner_form=w_form,
        loser_form=l_form,
        winner_k=winner_k,
        loser_k=loser_k,
        expected_winner=expected_winner,
        expected_loser=expected_loser,
        surprise=surprise,
        winner_delta=step.winner_delta,
        loser_delta=step.loser_delta,
        confidence_threshold=cfg.confidence_threshold,
    )
    logger.debug(
        "Rating update %r (K %.2f/%.2f, expected %.4f, surprise %.4f, gap x%.3f)",
        result, winner_k, loser_k, expected_winner, surprise, step.gap_multiplier,
    )
    return result


def calculate_elo(winner_rating: float, loser_rating: float) -> SimpleUpdate:
    """
    Simple function to calculate new ratings without tracked stats.

    Both jokes are treated as established (30 games, no recorded form)
    under the default config.

    Returns:
        SimpleUpdate(new_winner_rating, new_loser_rating)
    """
    neutral = ParticipantStats(games=NEUTRAL_GAMES)
    result = update(winner_rating, loser_rating, neutral, neutral)
    return SimpleUpdate(result.new_winner_rating, result.new_loser_rating)


def _round_rating(value: float) -> int:
    """Round to the nearest whole rating point, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _is_positive_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
