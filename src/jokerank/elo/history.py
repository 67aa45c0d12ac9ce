"""
Per-joke comparison history.

The engine is a pure function: it reads a ParticipantStats snapshot for each
side and never mutates it. Keeping that history current is the caller's job,
and the helpers here do it the same way everywhere:

- games is incremented once per comparison
- recent_form is a ring buffer of the last `form_window` outcomes (1 = win)
- volatility is smoothed toward how unexpected each result was, using
  `volatility_decay` as the weight on the previous value
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING, Any, Mapping, Optional

from jokerank.elo.constants import VOLATILITY_MAX, VOLATILITY_MIN
from jokerank.elo.params import (
    EloConfig,
    InvalidInputError,
    validate_form,
    validate_games,
    validate_volatility,
)
from jokerank.elo.signals import volatility

if TYPE_CHECKING:
    from jokerank.elo.calculator import UpdateResult


@dataclass(frozen=True)
class ParticipantStats:
    """
    Auxiliary state for one joke, read by the engine for a single update.

    Attributes:
        games: Completed comparisons before this one
        recent_form: Recent outcomes, most recent last (1 = win, 0 = loss)
        volatility: Stored uncertainty estimate, or None to derive one
        last_activity: When the joke was last compared (compression only)
    """
    games: int = 0
    recent_form: tuple[int, ...] = ()
    volatility: Optional[float] = None
    last_activity: Optional[datetime] = None

    def __post_init__(self) -> None:
        validate_games(self.games)
        object.__setattr__(self, "recent_form", validate_form(self.recent_form))
        object.__setattr__(self, "volatility", validate_volatility(self.volatility))

    @classmethod
    def coerce(cls, value: Any) -> "ParticipantStats":
        """
        Accept stats as a ParticipantStats, a mapping of its fields, or None.

        Mappings may use either snake_case or the camelCase keys
        (recentForm, lastActivity) the web front end sends.
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            data = dict(value)
            for camel, snake in (("recentForm", "recent_form"), ("lastActivity", "last_activity")):
                if camel in data:
                    data[snake] = data.pop(camel)
            try:
                return cls(**data)
            except TypeError as exc:
                raise InvalidInputError(f"Invalid stats mapping: {exc}") from exc
        raise InvalidInputError(f"Cannot interpret {value!r} as participant stats")


def record_result(
    stats: ParticipantStats,
    won: bool,
    expected: float,
    at: Optional[datetime] = None,
    config: Optional[EloConfig] = None,
) -> ParticipantStats:
    """
    Return the stats a joke should carry after one more comparison.

    Args:
        stats: Stats used for the comparison that just happened
        won: Whether this joke won
        expected: This joke's pre-comparison win probability
        at: When the comparison happened (becomes last_activity)
        config: Engine config providing form_window and volatility_decay

    Returns:
        New ParticipantStats; the input is left untouched
    """
    cfg = config or EloConfig()
    actual = 1 if won else 0

    form = (stats.recent_form + (actual,))[-cfg.form_window:]

    shock = abs(actual - expected)
    smoothed = cfg.volatility_decay * volatility(stats) + (1 - cfg.volatility_decay) * shock
    smoothed = max(VOLATILITY_MIN, min(VOLATILITY_MAX, smoothed))

    return replace(
        stats,
        games=stats.games + 1,
        recent_form=form,
        volatility=smoothed,
        last_activity=at if at is not None else stats.last_activity,
    )


def apply_update(
    result: "UpdateResult",
    winner_stats: ParticipantStats,
    loser_stats: ParticipantStats,
    at: Optional[datetime] = None,
    config: Optional[EloConfig] = None,
) -> tuple[ParticipantStats, ParticipantStats]:
    """Advance both sides' stats using the expectations from an UpdateResult."""
    new_winner = record_result(winner_stats, True, result.expected_winner, at=at, config=config)
    new_loser = record_result(loser_stats, False, result.expected_loser, at=at, config=config)
    return new_winner, new_loser
