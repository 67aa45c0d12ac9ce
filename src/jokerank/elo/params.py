"""Engine configuration and input validation."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from jokerank.elo.constants import ENGINE_DEFAULTS, RATING_LIMIT

# camelCase option names sent by the web front end
_CAMEL_CASE_OPTIONS = {
    "baseK": "base_k",
    "volatilityDecay": "volatility_decay",
    "minGames": "min_games",
    "confidenceThreshold": "confidence_threshold",
    "formWindow": "form_window",
}


class InvalidInputError(ValueError):
    """Raised when a rating, stats record or config value is out of domain."""


@dataclass(frozen=True)
class EloConfig:
    """
    All tunable engine options in one object.

    Assembled once per call; unset fields take the defaults from
    ENGINE_DEFAULTS. Use merged() to layer a partial mapping on top.
    """
    base_k: float = ENGINE_DEFAULTS["base_k"]
    volatility_decay: float = ENGINE_DEFAULTS["volatility_decay"]
    min_games: int = ENGINE_DEFAULTS["min_games"]
    confidence_threshold: float = ENGINE_DEFAULTS["confidence_threshold"]
    form_window: int = ENGINE_DEFAULTS["form_window"]

    def __post_init__(self) -> None:
        if not _is_finite(self.base_k) or self.base_k <= 0:
            raise InvalidInputError(f"base_k must be a positive number, got {self.base_k!r}")
        if not _is_finite(self.volatility_decay) or not 0 < self.volatility_decay <= 1:
            raise InvalidInputError(
                f"volatility_decay must be in (0, 1], got {self.volatility_decay!r}"
            )
        if not _is_count(self.min_games) or self.min_games <= 0:
            raise InvalidInputError(f"min_games must be a positive integer, got {self.min_games!r}")
        if not _is_finite(self.confidence_threshold):
            raise InvalidInputError(
                f"confidence_threshold must be a number, got {self.confidence_threshold!r}"
            )
        if not _is_count(self.form_window) or self.form_window <= 0:
            raise InvalidInputError(
                f"form_window must be a positive integer, got {self.form_window!r}"
            )

    @classmethod
    def merged(cls, partial: Optional[Mapping[str, Any]] = None) -> "EloConfig":
        """
        Build a config from a partial mapping layered over the defaults.

        Args:
            partial: Any subset of the config fields, in snake_case or the
                camelCase names (baseK, minGames, ...). None means all defaults.

        Raises:
            InvalidInputError: For unknown keys or out-of-range values.
        """
        if not partial:
            return cls()
        data = {_CAMEL_CASE_OPTIONS.get(key, key): value for key, value in partial.items()}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidInputError(f"Unknown config option(s): {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_settings(cls, settings=None) -> "EloConfig":
        """Build a config from environment settings (jokerank.config)."""
        if settings is None:
            from jokerank.config import get_settings

            settings = get_settings()
        return cls(
            base_k=settings.elo_base_k,
            volatility_decay=settings.elo_volatility_decay,
            min_games=settings.elo_min_games,
            confidence_threshold=settings.elo_confidence_threshold,
            form_window=settings.elo_form_window,
        )


def _is_finite(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and (isinstance(value, int) or math.isfinite(value))
    )


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_rating(rating: Any, name: str = "rating") -> float:
    """
    Return the rating as a float.

    Rejects NaN, infinities, non-numbers and magnitudes above RATING_LIMIT.
    """
    if not _is_finite(rating):
        raise InvalidInputError(f"{name} must be a finite number, got {rating!r}")
    if abs(rating) > RATING_LIMIT:
        raise InvalidInputError(f"{name} must be within +/-{RATING_LIMIT:g}, got {rating!r}")
    return float(rating)


def validate_games(games: Any, name: str = "games") -> int:
    if not _is_count(games) or games < 0:
        raise InvalidInputError(f"{name} must be a non-negative integer, got {games!r}")
    return games


def validate_form(recent_form: Any, name: str = "recent_form") -> tuple[int, ...]:
    """Form entries must be 0 (loss) or 1 (win)."""
    try:
        outcomes = tuple(recent_form)
    except TypeError as exc:
        raise InvalidInputError(f"{name} must be a sequence of 0/1 outcomes") from exc
    for outcome in outcomes:
        if isinstance(outcome, bool) or outcome not in (0, 1):
            raise InvalidInputError(f"{name} entries must be 0 or 1, got {outcome!r}")
    return tuple(int(o) for o in outcomes)


def validate_volatility(volatility: Any, name: str = "volatility") -> Optional[float]:
    if volatility is None:
        return None
    if not _is_finite(volatility) or volatility < 0:
        raise InvalidInputError(f"{name} must be a non-negative number, got {volatility!r}")
    return float(volatility)
