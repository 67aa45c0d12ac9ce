"""
Inactivity compression for joke ratings.

A joke that hasn't been compared for a while has a less reliable rating.
This module pulls idle ratings toward the population mean, linearly in the
idle time beyond a 30-day grace period, capped at a 30% pull.

Formula:
    rate = min((days_idle - 30) / 365, 0.3)
    new_rating = rating + (mean - rating) * rate

Compression is never applied by the update pipeline itself; callers run it
on their own schedule (e.g. before the next comparison of a long-idle joke).
"""

import math
from datetime import datetime

from jokerank.elo.constants import COMPRESSION_DEFAULTS, DEFAULT_RATING
from jokerank.elo.params import InvalidInputError, validate_rating


def compress(
    rating: float,
    days_since_last_activity: float,
    mean_rating: float = float(DEFAULT_RATING),
) -> float:
    """
    Regress an idle joke's rating toward the mean.

    Args:
        rating: Current rating
        days_since_last_activity: Days since the joke was last compared
        mean_rating: Rating to pull toward

    Returns:
        Compressed rating (unchanged within the grace period)

    Raises:
        InvalidInputError: For non-finite ratings or negative idle days

    Examples:
        compress(1500.0, 10)               # → 1500.0
        compress(1000.0, 395, 1500.0)      # → 1150.0 (30% cap)
        compress(1800.0, 30 + 73)          # → 1740.0 (20% pull)
    """
    rating = validate_rating(rating)
    mean_rating = validate_rating(mean_rating, "mean_rating")
    if isinstance(days_since_last_activity, bool) or not isinstance(days_since_last_activity, (int, float)):
        raise InvalidInputError(
            f"days_since_last_activity must be a number, got {days_since_last_activity!r}"
        )
    if not math.isfinite(days_since_last_activity) or days_since_last_activity < 0:
        raise InvalidInputError(
            f"days_since_last_activity must be finite and non-negative, got {days_since_last_activity!r}"
        )

    grace = COMPRESSION_DEFAULTS["grace_days"]
    if days_since_last_activity < grace:
        return rating

    rate = min(
        (days_since_last_activity - grace) / COMPRESSION_DEFAULTS["days_per_full_rate"],
        COMPRESSION_DEFAULTS["max_rate"],
    )
    return rating + (mean_rating - rating) * rate


def days_since(last_activity: datetime, now: datetime) -> float:
    """
    Fractional days between two timestamps, floored at zero.

    Both datetimes must be either naive or timezone-aware.

    Raises:
        InvalidInputError: When one timestamp is naive and the other aware
    """
    try:
        elapsed = (now - last_activity).total_seconds() / 86400.0
    except TypeError as exc:
        raise InvalidInputError(
            f"Cannot compare timestamps {last_activity!r} and {now!r}: {exc}"
        ) from exc
    return max(0.0, elapsed)
