"""
ELO rating engine module.

Implements adaptive pairwise ratings for jokes with:
- Experience boost for new jokes
- Volatility and recent-form (momentum) tracking
- Upset amplification and favourite-win damping
- Anti-inflation deflation and bounded rating deltas
- Inactivity compression (pulls idle jokes toward the mean)
"""

from jokerank.elo.calculator import (
    SimpleUpdate,
    UpdateResult,
    calculate_elo,
    confidence,
    update,
)
from jokerank.elo.constants import DEFAULT_RATING, ENGINE_DEFAULTS
from jokerank.elo.decay import compress, days_since
from jokerank.elo.history import ParticipantStats, apply_update, record_result
from jokerank.elo.params import EloConfig, InvalidInputError
from jokerank.elo.pipeline import Comparison, ComparisonPipeline, ComparisonRecord

__all__ = [
    "DEFAULT_RATING",
    "ENGINE_DEFAULTS",
    "EloConfig",
    "InvalidInputError",
    "ParticipantStats",
    "UpdateResult",
    "SimpleUpdate",
    "update",
    "calculate_elo",
    "confidence",
    "compress",
    "days_since",
    "record_result",
    "apply_update",
    "Comparison",
    "ComparisonPipeline",
    "ComparisonRecord",
]
