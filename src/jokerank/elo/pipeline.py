"""
Comparison pipeline: replays an ordered sequence of comparisons in memory.

For each comparison it:
1. Initialises unseen jokes at DEFAULT_RATING with empty history
2. Applies inactivity compression to idle jokes (when timestamps are known)
3. Runs the adaptive update
4. Advances both jokes' history (games, form ring buffer, volatility)

No storage is touched. This is the reference for how a caller should wire
the pure engine together with compression and history bookkeeping, and is
handy for rebuilding ratings from a saved comparison log.

Not thread-safe; feed it comparisons in chronological order from one place.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Hashable, Iterable, NamedTuple, Optional

from jokerank.elo.calculator import UpdateResult, update
from jokerank.elo.constants import DEFAULT_RATING
from jokerank.elo.decay import compress, days_since
from jokerank.elo.history import ParticipantStats, apply_update
from jokerank.elo.params import EloConfig

logger = logging.getLogger(__name__)


class Comparison(NamedTuple):
    """One judged head-to-head: winner_id beat loser_id."""
    winner_id: Hashable
    loser_id: Hashable
    at: Optional[datetime] = None


@dataclass
class ComparisonRecord:
    """A processed comparison and the update it produced."""
    comparison: Comparison
    result: UpdateResult


@dataclass
class _JokeState:
    """Internal tracking of a joke's current state during a replay."""
    rating: float = float(DEFAULT_RATING)
    stats: ParticipantStats = field(default_factory=ParticipantStats)


class ComparisonPipeline:
    """
    Replays comparisons and keeps per-joke ratings and history.

    Usage:
        pipeline = ComparisonPipeline()
        records = pipeline.run([
            Comparison("knock-knock", "pun-42", at=datetime(2026, 1, 3)),
            Comparison("pun-42", "dad-7", at=datetime(2026, 1, 4)),
        ])
        for joke_id, rating in pipeline.leaderboard():
            print(joke_id, rating)
    """

    def __init__(
        self,
        config: Optional[EloConfig] = None,
        mean_rating: float = float(DEFAULT_RATING),
        compress_idle: bool = True,
    ):
        self.config = config or EloConfig()
        self.mean_rating = mean_rating
        self.compress_idle = compress_idle
        self._jokes: dict[Hashable, _JokeState] = {}

    @classmethod
    def from_settings(cls, settings=None) -> "ComparisonPipeline":
        """Build a pipeline from environment settings (jokerank.config)."""
        if settings is None:
            from jokerank.config import get_settings

            settings = get_settings()
        return cls(
            config=EloConfig.from_settings(settings),
            mean_rating=settings.elo_mean_rating,
        )

    def run(self, comparisons: Iterable[Comparison]) -> list[ComparisonRecord]:
        """
        Process comparisons in order.

        Args:
            comparisons: Comparison tuples (or (winner_id, loser_id[, at])
                sequences), already sorted chronologically

        Returns:
            One ComparisonRecord per processed comparison. Self-comparisons
            are skipped.
        """
        records: list[ComparisonRecord] = []
        skipped = 0

        for raw in comparisons:
            comparison = Comparison(*raw)
            if comparison.winner_id == comparison.loser_id:
                logger.warning("Skipping self-comparison for joke %s", comparison.winner_id)
                skipped += 1
                continue

            records.append(self.process(comparison))

        logger.info(
            "Replayed %d comparisons across %d jokes (%d skipped)",
            len(records), len(self._jokes), skipped,
        )
        return records

    def process(self, comparison: Comparison) -> ComparisonRecord:
        """Apply a single comparison and advance both jokes' state."""
        winner = self._get_or_create(comparison.winner_id)
        loser = self._get_or_create(comparison.loser_id)

        # --- Step 1: inactivity compression ---
        if self.compress_idle and comparison.at is not None:
            winner.rating = self._compress(winner, comparison.at)
            loser.rating = self._compress(loser, comparison.at)

        # --- Step 2: rating update ---
        result = update(winner.rating, loser.rating, winner.stats, loser.stats, self.config)

        # --- Step 3: history ---
        winner.stats, loser.stats = apply_update(
            result, winner.stats, loser.stats, at=comparison.at, config=self.config,
        )
        winner.rating = float(result.new_winner_rating)
        loser.rating = float(result.new_loser_rating)

        return ComparisonRecord(comparison=comparison, result=result)

    def rating(self, joke_id: Hashable) -> float:
        """Current rating for a joke (DEFAULT_RATING if never seen)."""
        state = self._jokes.get(joke_id)
        return state.rating if state else float(DEFAULT_RATING)

    def stats(self, joke_id: Hashable) -> ParticipantStats:
        """Current history for a joke (empty if never seen)."""
        state = self._jokes.get(joke_id)
        return state.stats if state else ParticipantStats()

    def ratings(self) -> dict[Hashable, float]:
        """All current ratings, highest first."""
        return dict(self.leaderboard())

    def leaderboard(self) -> list[tuple[Hashable, float]]:
        """(joke_id, rating) pairs sorted by rating, highest first."""
        return sorted(
            ((joke_id, state.rating) for joke_id, state in self._jokes.items()),
            key=lambda item: item[1],
            reverse=True,
        )

    def _get_or_create(self, joke_id: Hashable) -> _JokeState:
        if joke_id not in self._jokes:
            self._jokes[joke_id] = _JokeState()
        return self._jokes[joke_id]

    def _compress(self, state: _JokeState, now: datetime) -> float:
        last = state.stats.last_activity
        if last is None:
            return state.rating
        idle_days = days_since(last, now)
        compressed = compress(state.rating, idle_days, self.mean_rating)
        if compressed != state.rating:
            logger.debug(
                "Compressed idle rating %.1f -> %.1f after %.1f days",
                state.rating, compressed, idle_days,
            )
        return compressed
