"""Unit tests for the in-memory comparison pipeline."""

import logging
from datetime import timedelta, timezone

import pytest

from jokerank.elo.constants import DEFAULT_RATING
from jokerank.elo.decay import compress
from jokerank.elo.history import ParticipantStats
from jokerank.elo.params import EloConfig, InvalidInputError
from jokerank.elo.pipeline import Comparison, ComparisonPipeline


class TestComparisonPipeline:

    @pytest.fixture
    def pipeline(self):
        return ComparisonPipeline()

    def test_first_comparison_between_new_jokes(self, pipeline, start_time):
        """
        Two unseen jokes start at 1500 with zero games.

        K = 32 * 1.5 * 1.4 * 1.15 = 77.28, delta = 77.28 * 0.5 * 0.98 = 37.87
        """
        records = pipeline.run([Comparison("pun", "dad", at=start_time)])

        assert len(records) == 1
        assert records[0].result.new_winner_rating == 1538
        assert records[0].result.new_loser_rating == 1462
        assert pipeline.rating("pun") == 1538.0
        assert pipeline.rating("dad") == 1462.0

    def test_unknown_joke_defaults(self, pipeline):
        assert pipeline.rating("never-seen") == float(DEFAULT_RATING)
        assert pipeline.stats("never-seen") == ParticipantStats()

    def test_history_advances(self, pipeline, start_time):
        pipeline.run([
            Comparison("pun", "dad", at=start_time),
            Comparison("dad", "pun", at=start_time + timedelta(days=1)),
            Comparison("pun", "dad", at=start_time + timedelta(days=2)),
        ])

        pun = pipeline.stats("pun")
        assert pun.games == 3
        assert pun.recent_form == (1, 0, 1)
        assert pun.last_activity == start_time + timedelta(days=2)
        assert pun.volatility is not None
        assert pipeline.stats("dad").recent_form == (0, 1, 0)

    def test_plain_tuples_accepted(self, pipeline):
        records = pipeline.run([("a", "b"), ("b", "c", None)])

        assert [r.comparison.winner_id for r in records] == ["a", "b"]
        assert isinstance(records[0].comparison, Comparison)

    def test_self_comparison_skipped(self, pipeline, caplog):
        with caplog.at_level(logging.WARNING, logger="jokerank.elo.pipeline"):
            records = pipeline.run([("a", "a"), ("a", "b")])

        assert len(records) == 1
        assert "self-comparison" in caplog.text
        assert pipeline.stats("a").games == 1

    def test_idle_joke_compressed_before_comparison(self, pipeline, start_time):
        records = pipeline.run([
            Comparison("pun", "dad", at=start_time),
            Comparison("knock", "pun", at=start_time + timedelta(days=400)),
        ])

        assert records[1].result.loser_before == pytest.approx(compress(1538, 400))
        assert records[1].result.loser_before == pytest.approx(1526.6)
        # First appearance has no last_activity, so no compression
        assert records[1].result.winner_before == float(DEFAULT_RATING)

    def test_recent_joke_not_compressed(self, pipeline, start_time):
        records = pipeline.run([
            Comparison("pun", "dad", at=start_time),
            Comparison("knock", "pun", at=start_time + timedelta(days=10)),
        ])

        assert records[1].result.loser_before == 1538.0

    def test_mixed_timezone_awareness_rejected(self, pipeline, start_time):
        """A naive history followed by an aware timestamp cannot be compared."""
        pipeline.run([Comparison("pun", "dad", at=start_time)])
        later = (start_time + timedelta(days=400)).replace(tzinfo=timezone.utc)

        with pytest.raises(InvalidInputError):
            pipeline.process(Comparison("knock", "pun", at=later))

    def test_compression_disabled(self, start_time):
        pipeline = ComparisonPipeline(compress_idle=False)
        records = pipeline.run([
            Comparison("pun", "dad", at=start_time),
            Comparison("knock", "pun", at=start_time + timedelta(days=400)),
        ])

        assert records[1].result.loser_before == 1538.0

    def test_leaderboard_sorted(self, pipeline):
        pipeline.run([("a", "b"), ("a", "c"), ("b", "c")])

        board = pipeline.leaderboard()
        assert [joke for joke, _ in board] == ["a", "b", "c"]
        assert list(pipeline.ratings()) == ["a", "b", "c"]
        ratings = [rating for _, rating in board]
        assert ratings == sorted(ratings, reverse=True)

    def test_uses_config(self, start_time):
        pipeline = ComparisonPipeline(config=EloConfig(base_k=8))
        records = pipeline.run([Comparison("pun", "dad", at=start_time)])

        # 8 * 1.5 * 1.4 * 1.15 = 19.32, clamped range untouched
        assert records[0].result.winner_k == pytest.approx(19.32)

    def test_summary_logged(self, pipeline, caplog):
        with caplog.at_level(logging.INFO, logger="jokerank.elo.pipeline"):
            pipeline.run([("a", "b")])

        assert "Replayed 1 comparisons across 2 jokes" in caplog.text
