"""Unit tests for settings and EloConfig construction."""

import logging

import pytest
from pydantic import ValidationError

from jokerank.config import (
    JSON_LOG_FORMAT,
    LOG_FORMAT,
    Settings,
    configure_logging,
    get_settings,
)
from jokerank.elo.constants import ENGINE_DEFAULTS
from jokerank.elo.params import EloConfig, InvalidInputError


class TestSettings:

    def test_defaults_match_engine_defaults(self, monkeypatch):
        monkeypatch.delenv("ELO_BASE_K", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        settings = Settings(_env_file=None)

        assert settings.elo_base_k == ENGINE_DEFAULTS["base_k"]
        assert settings.elo_min_games == ENGINE_DEFAULTS["min_games"]
        assert settings.elo_mean_rating == 1500.0
        assert settings.log_level == "INFO"
        assert settings.log_format == "console"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ELO_BASE_K", "48")
        monkeypatch.setenv("ELO_MIN_GAMES", "10")

        settings = Settings(_env_file=None)
        assert settings.elo_base_k == 48.0
        assert settings.elo_min_games == 10

    def test_log_level_normalised(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")

    def test_log_format_normalised(self):
        assert Settings(_env_file=None, log_format="JSON").log_format == "json"

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")

    def test_non_positive_base_k(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, elo_base_k=0)


class TestConfigureLogging:

    def test_explicit_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("WARNING")

        assert calls[0]["level"] == "WARNING"
        assert calls[0]["format"] == LOG_FORMAT

    def test_defaults_to_settings_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging()

        assert calls[0]["level"] == get_settings().log_level
        assert calls[0]["format"] == (
            JSON_LOG_FORMAT if get_settings().log_format == "json" else LOG_FORMAT
        )

    def test_json_format(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("INFO", log_format="json")

        assert calls[0]["format"] == JSON_LOG_FORMAT
        assert "%(name)s" in JSON_LOG_FORMAT


class TestEloConfig:

    def test_defaults(self):
        config = EloConfig()

        assert config.base_k == 32.0
        assert config.volatility_decay == 0.95
        assert config.min_games == 20
        assert config.form_window == 10

    def test_merged_partial(self):
        config = EloConfig.merged({"min_games": 5})

        assert config.min_games == 5
        assert config.base_k == 32.0

    def test_merged_none(self):
        assert EloConfig.merged(None) == EloConfig()

    def test_merged_camel_case(self):
        config = EloConfig.merged({"baseK": 40, "minGames": 5, "volatilityDecay": 0.9})

        assert config.base_k == 40
        assert config.min_games == 5
        assert config.volatility_decay == 0.9
        assert config.confidence_threshold == ENGINE_DEFAULTS["confidence_threshold"]

    def test_merged_unknown_key(self):
        with pytest.raises(InvalidInputError, match="Unknown config option"):
            EloConfig.merged({"k_factor": 40})

    @pytest.mark.parametrize(
        "overrides",
        [
            {"base_k": 0},
            {"base_k": float("nan")},
            {"volatility_decay": 0},
            {"volatility_decay": 1.5},
            {"min_games": 2.5},
            {"form_window": 0},
        ],
    )
    def test_rejects_out_of_range(self, overrides):
        with pytest.raises(InvalidInputError):
            EloConfig(**overrides)

    def test_pipeline_from_settings(self):
        from jokerank.elo.pipeline import ComparisonPipeline

        settings = Settings(_env_file=None, elo_mean_rating=1200, elo_min_games=5)
        pipeline = ComparisonPipeline.from_settings(settings)

        assert pipeline.mean_rating == 1200.0
        assert pipeline.config.min_games == 5

    def test_from_settings(self):
        settings = Settings(_env_file=None, elo_base_k=40, elo_form_window=5)
        config = EloConfig.from_settings(settings)

        assert config.base_k == 40
        assert config.form_window == 5
        assert config.min_games == ENGINE_DEFAULTS["min_games"]
