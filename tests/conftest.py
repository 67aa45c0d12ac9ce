"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

from datetime import datetime

import pytest

from jokerank.elo.history import ParticipantStats
from jokerank.elo.params import EloConfig


@pytest.fixture
def config():
    """Default engine configuration."""
    return EloConfig()


@pytest.fixture
def established():
    """Stats for a joke past the experience threshold with no recorded form."""
    return ParticipantStats(games=30)


@pytest.fixture
def newcomer():
    """Stats for a joke that has never been compared."""
    return ParticipantStats(games=0)


@pytest.fixture
def start_time():
    """Fixed timestamp for pipeline tests."""
    return datetime(2026, 1, 1, 12, 0, 0)
