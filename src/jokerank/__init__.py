"""
jokerank - Pairwise joke ranking

Ranks jokes by head-to-head comparison using an adaptive ELO engine.
Storage, approval workflows and UI live in the surrounding application,
which calls into this package with two ratings and an outcome.

Main components:
- elo: Adaptive pairwise rating engine and inactivity compression
- config: Environment-driven settings and logging setup
"""

__version__ = "1.0.0"
