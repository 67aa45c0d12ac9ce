"""
ELO engine constants.

Every coefficient of the adaptive pipeline lives here so the stages stay
free of magic numbers and the values can be tuned in one place.

Stage overview:
  1. Signals: experience boost, volatility, recent form
  2. Expectation: form-adjusted logistic win probability and surprise
  3. Step: per-joke K-factors, upset/favourite scaling, deflation, clamps
  4. Update: rounded new ratings and a blended confidence score
"""

# Default starting rating for new jokes
DEFAULT_RATING = 1500

# Largest rating magnitude accepted. Beyond this float spacing swallows
# the minimum 2-point delta, so a win would no longer move the rating.
RATING_LIMIT = 1e15

# Spread of the logistic expectation curve
SPREAD = 400.0

# Default engine configuration, merged under any caller overrides.
# confidence_threshold is not used by the pipeline itself; it is exposed
# so callers can flag low-confidence updates consistently.
ENGINE_DEFAULTS = {
    "base_k": 32.0,
    "volatility_decay": 0.95,
    "min_games": 20,
    "confidence_threshold": 0.7,
    "form_window": 10,
}

# Neutral stats used by the simplified calculate_elo() wrapper.
# 30 games puts both jokes past the default min_games threshold.
NEUTRAL_GAMES = 30

# --- Stage 1: signal extraction ---
SIGNAL_DEFAULTS = {
    "experience_max_boost": 0.5,   # games=0 gets a 1.5x multiplier
    "volatility_games_scale": 10.0,
    "volatility_form_min_len": 3,  # form variance only counts above this length
    "volatility_form_weight": 0.3,
    "form_decay": 0.85,            # weight per step back from the latest result
}

# Bounds for stored volatility when smoothed after a comparison
VOLATILITY_MIN = 0.05
VOLATILITY_MAX = 1.5

# --- Stage 2: expectation model ---
EXPECTATION_DEFAULTS = {
    "form_points": 15.0,          # max perceived strength from momentum
    "big_upset_gap": -200.0,
    "big_upset_scale": 500.0,
}

# --- Stage 3: adaptive step computation ---
STEP_DEFAULTS = {
    "volatility_weight": 0.4,
    "surprise_weight": 0.3,
    "underdog_boost": 1.1,
    "k_min": 8.0,
    "k_max": 80.0,
    "upset_scale": 100.0,
    "upset_weight": 0.4,
    "favorite_gap": 100.0,
    "favorite_scale": 150.0,
    "favorite_weight": 0.3,
    "favorite_floor": 0.3,
    "deflation": 0.98,
    "delta_min": 2.0,
    "delta_max": 100.0,
}

# --- Stage 4: confidence ---
CONFIDENCE_DEFAULTS = {
    "games_weight": 0.6,
    "volatility_weight": 0.4,
}

# --- Inactivity compression ---
# Linear pull toward the mean once a joke has been idle past the grace period
COMPRESSION_DEFAULTS = {
    "grace_days": 30.0,
    "days_per_full_rate": 365.0,
    "max_rate": 0.3,
}
