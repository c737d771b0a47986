"""
Configuration constants for the Roulette Dozen Predictor.
Single source of truth for all tunable parameters.
"""

import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# ─── Outcome Domain ───────────────────────────────────────────────────
MIN_NUMBER = 0
MAX_NUMBER = 36

# Dozen identifiers: 0 is the zero singleton, 1-3 are the table dozens
ZERO_DOZEN = 0
SCORED_DOZENS = (1, 2, 3)            # Zero never competes for the recommendation
ALL_DOZENS = (ZERO_DOZEN,) + SCORED_DOZENS

DOZEN_RANGES = {
    0: (0, 0),
    1: (1, 12),
    2: (13, 24),
    3: (25, 36),
}

DOZEN_LABELS = {
    0: 'Zero (0)',
    1: '1st',
    2: '2nd',
    3: '3rd',
}

DOZEN_RANGE_LABELS = {
    0: '0',
    1: '1-12',
    2: '13-24',
    3: '25-36',
}

# ─── Analysis Window ──────────────────────────────────────────────────
WINDOW_SIZE_DEFAULT = 30            # "Analyze last N" default
WINDOW_SIZE_MIN = 10
WINDOW_SIZE_MAX = 100
WINDOW_SIZE_STEP = 10
WINDOW_SIZE_CHOICES = tuple(range(WINDOW_SIZE_MIN, WINDOW_SIZE_MAX + 1, WINDOW_SIZE_STEP))

ALTERNATE_MODE_DEFAULT = True       # Also play the second-best dozen

# ─── Score Weights ────────────────────────────────────────────────────
# Base pair, then override rules in order. Later rules win.
BASE_FREQUENCY_WEIGHT = 0.6
BASE_ABSENCE_WEIGHT = 0.4

STREAK_RULE_MIN = 2                 # Streak >= 2 favours frequency
STREAK_FREQUENCY_WEIGHT = 0.8
STREAK_ABSENCE_WEIGHT = 0.2

ABSENCE_RULE_MIN = 5                # Absent >= 5 rounds favours absence
ABSENCE_FREQUENCY_WEIGHT = 0.3
ABSENCE_ABSENCE_WEIGHT = 0.7

SCORE_PRECISION = 3                 # Scores are kept to 3 decimals

# ─── Stabilizer ───────────────────────────────────────────────────────
MIN_OUTCOMES_FOR_PREDICTION = 10    # Wait for samples before predicting
SWITCH_RATIO = 1.2                  # Challenger must beat current * 1.2 to switch at once
HOLD_RATIO = 1.1                    # After 2 wins, hold while challenger < current * 1.1
MIN_ROUNDS_BEFORE_SWITCH = 3        # Otherwise switch only after holding 3 rounds
WIN_STREAK_TO_HOLD = 2

# ─── Strength Classification ──────────────────────────────────────────
STRONG_THRESHOLD = 0.65             # score > 0.65
MODERATE_THRESHOLD = 0.45           # score > 0.45
STRENGTH_STRONG = 'Strong'
STRENGTH_MODERATE = 'Moderate'
STRENGTH_WEAK = 'Weak'

PREDICTION_METHOD = 'Hybrid analytic v2.1'

# ─── Stake Progression ────────────────────────────────────────────────
# On WIN: reset to step 0. On LOSS: advance only when the lost prediction was Strong.
FIBONACCI_SEQUENCE = [1, 1, 2, 3, 5, 8, 13, 21]

# ─── Plenos ───────────────────────────────────────────────────────────
PLENOS_PRIMARY_COUNT = 6
PLENOS_ALT_COUNT = 4

# ─── Persistence ──────────────────────────────────────────────────────
DATA_DIR = os.path.join(BASE_DIR, 'data')
STATE_PATH = os.environ.get('ROULETTE_STATE_PATH', os.path.join(DATA_DIR, 'state.json'))
STATE_KEY = 'ruleta_predictor_v2_1'

# ─── Server Settings ─────────────────────────────────────────────────
HOST = '0.0.0.0'
PORT = 5050
DEBUG = False
SECRET_KEY = 'roulette-dozen-predictor-2024'
ASYNC_MODE = os.environ.get('ROULETTE_ASYNC_MODE', 'eventlet')


def get_dozen(number):
    """Map an outcome to its dozen (0 for zero, 1-3 for the table dozens)."""
    if number == 0:
        return ZERO_DOZEN
    if 1 <= number <= 12:
        return 1
    if 13 <= number <= 24:
        return 2
    if 25 <= number <= 36:
        return 3
    return None


def get_dozen_numbers(dozen):
    start, end = DOZEN_RANGES[dozen]
    return list(range(start, end + 1))


def get_strength_label(score):
    if score > STRONG_THRESHOLD:
        return STRENGTH_STRONG
    if score > MODERATE_THRESHOLD:
        return STRENGTH_MODERATE
    return STRENGTH_WEAK
