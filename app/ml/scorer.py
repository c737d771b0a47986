"""
Scorer - turns window statistics into a 0-1 score per dozen.

score(d) = freq_norm(d) * w_freq + absence_norm(d) * w_abs

The weight pair is dynamic: a base pair is passed through an ordered list
of override rules and the LAST matching rule wins. With the default rules
a dozen on a streak of 2+ leans on frequency (0.8/0.2) unless it has also
been absent 5+ rounds, in which case absence dominates (0.3/0.7).
The zero dozen is never scored.
"""

import math
from collections import namedtuple

import numpy as np

import sys
sys.path.insert(0, '.')
from config import (
    SCORED_DOZENS, SCORE_PRECISION,
    BASE_FREQUENCY_WEIGHT, BASE_ABSENCE_WEIGHT,
    STREAK_RULE_MIN, STREAK_FREQUENCY_WEIGHT, STREAK_ABSENCE_WEIGHT,
    ABSENCE_RULE_MIN, ABSENCE_FREQUENCY_WEIGHT, ABSENCE_ABSENCE_WEIGHT,
)


WeightRule = namedtuple('WeightRule', ['name', 'applies', 'freq_weight', 'absence_weight'])


def _streak_applies(dozen_stats):
    return dozen_stats['streak'] >= STREAK_RULE_MIN


def _absence_applies(dozen_stats):
    absence = dozen_stats['absence']
    return absence is not None and absence >= ABSENCE_RULE_MIN


# Order matters: evaluated top to bottom, later matches override earlier ones
WEIGHT_RULES = (
    WeightRule('streak', _streak_applies, STREAK_FREQUENCY_WEIGHT, STREAK_ABSENCE_WEIGHT),
    WeightRule('long_absence', _absence_applies, ABSENCE_FREQUENCY_WEIGHT, ABSENCE_ABSENCE_WEIGHT),
)


def select_weights(dozen_stats, rules=WEIGHT_RULES):
    """Pick the (w_freq, w_abs) pair for one dozen, normalized to sum to 1."""
    w_freq, w_abs = BASE_FREQUENCY_WEIGHT, BASE_ABSENCE_WEIGHT
    for rule in rules:
        if rule.applies(dozen_stats):
            w_freq, w_abs = rule.freq_weight, rule.absence_weight

    norm = w_freq + w_abs
    return w_freq / norm, w_abs / norm


def round_score(value, precision=SCORE_PRECISION):
    """Round half-up (0.0005 -> 0.001), unlike Python's banker's round()."""
    factor = 10 ** precision
    return math.floor(value * factor + 0.5) / factor


def compute_scores(stats, rules=WEIGHT_RULES):
    """Score D1..D3 from a compute_window_stats() snapshot.

    Returns:
        dict {1: float, 2: float, 3: float}, each in [0, 1] with 3 decimals.
        The three scores are not a distribution and need not sum to 1.
    """
    dozens = stats['dozens']
    total_analyzed = max(1, stats['total_analyzed'])

    # Unreachable behind the max(1, ...) guard, kept as the defined empty-window result
    if total_analyzed == 0:
        return {d: 0.0 for d in SCORED_DOZENS}

    counts = np.array([dozens[d]['count'] for d in SCORED_DOZENS], dtype=np.float64)
    freq_norm = counts / total_analyzed

    known = [dozens[d]['absence'] for d in SCORED_DOZENS if dozens[d]['absence'] is not None]
    max_absence = max(known) if known else 0

    if max_absence > 0:
        # Never-seen dozens count as the worst (most absent) case
        absence_norm = np.array([
            (dozens[d]['absence'] if dozens[d]['absence'] is not None else max_absence) / max_absence
            for d in SCORED_DOZENS
        ], dtype=np.float64)
    else:
        absence_norm = np.zeros(len(SCORED_DOZENS))

    weights = np.array([select_weights(dozens[d], rules) for d in SCORED_DOZENS])
    raw = freq_norm * weights[:, 0] + absence_norm * weights[:, 1]

    return {d: round_score(float(raw[i])) for i, d in enumerate(SCORED_DOZENS)}


def rank_dozens(scores):
    """Dozens by score, best first. Stable: ties keep 1st, 2nd, 3rd order."""
    return sorted(SCORED_DOZENS, key=lambda d: scores[d], reverse=True)
