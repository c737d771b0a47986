"""
Window Statistics - frequency, absence gap and streak per dozen.

Frequency looks only at the last N outcomes (the analysis window).
Absence and streak always scan the FULL history: a dozen that was last
seen 40 rounds ago is still 40 rounds absent with a 30-spin window.
"""

from collections import Counter

import sys
sys.path.insert(0, '.')
from config import ALL_DOZENS, get_dozen


def dozen_frequencies(outcomes, window_size):
    """Count of each dozen among the last `window_size` outcomes."""
    window = list(outcomes)[-window_size:] if window_size > 0 else []
    counts = Counter(get_dozen(n) for n in window)
    return {d: counts.get(d, 0) for d in ALL_DOZENS}


def dozen_absences(outcomes):
    """Rounds since each dozen last hit, scanning backward. None = never seen."""
    history = list(outcomes)
    absences = {d: None for d in ALL_DOZENS}
    pending = set(ALL_DOZENS)

    for gap, number in enumerate(reversed(history)):
        dozen = get_dozen(number)
        if dozen in pending:
            absences[dozen] = gap
            pending.discard(dozen)
            if not pending:
                break

    return absences


def dozen_streaks(outcomes):
    """Consecutive hits of each dozen at the very end of the history."""
    history = list(outcomes)
    streaks = {d: 0 for d in ALL_DOZENS}
    if not history:
        return streaks

    tail_dozen = get_dozen(history[-1])
    for number in reversed(history):
        if get_dozen(number) != tail_dozen:
            break
        streaks[tail_dozen] += 1

    return streaks


def compute_window_stats(outcomes, window_size):
    """Full statistics snapshot for the Scorer and the dashboard.

    Returns:
        dict with 'window_size', 'total_analyzed' and a 'dozens' mapping
        of dozen -> {'count', 'absence', 'streak'}.
    """
    history = list(outcomes)
    counts = dozen_frequencies(history, window_size)
    absences = dozen_absences(history)
    streaks = dozen_streaks(history)

    return {
        'window_size': window_size,
        'total_analyzed': min(window_size, len(history)),
        'dozens': {
            d: {
                'count': counts[d],
                'absence': absences[d],
                'streak': streaks[d],
            }
            for d in ALL_DOZENS
        },
    }
