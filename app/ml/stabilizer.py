"""
Stabilizer - hysteresis state machine over the single current prediction.

States:
    None                                   no prediction (fewer than 10 outcomes)
    {primary, alt, score, rounds_held}     active recommendation

A challenger dozen replaces the current one only when it is clearly
better (>= current * 1.2), or once the current pick has been held for 3
rounds. Two consecutive wins on the current primary protect it against
challengers scoring below current * 1.1.
"""

import sys
sys.path.insert(0, '.')
from config import (
    MIN_OUTCOMES_FOR_PREDICTION, SWITCH_RATIO, HOLD_RATIO,
    MIN_ROUNDS_BEFORE_SWITCH, WIN_STREAK_TO_HOLD,
)
from app.ml.scorer import rank_dozens


def recent_wins_for(primary, predictions, count=WIN_STREAK_TO_HOLD):
    """True if the last `count` resolved predictions were all wins on `primary`."""
    resolved = [p for p in reversed(predictions) if p.get('result')][:count]
    if len(resolved) < count:
        return False
    return all(p['result'] == 'win' and p['predicted_dozen'] == primary for p in resolved)


class Stabilizer:
    def __init__(self, current=None):
        self.current = dict(current) if current else None

    def reset(self):
        self.current = None

    def restore(self, current):
        self.current = dict(current) if current else None

    def evaluate(self, scores, outcome_count, alternate_mode, predictions=()):
        """Re-run the transition function after statistics changed.

        Args:
            scores: {1: float, 2: float, 3: float} from the Scorer
            outcome_count: length of the full outcome log
            alternate_mode: whether to carry the second-best dozen
            predictions: prediction history, oldest first

        Returns:
            'waiting', 'entered', 'refreshed', 'switched' or 'held'
        """
        if outcome_count < MIN_OUTCOMES_FOR_PREDICTION:
            self.current = None
            return 'waiting'

        ranking = rank_dozens(scores)
        best, second = ranking[0], ranking[1]
        best_score = scores[best]
        alt = second if alternate_mode else None

        if self.current is None:
            self._switch_to(best, alt, best_score)
            return 'entered'

        current = self.current
        if best == current['primary']:
            current['score'] = best_score
            current['alt'] = alt
            current['rounds_held'] += 1
            return 'refreshed'

        if best_score >= current['score'] * SWITCH_RATIO:
            self._switch_to(best, alt, best_score)
            return 'switched'

        if (recent_wins_for(current['primary'], predictions)
                and best_score < current['score'] * HOLD_RATIO):
            self._hold(ranking, alternate_mode)
            return 'held'

        if current['rounds_held'] >= MIN_ROUNDS_BEFORE_SWITCH:
            self._switch_to(best, alt, best_score)
            return 'switched'

        self._hold(ranking, alternate_mode)
        return 'held'

    def _hold(self, ranking, alternate_mode):
        current = self.current
        current['rounds_held'] += 1
        if not alternate_mode:
            current['alt'] = None
        elif current['alt'] is None:
            # Alternate mode was switched on while holding
            current['alt'] = next(d for d in ranking if d != current['primary'])

    def _switch_to(self, primary, alt, score):
        self.current = {
            'primary': primary,
            'alt': alt,
            'score': score,
            'rounds_held': 1,
        }

    def get_state(self):
        return dict(self.current) if self.current else None
