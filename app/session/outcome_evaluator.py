"""
Outcome Evaluator - prediction history, bot win/loss record and the
pending-prediction lifecycle.

Every accepted number first grades the pending prediction (made BEFORE the
number was known), then, once the statistics have absorbed the number, a
new pending prediction is queued for the next spin. At most one record is
pending at any time.
"""

import uuid
from datetime import datetime

import sys
sys.path.insert(0, '.')
from config import PREDICTION_METHOD, get_dozen, get_strength_label


class OutcomeEvaluator:
    def __init__(self):
        self.predictions = []
        self.won = 0
        self.lost = 0

    @property
    def effectiveness(self):
        total = self.won + self.lost
        if total == 0:
            return 0.0
        return round(self.won / total * 100, 1)

    def pending_index(self):
        """Index of the most recent unresolved record, or None."""
        for i in range(len(self.predictions) - 1, -1, -1):
            if self.predictions[i].get('result') is None:
                return i
        return None

    def resolve_pending(self, number, stake_manager):
        """Grade the pending prediction against `number`.

        Primary OR alternate dozen hitting counts as a win. Updates the
        bot record and the stake progression.

        Returns:
            the resolved record (copy), or None if nothing was pending
        """
        idx = self.pending_index()
        if idx is None:
            return None

        pred = self.predictions[idx]
        actual = get_dozen(number)
        primary_hit = pred['predicted_dozen'] == actual
        alt_hit = pred.get('alt_dozen') is not None and pred['alt_dozen'] == actual
        won = primary_hit or alt_hit

        resolved = dict(pred)
        resolved['result'] = 'win' if won else 'loss'
        resolved['number_when_evaluated'] = number
        self.predictions[idx] = resolved

        if won:
            self.won += 1
        else:
            self.lost += 1

        stake_manager.process_result(won, pred['score'])
        return dict(resolved)

    def create_pending(self, primary, alt, scores, stats):
        """Queue the prediction for the next spin from post-update state."""
        total_analyzed = max(1, stats['total_analyzed'])
        score = scores[primary]
        record = {
            'id': uuid.uuid4().hex,
            'created_at': datetime.now().isoformat(),
            'predicted_dozen': primary,
            'alt_dozen': alt,
            'method': PREDICTION_METHOD,
            'score': score,
            'strength': get_strength_label(score),
            'probability': stats['dozens'][primary]['count'] / total_analyzed * 100,
            'result': None,
            'number_when_evaluated': None,
        }
        self.predictions.append(record)
        return dict(record)

    def retract_pending(self, record_id=None):
        """Drop the trailing pending record (only if it matches `record_id` when given)."""
        if not self.predictions:
            return None
        last = self.predictions[-1]
        if last.get('result') is not None:
            return None
        if record_id is not None and last.get('id') != record_id:
            return None
        return self.predictions.pop()

    def unresolve(self, record_id):
        """Put a resolved record back to pending and take it off the bot record."""
        for i in range(len(self.predictions) - 1, -1, -1):
            pred = self.predictions[i]
            if pred.get('id') != record_id:
                continue
            if pred.get('result') == 'win':
                self.won = max(0, self.won - 1)
            elif pred.get('result') == 'loss':
                self.lost = max(0, self.lost - 1)
            reverted = dict(pred)
            reverted['result'] = None
            reverted['number_when_evaluated'] = None
            self.predictions[i] = reverted
            return reverted
        return None

    def load_state(self, predictions, bot_stats):
        self.predictions = [dict(p) for p in predictions]
        self.won = int(bot_stats.get('won', 0))
        self.lost = int(bot_stats.get('lost', 0))

    def full_reset(self):
        self.__init__()

    def get_bot_stats(self):
        return {'won': self.won, 'lost': self.lost}

    def get_history(self):
        return [dict(p) for p in self.predictions]
