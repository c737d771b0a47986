"""
Prediction Engine - Master orchestrator for the dozen predictor.

Owns every piece of mutable state (outcome log, prediction history, bot
record, stake index, current prediction) and exposes the operations the
UI calls. One round of accept_outcome() always runs in this order:

    1. grade the pending prediction with the PREVIOUS state
    2. append the number to the log
    3. recompute statistics -> scores -> stabilizer
    4. queue the next pending prediction from the UPDATED state

Swapping 1 and 2 would grade a prediction against a number it already
"knew". The engine is single-writer: callers must submit one outcome at a
time.
"""

import copy
import logging
import math

import sys
sys.path.insert(0, '.')
from config import (
    MIN_NUMBER, MAX_NUMBER, ALL_DOZENS, SCORED_DOZENS, DOZEN_LABELS, DOZEN_RANGE_LABELS,
    WINDOW_SIZE_DEFAULT, WINDOW_SIZE_CHOICES, ALTERNATE_MODE_DEFAULT,
    PLENOS_PRIMARY_COUNT, PLENOS_ALT_COUNT, MIN_OUTCOMES_FOR_PREDICTION, STATE_KEY,
    get_strength_label,
)
from app.errors import (
    InvalidOutcome, InvalidWindowSize, PersistenceLoadError, PersistenceSaveError,
)
from app.ml.outcome_log import OutcomeLog
from app.ml.window_stats import compute_window_stats
from app.ml.scorer import compute_scores, rank_dozens
from app.ml.stabilizer import Stabilizer
from app.ml.pleno_recommender import recommend_plenos
from app.money.stake_manager import StakeManager
from app.session.outcome_evaluator import OutcomeEvaluator

logger = logging.getLogger(__name__)


def validate_outcome(number):
    """Return `number` as an int in 0-36 or raise InvalidOutcome."""
    if isinstance(number, bool):
        raise InvalidOutcome(number)
    if isinstance(number, float):
        if not number.is_integer():
            raise InvalidOutcome(number)
        number = int(number)
    if not isinstance(number, int):
        raise InvalidOutcome(number)
    if number < MIN_NUMBER or number > MAX_NUMBER:
        raise InvalidOutcome(number)
    return number


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_dozen(value):
    return _is_int(value) and value in SCORED_DOZENS


class PredictionEngine:
    def __init__(self, store=None, state_key=STATE_KEY, autoload=True):
        self.store = store
        self.state_key = state_key

        self.log = OutcomeLog()
        self.stabilizer = Stabilizer()
        self.evaluator = OutcomeEvaluator()
        self.stake = StakeManager()

        self.window_size = WINDOW_SIZE_DEFAULT
        self.alternate_mode = ALTERNATE_MODE_DEFAULT

        # One entry per accepted outcome (most recent last), used by delete_last_outcome()
        self.undo_journal = []

        self.stats = None
        self.scores = None
        self._recompute()

        if store is not None and autoload:
            self.load_state()

    # ─── Derived state ──────────────────────────────────────────────────

    def _recompute(self):
        self.stats = compute_window_stats(self.log, self.window_size)
        self.scores = compute_scores(self.stats)

    def _restabilize(self):
        transition = self.stabilizer.evaluate(
            self.scores, len(self.log), self.alternate_mode, self.evaluator.predictions
        )
        if transition in ('entered', 'switched'):
            current = self.stabilizer.current
            logger.info("[Engine] Prediction %s -> %s (score %.3f)",
                        transition, DOZEN_LABELS[current['primary']], current['score'])
        return transition

    def _queue_next_prediction(self):
        current = self.stabilizer.current
        if current is not None:
            primary = current['primary']
            alt = current['alt'] if self.alternate_mode else None
        else:
            # Not enough samples for a stabilized pick yet: use the raw ranking
            ranking = rank_dozens(self.scores)
            primary = ranking[0]
            alt = ranking[1] if self.alternate_mode else None
        return self.evaluator.create_pending(primary, alt, self.scores, self.stats)

    # ─── Public operations ──────────────────────────────────────────────

    def accept_outcome(self, number):
        """Record a spin result.

        Returns:
            the prediction record this number resolved, or None if no
            prediction was pending

        Raises:
            InvalidOutcome: number is not an integer in 0-36 (nothing changes)
        """
        number = validate_outcome(number)

        entry = {
            'stake_index': self.stake.index,
            'current_pred': self.stabilizer.get_state(),
            'resolved_id': None,
            'pending_id': None,
        }

        resolved = self.evaluator.resolve_pending(number, self.stake)
        if resolved is not None:
            entry['resolved_id'] = resolved['id']

        self.log.append(number)
        self._recompute()
        self._restabilize()

        pending = self._queue_next_prediction()
        entry['pending_id'] = pending['id']
        self.undo_journal.append(entry)

        self.save_state()
        return resolved

    def delete_last_outcome(self):
        """Undo the last accepted number. Returns it, or None if the log is empty."""
        if not len(self.log):
            return None

        removed = self.log.pop()
        entry = self.undo_journal.pop() if self.undo_journal else None

        if entry is not None:
            self.evaluator.retract_pending(entry.get('pending_id'))
            if entry.get('resolved_id'):
                self.evaluator.unresolve(entry['resolved_id'])
            self.stake.restore(entry.get('stake_index', 0))
            self.stabilizer.restore(entry.get('current_pred'))
            self._recompute()
        else:
            # No journal for this outcome (older saved state): drop the log entry
            # and the prediction queued after it, nothing else can be restored
            self.evaluator.retract_pending()
            self._recompute()
            self._restabilize()

        logger.info("[Engine] Deleted last number %s (%d remaining)", removed, len(self.log))
        self.save_state()
        return removed

    def reset_all(self):
        """Clear numbers, predictions, bot record, stake and current prediction."""
        self.log.clear()
        self.evaluator.full_reset()
        self.stake.full_reset()
        self.stabilizer.reset()
        self.undo_journal = []
        self._recompute()
        logger.info("[Engine] Full reset")
        self.save_state()

    def set_window_size(self, window_size):
        if not _is_int(window_size) or window_size not in WINDOW_SIZE_CHOICES:
            raise InvalidWindowSize(window_size)
        if window_size == self.window_size:
            return
        self.window_size = window_size
        self._recompute()
        self._restabilize()
        self.save_state()

    def set_alternate_mode(self, enabled):
        enabled = bool(enabled)
        if enabled == self.alternate_mode:
            return
        self.alternate_mode = enabled
        self._restabilize()
        self.save_state()

    def recommend_plenos(self, dozen, take=PLENOS_PRIMARY_COUNT):
        if dozen not in ALL_DOZENS:
            raise ValueError(f'Unknown dozen {dozen!r}')
        return recommend_plenos(self.log, dozen, take)

    # ─── Snapshot ───────────────────────────────────────────────────────

    def get_snapshot(self):
        """Immutable view of the whole engine for display."""
        current = self.stabilizer.get_state()
        plenos = {'primary': [], 'alt': []}
        strength = None
        if current is not None:
            strength = get_strength_label(current['score'])
            plenos['primary'] = recommend_plenos(self.log, current['primary'], PLENOS_PRIMARY_COUNT)
            if self.alternate_mode and current['alt'] is not None:
                plenos['alt'] = recommend_plenos(self.log, current['alt'], PLENOS_ALT_COUNT)

        history = self.evaluator.get_history()
        snapshot = {
            'log': self.log.to_list(),
            'stats': self.stats,
            'scores': self.scores,
            'current_prediction': current,
            'prediction_history': history,
            'latest_prediction': history[-1] if history else None,
            'bot_stats': self.evaluator.get_bot_stats(),
            'effectiveness': self.evaluator.effectiveness,
            'stake_index': self.stake.index,
            'stake': self.stake.get_status(),
            'strength': strength,
            'plenos': plenos,
            'window_size': self.window_size,
            'alternate_mode': self.alternate_mode,
            'chart': [
                {'dozen': d, 'name': DOZEN_LABELS[d], 'range': DOZEN_RANGE_LABELS[d],
                 'score': round(self.scores[d] * 100, 1)}
                for d in SCORED_DOZENS
            ],
        }
        return copy.deepcopy(snapshot)

    # ─── State Persistence ──────────────────────────────────────────────

    def get_state(self):
        return {
            'numbers': self.log.to_list(),
            'predictions': self.evaluator.get_history(),
            'bot_stats': self.evaluator.get_bot_stats(),
            'fibo_index': self.stake.index,
            'analyze_last': self.window_size,
            'current_pred': self.stabilizer.get_state(),
            'use_alt_docena': self.alternate_mode,
            'undo_journal': copy.deepcopy(self.undo_journal),
        }

    def save_state(self):
        """Persist the state blob. Failures are logged, never raised."""
        if self.store is None:
            return False
        try:
            self.store.save(self.state_key, self.get_state())
            return True
        except PersistenceSaveError as e:
            logger.warning("[State] Failed to save: %s", e)
            return False

    def load_state(self):
        """Restore from the store. Any failure leaves the empty initial state.
        Returns True if a saved state was applied.
        """
        if self.store is None:
            return False
        try:
            blob = self.store.load(self.state_key)
            if blob is None:
                logger.info("[State] No saved state found")
                return False
            self._apply_state(blob)
        except PersistenceLoadError as e:
            logger.warning("[State] Failed to load, starting empty: %s", e)
            self._clear_in_memory()
            return False

        logger.info("[State] Loaded %d numbers, %d predictions",
                    len(self.log), len(self.evaluator.predictions))
        return True

    def _clear_in_memory(self):
        self.log.clear()
        self.evaluator.full_reset()
        self.stake.full_reset()
        self.stabilizer.reset()
        self.undo_journal = []
        self.window_size = WINDOW_SIZE_DEFAULT
        self.alternate_mode = ALTERNATE_MODE_DEFAULT
        self._recompute()

    def _apply_state(self, blob):
        if not isinstance(blob, dict):
            raise PersistenceLoadError('State blob is not an object')

        numbers = blob.get('numbers', [])
        predictions = blob.get('predictions', [])
        bot_stats = blob.get('bot_stats') or {}
        journal = blob.get('undo_journal') or []
        if not isinstance(numbers, list) or not isinstance(predictions, list):
            raise PersistenceLoadError('numbers/predictions must be lists')
        if not isinstance(bot_stats, dict) or not isinstance(journal, list):
            raise PersistenceLoadError('bot_stats must be an object, undo_journal a list')

        for pred in predictions:
            self._check_record(pred)
        for entry in journal:
            self._check_journal_entry(entry)
        if not all(_is_int(bot_stats.get(k, 0)) for k in ('won', 'lost')):
            raise PersistenceLoadError('bot_stats counts must be integers')

        current = self._parse_current(blob.get('current_pred'))

        window_size = blob.get('analyze_last', WINDOW_SIZE_DEFAULT)
        if window_size not in WINDOW_SIZE_CHOICES:
            window_size = WINDOW_SIZE_DEFAULT
        alternate_mode = blob.get('use_alt_docena', ALTERNATE_MODE_DEFAULT)
        if not isinstance(alternate_mode, bool):
            alternate_mode = ALTERNATE_MODE_DEFAULT

        self.log.load_history(numbers)
        self.evaluator.load_state(predictions, bot_stats)
        self.stake.restore(blob.get('fibo_index', 0))
        self.stabilizer.restore(current)
        self.window_size = window_size
        self.alternate_mode = alternate_mode

        # The journal only ever covers the most recent outcomes
        self.undo_journal = [dict(e) for e in journal[-len(self.log):]] if len(self.log) else []
        if len(self.log) < MIN_OUTCOMES_FOR_PREDICTION:
            self.stabilizer.reset()
        self._recompute()

    @staticmethod
    def _check_record(pred):
        if not isinstance(pred, dict):
            raise PersistenceLoadError(f'Malformed prediction record: {pred!r}')
        if not isinstance(pred.get('id'), str) or not pred['id']:
            raise PersistenceLoadError(f'Prediction record without id: {pred!r}')
        if not _is_dozen(pred.get('predicted_dozen')):
            raise PersistenceLoadError(f'Bad predicted_dozen in {pred!r}')
        alt = pred.get('alt_dozen')
        if alt is not None and not _is_dozen(alt):
            raise PersistenceLoadError(f'Bad alt_dozen in {pred!r}')
        if not _is_number(pred.get('score')):
            raise PersistenceLoadError(f'Bad score in {pred!r}')
        if pred.get('result') not in (None, 'win', 'loss'):
            raise PersistenceLoadError(f'Bad result in {pred!r}')

    @classmethod
    def _check_journal_entry(cls, entry):
        if not isinstance(entry, dict):
            raise PersistenceLoadError(f'Malformed undo entry: {entry!r}')
        if not _is_int(entry.get('stake_index', 0)):
            raise PersistenceLoadError(f'Bad stake_index in {entry!r}')
        for key in ('resolved_id', 'pending_id'):
            if entry.get(key) is not None and not isinstance(entry[key], str):
                raise PersistenceLoadError(f'Bad {key} in {entry!r}')
        entry['current_pred'] = cls._parse_current(entry.get('current_pred'))

    @staticmethod
    def _parse_current(current):
        if current is None:
            return None
        if not isinstance(current, dict):
            raise PersistenceLoadError('current_pred must be an object')
        if not _is_dozen(current.get('primary')):
            raise PersistenceLoadError('current_pred.primary must be 1-3')
        alt = current.get('alt')
        if alt is not None and not _is_dozen(alt):
            raise PersistenceLoadError('current_pred.alt must be 1-3 or null')
        if not _is_int(current.get('rounds_held')):
            raise PersistenceLoadError('current_pred.rounds_held must be an integer')
        score = current.get('score')
        if not _is_number(score):
            raise PersistenceLoadError('current_pred.score must be a number')
        return {
            'primary': current['primary'],
            'alt': alt,
            'score': float(score),
            'rounds_held': current['rounds_held'],
        }
