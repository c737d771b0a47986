"""
Unit Tests for the Stabilizer state machine and the StakeManager
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import FIBONACCI_SEQUENCE, MIN_OUTCOMES_FOR_PREDICTION
from app.ml.stabilizer import Stabilizer, recent_wins_for
from app.money.stake_manager import StakeManager


def _active(primary=1, alt=2, score=0.5, rounds_held=1):
    return Stabilizer({'primary': primary, 'alt': alt, 'score': score, 'rounds_held': rounds_held})


def _resolved(result, dozen):
    return {'result': result, 'predicted_dozen': dozen}


# ═══════════════════════════════════════════════════════════════
# Stabilizer
# ═══════════════════════════════════════════════════════════════

class TestStabilizerEntry:
    def test_waits_for_ten_outcomes(self):
        st = Stabilizer()
        for count in range(MIN_OUTCOMES_FOR_PREDICTION):
            assert st.evaluate({1: 0.9, 2: 0.1, 3: 0.1}, count, True) == 'waiting'
            assert st.current is None

    def test_entry_picks_best_and_second(self):
        st = Stabilizer()
        assert st.evaluate({1: 0.2, 2: 0.7, 3: 0.4}, 10, True) == 'entered'
        assert st.current == {'primary': 2, 'alt': 3, 'score': 0.7, 'rounds_held': 1}

    def test_entry_without_alternate(self):
        st = Stabilizer()
        st.evaluate({1: 0.2, 2: 0.7, 3: 0.4}, 10, False)
        assert st.current['alt'] is None

    def test_ties_keep_table_order(self):
        st = Stabilizer()
        st.evaluate({1: 0.4, 2: 0.4, 3: 0.4}, 10, True)
        assert st.current['primary'] == 1
        assert st.current['alt'] == 2

    def test_guard_clears_active_state(self):
        st = _active()
        assert st.evaluate({1: 0.0, 2: 0.9, 3: 0.0}, 9, True) == 'waiting'
        assert st.current is None


class TestStabilizerUpdate:
    def test_same_best_refreshes(self):
        st = _active(primary=1, alt=2, score=0.5, rounds_held=2)
        assert st.evaluate({1: 0.7, 2: 0.2, 3: 0.3}, 12, True) == 'refreshed'
        assert st.current == {'primary': 1, 'alt': 3, 'score': 0.7, 'rounds_held': 3}

    def test_clear_challenger_switches(self):
        """0.65 >= 0.5 * 1.2 -> switch immediately."""
        st = _active(primary=1, score=0.5, rounds_held=1)
        assert st.evaluate({1: 0.5, 2: 0.65, 3: 0.1}, 12, True) == 'switched'
        assert st.current['primary'] == 2
        assert st.current['alt'] == 1
        assert st.current['score'] == 0.65
        assert st.current['rounds_held'] == 1

    def test_weak_challenger_is_held(self):
        st = _active(primary=1, score=0.5, rounds_held=1)
        assert st.evaluate({1: 0.45, 2: 0.55, 3: 0.1}, 12, True) == 'held'
        assert st.current['primary'] == 1
        assert st.current['score'] == 0.5
        assert st.current['rounds_held'] == 2

    def test_hold_drops_alt_when_alternate_off(self):
        st = _active(primary=1, alt=2, score=0.5, rounds_held=1)
        assert st.evaluate({1: 0.45, 2: 0.55, 3: 0.1}, 12, False) == 'held'
        assert st.current['alt'] is None

    def test_hold_keeps_alt_when_alternate_on(self):
        st = _active(primary=1, alt=3, score=0.5, rounds_held=1)
        st.evaluate({1: 0.45, 2: 0.55, 3: 0.1}, 12, True)
        assert st.current['alt'] == 3

    def test_hold_picks_alt_when_alternate_turned_on(self):
        st = _active(primary=1, alt=None, score=0.5, rounds_held=1)
        assert st.evaluate({1: 0.45, 2: 0.55, 3: 0.1}, 12, True) == 'held'
        assert st.current['alt'] == 2

    def test_switch_after_three_rounds(self):
        st = _active(primary=1, score=0.5, rounds_held=3)
        assert st.evaluate({1: 0.45, 2: 0.55, 3: 0.1}, 12, True) == 'switched'
        assert st.current['primary'] == 2
        assert st.current['rounds_held'] == 1

    def test_two_wins_protect_current(self):
        history = [_resolved('win', 1), _resolved('win', 1), _resolved(None, 1)]
        st = _active(primary=1, score=0.5, rounds_held=5)
        assert st.evaluate({1: 0.4, 2: 0.54, 3: 0.1}, 12, True, history) == 'held'
        assert st.current['primary'] == 1
        assert st.current['rounds_held'] == 6

    def test_two_wins_do_not_protect_against_strong_challenger(self):
        history = [_resolved('win', 1), _resolved('win', 1)]
        st = _active(primary=1, score=0.5, rounds_held=5)
        assert st.evaluate({1: 0.4, 2: 0.56, 3: 0.1}, 12, True, history) == 'switched'
        assert st.current['primary'] == 2

    def test_wins_on_other_dozen_do_not_protect(self):
        history = [_resolved('win', 2), _resolved('win', 1)]
        st = _active(primary=1, score=0.5, rounds_held=5)
        assert st.evaluate({1: 0.4, 2: 0.54, 3: 0.1}, 12, True, history) == 'switched'


class TestRecentWins:
    def test_skips_pending(self):
        history = [_resolved('win', 3), _resolved('win', 3), _resolved(None, 3)]
        assert recent_wins_for(3, history)

    def test_needs_two_resolved(self):
        assert not recent_wins_for(3, [_resolved('win', 3)])

    def test_loss_breaks(self):
        assert not recent_wins_for(3, [_resolved('win', 3), _resolved('loss', 3)])


# ═══════════════════════════════════════════════════════════════
# StakeManager
# ═══════════════════════════════════════════════════════════════

class TestStakeManager:
    def test_starts_at_zero(self):
        sm = StakeManager()
        assert sm.index == 0
        assert sm.current_stake == 1
        assert sm.sequence == FIBONACCI_SEQUENCE

    def test_strong_loss_advances(self):
        sm = StakeManager()
        assert sm.process_result(False, 0.8) == 1
        assert sm.process_result(False, 0.66) == 2
        assert sm.current_stake == 2

    def test_moderate_and_weak_losses_hold(self):
        sm = StakeManager(index=3)
        sm.process_result(False, 0.65)
        assert sm.index == 3
        sm.process_result(False, 0.5)
        assert sm.index == 3
        sm.process_result(False, 0.2)
        assert sm.index == 3

    def test_win_resets(self):
        sm = StakeManager(index=5)
        sm.process_result(True, 0.1)
        assert sm.index == 0

    def test_capped_at_last_step(self):
        sm = StakeManager()
        for _ in range(20):
            sm.process_result(False, 0.9)
        assert sm.index == 7
        assert sm.current_stake == 21

    def test_restore_clamps(self):
        assert StakeManager(index=99).index == 7
        assert StakeManager(index=-3).index == 0
        assert StakeManager(index='bad').index == 0

    def test_status(self):
        sm = StakeManager(index=4)
        status = sm.get_status()
        assert status['round'] == 5
        assert status['value'] == 5
