"""
Outcome Log - append-only record of every accepted spin (0-36).

Entries never change once appended. The only removals are `pop()` for
"delete last number" and `clear()` for a full reset.
"""

import sys
sys.path.insert(0, '.')
from config import MIN_NUMBER, MAX_NUMBER


class OutcomeLog:
    def __init__(self, history=None):
        self.spin_history = []
        if history:
            self.load_history(history)

    def __len__(self):
        return len(self.spin_history)

    def __iter__(self):
        return iter(self.spin_history)

    def append(self, number):
        self.spin_history.append(number)

    def pop(self):
        """Remove and return the last number, or None when empty."""
        if not self.spin_history:
            return None
        return self.spin_history.pop()

    def clear(self):
        self.spin_history = []

    def load_history(self, history):
        """Load persisted numbers, dropping anything outside 0-36."""
        self.spin_history = [
            int(n) for n in history
            if isinstance(n, int) and not isinstance(n, bool)
            and MIN_NUMBER <= n <= MAX_NUMBER
        ]

    def to_list(self):
        return list(self.spin_history)
