"""
Stake Manager - Fibonacci loss progression for the dozen bet.

Money Management Strategy:
- Sequence: [1, 1, 2, 3, 5, 8, 13, 21] units
- On WIN: reset to step 0
- On LOSS: advance one step only if the lost prediction was Strong
  (score > 0.65); Moderate and Weak losses keep the current step
- The index is capped at the last step (21 units)
"""

import sys
sys.path.insert(0, '.')
from config import FIBONACCI_SEQUENCE, STRENGTH_STRONG, get_strength_label


class StakeManager:
    def __init__(self, index=0):
        self.sequence = list(FIBONACCI_SEQUENCE)
        self.index = 0
        self.restore(index)

    @property
    def max_index(self):
        return len(self.sequence) - 1

    @property
    def current_stake(self):
        return self.sequence[min(self.index, self.max_index)]

    def restore(self, index):
        """Set the index from persisted/undo state, clamped to the sequence."""
        try:
            index = int(index)
        except (TypeError, ValueError):
            index = 0
        self.index = max(0, min(index, self.max_index))

    def process_result(self, won, score):
        """Apply one resolved prediction. Returns the new index."""
        if won:
            self.index = 0
        elif get_strength_label(score) == STRENGTH_STRONG:
            self.index = min(self.index + 1, self.max_index)
        # Moderate / Weak losses leave the progression where it is
        return self.index

    def full_reset(self):
        self.index = 0

    def get_status(self):
        return {
            'index': self.index,
            'round': self.index + 1,
            'value': self.current_stake,
            'sequence': list(self.sequence),
        }
