"""
Error taxonomy for the prediction engine.

InvalidOutcome / InvalidWindowSize are surfaced to the caller.
Persistence errors are raised by the state store and swallowed (logged)
by the engine: a broken store never stops a session.
"""


class RouletteEngineError(Exception):
    """Base class for all engine errors."""


class InvalidOutcome(RouletteEngineError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f'Invalid number {value!r}. Enter 0-36.')


class InvalidWindowSize(RouletteEngineError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f'Invalid window size {value!r}. Use 10-100 in steps of 10.')


class PersistenceLoadError(RouletteEngineError):
    pass


class PersistenceSaveError(RouletteEngineError):
    pass
