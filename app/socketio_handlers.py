"""
SocketIO Event Handlers - Real-time WebSocket events for the dashboard.
Handles number input, undo/reset, settings and pleno lookups.

Every handler goes through `engine_lock`, so outcomes from several
clients are applied strictly one at a time.
"""

import logging
import threading

from flask_socketio import emit

from app import socketio

import sys
sys.path.insert(0, '.')
from config import STATE_PATH, PLENOS_PRIMARY_COUNT, get_dozen
from app.errors import InvalidOutcome, InvalidWindowSize
from app.ml.engine import PredictionEngine
from app.session.state_store import JsonStateStore

logger = logging.getLogger(__name__)

# Global instances
engine = PredictionEngine(store=JsonStateStore(STATE_PATH))
engine_lock = threading.Lock()

logger.info("[Startup] Engine ready with %d numbers", len(engine.log))


def _parse_int(value):
    """Input box values arrive as strings or numbers; strings go through int()."""
    if isinstance(value, str):
        return int(value.strip())
    return value


def _parse_bool(value):
    """Checkbox values arrive as bools, 0/1 or 'true'/'false' strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ('true', '1', 'yes', 'on'):
            return True
        if text in ('false', '0', 'no', 'off'):
            return False
    raise ValueError(f'Not a boolean: {value!r}')


@socketio.on('connect')
def handle_connect():
    with engine_lock:
        snapshot = engine.get_snapshot()
    emit('connected', {
        'message': 'Connected to Roulette Dozen Predictor',
        'snapshot': snapshot,
    })


@socketio.on('submit_outcome')
def handle_submit_outcome(data):
    """Submit the actual spin result."""
    data = data or {}
    try:
        number = _parse_int(data.get('number'))
    except ValueError:
        emit('error', {'message': 'Invalid number. Enter 0-36.'})
        return

    with engine_lock:
        try:
            resolved = engine.accept_outcome(number)
        except InvalidOutcome as e:
            emit('error', {'message': str(e)})
            return
        snapshot = engine.get_snapshot()

    emit('outcome_processed', {
        'number': snapshot['log'][-1],
        'dozen': get_dozen(snapshot['log'][-1]),
        'resolved': resolved,
        'snapshot': snapshot,
    })


@socketio.on('delete_last')
def handle_delete_last():
    """Undo/revert the last entered number."""
    with engine_lock:
        removed = engine.delete_last_outcome()
        snapshot = engine.get_snapshot()

    if removed is None:
        emit('error', {'message': 'No numbers to delete.'})
        return

    emit('outcome_deleted', {
        'removed_number': removed,
        'snapshot': snapshot,
    })


@socketio.on('reset_all')
def handle_reset_all():
    """Clear numbers, predictions, bot stats and the stake progression."""
    with engine_lock:
        engine.reset_all()
        snapshot = engine.get_snapshot()

    emit('reset_complete', {
        'message': 'All data cleared. Fresh start.',
        'snapshot': snapshot,
    })


@socketio.on('set_window_size')
def handle_set_window_size(data):
    data = data or {}
    try:
        window_size = _parse_int(data.get('window_size'))
    except ValueError:
        emit('error', {'message': 'Invalid window size. Use 10-100 in steps of 10.'})
        return

    with engine_lock:
        try:
            engine.set_window_size(window_size)
        except InvalidWindowSize as e:
            emit('error', {'message': str(e)})
            return
        snapshot = engine.get_snapshot()

    emit('settings_updated', {'snapshot': snapshot})


@socketio.on('set_alternate_mode')
def handle_set_alternate_mode(data):
    data = data or {}
    try:
        enabled = _parse_bool(data.get('enabled'))
    except ValueError:
        emit('error', {'message': 'Invalid alternate mode. Use true or false.'})
        return

    with engine_lock:
        engine.set_alternate_mode(enabled)
        snapshot = engine.get_snapshot()

    emit('settings_updated', {'snapshot': snapshot})


@socketio.on('get_snapshot')
def handle_get_snapshot():
    with engine_lock:
        snapshot = engine.get_snapshot()
    emit('snapshot', snapshot)


@socketio.on('recommend_plenos')
def handle_recommend_plenos(data):
    data = data or {}
    try:
        dozen = _parse_int(data.get('dozen'))
        take = _parse_int(data.get('take', PLENOS_PRIMARY_COUNT))
    except ValueError:
        emit('error', {'message': 'Invalid dozen. Use 0-3.'})
        return

    with engine_lock:
        try:
            numbers = engine.recommend_plenos(dozen, take)
        except (ValueError, TypeError):
            emit('error', {'message': 'Invalid dozen. Use 0-3.'})
            return

    emit('plenos', {'dozen': dozen, 'numbers': numbers})
