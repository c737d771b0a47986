"""
HTTP Routes - Health check and read-only JSON views of the engine.
"""

from flask import Blueprint, jsonify, request

import sys
sys.path.insert(0, '.')
from config import ALL_DOZENS, DOZEN_LABELS, PLENOS_PRIMARY_COUNT

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    return jsonify({'status': 'ok', 'service': 'Roulette Dozen Predictor'})


@main_bp.route('/api/snapshot')
def snapshot():
    from app.socketio_handlers import engine, engine_lock
    with engine_lock:
        return jsonify(engine.get_snapshot())


@main_bp.route('/api/plenos/<int:dozen>')
def plenos(dozen):
    from app.socketio_handlers import engine, engine_lock
    if dozen not in ALL_DOZENS:
        return jsonify({'error': f'Unknown dozen {dozen}. Use 0-3.'}), 400

    take = request.args.get('take', PLENOS_PRIMARY_COUNT, type=int)
    with engine_lock:
        numbers = engine.recommend_plenos(dozen, take)
    return jsonify({'dozen': dozen, 'label': DOZEN_LABELS[dozen], 'numbers': numbers})
