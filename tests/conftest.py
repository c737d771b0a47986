"""
Shared pytest setup: isolated state file and a threading SocketIO server
so the transport tests never touch real data or need eventlet.
"""
import os
import sys
import tempfile

_STATE_DIR = tempfile.mkdtemp(prefix='roulette_state_')
os.environ.setdefault('ROULETTE_STATE_PATH', os.path.join(_STATE_DIR, 'state.json'))
os.environ.setdefault('ROULETTE_ASYNC_MODE', 'threading')

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
