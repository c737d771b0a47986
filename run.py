#!/usr/bin/env python3
"""
Roulette Dozen Predictor - Entry Point
Start the Flask + SocketIO server.
"""

import os
import sys
import logging

# Ensure project root is in path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import HOST, PORT, DEBUG, DATA_DIR, STATE_PATH

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)

# Create data directory
os.makedirs(DATA_DIR, exist_ok=True)

from app import create_app, socketio

app = create_app()

if __name__ == '__main__':
    print("=" * 60)
    print("  Roulette Dozen Predictor v2.1")
    print("=" * 60)
    print(f"  Server:    http://localhost:{PORT}")
    print(f"  State:     {STATE_PATH}")
    print(f"  Debug:     {DEBUG}")
    print("=" * 60)
    print()

    socketio.run(app, host=HOST, port=PORT, debug=DEBUG, use_reloader=False)
