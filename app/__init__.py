"""
Flask Application Factory with SocketIO initialization.
"""

from flask import Flask
from flask_socketio import SocketIO

import sys
sys.path.insert(0, '.')
from config import SECRET_KEY, ASYNC_MODE

socketio = SocketIO()


def create_app():
    app = Flask(__name__)

    app.config['SECRET_KEY'] = SECRET_KEY

    from app.routes import main_bp
    app.register_blueprint(main_bp)

    socketio.init_app(app, cors_allowed_origins="*", async_mode=ASYNC_MODE)

    from app import socketio_handlers  # noqa: F401

    @app.after_request
    def add_no_cache_headers(response):
        """Snapshots change every spin; never let the browser cache them."""
        if 'application/json' in response.content_type:
            response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
            response.headers['Pragma'] = 'no-cache'
            response.headers['Expires'] = '0'
        return response

    return app
