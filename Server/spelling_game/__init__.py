"""
Spelling Game Server Application Package

Flask + Socket.IO server for the spelling practice games: practice, timed,
quiz, word scramble, find-the-mistake and crossword.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance and its SocketIO server
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.game_controller import game_bp

    app.register_blueprint(game_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Spoken words go to the game's Socket.IO room
    from .services.game_service import get_game_service
    from .services.speech import SocketSpeechChannel
    from .websocket.handlers import game_room
    game_service = get_game_service()
    if game_service is not None and game_service.speech_factory is None:
        game_service.speech_factory = lambda game_id: SocketSpeechChannel(socketio, game_room(game_id))

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
