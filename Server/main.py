"""
Spelling Game Server - Main Entry Point

Initializes the store, the dictionary client and the game service, then
starts the Flask-SocketIO application.
"""

from spelling_game import create_app
from spelling_game.config import Config
from spelling_game.services.dictionary import DictionaryClient
from spelling_game.services.game_service import initialize_game_service
from spelling_game.services.storage import GameStore
from spelling_game.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        store = None
        if Config.MONGO_URI:
            try:
                store = GameStore(Config.MONGO_URI, db_name=Config.MONGO_DB_NAME)
                print("✓ Game store connected")
            except Exception as e:
                game_logger.logger.error(f"Game store unavailable, running without persistence: {e}")
                print("✗ Failed to connect game store, sessions will not be saved")
        else:
            print("✗ MongoDB URI not configured, sessions will not be saved")

        dictionary = DictionaryClient(Config.DICTIONARY_API_URL, Config.DICTIONARY_TIMEOUT_SECONDS, store=store)

        initialize_game_service(store=store, dictionary=dictionary, time_limit=Config.TIMED_MODE_SECONDS)
        print("✓ Game service initialized successfully")

        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        game_logger.logger.info("Spelling Game Server starting")

        print(f"\nStarting Spelling Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print(f"Persistence available: {store is not None}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Spelling Game Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
