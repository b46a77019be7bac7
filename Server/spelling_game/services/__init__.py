"""
Services Package

Contains all business logic and service classes.
"""

from .game_service import GameService, GameConfig, get_game_service, initialize_game_service
from .storage import GameStore
from .dictionary import DictionaryClient
from .turn_controller import TurnController
from .misspelling import MisspellingGenerator

__all__ = [
    'GameService', 'GameConfig', 'get_game_service', 'initialize_game_service',
    'GameStore', 'DictionaryClient', 'TurnController', 'MisspellingGenerator'
]
