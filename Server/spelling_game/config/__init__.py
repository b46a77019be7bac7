"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Gameplay constants (scoring, timers, items)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import POINTS_PER_WORD, STREAK_BONUS, TIMED_MODE_SECONDS, points_for

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'POINTS_PER_WORD', 'STREAK_BONUS', 'TIMED_MODE_SECONDS', 'points_for'
]
