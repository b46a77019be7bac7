"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_auth, optional_auth, decode_token
from .helpers import get_user_identity, current_user_id, state_to_dict
from .game_logger import game_logger

__all__ = [
    'require_auth', 'optional_auth', 'decode_token',
    'get_user_identity', 'current_user_id', 'state_to_dict',
    'game_logger'
]
