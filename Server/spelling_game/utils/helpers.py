"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Any, Dict, Optional
from dataclasses import asdict
from flask import request


def get_user_identity(request_obj=None) -> Dict[str, Any]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    user = getattr(request_obj, 'user', None) or {}
    return {
        'user_ip': request_obj.remote_addr or 'unknown',
        'user_id': user.get('user_id'),
        'username': user.get('username'),
    }


def current_user_id(request_obj=None) -> Optional[str]:
    """The authenticated user's id, or None for guests."""
    return get_user_identity(request_obj)['user_id']


def state_to_dict(state) -> Dict[str, Any]:
    """Serialize a GameState dataclass for a JSON response."""
    return asdict(state)
