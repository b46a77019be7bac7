"""
Authentication Decorators

JWT bearer-token decorators for HTTP endpoints. Tokens are issued by the
account service; this server only verifies them.
"""

from functools import wraps
from typing import Dict, Optional

import jwt
from flask import request, jsonify, current_app


def decode_token(token: str) -> Dict:
    """
    Verify a JWT and return its user claims.

    Raises:
        jwt.InvalidTokenError: Bad signature, expired, or missing user id.
    """
    secret = current_app.config.get('JWT_SECRET')
    if not secret:
        raise jwt.InvalidTokenError('Token verification is not configured')
    payload = jwt.decode(token, secret, algorithms=['HS256'])
    user_id = payload.get('user_id')
    if not user_id:
        raise jwt.InvalidTokenError('Token has no user id')
    return {'user_id': str(user_id), 'username': payload.get('username')}


def _bearer_token() -> Optional[str]:
    auth_header = request.headers.get('Authorization')
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    return auth_header.split(' ', 1)[1]


def require_auth(f):
    """
    Decorator to require authentication for protected HTTP endpoints.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return jsonify({
                'success': False,
                'error': 'Authorization token required'
            }), 401

        try:
            request.user = decode_token(token)
        except jwt.ExpiredSignatureError:
            return jsonify({'success': False, 'error': 'Token has expired'}), 401
        except jwt.InvalidTokenError as e:
            return jsonify({'success': False, 'error': f'Invalid token: {e}'}), 401

        return f(*args, **kwargs)

    return decorated_function


def optional_auth(f):
    """Attach the user when a valid token is sent; guests get ``request.user = None``."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        request.user = None
        token = _bearer_token()
        if token:
            try:
                request.user = decode_token(token)
            except jwt.InvalidTokenError as e:
                return jsonify({'success': False, 'error': f'Invalid token: {e}'}), 401
        return f(*args, **kwargs)

    return decorated_function
