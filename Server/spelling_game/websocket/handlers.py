"""
WebSocket Event Handlers

Game rooms and the timed-mode countdown.
"""

from dataclasses import asdict
from flask_socketio import emit, join_room, leave_room
from ..models.errors import GameNotFoundError
from ..models.game import GameMode
from ..services.game_service import get_game_service
from ..utils.game_logger import game_logger

# Games with a running countdown task
running_timers = set()


def game_room(game_id: str) -> str:
    return f"game_{game_id}"


def run_countdown(socketio, game_id: str):
    """
    Tick a timed game once per second until its pass completes or the game goes away.

    A 2nd Chance pass gets a fresh countdown when the client joins again.
    """
    room = game_room(game_id)
    try:
        while True:
            socketio.sleep(1)
            game_service = get_game_service()
            if not game_service:
                break
            try:
                state = game_service.tick(game_id)
            except GameNotFoundError:
                break

            socketio.emit('timer_tick', {'game_id': game_id, 'time_left': state.time_left}, room=room)
            if state.phase == 'complete':
                socketio.emit('game_complete', {'game_id': game_id, 'state': asdict(state)}, room=room)
                break
    except Exception as e:
        game_logger.logger.error(f"Countdown for game {game_id} stopped: {e}")
    finally:
        running_timers.discard(game_id)


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('join_game')
    def handle_join_game(data):
        """Join a game's room; timed games start their countdown here."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        game_id = (data or {}).get('game_id')
        if not game_id:
            emit('error', {'error': 'Game ID is required'})
            return

        try:
            game = game_service.get_game(game_id)
        except GameNotFoundError:
            emit('error', {'error': 'Game not found'})
            return

        join_room(game_room(game_id))
        state = game_service.get_game_state(game_id)
        emit('game_state_update', {'game_id': game_id, 'state': asdict(state)})

        if (game.config.mode == GameMode.TIMED and not game.controller.is_complete
                and game_id not in running_timers):
            running_timers.add(game_id)
            socketio.start_background_task(run_countdown, socketio, game_id)
            game_logger.logger.info(f"Countdown started for game {game_id}")

    @socketio.on('leave_game')
    def handle_leave_game(data):
        game_id = (data or {}).get('game_id')
        if not game_id:
            emit('error', {'error': 'Game ID is required'})
            return
        leave_room(game_room(game_id))
