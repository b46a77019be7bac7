"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..models.errors import GameNotFoundError, InvalidTurnAction
from ..services.game_service import get_game_service
from ..utils.decorators import optional_auth, require_auth
from ..utils.game_logger import game_logger
from ..utils.helpers import current_user_id, state_to_dict

game_bp = Blueprint('game', __name__)


def _error(action: str, message: str, status: int, game_id=None):
    error_response = {'success': False, 'error': message}
    game_logger.log_server_response(request, action, False, error_response, game_id)
    return jsonify(error_response), status


def _run_game_action(game_id: str, action: str, operation, owner_only: bool = False, **log_details):
    """
    Shared request flow for actions on one game.

    ``operation`` receives the game service and returns a GameState.
    Invalid actions map to 400, unknown games to 404, anything else to 500.
    """
    try:
        game_service = get_game_service()
        if not game_service:
            return _error(action, 'Game service unavailable', 500, game_id)

        game_logger.log_user_action(request, action, game_id, **log_details)

        if owner_only and game_service.owner_of(game_id) != current_user_id():
            return _error(action, 'This game belongs to another player', 403, game_id)

        state = operation(game_service)
        response_data = {
            'success': True,
            'state': state_to_dict(state)
        }
        game_logger.log_server_response(request, action, True, response_data, game_id,
                                        phase=state.phase, score=state.score)
        return jsonify(response_data)

    except GameNotFoundError as e:
        return _error(action, str(e), 404, game_id)
    except InvalidTurnAction as e:
        return _error(action, str(e), 400, game_id)
    except Exception as e:
        game_logger.log_error(request, e, action, game_id)
        return _error(action, str(e), 500, game_id)


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


def _int_field(data: dict, name: str, required: bool = True):
    value = data.get(name)
    if value is None and not required:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTurnAction(f"'{name}' must be an integer")
    return value


@game_bp.route('/new_game', methods=['POST'])
@optional_auth
def new_game():
    """Create a new game session from a stored list or a virtual word list."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _error('new_game', 'Game service unavailable', 500)

        data = _json_body()
        game_mode = data.get('mode', 'practice')
        list_id = data.get('list_id')
        virtual_words = data.get('virtual_words')
        quiz_count = data.get('quiz_count')

        game_logger.log_user_action(request, 'new_game', game_mode=game_mode,
                                    list_id=list_id, virtual=bool(virtual_words))

        game_id = game_service.create_new_game(
            game_mode, list_id=list_id, virtual_words=virtual_words,
            quiz_count=quiz_count, user_id=current_user_id(),
        )
        state = game_service.get_game_state(game_id)

        response_data = {
            'success': True,
            'game_id': game_id,
            'state': state_to_dict(state)
        }
        game_logger.log_server_response(request, 'new_game', True, response_data, game_id,
                                        word_count=state.word_count)
        return jsonify(response_data)

    except ValueError as e:
        return _error('new_game', str(e), 400)
    except Exception as e:
        game_logger.log_error(request, e, 'new_game')
        return _error('new_game', str(e), 500)


@game_bp.route('/game/<game_id>/state', methods=['GET'])
def get_state(game_id):
    """Get current game state."""
    return _run_game_action(game_id, 'get_state', lambda gs: gs.get_game_state(game_id))


@game_bp.route('/game/<game_id>/answer', methods=['POST'])
def submit_answer(game_id):
    """Submit a typed answer (practice, timed, quiz)."""
    answer = _json_body().get('answer', '')
    if not isinstance(answer, str):
        answer = ''
    return _run_game_action(game_id, 'submit_answer', lambda gs: gs.submit_answer(game_id, answer))


@game_bp.route('/game/<game_id>/choice', methods=['POST'])
def choose(game_id):
    """Pick the misspelled word (find-the-mistake)."""
    data = _json_body()
    return _run_game_action(
        game_id, 'choose',
        lambda gs: gs.choose(game_id, _int_field(data, 'choice_index')),
        choice_index=data.get('choice_index'),
    )


@game_bp.route('/game/<game_id>/scramble/place', methods=['POST'])
def place_tile(game_id):
    """Place a tray tile: tap (first empty slot) or drop on ``slot_index``."""
    data = _json_body()
    return _run_game_action(
        game_id, 'scramble_place',
        lambda gs: gs.place_tile(game_id, _int_field(data, 'tray_index'),
                                 _int_field(data, 'slot_index', required=False)),
    )


@game_bp.route('/game/<game_id>/scramble/remove', methods=['POST'])
def remove_tile(game_id):
    data = _json_body()
    return _run_game_action(
        game_id, 'scramble_remove',
        lambda gs: gs.remove_tile(game_id, _int_field(data, 'slot_index')),
    )


@game_bp.route('/game/<game_id>/scramble/clear', methods=['POST'])
def clear_tiles(game_id):
    return _run_game_action(game_id, 'scramble_clear', lambda gs: gs.clear_tiles(game_id))


@game_bp.route('/game/<game_id>/scramble/submit', methods=['POST'])
def submit_scramble(game_id):
    return _run_game_action(game_id, 'scramble_submit', lambda gs: gs.submit_scramble(game_id))


@game_bp.route('/game/<game_id>/crossword/cell', methods=['POST'])
def set_cell(game_id):
    """Type (or erase, with an empty letter) one crossword cell."""
    data = _json_body()
    letter = data.get('letter', '')
    if not isinstance(letter, str):
        letter = ''
    return _run_game_action(
        game_id, 'crossword_cell',
        lambda gs: gs.set_cell(game_id, _int_field(data, 'row'), _int_field(data, 'col'), letter),
    )


@game_bp.route('/game/<game_id>/crossword/show_mistakes', methods=['POST'])
def show_mistakes(game_id):
    return _run_game_action(game_id, 'crossword_show_mistakes', lambda gs: gs.show_mistakes(game_id))


@game_bp.route('/game/<game_id>/crossword/submit', methods=['POST'])
def submit_crossword(game_id):
    return _run_game_action(game_id, 'crossword_submit', lambda gs: gs.submit_crossword(game_id))


@game_bp.route('/game/<game_id>/next', methods=['POST'])
def next_word(game_id):
    """Leave the feedback screen."""
    return _run_game_action(game_id, 'next_word', lambda gs: gs.next_word(game_id))


@game_bp.route('/game/<game_id>/try_again', methods=['POST'])
def try_again(game_id):
    """Practice mode: retry a missed word without scoring."""
    return _run_game_action(game_id, 'try_again', lambda gs: gs.try_again(game_id))


@game_bp.route('/game/<game_id>/skip', methods=['POST'])
def skip(game_id):
    return _run_game_action(game_id, 'skip', lambda gs: gs.skip(game_id))


@game_bp.route('/game/<game_id>/do_over', methods=['POST'])
@require_auth
def do_over(game_id):
    """Accept (``accept: true``) or decline the pending Do Over."""
    accept = _json_body().get('accept') is True
    return _run_game_action(
        game_id, 'do_over',
        lambda gs: gs.resolve_do_over(game_id, accept),
        owner_only=True, accept=accept,
    )


@game_bp.route('/game/<game_id>/second_chance', methods=['POST'])
@require_auth
def second_chance(game_id):
    """Replay only the missed words of a finished game."""
    return _run_game_action(game_id, 'second_chance', lambda gs: gs.second_chance(game_id), owner_only=True)


@game_bp.route('/game/<game_id>/restart', methods=['POST'])
def restart(game_id):
    """Save progress and start the same game over."""
    return _run_game_action(game_id, 'restart', lambda gs: gs.restart(game_id))


@game_bp.route('/game/<game_id>/abandon', methods=['POST'])
def abandon(game_id):
    """Leave a game. Progress so far is saved; failures never block leaving."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _error('abandon', 'Game service unavailable', 500, game_id)

        game_logger.log_user_action(request, 'abandon', game_id)
        saved = game_service.abandon(game_id)

        response_data = {'success': True, 'progress_saved': saved}
        game_logger.log_server_response(request, 'abandon', True, response_data, game_id)
        return jsonify(response_data)

    except GameNotFoundError as e:
        return _error('abandon', str(e), 404, game_id)
    except Exception as e:
        game_logger.log_error(request, e, 'abandon', game_id)
        return _error('abandon', str(e), 500, game_id)


@game_bp.route('/game/<game_id>/word_meta', methods=['GET'])
def word_meta(game_id):
    """Definition, example sentence, origin and illustration of the word being reviewed."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _error('word_meta', 'Game service unavailable', 500, game_id)

        game_logger.log_user_action(request, 'word_meta', game_id)
        meta = game_service.get_word_meta(game_id)

        response_data = {'success': True, 'meta': meta}
        game_logger.log_server_response(request, 'word_meta', True, response_data, game_id)
        return jsonify(response_data)

    except GameNotFoundError as e:
        return _error('word_meta', str(e), 404, game_id)
    except InvalidTurnAction as e:
        return _error('word_meta', str(e), 400, game_id)
    except Exception as e:
        game_logger.log_error(request, e, 'word_meta', game_id)
        return _error('word_meta', str(e), 500, game_id)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    game_service = get_game_service()
    return jsonify({
        'status': 'healthy',
        'service': 'spelling-game-server',
        'active_games': len(game_service.games) if game_service else 0
    })
