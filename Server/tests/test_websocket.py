import random
from unittest.mock import Mock

import pytest

from spelling_game import create_app
from spelling_game.config import TestingConfig
from spelling_game.services.game_service import initialize_game_service
from spelling_game.services.speech import NullSpeechChannel
from spelling_game.websocket.handlers import run_countdown, running_timers


@pytest.fixture
def game_service():
    return initialize_game_service(speech_factory=lambda game_id: NullSpeechChannel(),
                                   time_limit=3, rng=random.Random(5))


def test_countdown_ticks_until_complete(game_service):
    game_id = game_service.create_new_game('timed', virtual_words='cat, dog, sun')
    socketio = Mock()
    running_timers.add(game_id)

    run_countdown(socketio, game_id)

    assert socketio.sleep.call_count == 3
    events = [call[0][0] for call in socketio.emit.call_args_list]
    assert events == ['timer_tick', 'timer_tick', 'timer_tick', 'game_complete']
    assert socketio.emit.call_args_list[2][0][1]['time_left'] == 0
    assert game_id not in running_timers
    assert game_service.get_game_state(game_id).phase == 'complete'


def test_countdown_stops_for_abandoned_game(game_service):
    game_id = game_service.create_new_game('timed', virtual_words='cat, dog')
    game_service.abandon(game_id)
    socketio = Mock()

    run_countdown(socketio, game_id)

    socketio.emit.assert_not_called()


def test_join_game_sends_state(game_service):
    app, socketio = create_app(TestingConfig)
    game_id = game_service.create_new_game('practice', virtual_words='cat, dog')

    client = socketio.test_client(app)
    client.emit('join_game', {'game_id': game_id})
    received = client.get_received()

    assert received[0]['name'] == 'game_state_update'
    assert received[0]['args'][0]['state']['game_mode'] == 'practice'


def test_join_unknown_game(game_service):
    app, socketio = create_app(TestingConfig)
    client = socketio.test_client(app)
    client.emit('join_game', {'game_id': 'missing'})
    assert client.get_received()[0]['name'] == 'error'
