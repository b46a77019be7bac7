import random
import threading
import time
from unittest.mock import Mock

import pytest

from spelling_game.services.game_service import GameService
from spelling_game.services.speech import NullSpeechChannel

WORDS = "apple, banana, cherry, garden, island"


def make_service(dictionary=None):
    return GameService(dictionary=dictionary, speech_factory=lambda game_id: NullSpeechChannel(),
                       rng=random.Random(4))


def test_slow_dictionary_does_not_block_other_games():
    started = threading.Event()
    release = threading.Event()

    def word_exists(candidate):
        started.set()
        release.wait(5)
        return False

    service = make_service(dictionary=Mock(word_exists=Mock(side_effect=word_exists)))
    other_id = service.create_new_game('practice', virtual_words=WORDS)
    creator = threading.Thread(target=service.create_new_game, args=('mistake',),
                               kwargs={'virtual_words': WORDS})
    creator.start()
    try:
        assert started.wait(2)
        begin = time.monotonic()
        state = service.get_game_state(other_id)
        word = service.get_game(other_id).controller.current_word.text
        service.submit_answer(other_id, word)
        assert time.monotonic() - begin < 1
        assert state.phase == 'presenting'
    finally:
        release.set()
        creator.join(5)
    assert len(service.games) == 2


def test_mistake_game_needs_four_different_words():
    service = make_service()
    with pytest.raises(ValueError):
        service.create_new_game('mistake', virtual_words='cat, dog, Cat, sun')
    assert service.games == {}


def test_restart_keeps_game_id():
    service = make_service()
    game_id = service.create_new_game('quiz', virtual_words=WORDS)
    service.submit_answer(game_id, 'wrong')
    state = service.restart(game_id)
    assert state.game_id == game_id
    assert state.current_index == 0
    assert service.get_game(game_id).controller.turn.incorrect_words == []
