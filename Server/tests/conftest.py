import random
from unittest.mock import Mock

import pytest

from spelling_game.models.game import GameMode, Word
from spelling_game.services.recovery import Inventory, RecoveryCoordinator
from spelling_game.services.session_lifecycle import SessionLifecycle
from spelling_game.services.turn_controller import TurnController

TEN_WORDS = ["apple", "banana", "cherry", "garden", "island",
             "jacket", "kitten", "lemon", "market", "needle"]


def make_words(texts):
    return [Word(id=index + 1, text=text) for index, text in enumerate(texts)]


def item_store(do_over=0, second_chance=0):
    """Mock store holding the given Star Shop items; every use succeeds."""
    counts = {'do_over': do_over, 'second_chance': second_chance}
    store = Mock()
    store.get_item_count.side_effect = lambda user_id, item_id: counts[item_id]
    store.use_item.return_value = True
    return store


def grant_items(store, user_id, item_id, quantity):
    """Seed a player's Star Shop inventory directly in the items collection."""
    store.items_collection.update_one({'user_id': user_id, 'item_id': item_id},
                                      {'$inc': {'quantity': quantity}}, upsert=True)


@pytest.fixture
def make_controller():
    """Factory for turn controllers with a headless lifecycle and a mocked inventory."""
    def _make(mode, texts=TEN_WORDS, do_over=0, second_chance=0, lifecycle=None, **kwargs):
        inventory = Inventory(item_store(do_over, second_chance), 'user-1')
        kwargs.setdefault('rng', random.Random(7))
        return TurnController(
            mode, make_words(texts),
            recovery=RecoveryCoordinator(inventory),
            lifecycle=lifecycle or SessionLifecycle(None, mode),
            **kwargs
        )
    return _make


def answer_all(controller, wrong=()):
    """Type answers until the pass completes; words in ``wrong`` get a bad answer."""
    while not controller.is_complete:
        word = controller.current_word.text
        controller.submit_answer(word + "zz" if word in wrong else word)
        if controller.mode.has_feedback and not controller.is_complete:
            controller.next()
