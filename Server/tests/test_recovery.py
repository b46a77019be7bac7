from unittest.mock import Mock

from conftest import item_store, make_words
from spelling_game.models.game import GameMode, OriginalGameMetrics, PassResult
from spelling_game.services.recovery import Inventory, RecoveryCoordinator, merge_second_chance


def test_guest_inventory_is_empty():
    inventory = Inventory()
    assert inventory.count("do_over") == 0
    assert inventory.consume("do_over") is False


def test_consume_is_optimistic():
    store = item_store(do_over=2)
    inventory = Inventory(store, "u1")
    assert inventory.consume("do_over") is True
    assert inventory.count("do_over") == 1
    store.use_item.assert_called_once_with("u1", "do_over", 1)


def test_rejected_consume_refetches():
    store = item_store(do_over=1)
    store.use_item.return_value = False
    inventory = Inventory(store, "u1")

    assert inventory.consume("do_over") is True
    # The store still reports one item
    assert inventory.count("do_over") == 1
    assert store.get_item_count.call_count == 4


def test_store_error_during_consume_refetches():
    store = item_store(second_chance=1)
    store.use_item.side_effect = RuntimeError("timeout")
    inventory = Inventory(store, "u1")
    assert inventory.consume("second_chance") is True
    assert inventory.count("second_chance") == 1


def test_inventory_fetch_failure_counts_zero():
    store = Mock()
    store.get_item_count.side_effect = RuntimeError("db down")
    assert Inventory(store, "u1").count("do_over") == 0


def test_do_over_offer_rules():
    coordinator = RecoveryCoordinator(Inventory(item_store(do_over=1), "u1"))
    assert coordinator.should_offer_do_over(GameMode.TIMED)
    assert coordinator.should_offer_do_over(GameMode.MISTAKE)
    assert not coordinator.should_offer_do_over(GameMode.PRACTICE)
    assert not coordinator.should_offer_do_over(GameMode.CROSSWORD)


def test_second_chance_offer_rules():
    coordinator = RecoveryCoordinator(Inventory(item_store(second_chance=1), "u1"))
    assert coordinator.can_offer_second_chance(GameMode.QUIZ, ["word"], in_second_chance=False)
    assert coordinator.can_offer_second_chance(GameMode.CROSSWORD, ["word"], in_second_chance=False)
    assert not coordinator.can_offer_second_chance(GameMode.QUIZ, [], in_second_chance=False)
    assert not coordinator.can_offer_second_chance(GameMode.QUIZ, ["word"], in_second_chance=True)


def test_practice_never_offers_second_chance():
    coordinator = RecoveryCoordinator(Inventory(item_store(second_chance=3), "u1"))
    assert not coordinator.can_offer_second_chance(GameMode.PRACTICE, ["word"], in_second_chance=False)


def test_retry_words_keep_original_order():
    words = make_words(["a", "b", "c", "d"])
    retry = RecoveryCoordinator.retry_words(words, ["d", "b"])
    assert [word.text for word in retry] == ["b", "d"]


def test_merge_law():
    original = OriginalGameMetrics(total_words=10, correct_count=7,
                                   incorrect_words=["x", "y", "z"], score=140, best_streak=4)
    retry = PassResult(mode=GameMode.QUIZ, total_words=3, correct_count=2, incorrect_words=["z"],
                       score=40, best_streak=2, list_word_count=10, is_second_chance=True)

    merged = merge_second_chance(original, retry)

    assert merged['total_words'] == 10
    assert merged['correct_count'] == 9
    assert merged['incorrect_words'] == ["z"]
    assert merged['accuracy'] == 90
    assert merged['score'] == 180
    assert merged['best_streak'] == 4


def test_merge_never_exceeds_total():
    original = OriginalGameMetrics(total_words=2, correct_count=2, incorrect_words=[])
    retry = PassResult(mode=GameMode.QUIZ, total_words=1, correct_count=1, incorrect_words=[],
                       score=20, best_streak=1, list_word_count=2, is_second_chance=True)
    assert merge_second_chance(original, retry)['correct_count'] == 2
