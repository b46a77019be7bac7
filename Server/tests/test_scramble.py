import random

import pytest

from spelling_game.models.errors import InvalidTurnAction
from spelling_game.services.scramble import ScrambleBoard, shuffle_letters


@pytest.mark.parametrize("word", ["apple", "banana", "mississippi", "a", "aa", "ab", "rhythm"])
def test_shuffle_is_permutation(word):
    for seed in range(20):
        assert sorted(shuffle_letters(word, random.Random(seed))) == sorted(word)


def test_shuffle_differs_when_letters_distinct():
    for seed in range(50):
        assert "".join(shuffle_letters("planet", random.Random(seed))) != "planet"


def test_single_letter_word():
    board = ScrambleBoard("a", random.Random(1))
    board.place(0)
    assert board.submit() is True


def test_tap_fills_first_empty_slot():
    board = ScrambleBoard("cat", letters=["t", "a", "c"])
    board.place(2)
    board.place(1)
    assert board.slot_letters() == ["c", "a", None]
    assert board.tray_letters() == ["t", None, None]


def test_drop_on_filled_slot_returns_tile_to_origin():
    board = ScrambleBoard("cat", letters=["t", "a", "c"])
    board.place(0, 1)
    board.place(2, 1)
    assert board.slot_letters() == [None, "c", None]
    assert board.tray_letters() == ["t", "a", None]


def test_repeated_letters_keep_their_origin():
    board = ScrambleBoard("aab", letters=["a", "b", "a"])
    board.place(2)
    board.place(0)
    board.remove(0)
    assert board.tray[2].origin == 2
    assert board.tray_letters() == [None, "b", "a"]
    assert board.slot_letters() == [None, "a", None]


def test_clear_all_restores_tray():
    board = ScrambleBoard("stone", random.Random(5))
    dealt = board.tray_letters()
    for index in range(len(dealt)):
        board.place(index)
    board.clear_all()
    assert board.tray_letters() == dealt
    assert board.slot_letters() == [None] * 5


def test_full_round_trip_solves():
    board = ScrambleBoard("Letter", random.Random(3))
    for letter in board.word:
        index = next(i for i, tile in enumerate(board.tray) if tile and tile.letter == letter)
        board.place(index)
    assert board.is_full
    assert board.submit() is True


def test_submit_requires_full_slots():
    board = ScrambleBoard("dog", random.Random(2))
    board.place(0)
    with pytest.raises(InvalidTurnAction):
        board.submit()


def test_place_from_empty_tray_position():
    board = ScrambleBoard("dog", random.Random(2))
    board.place(0)
    with pytest.raises(InvalidTurnAction):
        board.place(0)


def test_invalid_indexes():
    board = ScrambleBoard("dog", random.Random(2))
    with pytest.raises(InvalidTurnAction):
        board.place(5)
    with pytest.raises(InvalidTurnAction):
        board.remove(-1)


def test_letters_must_match_word():
    with pytest.raises(ValueError):
        ScrambleBoard("dog", letters=["d", "o", "o"])
