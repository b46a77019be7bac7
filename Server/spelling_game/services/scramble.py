"""
Scramble Placement Model

A tray of shuffled letter tiles and one answer slot per letter of the
target word. Tiles are identified by the tray index they were dealt to,
so repeated letters are never confused and every tile always has a home
to return to.
"""

import random
from dataclasses import dataclass
from typing import List, Optional

from ..config.game_settings import SCRAMBLE_MAX_RESHUFFLES
from ..models.errors import InvalidTurnAction


@dataclass(frozen=True)
class Tile:
    letter: str
    origin: int  # tray index the tile was dealt to


def shuffle_letters(word: str, rng: Optional[random.Random] = None,
                    max_reshuffles: int = SCRAMBLE_MAX_RESHUFFLES) -> List[str]:
    """
    Fisher-Yates shuffle of a word's letters.

    Reshuffles (bounded) while the result still spells the word, so the
    tray does not start out already solved.
    """
    rng = rng or random.Random()
    letters = list(word)

    def _shuffle():
        for i in range(len(letters) - 1, 0, -1):
            j = rng.randint(0, i)
            letters[i], letters[j] = letters[j], letters[i]

    _shuffle()
    attempts = 0
    while "".join(letters) == word and attempts < max_reshuffles:
        _shuffle()
        attempts += 1
    return letters


class ScrambleBoard:
    """Tray/slot placement state for one scrambled word."""

    def __init__(self, word: str, rng: Optional[random.Random] = None,
                 letters: Optional[List[str]] = None):
        if not word:
            raise ValueError("Scramble word must not be empty")
        self.word = word
        dealt = letters if letters is not None else shuffle_letters(word, rng)
        if sorted(dealt) != sorted(word):
            raise ValueError("Dealt letters must be a permutation of the word")
        self.tray: List[Optional[Tile]] = [Tile(letter, index) for index, letter in enumerate(dealt)]
        self.slots: List[Optional[Tile]] = [None] * len(word)

    @property
    def is_full(self) -> bool:
        return all(slot is not None for slot in self.slots)

    def place(self, tray_index: int, slot_index: Optional[int] = None) -> None:
        """
        Move a tray tile into a slot.

        Without ``slot_index`` the tile goes to the first empty slot
        (tap-to-place). Dropping onto a filled slot sends the displaced
        tile back to its own tray index.
        """
        self._check_index(tray_index, len(self.tray), "tray")
        tile = self.tray[tray_index]
        if tile is None:
            raise InvalidTurnAction(f"Tray position {tray_index} is empty")

        if slot_index is None:
            slot_index = next((i for i, slot in enumerate(self.slots) if slot is None), None)
            if slot_index is None:
                raise InvalidTurnAction("All slots are already filled")
        self._check_index(slot_index, len(self.slots), "slot")

        displaced = self.slots[slot_index]
        if displaced is not None:
            self.tray[displaced.origin] = displaced
        self.slots[slot_index] = tile
        self.tray[tray_index] = None

    def remove(self, slot_index: int) -> None:
        """Return the tile in a slot to its tray index. Removing from an empty slot is a no-op."""
        self._check_index(slot_index, len(self.slots), "slot")
        tile = self.slots[slot_index]
        if tile is None:
            return
        self.tray[tile.origin] = tile
        self.slots[slot_index] = None

    def clear_all(self) -> None:
        for index in range(len(self.slots)):
            self.remove(index)

    def answer(self) -> str:
        return "".join(tile.letter for tile in self.slots if tile is not None)

    def submit(self) -> bool:
        """Compare the filled slots with the word, case-insensitively."""
        if not self.is_full:
            raise InvalidTurnAction("Place every letter before submitting")
        return self.answer().lower() == self.word.lower()

    def tray_letters(self) -> List[Optional[str]]:
        return [tile.letter if tile else None for tile in self.tray]

    def slot_letters(self) -> List[Optional[str]]:
        return [tile.letter if tile else None for tile in self.slots]

    @staticmethod
    def _check_index(index: int, size: int, name: str) -> None:
        if not isinstance(index, int) or not 0 <= index < size:
            raise InvalidTurnAction(f"Invalid {name} index: {index}")
