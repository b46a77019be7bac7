"""
Word Source

Turns a stored word list or a virtual comma-separated list into the shuffled
word sequence a game plays.
"""

import logging
import random
import time
from typing import List, Optional

from ..config.game_settings import QUIZ_SHORT_COUNT
from ..models.game import GameMode, Word

logger = logging.getLogger(__name__)


def parse_virtual_words(virtual_words) -> List[str]:
    """Accepts "a, b, c" or a list of strings. Blank entries are dropped."""
    if isinstance(virtual_words, str):
        parts = virtual_words.split(',')
    else:
        parts = list(virtual_words or [])
    return [str(part).strip() for part in parts if str(part).strip()]


def unique_words(texts: List[str]) -> List[str]:
    """First spelling of each word, compared case-insensitively, in list order."""
    seen = set()
    unique = []
    for text in texts:
        if text.lower() not in seen:
            seen.add(text.lower())
            unique.append(text)
    return unique


def shuffle_words(texts: List[str], rng: Optional[random.Random] = None) -> List[str]:
    """Durstenfeld shuffle of a copy, seeded from the clock unless an rng is given."""
    rng = rng or random.Random(time.time_ns())
    shuffled = list(texts)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_session_words(texts: List[str], mode: GameMode, quiz_count: Optional[str] = None,
                        rng: Optional[random.Random] = None) -> List[Word]:
    shuffled = shuffle_words(texts, rng)
    if mode == GameMode.QUIZ and str(quiz_count) == str(QUIZ_SHORT_COUNT):
        shuffled = shuffled[:QUIZ_SHORT_COUNT]
    return [Word(id=index + 1, text=text) for index, text in enumerate(shuffled)]


def load_word_texts(store, list_id: Optional[str] = None, virtual_words=None) -> List[str]:
    """
    Word texts of the requested list, each word once.

    Raises:
        ValueError: Neither source given, or the list is missing or empty.
    """
    if virtual_words:
        texts = parse_virtual_words(virtual_words)
    elif list_id:
        if store is None:
            raise ValueError("Word lists are unavailable without a database")
        word_list = store.get_word_list(list_id)
        if not word_list:
            raise ValueError(f"Word list not found: {list_id}")
        texts = [str(text).strip() for text in word_list.get('words', []) if str(text).strip()]
    else:
        raise ValueError("Either list_id or virtual_words is required")

    texts = unique_words(texts)
    if not texts:
        raise ValueError("The word list is empty")
    logger.debug(f"Loaded {len(texts)} words ({'virtual' if virtual_words else list_id})")
    return texts
