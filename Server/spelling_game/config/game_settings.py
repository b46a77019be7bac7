"""
Game Configuration Constants Module

Gameplay constants shared by the turn controller, the scoring ledger,
the recovery coordinator and the session lifecycle. Everything that
changes how a pass is played or scored is centralized here.
"""

from typing import Dict, Final, List

# Scoring
POINTS_PER_WORD: Final[int] = 20
"""Base points for one correct answer. Applies to every mode."""

STREAK_BONUS: Final[int] = 5
"""Extra points per streak step, added on each correct answer in live-feedback modes."""

MODE_POINTS: Final[Dict[str, int]] = {
    "practice": POINTS_PER_WORD,
    "timed": POINTS_PER_WORD,
    "quiz": POINTS_PER_WORD,
    "scramble": POINTS_PER_WORD,
    "mistake": POINTS_PER_WORD,
    "crossword": POINTS_PER_WORD,
}

CROSSWORD_COMPLETION_MULTIPLIER: Final[int] = 2
"""Completion bonus is points * this, applied only when every entry is correct."""

# Timed mode
TIMED_MODE_SECONDS: Final[int] = 60

# Quiz mode
QUIZ_SHORT_COUNT: Final[int] = 10
"""Word count used when a quiz is started with quiz_count == "10"."""

# Find-the-mistake mode
MISTAKE_CHOICE_COUNT: Final[int] = 4
MISTAKE_MIN_WORDS: Final[int] = MISTAKE_CHOICE_COUNT
"""Distinct words a list needs so every question shows a full set of choices."""

# Scramble mode
SCRAMBLE_MAX_RESHUFFLES: Final[int] = 10

# Crossword mode
CROSSWORD_MIN_WORDS: Final[int] = 5
CROSSWORD_MAX_WORDS: Final[int] = 15
DEFAULT_CLUE: Final[str] = "Spell this word"

# Achievements
TIMED_STAR_MIN_CORRECT: Final[int] = 10
MAX_MASTERY_STARS: Final[int] = 3
MASTERY_ACHIEVEMENT_TYPE: Final[str] = "Word List Mastery"

# Star Shop items
DO_OVER_ITEM: Final[str] = "do_over"
SECOND_CHANCE_ITEM: Final[str] = "second_chance"

# Used when no real example sentence is available for a word
FALLBACK_EXAMPLE_TEMPLATES: Final[List[str]] = [
    "I saw a {word} today.",
    "The {word} was very interesting.",
    "Can you find the {word}?",
    "Look at that {word}!",
    "My friend has a {word}.",
    "We learned about {word} in school.",
    "The {word} is important.",
    "I like to use {word}.",
    "Let me tell you about {word}.",
    "Everyone needs {word}.",
]


def points_for(mode: str) -> int:
    """Return the fixed per-answer points for a game mode value."""
    return MODE_POINTS.get(mode, POINTS_PER_WORD)
