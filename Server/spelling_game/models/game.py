"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class GameMode(Enum):
    """Gameplay modes. Each mode owns its turn structure and scoring rule."""
    PRACTICE = "practice"
    TIMED = "timed"
    QUIZ = "quiz"
    SCRAMBLE = "scramble"
    MISTAKE = "mistake"
    CROSSWORD = "crossword"

    @property
    def has_feedback(self) -> bool:
        """Modes that stop on a feedback screen after every answer."""
        return self in (GameMode.PRACTICE, GameMode.SCRAMBLE, GameMode.MISTAKE)

    @property
    def allows_do_over(self) -> bool:
        return self not in (GameMode.PRACTICE, GameMode.CROSSWORD)

    @property
    def allows_skip(self) -> bool:
        return self not in (GameMode.QUIZ, GameMode.CROSSWORD)

    @property
    def allows_second_chance(self) -> bool:
        return self != GameMode.PRACTICE

    @property
    def speaks_word(self) -> bool:
        """Listen-and-spell modes read the current word aloud."""
        return self in (GameMode.PRACTICE, GameMode.TIMED, GameMode.QUIZ)

    @property
    def is_ranked(self) -> bool:
        """Ranked modes push leaderboard entries and run achievement checks."""
        return self != GameMode.PRACTICE


class TurnPhase(Enum):
    """Turn controller states."""
    PRESENTING = "presenting"
    EVALUATING = "evaluating"
    FEEDBACK = "feedback"
    DO_OVER_OFFERED = "do_over_offered"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Word:
    """A word from a list; the source of truth for the correct spelling."""
    id: int
    text: str
    difficulty: Optional[str] = None
    sentence_example: Optional[str] = None
    word_origin: Optional[str] = None
    part_of_speech: Optional[str] = None


@dataclass
class QuizAnswer:
    word: str
    user_answer: str
    is_correct: bool


@dataclass
class MistakeQuestion:
    """Four choices, one of them misspelled."""
    choices: List[str]
    misspelled_index: int
    correct_spelling: str


@dataclass
class PendingResult:
    """An incorrect attempt held back while a Do Over is offered."""
    user_answer: str
    correct_word: str
    word_index: int


@dataclass
class ScoringState:
    score: int = 0
    correct_count: int = 0
    streak: int = 0
    best_streak: int = 0


@dataclass
class OriginalGameMetrics:
    """Snapshot of a finished main pass taken when a 2nd Chance begins."""
    total_words: int
    correct_count: int
    incorrect_words: List[str]
    score: int = 0
    best_streak: int = 0


@dataclass
class PassResult:
    """Totals of one completed pass, as handed to the session lifecycle."""
    mode: GameMode
    total_words: int
    correct_count: int
    incorrect_words: List[str]
    score: int
    best_streak: int
    list_word_count: int
    is_second_chance: bool = False


@dataclass
class SessionSummary:
    """Final (possibly merged) totals of a session after a finalize call."""
    total_words: int
    correct_count: int
    incorrect_words: List[str]
    accuracy: int
    score: int
    best_streak: int
    star_earned: bool = False


@dataclass
class GameState:
    """Client-facing game state. Never contains the answer while a turn is open."""
    game_id: str
    game_mode: str
    phase: str
    current_index: int
    word_count: int
    score: int
    correct_count: int
    streak: int
    best_streak: int
    incorrect_words: List[str]
    second_chance_active: bool
    do_over_available: int
    second_chance_available: int
    user_input: str = ""
    is_correct: Optional[bool] = None
    correct_word: Optional[str] = None
    time_left: Optional[int] = None
    selected_choice_index: Optional[int] = None
    mistake_choices: List[str] = field(default_factory=list)
    scramble_tray: List[Optional[str]] = field(default_factory=list)
    scramble_slots: List[Optional[str]] = field(default_factory=list)
    crossword: Optional[Dict] = None
    quiz_answers: List[Dict] = field(default_factory=list)
    summary: Optional[Dict] = None
