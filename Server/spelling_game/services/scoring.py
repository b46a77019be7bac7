"""
Scoring & Streak Ledger

Per-answer points, running streak, best streak and running score for one pass.
"""

import math

from ..config.game_settings import CROSSWORD_COMPLETION_MULTIPLIER, STREAK_BONUS, points_for
from ..models.game import GameMode, ScoringState


def calculate_accuracy(correct: int, total: int) -> int:
    """Whole-number percentage, rounding halves up. Zero when nothing was played."""
    if total <= 0:
        return 0
    return int(math.floor(correct * 100 / total + 0.5))


class ScoreLedger:
    """
    Tracks score, correct count and streaks for a single pass.

    Live-feedback modes score each correct answer as
    ``points + streak * STREAK_BONUS`` (streak before the increment).
    Quiz mode only counts answers and scores once at the end; crossword
    mode scores a whole grid in one call.
    """

    def __init__(self, mode: GameMode):
        self.mode = mode
        self.points = points_for(mode.value)
        self.state = ScoringState()

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def correct_count(self) -> int:
        return self.state.correct_count

    @property
    def streak(self) -> int:
        return self.state.streak

    @property
    def best_streak(self) -> int:
        return self.state.best_streak

    def record_correct(self) -> int:
        """Count one correct answer and return the points it earned."""
        earned = 0
        if self.mode != GameMode.QUIZ:
            earned = self.points + self.state.streak * STREAK_BONUS
            self.state.score += earned
        self.state.correct_count += 1
        self.state.streak += 1
        self.state.best_streak = max(self.state.best_streak, self.state.streak)
        return earned

    def record_incorrect(self) -> None:
        self.state.streak = 0

    def finalize_quiz(self) -> int:
        """Quiz score: every correct answer is worth the flat per-word value."""
        self.state.score = self.state.correct_count * self.points
        return self.state.score

    def score_crossword(self, solved: int, grid_complete: bool) -> int:
        """Points per solved entry plus the completion bonus when the whole grid is right."""
        self.state.correct_count = solved
        self.state.score = solved * self.points
        if grid_complete:
            self.state.score += self.points * CROSSWORD_COMPLETION_MULTIPLIER
        return self.state.score

    def reset(self) -> None:
        self.state = ScoringState()
