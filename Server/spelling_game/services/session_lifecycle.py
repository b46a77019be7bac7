"""
Session Lifecycle & Persistence Bridge

Creates the session record when a game starts, saves partial progress when
a game is abandoned, and finalizes the record when a pass completes, followed
by the leaderboard entry and the achievement check. Every store call is
best-effort: failures are logged and gameplay carries on.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from ..models.game import GameMode, OriginalGameMetrics, PassResult, SessionSummary
from .achievements import AchievementEvaluator
from .recovery import merge_second_chance
from .scoring import calculate_accuracy

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """
    Persistence bridge for one game.

    Virtual word lists and guests never get a session record; for them
    finalize still computes the summary but nothing is written.
    """

    def __init__(self, store, mode: GameMode, user_id: Optional[str] = None,
                 list_id: Optional[str] = None, is_virtual: bool = False):
        self.store = store
        self.mode = mode
        self.user_id = user_id
        self.list_id = list_id
        self.is_virtual = is_virtual
        self.session_id: Optional[str] = None
        self.finalize_count = 0
        self.achievements = AchievementEvaluator(store)

    @property
    def persists(self) -> bool:
        return self.store is not None and not self.is_virtual and self.user_id is not None

    def start(self) -> Optional[str]:
        """Create the session record. Returns its id, or None when nothing is persisted."""
        if not self.persists:
            return None
        try:
            self.session_id = self.store.create_session(self.mode.value, self.user_id, self.list_id)
            logger.info(f"Created session {self.session_id} ({self.mode.value}) for user {self.user_id}")
        except Exception as e:
            logger.error(f"Failed to create game session: {e}")
            self.session_id = None
        return self.session_id

    def save_partial(self, words_attempted: int, correct_count: int,
                     incorrect_words: List[str], best_streak: int) -> bool:
        """
        Record progress of a game left before completion.

        ``total_words`` is at least ``correct + incorrect`` so the record
        never shows more answers than words. Returns True if a write happened.
        """
        if self.session_id is None:
            return False
        if words_attempted <= 0 and not incorrect_words and correct_count <= 0:
            return False

        total_words = max(words_attempted, correct_count + len(incorrect_words))
        try:
            self.store.update_session(self.session_id, {
                'total_words': total_words,
                'correct_words': correct_count,
                'best_streak': best_streak,
                'incorrect_words': list(incorrect_words),
                'is_complete': False,
            })
            logger.info(f"Saved partial progress for session {self.session_id}: "
                        f"{total_words} words attempted, {correct_count} correct")
            return True
        except Exception as e:
            logger.error(f"Failed to save partial progress for session {self.session_id}: {e}")
            return False

    def finalize(self, result: PassResult,
                 original: Optional[OriginalGameMetrics] = None) -> SessionSummary:
        """
        Finalize the session with a completed pass.

        A 2nd Chance pass is merged with ``original`` first and may only be
        finalized after the main pass was.
        """
        if result.is_second_chance:
            if original is None or self.finalize_count == 0:
                raise RuntimeError("A 2nd Chance pass cannot be finalized before its main pass")
            merged = merge_second_chance(original, result)
            logger.info(f"Merging 2nd Chance results: original {original.correct_count}/{original.total_words}, "
                        f"retry +{result.correct_count}, still wrong {len(result.incorrect_words)}")
        else:
            merged = {
                'total_words': result.total_words,
                'correct_count': result.correct_count,
                'incorrect_words': list(result.incorrect_words),
                'accuracy': calculate_accuracy(result.correct_count, result.total_words),
                'score': result.score,
                'best_streak': result.best_streak,
            }
        self.finalize_count += 1

        summary = SessionSummary(
            total_words=merged['total_words'],
            correct_count=merged['correct_count'],
            incorrect_words=merged['incorrect_words'],
            accuracy=merged['accuracy'],
            score=merged['score'],
            best_streak=merged['best_streak'],
        )

        if self.session_id is None:
            return summary

        try:
            self.store.update_session(self.session_id, {
                'score': summary.score,
                'total_words': summary.total_words,
                'correct_words': summary.correct_count,
                'best_streak': summary.best_streak,
                'incorrect_words': summary.incorrect_words,
                'is_complete': True,
                'completed_at': datetime.now(timezone.utc),
            })
        except Exception as e:
            # The leaderboard entry is still attempted below
            logger.error(f"Failed to finalize game session {self.session_id}: {e}")

        if self.mode.is_ranked:
            self._push_leaderboard(summary)
            summary.star_earned = self.achievements.evaluate(
                self.user_id, self.list_id, self.mode,
                summary.accuracy, summary.correct_count, result.list_word_count,
            )
            if summary.star_earned:
                self._record_star()
        return summary

    def _push_leaderboard(self, summary: SessionSummary) -> None:
        try:
            self.store.create_leaderboard_score(
                score=summary.score,
                accuracy=summary.accuracy,
                game_mode=self.mode.value,
                user_id=self.user_id,
                session_id=self.session_id,
            )
        except Exception as e:
            logger.error(f"Failed to save leaderboard score for session {self.session_id}: {e}")

    def _record_star(self) -> None:
        try:
            self.store.update_session(self.session_id, {'stars_earned': 1})
        except Exception as e:
            logger.error(f"Failed to record earned star on session {self.session_id}: {e}")
