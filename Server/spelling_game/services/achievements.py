"""
Achievement Evaluation

"Word List Mastery": a star for each ranked mode completed at 100%
accuracy on a word list, capped at three stars per list.
"""

import logging
from typing import Optional

from ..config.game_settings import MASTERY_ACHIEVEMENT_TYPE, MAX_MASTERY_STARS, TIMED_STAR_MIN_CORRECT
from ..models.game import GameMode

logger = logging.getLogger(__name__)


def is_star_eligible(mode: GameMode, accuracy: int, correct_count: int, list_word_count: int) -> bool:
    """
    Whether a finished session qualifies for a mastery star.

    Timed mode additionally needs at least ``min(10, words in list)``
    correct answers, since a short run can be 100% accurate.
    """
    if not mode.is_ranked:
        return False
    if mode == GameMode.TIMED:
        return correct_count >= min(TIMED_STAR_MIN_CORRECT, list_word_count) and accuracy == 100
    return accuracy == 100


def star_label(total_stars: int) -> str:
    return f"{total_stars} {'Star' if total_stars == 1 else 'Stars'}"


class AchievementEvaluator:
    """Runs the mastery check for one finalize call and records new stars."""

    def __init__(self, store):
        self.store = store

    def evaluate(self, user_id: Optional[str], list_id: Optional[str], mode: GameMode,
                 accuracy: int, correct_count: int, list_word_count: int) -> bool:
        """
        Award a star if this mode has not yet been mastered on the list.

        Returns True only when a new star was recorded. Store failures are
        logged and count as no star.
        """
        if not user_id or not list_id:
            return False
        if not is_star_eligible(mode, accuracy, correct_count, list_word_count):
            return False

        try:
            existing = self.store.get_achievement(user_id, list_id, MASTERY_ACHIEVEMENT_TYPE)
            completed_modes = set((existing or {}).get('completed_modes', []))
            if mode.value in completed_modes:
                logger.info(f"Mastery already earned for user {user_id}, list {list_id}, mode {mode.value}")
                return False

            completed_modes.add(mode.value)
            total_stars = min(len(completed_modes), MAX_MASTERY_STARS)
            self.store.upsert_achievement(
                user_id=user_id,
                list_id=list_id,
                achievement_type=MASTERY_ACHIEVEMENT_TYPE,
                achievement_value=star_label(total_stars),
                completed_modes=sorted(completed_modes),
            )
            return True
        except Exception as e:
            logger.error(f"Error saving achievement for user {user_id}, list {list_id}: {e}")
            return False
