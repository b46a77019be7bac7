"""
Recovery Mechanic Coordinator

Decides when "Do Over" and "2nd Chance" may be offered, consumes the
Star Shop items, and merges a 2nd Chance pass back into the original
session totals.
"""

import logging
from typing import Dict, List, Optional

from ..config.game_settings import DO_OVER_ITEM, SECOND_CHANCE_ITEM
from ..models.game import GameMode, OriginalGameMetrics, PassResult, Word
from .scoring import calculate_accuracy

logger = logging.getLogger(__name__)


class Inventory:
    """
    Optimistic local copy of a player's Star Shop item counts.

    The store owns the real quantities. A consume is applied locally at
    once; if the store rejects it or fails, the counts are refetched.
    Guests (no user or no store) always hold zero items.
    """

    ITEMS = (DO_OVER_ITEM, SECOND_CHANCE_ITEM)

    def __init__(self, store=None, user_id: Optional[str] = None):
        self.store = store
        self.user_id = user_id
        self.counts: Dict[str, int] = {item: 0 for item in self.ITEMS}
        self.refresh()

    def refresh(self) -> None:
        if self.store is None or self.user_id is None:
            return
        for item in self.ITEMS:
            try:
                self.counts[item] = int(self.store.get_item_count(self.user_id, item))
            except Exception as e:
                logger.warning(f"Failed to fetch '{item}' count for user {self.user_id}: {e}")
                self.counts[item] = 0

    def count(self, item_id: str) -> int:
        return self.counts.get(item_id, 0)

    def consume(self, item_id: str) -> bool:
        """Use one item. Returns False only when none are held locally."""
        if self.count(item_id) <= 0:
            return False
        self.counts[item_id] -= 1

        try:
            accepted = self.store.use_item(self.user_id, item_id, 1)
        except Exception as e:
            logger.error(f"Failed to use '{item_id}' for user {self.user_id}: {e}")
            accepted = False
        if not accepted:
            logger.warning(f"Store rejected '{item_id}' use for user {self.user_id}, refetching inventory")
            self.refresh()
        return True


class RecoveryCoordinator:
    """Offer rules and item consumption for Do Over and 2nd Chance."""

    def __init__(self, inventory: Inventory):
        self.inventory = inventory

    def should_offer_do_over(self, mode: GameMode) -> bool:
        return mode.allows_do_over and self.inventory.count(DO_OVER_ITEM) > 0

    def can_offer_second_chance(self, mode: GameMode, incorrect_words: List[str], in_second_chance: bool) -> bool:
        """A finished main pass with mistakes, while the player holds a 2nd Chance."""
        if not mode.allows_second_chance or in_second_chance or not incorrect_words:
            return False
        return self.inventory.count(SECOND_CHANCE_ITEM) > 0

    def use_do_over(self) -> bool:
        return self.inventory.consume(DO_OVER_ITEM)

    def use_second_chance(self) -> bool:
        return self.inventory.consume(SECOND_CHANCE_ITEM)

    @staticmethod
    def snapshot(result: PassResult) -> OriginalGameMetrics:
        return OriginalGameMetrics(
            total_words=result.total_words,
            correct_count=result.correct_count,
            incorrect_words=list(result.incorrect_words),
            score=result.score,
            best_streak=result.best_streak,
        )

    @staticmethod
    def retry_words(words: List[Word], incorrect_words: List[str]) -> List[Word]:
        """The reduced word list for a 2nd Chance pass, in original order."""
        wrong = set(incorrect_words)
        return [word for word in words if word.text in wrong]


def merge_second_chance(original: OriginalGameMetrics, retry: PassResult) -> Dict:
    """
    Combine a 2nd Chance pass with the main pass it retried.

    The original total is kept, corrections from the retry are added to the
    original correct count, and only words still wrong after the retry stay
    incorrect. Nothing counted correct in the main pass is ever taken away.
    """
    merged_total = original.total_words
    merged_correct = min(original.correct_count + retry.correct_count, merged_total)
    return {
        'total_words': merged_total,
        'correct_count': merged_correct,
        'incorrect_words': list(retry.incorrect_words),
        'accuracy': calculate_accuracy(merged_correct, merged_total),
        'score': original.score + retry.score,
        'best_streak': max(original.best_streak, retry.best_streak),
    }
