from unittest.mock import Mock

import pytest

from spelling_game.models.game import GameMode
from spelling_game.services.achievements import AchievementEvaluator, is_star_eligible, star_label
from spelling_game.services.scoring import ScoreLedger, calculate_accuracy


@pytest.mark.parametrize("correct,total,expected", [
    (8, 10, 80),
    (5, 6, 83),
    (1, 8, 13),   # 12.5 rounds up
    (2, 3, 67),
    (0, 0, 0),
    (3, 0, 0),
])
def test_calculate_accuracy(correct, total, expected):
    assert calculate_accuracy(correct, total) == expected


def test_streak_bonus_uses_streak_before_increment():
    ledger = ScoreLedger(GameMode.SCRAMBLE)
    assert ledger.record_correct() == 20
    assert ledger.record_correct() == 25
    ledger.record_incorrect()
    assert ledger.streak == 0
    assert ledger.record_correct() == 20
    assert ledger.score == 65
    assert ledger.best_streak == 2


def test_quiz_ledger_scores_at_finalize():
    ledger = ScoreLedger(GameMode.QUIZ)
    for _ in range(8):
        ledger.record_correct()
    assert ledger.score == 0
    assert ledger.finalize_quiz() == 160


def test_crossword_bonus_only_when_complete():
    ledger = ScoreLedger(GameMode.CROSSWORD)
    assert ledger.score_crossword(4, grid_complete=False) == 80
    assert ledger.score_crossword(5, grid_complete=True) == 140
    assert ledger.correct_count == 5


def test_reset():
    ledger = ScoreLedger(GameMode.TIMED)
    ledger.record_correct()
    ledger.reset()
    assert (ledger.score, ledger.correct_count, ledger.streak, ledger.best_streak) == (0, 0, 0, 0)


# Achievements

@pytest.mark.parametrize("mode,accuracy,correct,list_count,expected", [
    (GameMode.QUIZ, 100, 10, 10, True),
    (GameMode.QUIZ, 90, 9, 10, False),
    (GameMode.PRACTICE, 100, 10, 10, False),
    (GameMode.TIMED, 100, 9, 20, False),
    (GameMode.TIMED, 100, 10, 20, True),
    (GameMode.TIMED, 100, 6, 6, True),
    (GameMode.TIMED, 80, 12, 20, False),
])
def test_star_eligibility(mode, accuracy, correct, list_count, expected):
    assert is_star_eligible(mode, accuracy, correct, list_count) is expected


def test_star_label():
    assert star_label(1) == "1 Star"
    assert star_label(3) == "3 Stars"


def test_first_mastery_awards_a_star():
    store = Mock()
    store.get_achievement.return_value = None
    evaluator = AchievementEvaluator(store)

    assert evaluator.evaluate("u1", "list1", GameMode.SCRAMBLE, 100, 10, 10) is True
    store.upsert_achievement.assert_called_once_with(
        user_id="u1", list_id="list1", achievement_type="Word List Mastery",
        achievement_value="1 Star", completed_modes=["scramble"],
    )


def test_repeat_mode_earns_nothing():
    store = Mock()
    store.get_achievement.return_value = {'completed_modes': ['quiz']}
    assert AchievementEvaluator(store).evaluate("u1", "list1", GameMode.QUIZ, 100, 10, 10) is False
    store.upsert_achievement.assert_not_called()


def test_stars_capped_at_three():
    store = Mock()
    store.get_achievement.return_value = {'completed_modes': ['quiz', 'timed', 'scramble']}
    assert AchievementEvaluator(store).evaluate("u1", "list1", GameMode.MISTAKE, 100, 10, 10) is True
    assert store.upsert_achievement.call_args.kwargs['achievement_value'] == "3 Stars"


def test_store_failure_means_no_star():
    store = Mock()
    store.get_achievement.side_effect = RuntimeError("db down")
    assert AchievementEvaluator(store).evaluate("u1", "list1", GameMode.QUIZ, 100, 10, 10) is False
