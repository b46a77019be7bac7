"""
Turn Controller

Drives one game through its word list, one turn at a time:

    PRESENTING -> EVALUATING -> FEEDBACK -> PRESENTING ... -> COMPLETE
                             -> DO_OVER_OFFERED -> PRESENTING | FEEDBACK

The game mode decides which of these transitions exist. Timed and quiz
modes never stop on FEEDBACK; practice, scramble and find-the-mistake
always do. Crossword mode presents one grid and completes on submission.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..config.game_settings import (
    DO_OVER_ITEM, MISTAKE_CHOICE_COUNT, MISTAKE_MIN_WORDS, SECOND_CHANCE_ITEM, TIMED_MODE_SECONDS
)
from ..models.crossword import Cell, CrosswordGrid
from ..models.errors import InvalidTurnAction
from ..models.game import (
    GameMode, GameState, MistakeQuestion, OriginalGameMetrics, PassResult,
    PendingResult, QuizAnswer, SessionSummary, TurnPhase, Word
)
from .misspelling import MisspellingGenerator
from .recovery import RecoveryCoordinator
from .scoring import ScoreLedger
from .scramble import ScrambleBoard
from .session_lifecycle import SessionLifecycle
from .speech import NullSpeechChannel

logger = logging.getLogger(__name__)


@dataclass
class TurnState:
    """Transient per-pass turn state. Never persisted."""
    active_words: List[Word]
    current_index: int = 0
    phase: TurnPhase = TurnPhase.PRESENTING
    user_input: str = ""
    is_correct: Optional[bool] = None
    selected_choice_index: Optional[int] = None
    pending: Optional[PendingResult] = None
    retrying: bool = False
    words_checked: int = 0
    time_left: Optional[int] = None
    incorrect_words: List[str] = field(default_factory=list)
    corrected_words: List[str] = field(default_factory=list)
    quiz_answers: List[QuizAnswer] = field(default_factory=list)


def fresh_turn_state(words: List[Word], mode: GameMode,
                     time_limit: int = TIMED_MODE_SECONDS) -> TurnState:
    """Initial turn state for a pass over ``words``."""
    return TurnState(
        active_words=list(words),
        time_left=time_limit if mode == GameMode.TIMED else None,
    )


class TurnController:
    """
    State machine for one game: a main pass and at most one 2nd Chance pass.

    Args:
        mode: Game mode.
        words: The session's word list, already shuffled by the caller.
        recovery: Offer rules and item consumption for Do Over / 2nd Chance.
        lifecycle: Persistence bridge; finalized once per completed pass.
        misspeller: Required in find-the-mistake mode.
        grid: Required in crossword mode.
        speech: Where "speak"/"cancel" requests go.
        rng: Random source for scrambles and choice layout.
        time_limit: Countdown length for timed mode, in seconds.
    """

    def __init__(self, mode: GameMode, words: List[Word], recovery: RecoveryCoordinator,
                 lifecycle: SessionLifecycle, misspeller: Optional[MisspellingGenerator] = None,
                 grid: Optional[CrosswordGrid] = None, speech=None,
                 rng: Optional[random.Random] = None, time_limit: int = TIMED_MODE_SECONDS):
        if not words:
            raise ValueError("A game needs at least one word")
        if mode == GameMode.CROSSWORD and (grid is None or not grid.entries):
            raise ValueError("Crossword mode needs a grid with entries")
        if mode == GameMode.MISTAKE and misspeller is None:
            raise ValueError("Find-the-mistake mode needs a misspelling generator")
        if mode == GameMode.MISTAKE and len({word.text.lower() for word in words}) < MISTAKE_MIN_WORDS:
            raise ValueError(f"Find-the-mistake mode needs at least {MISTAKE_MIN_WORDS} different words")

        self.mode = mode
        self.words = list(words)
        self.recovery = recovery
        self.lifecycle = lifecycle
        self.misspeller = misspeller
        self.grid = grid
        self.speech = speech or NullSpeechChannel()
        self.rng = rng or random.Random()
        self.time_limit = time_limit

        self.ledger = ScoreLedger(mode)
        self.turn = fresh_turn_state(self.words, mode, time_limit)
        self.scramble: Optional[ScrambleBoard] = None
        self.mistake: Optional[MistakeQuestion] = None
        self.mistake_cache: Dict[str, MistakeQuestion] = {}

        self.crossword_inputs: Dict[Cell, str] = {}
        self.highlighted_cells: Set[Cell] = set()
        self.retry_entry_numbers: Set[int] = set()

        self.second_chance_active = False
        self.original_metrics: Optional[OriginalGameMetrics] = None
        self.last_result: Optional[PassResult] = None
        self.summary: Optional[SessionSummary] = None
        self._pass_finalized = False

        self._present()

    # Queries

    @property
    def phase(self) -> TurnPhase:
        return self.turn.phase

    @property
    def is_complete(self) -> bool:
        return self.turn.phase == TurnPhase.COMPLETE

    @property
    def current_word(self) -> Optional[Word]:
        if self.mode == GameMode.CROSSWORD or self.is_complete:
            return None
        if self.turn.current_index < len(self.turn.active_words):
            return self.turn.active_words[self.turn.current_index]
        return None

    def words_attempted(self) -> int:
        """Words moved past, plus the current one when its feedback is showing."""
        attempted = self.turn.current_index
        if self.turn.phase == TurnPhase.FEEDBACK:
            attempted += 1
        return attempted

    def second_chance_offered(self) -> bool:
        if not self.is_complete or self.last_result is None:
            return False
        return self.recovery.can_offer_second_chance(self.mode, self.last_result.incorrect_words,
                                                     self.second_chance_active)

    # Typed answers (practice, timed, quiz)

    def submit_answer(self, text: str) -> Optional[bool]:
        """
        Submit a typed answer for the current word.

        Returns whether it was correct, or None while a Do Over is offered.
        """
        self._require_mode(GameMode.PRACTICE, GameMode.TIMED, GameMode.QUIZ)
        self._require_phase(TurnPhase.PRESENTING)
        answer = (text or "").strip()
        if not answer:
            raise InvalidTurnAction("Type an answer before submitting")
        self.turn.user_input = answer
        correct = answer.lower() == self.current_word.text.lower()
        return self._evaluate(correct, answer)

    # Find-the-mistake

    def choose(self, choice_index: int) -> Optional[bool]:
        """Pick the choice believed to be misspelled."""
        self._require_mode(GameMode.MISTAKE)
        self._require_phase(TurnPhase.PRESENTING)
        if not isinstance(choice_index, int) or not 0 <= choice_index < len(self.mistake.choices):
            raise InvalidTurnAction(f"Invalid choice index: {choice_index}")
        self.turn.selected_choice_index = choice_index
        correct = choice_index == self.mistake.misspelled_index
        return self._evaluate(correct, self.mistake.choices[choice_index])

    # Scramble

    def place_tile(self, tray_index: int, slot_index: Optional[int] = None) -> None:
        self._require_mode(GameMode.SCRAMBLE)
        self._require_phase(TurnPhase.PRESENTING)
        self.scramble.place(tray_index, slot_index)

    def remove_tile(self, slot_index: int) -> None:
        self._require_mode(GameMode.SCRAMBLE)
        self._require_phase(TurnPhase.PRESENTING)
        self.scramble.remove(slot_index)

    def clear_tiles(self) -> None:
        self._require_mode(GameMode.SCRAMBLE)
        self._require_phase(TurnPhase.PRESENTING)
        self.scramble.clear_all()

    def submit_scramble(self) -> Optional[bool]:
        self._require_mode(GameMode.SCRAMBLE)
        self._require_phase(TurnPhase.PRESENTING)
        correct = self.scramble.submit()
        return self._evaluate(correct, self.scramble.answer())

    # Crossword

    def set_cell(self, row: int, col: int, letter: str) -> None:
        self._require_mode(GameMode.CROSSWORD)
        self._require_phase(TurnPhase.PRESENTING)
        if not self.grid.is_open(row, col):
            raise InvalidTurnAction(f"No crossword cell at ({row}, {col})")
        letter = (letter or "").strip()
        if len(letter) > 1 or (letter and not letter.isalpha()):
            raise InvalidTurnAction("A crossword cell holds a single letter")
        self.crossword_inputs[(row, col)] = letter.upper()
        self.highlighted_cells.discard((row, col))

    def show_mistakes(self) -> Set[Cell]:
        """Highlight filled-in cells whose letter is wrong. Empty cells are never highlighted."""
        self._require_mode(GameMode.CROSSWORD)
        mistakes = set()
        for entry in self.grid.entries:
            for position, expected in zip(entry.positions(), entry.word):
                typed = self.crossword_inputs.get(position, "")
                if typed and typed.upper() != expected.upper():
                    mistakes.add(position)
        self.highlighted_cells = mistakes
        return mistakes

    def submit_crossword(self) -> int:
        """
        Check every entry and complete the pass. Returns the number of
        entries solved in this pass.

        On a 2nd Chance pass only the entries missed in the main pass are
        scored; entries already counted correct stay counted.
        """
        self._require_mode(GameMode.CROSSWORD)
        self._require_phase(TurnPhase.PRESENTING)
        self.turn.phase = TurnPhase.EVALUATING

        entries = self.grid.entries
        if self.second_chance_active:
            entries = [entry for entry in entries if entry.number in self.retry_entry_numbers]

        solved = [entry for entry in entries if entry.is_solved(self.crossword_inputs)]
        unsolved = [entry for entry in entries if not entry.is_solved(self.crossword_inputs)]
        self.turn.incorrect_words = [entry.word for entry in unsolved]
        self.turn.corrected_words = [entry.word for entry in solved]
        self.turn.words_checked = len(entries)
        self.retry_entry_numbers = {entry.number for entry in unsolved}

        self.ledger.score_crossword(len(solved), grid_complete=not unsolved)
        self._complete()
        return len(solved)

    # Flow

    def next(self) -> None:
        """Leave the feedback screen for the next word (or completion)."""
        self._require_phase(TurnPhase.FEEDBACK)
        self._advance()

    def try_again(self) -> None:
        """Practice only: retry a missed word. The retry is not scored."""
        self._require_mode(GameMode.PRACTICE)
        self._require_phase(TurnPhase.FEEDBACK)
        if self.turn.is_correct:
            raise InvalidTurnAction("Only a missed word can be tried again")
        self.turn.retrying = True
        self.turn.user_input = ""
        self.turn.is_correct = None
        self.turn.phase = TurnPhase.PRESENTING

    def skip(self) -> None:
        """Move past the current word without recording a result."""
        if not self.mode.allows_skip:
            raise InvalidTurnAction(f"Skipping is not available in {self.mode.value} mode")
        self._require_phase(TurnPhase.PRESENTING)
        self._advance()

    def tick(self) -> Optional[int]:
        """One second of the timed-mode countdown. Completes the pass at zero."""
        if self.mode != GameMode.TIMED or self.is_complete:
            return self.turn.time_left
        self.turn.time_left = max(0, self.turn.time_left - 1)
        if self.turn.time_left == 0:
            # An unanswered Do Over offer is dropped, not recorded
            self.turn.pending = None
            self._complete()
        return self.turn.time_left

    # Recovery

    def accept_do_over(self) -> None:
        """Spend a Do Over: forget the wrong attempt and retry the same word."""
        self._require_phase(TurnPhase.DO_OVER_OFFERED)
        if not self.recovery.use_do_over():
            raise InvalidTurnAction("No Do Over items left")
        logger.info(f"Do Over used on '{self.turn.pending.correct_word}' ({self.mode.value})")
        self.turn.pending = None
        self.turn.user_input = ""
        self.turn.selected_choice_index = None
        if self.scramble is not None:
            self.scramble.clear_all()
        self.turn.phase = TurnPhase.PRESENTING

    def decline_do_over(self) -> None:
        """Record the held-back wrong attempt as a normal incorrect answer."""
        self._require_phase(TurnPhase.DO_OVER_OFFERED)
        pending = self.turn.pending
        self.turn.pending = None
        self._commit_incorrect(pending.user_answer)

    def begin_second_chance(self) -> None:
        """
        Spend a 2nd Chance: replay only the words missed in the main pass.

        Crossword keeps its grid and typed letters and highlights the
        wrong cells instead of building a reduced word list.
        """
        self._require_phase(TurnPhase.COMPLETE)
        if not self.second_chance_offered():
            raise InvalidTurnAction("2nd Chance is not available")
        if not self.recovery.use_second_chance():
            raise InvalidTurnAction("No 2nd Chance items left")

        self.original_metrics = self.recovery.snapshot(self.last_result)
        self.second_chance_active = True
        self.summary = None
        self._pass_finalized = False
        self.ledger.reset()
        logger.info(f"2nd Chance started ({self.mode.value}) for {len(self.original_metrics.incorrect_words)} words")

        if self.mode == GameMode.CROSSWORD:
            self.turn = fresh_turn_state(self.words, self.mode, self.time_limit)
            self.show_mistakes()
            return

        retry = self.recovery.retry_words(self.words, self.original_metrics.incorrect_words)
        self.turn = fresh_turn_state(retry, self.mode, self.time_limit)
        self._present()

    # Internals

    def _evaluate(self, correct: bool, user_answer: str) -> Optional[bool]:
        self.turn.phase = TurnPhase.EVALUATING
        word = self.current_word

        if self.turn.retrying:
            self.turn.is_correct = correct
            self.turn.phase = TurnPhase.FEEDBACK
            return correct

        if correct:
            self.ledger.record_correct()
            self.turn.corrected_words.append(word.text)
            self.turn.words_checked += 1
            if self.mode == GameMode.QUIZ:
                self.turn.quiz_answers.append(QuizAnswer(word.text, user_answer, True))
            self._after_answer(True)
            return True

        if self.recovery.should_offer_do_over(self.mode):
            self.turn.pending = PendingResult(user_answer, word.text, self.turn.current_index)
            self.turn.phase = TurnPhase.DO_OVER_OFFERED
            return None

        self._commit_incorrect(user_answer)
        return False

    def _commit_incorrect(self, user_answer: str) -> None:
        word = self.current_word
        self.ledger.record_incorrect()
        self.turn.incorrect_words.append(word.text)
        self.turn.words_checked += 1
        if self.mode == GameMode.QUIZ:
            self.turn.quiz_answers.append(QuizAnswer(word.text, user_answer, False))
        self._after_answer(False)

    def _after_answer(self, correct: bool) -> None:
        self.turn.is_correct = correct
        if self.mode.has_feedback:
            self.turn.phase = TurnPhase.FEEDBACK
        else:
            self._advance()

    def _advance(self) -> None:
        if self.turn.current_index < len(self.turn.active_words) - 1:
            self.turn.current_index += 1
            self._present()
        else:
            self._complete()

    def _present(self) -> None:
        """Show the current word: reset the turn and set up the mode's puzzle."""
        self.turn.phase = TurnPhase.PRESENTING
        self.turn.user_input = ""
        self.turn.is_correct = None
        self.turn.selected_choice_index = None
        self.turn.retrying = False
        self.speech.cancel()

        if self.mode == GameMode.CROSSWORD:
            return
        word = self.current_word
        if self.mode == GameMode.SCRAMBLE:
            self.scramble = ScrambleBoard(word.text, self.rng)
        elif self.mode == GameMode.MISTAKE:
            self.mistake = self._mistake_question(word)
        if self.mode.speaks_word:
            self.speech.speak(word.text)

    def _mistake_question(self, word: Word) -> MistakeQuestion:
        """
        The current word (misspelled) among other words from the list.

        Cached per word so Do Over and 2nd Chance replays see the same
        misspelling.
        """
        cached = self.mistake_cache.get(word.text)
        if cached is not None:
            return cached

        seen = {word.text.lower()}
        pool = []
        for other in self.words:
            if other.text.lower() not in seen:
                seen.add(other.text.lower())
                pool.append(other.text)
        others = self.rng.sample(pool, MISTAKE_CHOICE_COUNT - 1)

        misspelled = self.misspeller.generate(word.text, others)
        misspelled_index = self.rng.randint(0, len(others))
        choices = list(others)
        choices.insert(misspelled_index, misspelled)

        question = MistakeQuestion(choices=choices, misspelled_index=misspelled_index, correct_spelling=word.text)
        self.mistake_cache[word.text] = question
        return question

    def _complete(self) -> None:
        self.turn.phase = TurnPhase.COMPLETE
        self.speech.cancel()
        if self._pass_finalized:
            return
        self._pass_finalized = True

        if self.mode == GameMode.QUIZ:
            self.ledger.finalize_quiz()
        self.last_result = self._pass_result()
        self.summary = self.lifecycle.finalize(
            self.last_result, self.original_metrics if self.second_chance_active else None
        )

    def _pass_result(self) -> PassResult:
        if self.mode == GameMode.TIMED:
            total = self.turn.words_checked
        elif self.mode == GameMode.CROSSWORD:
            total = len(self.grid.entries)
        else:
            total = len(self.turn.active_words)

        incorrect = list(self.turn.incorrect_words)
        if self.second_chance_active and self.mode != GameMode.CROSSWORD:
            # Retry words never answered (timer ran out, skipped) are still wrong
            corrected = set(self.turn.corrected_words)
            incorrect = [word.text for word in self.turn.active_words if word.text not in corrected]

        return PassResult(
            mode=self.mode,
            total_words=total,
            correct_count=self.ledger.correct_count,
            incorrect_words=incorrect,
            score=self.ledger.score,
            best_streak=self.ledger.best_streak,
            list_word_count=len(self.words),
            is_second_chance=self.second_chance_active,
        )

    def _require_phase(self, *phases: TurnPhase) -> None:
        if self.turn.phase not in phases:
            raise InvalidTurnAction(f"Not allowed while {self.turn.phase.value}")

    def _require_mode(self, *modes: GameMode) -> None:
        if self.mode not in modes:
            raise InvalidTurnAction(f"Not available in {self.mode.value} mode")

    # Serialization

    def to_state(self, game_id: str) -> GameState:
        """Client view of the game. The answer is only revealed once a turn is decided."""
        revealed = self.turn.phase in (TurnPhase.FEEDBACK, TurnPhase.COMPLETE)
        word = self.current_word
        state = GameState(
            game_id=game_id,
            game_mode=self.mode.value,
            phase=self.turn.phase.value,
            current_index=self.turn.current_index,
            word_count=len(self.turn.active_words),
            score=self.ledger.score,
            correct_count=self.ledger.correct_count,
            streak=self.ledger.streak,
            best_streak=self.ledger.best_streak,
            incorrect_words=list(self.turn.incorrect_words) if revealed or self.mode.has_feedback else [],
            second_chance_active=self.second_chance_active,
            do_over_available=self.recovery.inventory.count(DO_OVER_ITEM),
            second_chance_available=self.recovery.inventory.count(SECOND_CHANCE_ITEM),
            user_input=self.turn.user_input,
            is_correct=self.turn.is_correct,
            correct_word=word.text if revealed and word else None,
            time_left=self.turn.time_left,
            selected_choice_index=self.turn.selected_choice_index,
        )

        if self.mode == GameMode.MISTAKE and self.mistake and not self.is_complete:
            state.mistake_choices = list(self.mistake.choices)
            if revealed:
                state.correct_word = self.mistake.correct_spelling
        if self.mode == GameMode.SCRAMBLE and self.scramble and not self.is_complete:
            state.scramble_tray = self.scramble.tray_letters()
            state.scramble_slots = self.scramble.slot_letters()
        if self.mode == GameMode.CROSSWORD:
            state.crossword = self.grid.to_public_dict()
            state.crossword['inputs'] = {f"{row}-{col}": letter for (row, col), letter in self.crossword_inputs.items()}
            state.crossword['highlighted'] = sorted(f"{row}-{col}" for row, col in self.highlighted_cells)
        if self.mode == GameMode.QUIZ and self.is_complete:
            state.quiz_answers = [
                {'word': a.word, 'user_answer': a.user_answer, 'is_correct': a.is_correct}
                for a in self.turn.quiz_answers
            ]
        if self.summary is not None:
            state.summary = {
                'total_words': self.summary.total_words,
                'correct_count': self.summary.correct_count,
                'incorrect_words': list(self.summary.incorrect_words),
                'accuracy': self.summary.accuracy,
                'score': self.summary.score,
                'best_streak': self.summary.best_streak,
                'star_earned': self.summary.star_earned,
                'second_chance_offered': self.second_chance_offered(),
            }
        return state
