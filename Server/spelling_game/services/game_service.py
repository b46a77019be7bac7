"""
Game Service

Owns the active games of this server process. Each game is a turn
controller plus the collaborators it was built with; this service creates
them from a GameConfig, routes player actions to them, and saves partial
progress when a game is restarted or abandoned.
"""

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..config.game_settings import (
    CROSSWORD_MAX_WORDS, CROSSWORD_MIN_WORDS, DEFAULT_CLUE, MISTAKE_MIN_WORDS, TIMED_MODE_SECONDS
)
from ..models.crossword import build_stacked_grid
from ..models.errors import GameNotFoundError, InvalidTurnAction
from ..models.game import GameMode, GameState, TurnPhase, Word
from ..utils.game_logger import game_logger
from .misspelling import MisspellingGenerator
from .recovery import Inventory, RecoveryCoordinator
from .session_lifecycle import SessionLifecycle
from .speech import NullSpeechChannel
from .turn_controller import TurnController
from .word_source import build_session_words, load_word_texts

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Everything needed to (re)build a game from scratch."""
    mode: GameMode
    words: List[Word]
    user_id: Optional[str] = None
    list_id: Optional[str] = None
    is_virtual: bool = False
    clues: List[str] = field(default_factory=list)


@dataclass
class ActiveGame:
    game_id: str
    config: GameConfig
    controller: TurnController
    lifecycle: SessionLifecycle
    created_at: float = field(default_factory=time.time)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)


class GameService:
    """
    Core game service managing multiple game sessions.

    This class handles:
    - Game creation from a stored or virtual word list
    - Routing player actions to each game's turn controller
    - Restart and abandonment with partial progress saves
    - Game state export without exposing answers to clients
    """

    def __init__(self, store=None, dictionary=None,
                 grid_builder: Callable = build_stacked_grid,
                 speech_factory: Optional[Callable[[str], object]] = None,
                 time_limit: int = TIMED_MODE_SECONDS,
                 rng: Optional[random.Random] = None):
        self.store = store
        self.dictionary = dictionary
        self.grid_builder = grid_builder
        self.speech_factory = speech_factory
        self.time_limit = time_limit
        self.rng = rng
        self.games: Dict[str, ActiveGame] = {}
        self._lock = threading.RLock()

    # Creation

    def create_new_game(self, game_mode: str, list_id: Optional[str] = None, virtual_words=None,
                        quiz_count: Optional[str] = None, user_id: Optional[str] = None) -> str:
        """
        Creates a new game session.

        Args:
            game_mode: One of the GameMode values
            list_id: Stored word list to play
            virtual_words: Comma-separated words (or a list) played without persistence
            quiz_count: "10" limits a quiz to ten words
            user_id: Authenticated player, None for guests

        Returns:
            str: Unique game ID for this session

        Raises:
            ValueError: Unknown mode, missing or too short word list.
        """
        try:
            mode = GameMode(game_mode)
        except ValueError:
            raise ValueError(f"Unknown game mode: {game_mode}")

        texts = load_word_texts(self.store, list_id, virtual_words)
        words = build_session_words(texts, mode, quiz_count, self.rng)

        clues = []
        if mode == GameMode.CROSSWORD:
            words = words[:CROSSWORD_MAX_WORDS]
            if len(words) < CROSSWORD_MIN_WORDS:
                raise ValueError(f"Crossword needs at least {CROSSWORD_MIN_WORDS} words")
            clues = [self._clue_for(word.text) for word in words]
        elif mode == GameMode.MISTAKE and len(words) < MISTAKE_MIN_WORDS:
            raise ValueError(f"Find-the-mistake needs at least {MISTAKE_MIN_WORDS} different words")

        config = GameConfig(
            mode=mode,
            words=words,
            user_id=user_id,
            list_id=None if virtual_words else list_id,
            is_virtual=bool(virtual_words),
            clues=clues,
        )

        game_id = str(uuid.uuid4())
        # Building a mistake game queries the dictionary; keep that out of the registry lock.
        game = self.reset_session(game_id, config)
        with self._lock:
            self.games[game_id] = game
        game_logger.log_game_event(game_id, 'game_started', user_id,
                                   game_mode=mode.value, word_count=len(words), virtual=config.is_virtual)
        return game_id

    def reset_session(self, game_id: str, config: GameConfig) -> ActiveGame:
        """Build a fresh game from its config: new session record, zeroed ledger, first word presented."""
        lifecycle = SessionLifecycle(self.store, config.mode, config.user_id, config.list_id, config.is_virtual)
        lifecycle.start()

        inventory = Inventory(self.store, config.user_id)
        speech = self.speech_factory(game_id) if self.speech_factory else NullSpeechChannel()
        rng = self.rng or random.Random()

        misspeller = None
        if config.mode == GameMode.MISTAKE:
            word_exists = self.dictionary.word_exists if self.dictionary is not None else None
            misspeller = MisspellingGenerator(word_exists=word_exists, rng=rng)

        grid = None
        if config.mode == GameMode.CROSSWORD:
            grid = self.grid_builder([word.text for word in config.words], config.clues)

        controller = TurnController(
            config.mode, config.words,
            recovery=RecoveryCoordinator(inventory),
            lifecycle=lifecycle,
            misspeller=misspeller,
            grid=grid,
            speech=speech,
            rng=rng,
            time_limit=self.time_limit,
        )
        return ActiveGame(game_id=game_id, config=config, controller=controller, lifecycle=lifecycle)

    def _clue_for(self, word: str) -> str:
        if self.dictionary is None:
            return DEFAULT_CLUE
        try:
            return self.dictionary.fetch_clue(word)
        except Exception as e:
            logger.warning(f"Clue lookup failed for '{word}': {e}")
            return DEFAULT_CLUE

    # Queries

    def get_game(self, game_id: str) -> ActiveGame:
        with self._lock:
            game = self.games.get(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    def get_game_state(self, game_id: str) -> GameState:
        """Returns the current game state for a session (without revealing the answer)."""
        game = self.get_game(game_id)
        with game.lock:
            return game.controller.to_state(game_id)

    def owner_of(self, game_id: str) -> Optional[str]:
        return self.get_game(game_id).config.user_id

    def get_word_meta(self, game_id: str) -> Dict:
        """
        Definition, example, origin and illustration for the word on screen.

        Only available once the word's answer is revealed. Lookup failures
        yield empty fields rather than errors.
        """
        game = self.get_game(game_id)
        with game.lock:
            controller = game.controller
            if controller.phase != TurnPhase.FEEDBACK or controller.current_word is None:
                raise InvalidTurnAction("Word details are shown with feedback only")
            word = controller.current_word.text

        meta = {'word': word, 'definition': None, 'example': None, 'origin': None,
                'part_of_speech': None, 'illustration': None}
        if self.dictionary is not None:
            try:
                meta.update(self.dictionary.fetch_word_meta(word))
                meta['illustration'] = self.dictionary.fetch_illustration(word)
            except Exception as e:
                logger.warning(f"Word details lookup failed for '{word}': {e}")
        return meta

    # Actions

    def _act(self, game_id: str, action: Callable[[TurnController], object]) -> GameState:
        game = self.get_game(game_id)
        with game.lock:
            was_complete = game.controller.is_complete
            action(game.controller)
            if game.controller.is_complete and not was_complete:
                self._log_pass_complete(game)
            return game.controller.to_state(game_id)

    def _log_pass_complete(self, game: ActiveGame) -> None:
        summary = game.controller.summary
        game_logger.log_game_event(
            game.game_id, 'pass_complete', game.config.user_id,
            game_mode=game.config.mode.value,
            second_chance=game.controller.second_chance_active,
            score=summary.score if summary else None,
            accuracy=summary.accuracy if summary else None,
            star_earned=summary.star_earned if summary else False,
        )

    def submit_answer(self, game_id: str, answer: str) -> GameState:
        return self._act(game_id, lambda c: c.submit_answer(answer))

    def choose(self, game_id: str, choice_index: int) -> GameState:
        return self._act(game_id, lambda c: c.choose(choice_index))

    def place_tile(self, game_id: str, tray_index: int, slot_index: Optional[int] = None) -> GameState:
        return self._act(game_id, lambda c: c.place_tile(tray_index, slot_index))

    def remove_tile(self, game_id: str, slot_index: int) -> GameState:
        return self._act(game_id, lambda c: c.remove_tile(slot_index))

    def clear_tiles(self, game_id: str) -> GameState:
        return self._act(game_id, lambda c: c.clear_tiles())

    def submit_scramble(self, game_id: str) -> GameState:
        return self._act(game_id, lambda c: c.submit_scramble())

    def set_cell(self, game_id: str, row: int, col: int, letter: str) -> GameState:
        return self._act(game_id, lambda c: c.set_cell(row, col, letter))

    def show_mistakes(self, game_id: str) -> GameState:
        return self._act(game_id, lambda c: c.show_mistakes())

    def submit_crossword(self, game_id: str) -> GameState:
        return self._act(game_id, lambda c: c.submit_crossword())

    def next_word(self, game_id: str) -> GameState:
        return self._act(game_id, lambda c: c.next())

    def try_again(self, game_id: str) -> GameState:
        return self._act(game_id, lambda c: c.try_again())

    def skip(self, game_id: str) -> GameState:
        return self._act(game_id, lambda c: c.skip())

    def tick(self, game_id: str) -> GameState:
        """Advance the timed-mode countdown by one second."""
        return self._act(game_id, lambda c: c.tick())

    def resolve_do_over(self, game_id: str, accept: bool) -> GameState:
        state = self._act(game_id, lambda c: c.accept_do_over() if accept else c.decline_do_over())
        if accept:
            game_logger.log_game_event(game_id, 'do_over_used', self.owner_of(game_id),
                                       word_index=state.current_index)
        return state

    def second_chance(self, game_id: str) -> GameState:
        state = self._act(game_id, lambda c: c.begin_second_chance())
        game_logger.log_game_event(game_id, 'second_chance_used', self.owner_of(game_id),
                                   retry_words=state.word_count)
        return state

    def restart(self, game_id: str) -> GameState:
        """Save progress of the current run, then rebuild the game from its config under the same id."""
        game = self.get_game(game_id)
        with game.lock:
            self._save_partial(game)
            fresh = self.reset_session(game_id, game.config)
            with self._lock:
                self.games[game_id] = fresh
        with fresh.lock:
            return fresh.controller.to_state(game_id)

    def abandon(self, game_id: str) -> bool:
        """Save progress and drop the game. Returns whether partial progress was written."""
        game = self.get_game(game_id)
        with game.lock:
            saved = self._save_partial(game)
            game.controller.speech.cancel()
            with self._lock:
                self.games.pop(game_id, None)
        game_logger.log_game_event(game_id, 'game_abandoned', game.config.user_id,
                                   game_mode=game.config.mode.value, progress_saved=saved)
        return saved

    def _save_partial(self, game: ActiveGame) -> bool:
        """A finished main pass is already recorded; only unfinished runs are saved."""
        controller = game.controller
        if controller.lifecycle.finalize_count > 0 or controller.is_complete:
            return False
        return game.lifecycle.save_partial(
            words_attempted=controller.words_attempted(),
            correct_count=controller.ledger.correct_count,
            incorrect_words=list(controller.turn.incorrect_words),
            best_streak=controller.ledger.best_streak,
        )


# Global game service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(store=None, dictionary=None, **kwargs) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(store=store, dictionary=dictionary, **kwargs)
    return _game_service
