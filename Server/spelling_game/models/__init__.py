"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    GameMode, TurnPhase, Word, QuizAnswer, MistakeQuestion, PendingResult,
    ScoringState, OriginalGameMetrics, PassResult, SessionSummary, GameState
)
from .crossword import CrosswordCell, CrosswordEntry, CrosswordGrid, build_stacked_grid
from .errors import InvalidTurnAction, GameNotFoundError

__all__ = [
    'GameMode', 'TurnPhase', 'Word', 'QuizAnswer', 'MistakeQuestion', 'PendingResult',
    'ScoringState', 'OriginalGameMetrics', 'PassResult', 'SessionSummary', 'GameState',
    'CrosswordCell', 'CrosswordEntry', 'CrosswordGrid', 'build_stacked_grid',
    'InvalidTurnAction', 'GameNotFoundError'
]
