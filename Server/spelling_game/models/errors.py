"""
Gameplay Errors

Raised by the game engine and mapped to HTTP status codes by the controllers.
"""


class InvalidTurnAction(ValueError):
    """The action is not allowed in the current phase or mode."""


class GameNotFoundError(KeyError):
    """No active game with the given id."""

    def __str__(self):
        return f"Game not found: {self.args[0]}" if self.args else "Game not found"
