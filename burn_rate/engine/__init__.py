"""Game engine components."""

from .game_setup import create_game
from .turn_executor import TurnOrchestrator, TurnResult

__all__ = [
    "create_game",
    "TurnOrchestrator",
    "TurnResult",
]
