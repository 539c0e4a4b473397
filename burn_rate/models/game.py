"""Game state container."""

from dataclasses import dataclass, field
from enum import Enum

from ..utils.constants import AI, EARLY_GAME_END, LATE_GAME_END, MID_GAME_END, PLAYER
from .combat import CombatEvent
from .player import PlayerState


class GamePhase(str, Enum):
    EARLY = "early"
    MID = "mid"
    LATE = "late"
    ENDGAME = "endgame"


def phase_for_turn(turn: int) -> GamePhase:
    """Return the game phase for a turn number.

    Args:
        turn: Current turn (1-based)

    Returns:
        early through turn 5, mid through 15, late through 25, then endgame
    """
    if turn <= EARLY_GAME_END:
        return GamePhase.EARLY
    if turn <= MID_GAME_END:
        return GamePhase.MID
    if turn <= LATE_GAME_END:
        return GamePhase.LATE
    return GamePhase.ENDGAME


@dataclass
class GameState:
    """Main game state container.

    Owned by the TurnOrchestrator. Everything else receives copies between
    turns and treats them as read-only.
    """

    turn: int
    player: PlayerState
    ai: PlayerState
    combat_log: list[CombatEvent] = field(default_factory=list)
    game_phase: GamePhase = GamePhase.EARLY
    is_game_over: bool = False
    winner: str | None = None  # "player", "ai", "draw", or None
    victory_type: str | None = None  # "military", "economic", or None

    def __post_init__(self):
        """Validate game state after initialization."""
        if self.turn < 1:
            raise ValueError(f"Invalid turn: {self.turn} (must be >= 1)")
        if self.player.side != PLAYER or self.ai.side != AI:
            raise ValueError("GameState needs a 'player' side and an 'ai' side")
        if self.winner not in (None, PLAYER, AI, "draw"):
            raise ValueError(
                f"Invalid winner: {self.winner} (must be None, 'player', 'ai', or 'draw')"
            )
        if self.victory_type not in (None, "military", "economic"):
            raise ValueError(
                f"Invalid victory_type: {self.victory_type} (must be None, 'military', or 'economic')"
            )

    def get_player(self, side: str) -> PlayerState:
        """Return the state for one side."""
        if side == PLAYER:
            return self.player
        if side == AI:
            return self.ai
        raise ValueError(f"Invalid side: {side} (must be 'player' or 'ai')")

    def opponent(self, side: str) -> PlayerState:
        """Return the state for the other side."""
        return self.ai if self.get_player(side) is self.player else self.player
