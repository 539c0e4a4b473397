"""Victory condition checking.

Two ways to lose:
1. Military: home garrison empty and every mission empty
2. Economic: both resource stocks at zero while income has been non-positive
   for ECONOMIC_COLLAPSE_TURNS consecutive turns

Fleet elimination is checked first. If both sides are eliminated in the same
turn, the mutual elimination policy decides: "defender" awards the game to
the defender of the battle that emptied a home garrison that turn (the AI
when no single battle did), "draw" declares a draw.
"""

import logging
from dataclasses import dataclass

from ..models.fleet import FleetComposition, FleetMovement
from ..models.game import GameState
from ..models.player import PlayerState
from ..utils.constants import (
    AI,
    DEFAULT_MUTUAL_ELIMINATION_POLICY,
    ECONOMIC_COLLAPSE_TURNS,
    PLAYER,
)

logger = logging.getLogger(__name__)

ONGOING = "ongoing"
DRAW = "draw"


@dataclass
class VictoryResult:
    """Outcome of a victory check.

    Attributes:
        game_ended: True if the game is over
        winner: "player", "ai", "draw", or None
        victory_type: "military", "economic", or None
    """

    game_ended: bool
    winner: str | None = None
    victory_type: str | None = None


def check_fleet_elimination(home_fleet: FleetComposition, missions: list[FleetMovement]) -> bool:
    """True if the home garrison and every mission are empty."""
    if not home_fleet.is_empty():
        return False
    return all(movement.composition.is_empty() for movement in missions)


def _resolve_mutual(defender: str | None, policy: str) -> str:
    if policy == DRAW:
        return DRAW
    return defender if defender in (PLAYER, AI) else AI


def check_victory_conditions(
    player_home: FleetComposition,
    player_missions: list[FleetMovement],
    ai_home: FleetComposition,
    ai_missions: list[FleetMovement],
    defender: str | None = None,
    policy: str = DEFAULT_MUTUAL_ELIMINATION_POLICY,
) -> str:
    """Check fleet elimination for both sides.

    Args:
        player_home: Player's home garrison
        player_missions: Player's missions
        ai_home: AI's home garrison
        ai_missions: AI's missions
        defender: Defender of the battle that triggered the check
        policy: Mutual elimination policy, "defender" or "draw"

    Returns:
        "ongoing", "player", "ai", or "draw"
    """
    player_eliminated = check_fleet_elimination(player_home, player_missions)
    ai_eliminated = check_fleet_elimination(ai_home, ai_missions)

    if player_eliminated and ai_eliminated:
        return _resolve_mutual(defender, policy)
    if player_eliminated:
        return AI
    if ai_eliminated:
        return PLAYER
    return ONGOING


def is_economically_collapsed(
    player: PlayerState, required_turns: int = ECONOMIC_COLLAPSE_TURNS
) -> bool:
    """True if both stocks are empty and income has stayed non-positive."""
    resources = player.resources
    return (
        resources.metal <= 0
        and resources.energy <= 0
        and player.stalled_turns >= required_turns
    )


def evaluate_victory(
    game: GameState,
    defender: str | None = None,
    policy: str = DEFAULT_MUTUAL_ELIMINATION_POLICY,
    collapse_turns: int = ECONOMIC_COLLAPSE_TURNS,
) -> VictoryResult:
    """Run every victory check against a game state.

    Args:
        game: Game state after combat and mission returns
        defender: Defender of the battle that emptied a home garrison, if any
        policy: Mutual elimination policy
        collapse_turns: Stalled turns needed for an economic collapse

    Returns:
        VictoryResult describing whether and how the game ended
    """
    military = check_victory_conditions(
        game.player.home_fleet,
        game.player.missions,
        game.ai.home_fleet,
        game.ai.missions,
        defender=defender,
        policy=policy,
    )
    if military != ONGOING:
        logger.info(f"Military victory check: winner={military}")
        return VictoryResult(game_ended=True, winner=military, victory_type="military")

    player_collapsed = is_economically_collapsed(game.player, collapse_turns)
    ai_collapsed = is_economically_collapsed(game.ai, collapse_turns)
    if player_collapsed and ai_collapsed:
        winner = _resolve_mutual(None, policy)
    elif player_collapsed:
        winner = AI
    elif ai_collapsed:
        winner = PLAYER
    else:
        return VictoryResult(game_ended=False)

    logger.info(f"Economic victory check: winner={winner}")
    return VictoryResult(game_ended=True, winner=winner, victory_type="economic")
