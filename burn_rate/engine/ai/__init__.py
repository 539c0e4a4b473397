"""AI personas.

Each archetype maps to a pure decision function. The driver (CLI loop or
HTTP session) submits the returned command through the orchestrator like
any human command.
"""

import logging
from dataclasses import replace

from ...models.command import AttackCommand, Command, CommandResult
from ...models.game import GameState
from ...utils.constants import AI, AI_HOME, PLAYER
from ...utils.rng import GameRNG
from ..turn_executor import TurnOrchestrator
from . import aggressor, economist, hybrid, trickster
from .base import AIState, create_ai_state

logger = logging.getLogger(__name__)

PERSONAS = {
    "aggressor": aggressor.decide,
    "economist": economist.decide,
    "trickster": trickster.decide,
    "hybrid": hybrid.decide,
}


def decide(game, ai_state: AIState, rng: GameRNG) -> tuple[Command, AIState]:
    """Dispatch to the persona named by ai_state.archetype."""
    return PERSONAS[ai_state.archetype](game, ai_state, rng)


def mirror_game(game: GameState) -> GameState:
    """Swap the two sides so a persona can play the human's seat."""
    return replace(
        game,
        player=replace(game.ai, side=PLAYER),
        ai=replace(game.player, side=AI),
    )


def play_ai_turn(
    orchestrator: TurnOrchestrator, ai_state: AIState, rng: GameRNG, side: str = AI
) -> tuple[CommandResult, AIState]:
    """Let a persona decide and submit its command for the current turn.

    Args:
        orchestrator: Game being played
        ai_state: Persona memory
        rng: Random source for the decision
        side: Seat the persona plays (the human's seat in auto mode)

    Returns:
        Tuple of (submission result, updated persona memory)
    """
    game = orchestrator.get_game_state()
    if side == PLAYER:
        command, ai_state = decide(mirror_game(game), ai_state, rng)
        if isinstance(command, AttackCommand):
            command = AttackCommand(fleet=command.fleet, target=AI_HOME)
    else:
        command, ai_state = decide(game, ai_state, rng)

    result = orchestrator.submit(side, command)
    logger.info(
        f"{side} ({ai_state.archetype}) chose {command.kind}: "
        f"{'accepted' if result.success else '; '.join(result.errors)}"
    )
    return result, ai_state


__all__ = [
    "AIState",
    "PERSONAS",
    "create_ai_state",
    "decide",
    "mirror_game",
    "play_ai_turn",
]
