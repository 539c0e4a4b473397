"""Hybrid persona: rotates between four strategies every 2-4 turns."""

from dataclasses import replace

from ...models.command import Command
from ...models.economy import StructureType
from ...models.fleet import UnitType
from ...models.game import GameState
from ...utils.rng import GameRNG
from .base import (
    COUNTERS,
    HYBRID_STRATEGIES,
    AIState,
    attack,
    build,
    can_afford_build,
    dominant_unit_type,
    economic_advantage,
    opponent_exposed,
    plan_attack,
    scan,
    threat_level,
    total_income,
    wait,
)

TARGET_INCOME = 20000
DEFENSIVE_FLEET_TARGET = 8
AGGRESSIVE_ATTACK_SHARE = (0.7, 0.9)
OPPORTUNISTIC_ATTACK_SHARE = 0.8


def select_new_strategy(threat: float, advantage: float, rng: GameRNG) -> str:
    """Pick the next strategy from the current threat and income balance."""
    if threat > 0.7:
        return "defensive" if rng.random() < 0.7 else "aggressive"
    if advantage < -0.3:
        return "economic" if rng.random() < 0.6 else "opportunistic"
    if advantage > 0.3:
        return "aggressive" if rng.random() < 0.6 else "opportunistic"
    return rng.choice(HYBRID_STRATEGIES)


def adapt_strategy(
    game: GameState, strategy: str, threat: float, advantage: float, rng: GameRNG
) -> str:
    """React to what the player is doing this turn."""
    if game.player.home_fleet.total() > 5 and threat > 0.5:
        strategy = "defensive" if rng.random() < 0.6 else "aggressive"
    if total_income(game.player) > TARGET_INCOME and advantage < 0:
        strategy = "economic" if rng.random() < 0.5 else "aggressive"
    return strategy


def _aggressive(game: GameState, rng: GameRNG) -> Command:
    ai = game.ai
    if ai.home_fleet.total() >= 4:
        command = attack(plan_attack(ai.home_fleet, *AGGRESSIVE_ATTACK_SHARE, rng))
        if command is not None:
            return command
    if can_afford_build(ai, UnitType.FRIGATE, 2):
        return build(UnitType.FRIGATE, rng.randint(1, 3))
    if can_afford_build(ai, UnitType.CRUISER):
        return build(UnitType.CRUISER)
    return wait()


def _economic(game: GameState) -> Command:
    ai = game.ai
    if total_income(ai) < TARGET_INCOME:
        if ai.resources.metal_income <= ai.resources.energy_income:
            if can_afford_build(ai, StructureType.MINE):
                return build(StructureType.MINE)
        elif can_afford_build(ai, StructureType.REACTOR):
            return build(StructureType.REACTOR)
    if ai.home_fleet.total() < 3 and can_afford_build(ai, UnitType.CRUISER):
        return build(UnitType.CRUISER)
    return wait()


def _defensive(game: GameState, rng: GameRNG) -> Command:
    ai = game.ai
    if ai.home_fleet.total() < DEFENSIVE_FLEET_TARGET:
        counter = COUNTERS[dominant_unit_type(game.player.home_fleet)]
        if can_afford_build(ai, counter):
            return build(counter)
    if ai.resources.energy >= 2500 and rng.random() < 0.4:
        return scan("deep")
    return wait()


def _opportunistic(game: GameState) -> Command:
    ai = game.ai
    thin_garrison = game.player.home_fleet.total() <= 2
    if (thin_garrison or opponent_exposed(game)) and ai.home_fleet.total() >= 3:
        command = attack(ai.home_fleet.scaled(OPPORTUNISTIC_ATTACK_SHARE))
        if command is not None:
            return command
    if total_income(game.player) > total_income(ai):
        return _economic(game)
    if can_afford_build(ai, UnitType.CRUISER):
        return build(UnitType.CRUISER)
    if can_afford_build(ai, UnitType.FRIGATE, 2):
        return build(UnitType.FRIGATE, 2)
    return wait()


def decide(game: GameState, ai_state: AIState, rng: GameRNG) -> tuple[Command, AIState]:
    """Pick the hybrid's command for this turn.

    Args:
        game: Current game state
        ai_state: Hybrid memory (current strategy and its timer)
        rng: Random source

    Returns:
        Tuple of (command, updated memory)
    """
    threat = threat_level(game)
    advantage = economic_advantage(game)
    strategy = ai_state.strategy or rng.choice(HYBRID_STRATEGIES)
    timer = ai_state.strategy_timer
    duration = ai_state.strategy_duration

    if rng.random() < ai_state.profile.adaptive_variation:
        strategy = adapt_strategy(game, strategy, threat, advantage, rng)

    timer += 1
    if timer >= duration:
        strategy = select_new_strategy(threat, advantage, rng)
        timer = 0
        duration = rng.randint(2, 4)

    if strategy == "aggressive":
        command = _aggressive(game, rng)
    elif strategy == "economic":
        command = _economic(game)
    elif strategy == "defensive":
        command = _defensive(game, rng)
    else:
        command = _opportunistic(game)

    new_state = replace(
        ai_state,
        threat_level=threat,
        economic_advantage=advantage,
        strategy=strategy,
        strategy_timer=timer,
        strategy_duration=duration,
        last_command=command.kind,
    )
    return command, new_state
