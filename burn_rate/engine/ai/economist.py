"""Economist persona: grows income first, fights only with overwhelming odds."""

from dataclasses import replace

from ...models.command import Command
from ...models.economy import StructureType
from ...models.fleet import UnitType
from ...models.game import GameState
from ...utils.rng import GameRNG
from .base import (
    AIState,
    attack,
    build,
    can_afford_build,
    economic_advantage,
    fleet_strength,
    plan_attack,
    scan,
    threat_level,
    total_income,
    wait,
)

TARGET_INCOME = 25000
DEFENSIVE_FLEET_TARGET = 8
ATTACK_SHARE = (0.4, 0.5)
MIN_ATTACK_UNITS = 10
SCAN_CHANCE = 0.3


def _defensive_military(game: GameState, rng: GameRNG) -> Command:
    ai = game.ai
    if ai.home_fleet.total() < DEFENSIVE_FLEET_TARGET:
        if can_afford_build(ai, UnitType.CRUISER):
            return build(UnitType.CRUISER)
        if can_afford_build(ai, UnitType.FRIGATE, 2):
            return build(UnitType.FRIGATE, 2)
        if can_afford_build(ai, UnitType.BATTLESHIP):
            return build(UnitType.BATTLESHIP)

    if ai.resources.energy >= 2500 and rng.random() < SCAN_CHANCE:
        return scan("deep")
    return wait()


def _economic(game: GameState, rng: GameRNG) -> Command:
    ai = game.ai
    if total_income(ai) < TARGET_INCOME:
        if ai.resources.metal_income <= ai.resources.energy_income:
            if can_afford_build(ai, StructureType.MINE):
                return build(StructureType.MINE)
        elif can_afford_build(ai, StructureType.REACTOR):
            return build(StructureType.REACTOR)
    return _defensive_military(game, rng)


def _military(game: GameState, advantage: float, rng: GameRNG) -> Command:
    home = game.ai.home_fleet
    if home.total() >= MIN_ATTACK_UNITS and advantage > 0.3:
        if fleet_strength(home) >= fleet_strength(game.player.home_fleet) * 2:
            command = attack(plan_attack(home, *ATTACK_SHARE, rng))
            if command is not None:
                return command
    return _defensive_military(game, rng)


def decide(game: GameState, ai_state: AIState, rng: GameRNG) -> tuple[Command, AIState]:
    """Pick the economist's command for this turn.

    Builds military only when threatened, and attacks only with ten or more
    ships, a 30% income lead, and double the player's garrison strength.
    """
    threat = threat_level(game)
    advantage = economic_advantage(game)
    profile = ai_state.profile

    if threat > 0.5 and rng.random() < profile.military_focus:
        command = _military(game, advantage, rng)
    elif rng.random() < profile.economic_focus:
        command = _economic(game, rng)
    else:
        command = _defensive_military(game, rng)

    new_state = replace(
        ai_state,
        threat_level=threat,
        economic_advantage=advantage,
        last_command=command.kind,
    )
    return command, new_state
