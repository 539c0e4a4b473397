"""Aggressor persona: builds cheap ships and attacks early and often."""

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
    plan_attack,
    threat_level,
    total_income,
    wait,
)

ATTACK_SHARE = (0.6, 0.8)
MIN_ATTACK_UNITS = 5
ECONOMY_INCOME_FLOOR = 15000


def _build_military(game: GameState, rng: GameRNG) -> Command:
    ai = game.ai
    if can_afford_build(ai, UnitType.FRIGATE, 3):
        return build(UnitType.FRIGATE, rng.randint(1, 3))
    if can_afford_build(ai, UnitType.CRUISER, 2):
        return build(UnitType.CRUISER, rng.randint(1, 2))
    if can_afford_build(ai, UnitType.BATTLESHIP):
        return build(UnitType.BATTLESHIP)
    return wait()


def _defensive(game: GameState, rng: GameRNG) -> Command:
    ai = game.ai
    if can_afford_build(ai, UnitType.BATTLESHIP):
        return build(UnitType.BATTLESHIP)
    if can_afford_build(ai, UnitType.CRUISER):
        return build(UnitType.CRUISER, rng.randint(1, 3))
    if can_afford_build(ai, UnitType.FRIGATE):
        return build(UnitType.FRIGATE, rng.randint(1, 5))
    return wait()


def _military(game: GameState, threat: float, rng: GameRNG) -> Command:
    home = game.ai.home_fleet
    if home.total() >= MIN_ATTACK_UNITS and threat < 0.8:
        command = attack(plan_attack(home, *ATTACK_SHARE, rng))
        if command is not None:
            return command
    return _build_military(game, rng)


def _economic(game: GameState, rng: GameRNG) -> Command:
    ai = game.ai
    if total_income(ai) < ECONOMY_INCOME_FLOOR:
        if ai.resources.metal_income < ai.resources.energy_income and can_afford_build(
            ai, StructureType.MINE
        ):
            return build(StructureType.MINE)
        if can_afford_build(ai, StructureType.REACTOR):
            return build(StructureType.REACTOR)
    return _build_military(game, rng)


def decide(game: GameState, ai_state: AIState, rng: GameRNG) -> tuple[Command, AIState]:
    """Pick the aggressor's command for this turn.

    Turtles when badly outgunned (20% of the time), otherwise favors attacks
    and cheap ships, and only invests in economy when income is thin.
    """
    threat = threat_level(game)
    profile = ai_state.profile

    if rng.random() < profile.adaptive_variation and threat > 0.7:
        command = _defensive(game, rng)
    elif rng.random() < profile.military_focus:
        command = _military(game, threat, rng)
    else:
        command = _economic(game, rng)

    new_state = replace(
        ai_state,
        threat_level=threat,
        economic_advantage=economic_advantage(game),
        last_command=command.kind,
    )
    return command, new_state
