"""Trickster persona: decoy scans and odd builds, sharp play when unobserved."""

from dataclasses import replace

from ...models.command import Command
from ...models.economy import StructureType
from ...models.fleet import UNIT_TYPES, UnitType
from ...models.game import GameState
from ...utils.rng import GameRNG
from .base import (
    COUNTERS,
    AIState,
    attack,
    build,
    can_afford_build,
    dominant_unit_type,
    economic_advantage,
    fleet_strength,
    plan_attack,
    scan,
    threat_level,
    wait,
)

UNOBSERVED_TURNS = 3
STRAIGHTFORWARD_CHANCE = 0.3
DECEPTION_COOLDOWN = 3
DECOY_SCAN_CHANCE = 0.4
ATTACK_SHARE = (0.5, 0.7)
INCOME_FLOOR = 15000

# Quantity of the counter unit built against each dominant player unit
COUNTER_QUANTITY = {
    UnitType.FRIGATE: 1,
    UnitType.CRUISER: 3,
    UnitType.BATTLESHIP: 2,
}


def _random_unit(game: GameState, rng: GameRNG) -> Command:
    unit_type = rng.choice(UNIT_TYPES)
    if can_afford_build(game.ai, unit_type):
        return build(unit_type)
    return wait()


def _unexpected_units(game: GameState, rng: GameRNG) -> Command:
    """Build the unit the player least expects against their dominant type."""
    ai = game.ai
    dominant = dominant_unit_type(game.player.home_fleet)
    if dominant == UnitType.FRIGATE and can_afford_build(ai, UnitType.CRUISER):
        return build(UnitType.CRUISER, rng.randint(1, 2))
    if dominant == UnitType.CRUISER and can_afford_build(ai, UnitType.BATTLESHIP):
        return build(UnitType.BATTLESHIP)
    if dominant == UnitType.BATTLESHIP and can_afford_build(ai, UnitType.FRIGATE, 3):
        return build(UnitType.FRIGATE, rng.randint(2, 5))
    return _random_unit(game, rng)


def _deceptive(game: GameState, ai_state: AIState, rng: GameRNG) -> tuple[Command, AIState]:
    if game.turn - ai_state.last_deception_turn >= DECEPTION_COOLDOWN:
        if game.ai.resources.energy >= 1000 and rng.random() < DECOY_SCAN_CHANCE:
            return scan("basic"), replace(ai_state, last_deception_turn=game.turn)
    return _unexpected_units(game, rng), ai_state


def _straightforward(game: GameState, threat: float, rng: GameRNG) -> Command:
    ai = game.ai
    home = ai.home_fleet
    if home.total() >= 6 and threat < 0.6:
        if fleet_strength(home) >= fleet_strength(game.player.home_fleet) * 1.2:
            command = attack(plan_attack(home, *ATTACK_SHARE, rng))
            if command is not None:
                return command

    dominant = dominant_unit_type(game.player.home_fleet)
    counter = COUNTERS[dominant]
    quantity = COUNTER_QUANTITY[dominant]
    if can_afford_build(ai, counter, quantity):
        return build(counter, quantity)
    if can_afford_build(ai, UnitType.FRIGATE):
        return build(UnitType.FRIGATE)
    return wait()


def _balanced(game: GameState, rng: GameRNG) -> Command:
    ai = game.ai
    if rng.random() < 0.5:
        if ai.resources.metal_income < INCOME_FLOOR and can_afford_build(ai, StructureType.MINE):
            return build(StructureType.MINE)
        if ai.resources.energy_income < INCOME_FLOOR and can_afford_build(
            ai, StructureType.REACTOR
        ):
            return build(StructureType.REACTOR)
    return _random_unit(game, rng)


def decide(game: GameState, ai_state: AIState, rng: GameRNG) -> tuple[Command, AIState]:
    """Pick the trickster's command for this turn.

    When the player has not scanned for more than three turns it sometimes
    plays straight: attacks with a 1.2x edge and builds hard counters.
    Otherwise it mostly misdirects with decoy scans and unexpected builds.
    """
    threat = threat_level(game)
    profile = ai_state.profile
    last_player_scan = game.player.intelligence.last_scan_turn or 0

    if game.turn - last_player_scan > UNOBSERVED_TURNS and rng.random() < STRAIGHTFORWARD_CHANCE:
        command = _straightforward(game, threat, rng)
    elif rng.random() < profile.deception:
        command, ai_state = _deceptive(game, ai_state, rng)
    else:
        command = _balanced(game, rng)

    new_state = replace(
        ai_state,
        threat_level=threat,
        economic_advantage=economic_advantage(game),
        last_command=command.kind,
    )
    return command, new_state
