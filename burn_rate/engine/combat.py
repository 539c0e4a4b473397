"""Combat resolution.

Each unit type is strong against one type, neutral against itself, and weak
against the third:

    frigate    > cruiser     (1.5x; cruiser vs frigate is 0.7x)
    cruiser    > battleship  (1.5x; battleship vs cruiser is 0.7x)
    battleship > frigate     (1.5x; frigate vs battleship is 0.7x)

A side's strength sums, for each of its unit types, the count times the
effectiveness-weighted size of the opposing fleet times a random factor in
[0.8, 1.2]. The strength ratio picks an outcome tier, and the tier picks the
band casualty rates are drawn from.
"""

import logging
import math
from dataclasses import dataclass, field

from ..errors import UnknownTypeError
from ..models.combat import BattleOutcome
from ..models.fleet import UNIT_TYPES, FleetComposition, UnitType, parse_unit_type
from ..utils.constants import (
    CLOSE_BATTLE_CASUALTY_RANGE,
    DECISIVE_LOSER_CASUALTY_RANGE,
    DECISIVE_RATIO,
    DECISIVE_WINNER_CASUALTY_RANGE,
    RANDOM_FACTOR_RANGE,
)
from ..utils.rng import GameRNG

logger = logging.getLogger(__name__)

STRONG = 1.5
NEUTRAL = 1.0
WEAK = 0.7

EFFECTIVENESS = {
    (UnitType.FRIGATE, UnitType.FRIGATE): NEUTRAL,
    (UnitType.FRIGATE, UnitType.CRUISER): STRONG,
    (UnitType.FRIGATE, UnitType.BATTLESHIP): WEAK,
    (UnitType.CRUISER, UnitType.FRIGATE): WEAK,
    (UnitType.CRUISER, UnitType.CRUISER): NEUTRAL,
    (UnitType.CRUISER, UnitType.BATTLESHIP): STRONG,
    (UnitType.BATTLESHIP, UnitType.FRIGATE): STRONG,
    (UnitType.BATTLESHIP, UnitType.CRUISER): WEAK,
    (UnitType.BATTLESHIP, UnitType.BATTLESHIP): NEUTRAL,
}


@dataclass
class CombatFactors:
    """Per-unit-type random factors for both sides of one battle.

    Types missing from a mapping get a fresh draw from [0.8, 1.2].
    """

    attacker: dict[UnitType, float] = field(default_factory=dict)
    defender: dict[UnitType, float] = field(default_factory=dict)

    @classmethod
    def fixed(cls, value: float = 1.0) -> "CombatFactors":
        """Same factor for every unit type on both sides."""
        factors = {unit_type: value for unit_type in UNIT_TYPES}
        return cls(attacker=dict(factors), defender=dict(factors))


@dataclass
class CombatResult:
    """Result of a combat resolution.

    Attributes:
        outcome: decisive_attacker, decisive_defender, or close_battle
        attacker_survivors: Attacking ships left
        defender_survivors: Defending ships left
        attacker_casualties: Attacking ships lost
        defender_casualties: Defending ships lost
        strength_ratio: attacker_strength / defender_strength, math.inf if the
            defender has no strength
        attacker_strength: Attacker's combat strength
        defender_strength: Defender's combat strength
    """

    outcome: BattleOutcome
    attacker_survivors: FleetComposition
    defender_survivors: FleetComposition
    attacker_casualties: FleetComposition
    defender_casualties: FleetComposition
    strength_ratio: float
    attacker_strength: float = 0.0
    defender_strength: float = 0.0


def effectiveness(unit_type, against) -> float:
    """Multiplier for one unit type fighting another.

    Raises:
        UnknownTypeError: If either type is unknown
    """
    key = (parse_unit_type(unit_type), parse_unit_type(against))
    if key not in EFFECTIVENESS:
        raise UnknownTypeError(f"No effectiveness entry for {key}")
    return EFFECTIVENESS[key]


def draw_random_factors(rng: GameRNG) -> dict[UnitType, float]:
    """Draw one factor per unit type from [0.8, 1.2]."""
    low, high = RANDOM_FACTOR_RANGE
    return {unit_type: rng.uniform(low, high) for unit_type in UNIT_TYPES}


def calculate_fleet_strength(
    side: FleetComposition,
    opposing: FleetComposition,
    random_factors: dict[UnitType, float] | None = None,
    rng: GameRNG | None = None,
) -> float:
    """Calculate a fleet's combat strength against an opposing fleet.

    For each unit type the side fields:
        count * sum(opposing_count[t] * effectiveness(type, t)) * factor[type]

    Args:
        side: Fleet whose strength is being computed
        opposing: Fleet it is fighting
        random_factors: Factor per unit type; missing types are drawn from rng
        rng: Random source for missing factors (unseeded if None)

    Returns:
        Total strength (0 if either fleet is empty)
    """
    factors = {parse_unit_type(k): v for k, v in (random_factors or {}).items()}
    missing = [t for t in UNIT_TYPES if t not in factors]
    if missing:
        drawn = draw_random_factors(rng or GameRNG())
        for unit_type in missing:
            factors[unit_type] = drawn[unit_type]

    strength = 0.0
    for unit_type, count in side.items():
        if count == 0:
            continue
        weighted_opposition = sum(
            opposing_count * effectiveness(unit_type, opposing_type)
            for opposing_type, opposing_count in opposing.items()
        )
        strength += count * weighted_opposition * factors[unit_type]
    return strength


def determine_battle_outcome(attacker_strength: float, defender_strength: float) -> BattleOutcome:
    """Pick the outcome tier from the two strengths.

    A side with zero strength cannot win. Otherwise a ratio of at least 2.0
    is decisive for the attacker, at most 0.5 decisive for the defender, and
    anything between is a close battle.
    """
    if attacker_strength <= 0:
        return BattleOutcome.DECISIVE_DEFENDER
    if defender_strength <= 0:
        return BattleOutcome.DECISIVE_ATTACKER

    ratio = attacker_strength / defender_strength
    if ratio >= DECISIVE_RATIO:
        return BattleOutcome.DECISIVE_ATTACKER
    if ratio <= 1 / DECISIVE_RATIO:
        return BattleOutcome.DECISIVE_DEFENDER
    return BattleOutcome.CLOSE_BATTLE


def casualty_band(outcome: BattleOutcome, is_winner: bool) -> tuple[float, float]:
    """Casualty-rate band for one side of a battle."""
    if outcome == BattleOutcome.CLOSE_BATTLE:
        return CLOSE_BATTLE_CASUALTY_RANGE
    if is_winner:
        return DECISIVE_WINNER_CASUALTY_RANGE
    return DECISIVE_LOSER_CASUALTY_RANGE


def calculate_casualties(
    fleet: FleetComposition,
    outcome: BattleOutcome,
    is_winner: bool,
    rng: GameRNG | None = None,
) -> tuple[FleetComposition, FleetComposition]:
    """Apply one casualty rate to every unit type in a fleet.

    Args:
        fleet: Fleet taking losses
        outcome: Battle outcome tier
        is_winner: Whether this fleet won a decisive battle
        rng: Random source for the casualty rate (unseeded if None)

    Returns:
        Tuple of (casualties, survivors); casualties are floor(count * rate)
    """
    low, high = casualty_band(outcome, is_winner)
    rate = (rng or GameRNG()).uniform(low, high)
    casualties = fleet.scaled(rate)
    survivors = fleet.minus(casualties)
    return casualties, survivors


def resolve_combat(
    attacker: FleetComposition,
    defender: FleetComposition,
    random_factors: CombatFactors | None = None,
    rng: GameRNG | None = None,
) -> CombatResult:
    """Resolve a battle between an attacking fleet and a defending garrison.

    An empty garrison cannot win: a non-empty attacker facing one wins
    decisively and the defender loses nothing (it has nothing to lose).

    Args:
        attacker: Attacking fleet
        defender: Defending garrison
        random_factors: Fixed factors for either side; missing ones are drawn
        rng: Random source for factors and casualty rates (unseeded if None)

    Returns:
        CombatResult with outcome, casualties, survivors, and strength ratio
    """
    rng = rng or GameRNG()
    random_factors = random_factors or CombatFactors()

    attacker_strength = calculate_fleet_strength(attacker, defender, random_factors.attacker, rng)
    defender_strength = calculate_fleet_strength(defender, attacker, random_factors.defender, rng)

    if defender.is_empty() and not attacker.is_empty():
        outcome = BattleOutcome.DECISIVE_ATTACKER
    else:
        outcome = determine_battle_outcome(attacker_strength, defender_strength)

    attacker_casualties, attacker_survivors = calculate_casualties(
        attacker, outcome, outcome == BattleOutcome.DECISIVE_ATTACKER, rng
    )
    defender_casualties, defender_survivors = calculate_casualties(
        defender, outcome, outcome == BattleOutcome.DECISIVE_DEFENDER, rng
    )

    strength_ratio = attacker_strength / defender_strength if defender_strength > 0 else math.inf

    logger.debug(
        f"Combat {attacker} vs {defender}: {outcome.value} "
        f"(strength {attacker_strength:.0f} vs {defender_strength:.0f})"
    )

    return CombatResult(
        outcome=outcome,
        attacker_survivors=attacker_survivors,
        defender_survivors=defender_survivors,
        attacker_casualties=attacker_casualties,
        defender_casualties=defender_casualties,
        strength_ratio=strength_ratio,
        attacker_strength=attacker_strength,
        defender_strength=defender_strength,
    )
