"""Shared state and heuristics for AI personas.

Each persona is a pure function

    decide(game, ai_state, rng) -> (Command, AIState)

that reads the game from the AI's side and returns the command to submit
plus its updated memory. The orchestrator treats the command exactly like a
human's.
"""

from dataclasses import dataclass

from ...models.command import AttackCommand, BuildCommand, Command, EndTurnCommand, ScanCommand
from ...models.fleet import FleetComposition, UnitType
from ...models.game import GameState
from ...models.player import PlayerState
from ...utils.constants import AI_ARCHETYPES, PLAYER_HOME, UNIT_STRENGTH_WEIGHTS
from ...utils.rng import GameRNG
from ..construction import build_order_for, upfront_cost
from ..economy import build_commitment
from ..missions import is_home_system_vulnerable

HYBRID_STRATEGIES = ("aggressive", "economic", "defensive", "opportunistic")

# Unit that beats each unit type
COUNTERS = {
    UnitType.FRIGATE: UnitType.BATTLESHIP,
    UnitType.CRUISER: UnitType.FRIGATE,
    UnitType.BATTLESHIP: UnitType.CRUISER,
}


@dataclass(frozen=True)
class BehaviorProfile:
    """Probabilities steering a persona's choices.

    Attributes:
        military_focus: Chance of a military branch
        economic_focus: Chance of an economic branch
        aggression: Overall appetite for attacks
        deception: Chance of a deceptive branch
        adaptive_variation: Chance of reacting to the opponent this turn
    """

    military_focus: float
    economic_focus: float
    aggression: float
    deception: float
    adaptive_variation: float


PROFILES = {
    "aggressor": BehaviorProfile(0.8, 0.2, 0.9, 0.1, 0.2),
    "economist": BehaviorProfile(0.25, 0.75, 0.3, 0.1, 0.25),
    "trickster": BehaviorProfile(0.4, 0.3, 0.6, 0.7, 0.3),
    "hybrid": BehaviorProfile(0.6, 0.6, 0.5, 0.2, 0.4),
}


@dataclass(frozen=True)
class AIState:
    """A persona's memory between turns.

    Attributes:
        archetype: aggressor, economist, trickster, or hybrid
        threat_level: 0 (safe) to 1 (outgunned), from the last decision
        economic_advantage: -1 to 1, AI income vs player income
        strategy: Hybrid's current strategy
        strategy_timer: Turns the hybrid has kept its strategy
        strategy_duration: Turns before the hybrid picks a new strategy
        last_deception_turn: Turn of the trickster's last decoy scan
        last_command: Kind of the last command issued
    """

    archetype: str
    threat_level: float = 0.0
    economic_advantage: float = 0.0
    strategy: str | None = None
    strategy_timer: int = 0
    strategy_duration: int = 3
    last_deception_turn: int = 0
    last_command: str | None = None

    def __post_init__(self):
        """Validate AI state."""
        if self.archetype not in AI_ARCHETYPES:
            raise ValueError(f"Invalid archetype: {self.archetype}")
        if self.strategy is not None and self.strategy not in HYBRID_STRATEGIES:
            raise ValueError(f"Invalid strategy: {self.strategy}")

    @property
    def profile(self) -> BehaviorProfile:
        return PROFILES[self.archetype]


def create_ai_state(archetype: str, rng: GameRNG) -> AIState:
    """Starting memory for a persona."""
    if archetype == "hybrid":
        return AIState(archetype=archetype, strategy=rng.choice(HYBRID_STRATEGIES))
    return AIState(archetype=archetype)


def fleet_strength(fleet: FleetComposition) -> float:
    """Rough strength estimate: frigate 1, cruiser 2.5, battleship 5."""
    return sum(
        UNIT_STRENGTH_WEIGHTS[unit_type.value] * count for unit_type, count in fleet.items()
    )


def threat_level(game: GameState) -> float:
    """How outgunned the AI's garrison is, clamped to [0, 1]."""
    ai_strength = fleet_strength(game.ai.home_fleet)
    if ai_strength == 0:
        return 1.0
    ratio = fleet_strength(game.player.home_fleet) / ai_strength
    return min(1.0, max(0.0, ratio - 0.5))


def economic_advantage(game: GameState) -> float:
    """(AI income - player income) / combined income, 0 if both are zero."""
    player_income = game.player.resources.metal_income + game.player.resources.energy_income
    ai_income = game.ai.resources.metal_income + game.ai.resources.energy_income
    if player_income + ai_income == 0:
        return 0.0
    return (ai_income - player_income) / (ai_income + player_income)


def total_income(player: PlayerState) -> int:
    return player.resources.metal_income + player.resources.energy_income


def can_afford_build(player: PlayerState, buildable, quantity: int = 1) -> bool:
    """True if the stock covers the order's whole build commitment."""
    order = build_order_for(player, buildable, quantity)
    return player.resources.covers(build_commitment(order, upfront_cost(player, buildable, quantity)))


def opponent_exposed(game: GameState) -> bool:
    """True if the opponent has ships in transit and a weaker garrison than ours."""
    player = game.player
    if not is_home_system_vulnerable(player.home_fleet, player.missions, game.turn):
        return False
    return fleet_strength(player.home_fleet) < fleet_strength(game.ai.home_fleet)


def dominant_unit_type(fleet: FleetComposition) -> UnitType:
    """Most numerous unit type (frigate on ties or an empty fleet)."""
    if fleet.is_empty():
        return UnitType.FRIGATE
    if fleet.frigates >= fleet.cruisers and fleet.frigates >= fleet.battleships:
        return UnitType.FRIGATE
    if fleet.cruisers >= fleet.battleships:
        return UnitType.CRUISER
    return UnitType.BATTLESHIP


def plan_attack(
    available: FleetComposition, low: float, high: float, rng: GameRNG
) -> FleetComposition:
    """Commit a random share in [low, high] of each unit type."""
    return available.scaled(rng.uniform(low, high))


def build(buildable, quantity: int = 1) -> BuildCommand:
    return BuildCommand(buildable, quantity)


def attack(fleet: FleetComposition) -> AttackCommand | None:
    """Attack the player's home, or None if the planned fleet is empty."""
    if fleet.is_empty():
        return None
    return AttackCommand(fleet=fleet, target=PLAYER_HOME)


def scan(scan_type: str) -> ScanCommand:
    return ScanCommand(scan_type)


def wait() -> Command:
    return EndTurnCommand()
