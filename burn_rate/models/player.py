"""Player state container."""

from dataclasses import dataclass, field

from ..utils.constants import SIDES
from .economy import EconomyState, Resources
from .fleet import FleetComposition, FleetMovement
from .intelligence import IntelligenceState


@dataclass
class PlayerState:
    """Everything one side owns.

    Attributes:
        side: "player" or "ai"
        resources: Stocks and last computed net income
        home_fleet: Garrison defending the home system
        missions: Fleets away on attack missions
        economy: Structure counts and construction queue
        intelligence: Scan history and scan modifiers
        stalled_turns: Consecutive turns ending with non-positive net income
    """

    side: str
    resources: Resources
    home_fleet: FleetComposition = field(default_factory=FleetComposition)
    missions: list[FleetMovement] = field(default_factory=list)
    economy: EconomyState = field(default_factory=EconomyState)
    intelligence: IntelligenceState = field(default_factory=IntelligenceState)
    stalled_turns: int = 0

    def __post_init__(self):
        """Validate player data after initialization."""
        if self.side not in SIDES:
            raise ValueError(f"Invalid side: {self.side} (must be 'player' or 'ai')")
        if self.stalled_turns < 0:
            raise ValueError(f"Invalid stalled_turns: {self.stalled_turns} (must be >= 0)")

    def total_fleet(self) -> FleetComposition:
        """Home garrison plus every ship away on a mission."""
        total = self.home_fleet.copy()
        for movement in self.missions:
            total.merge(movement.composition)
        return total
