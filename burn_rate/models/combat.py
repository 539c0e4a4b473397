"""Combat data models."""

from dataclasses import dataclass
from enum import Enum

from .fleet import FleetComposition


class BattleOutcome(str, Enum):
    DECISIVE_ATTACKER = "decisive_attacker"
    DECISIVE_DEFENDER = "decisive_defender"
    CLOSE_BATTLE = "close_battle"


@dataclass
class CombatEvent:
    """Record of a battle, appended to the game's combat log.

    Attributes:
        turn: Turn the battle was fought
        attacker: Side that launched the mission
        defender: Side whose home garrison was attacked
        attacker_fleet: Attacking fleet before the battle
        defender_fleet: Defending garrison before the battle
        outcome: Battle outcome tier
        attacker_casualties: Ships the attacker lost
        defender_casualties: Ships the defender lost
        attacker_survivors: Ships the attacker has left
        defender_survivors: Ships the defender has left
        strength_ratio: Attacker strength / defender strength (inf if defender had none)
    """

    turn: int
    attacker: str
    defender: str
    attacker_fleet: FleetComposition
    defender_fleet: FleetComposition
    outcome: BattleOutcome
    attacker_casualties: FleetComposition
    defender_casualties: FleetComposition
    attacker_survivors: FleetComposition
    defender_survivors: FleetComposition
    strength_ratio: float

    @property
    def winner(self) -> str | None:
        """Side that won decisively, or None for a close battle."""
        if self.outcome == BattleOutcome.DECISIVE_ATTACKER:
            return self.attacker
        if self.outcome == BattleOutcome.DECISIVE_DEFENDER:
            return self.defender
        return None
