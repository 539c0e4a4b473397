"""Per-game configuration overrides."""

from dataclasses import dataclass

from .constants import (
    AI_ARCHETYPES,
    DEFAULT_AI_ARCHETYPE,
    DEFAULT_MUTUAL_ELIMINATION_POLICY,
    ECONOMIC_COLLAPSE_TURNS,
    MUTUAL_ELIMINATION_POLICIES,
    STARTING_ENERGY,
    STARTING_FLEET,
    STARTING_METAL,
)


@dataclass
class EngineConfig:
    """Settings for a single game.

    Defaults come from utils.constants; every field can be overridden per game
    (CLI flags, HTTP create-game request, or tests).
    """

    ai_archetype: str = DEFAULT_AI_ARCHETYPE
    seed: int | None = None  # None = unseeded
    starting_metal: int = STARTING_METAL
    starting_energy: int = STARTING_ENERGY
    starting_fleet: tuple[int, int, int] = STARTING_FLEET
    mutual_elimination_policy: str = DEFAULT_MUTUAL_ELIMINATION_POLICY
    economic_collapse_turns: int = ECONOMIC_COLLAPSE_TURNS

    def __post_init__(self):
        """Validate configuration values."""
        if self.ai_archetype not in AI_ARCHETYPES:
            raise ValueError(
                f"Invalid ai_archetype: {self.ai_archetype} (must be one of {', '.join(AI_ARCHETYPES)})"
            )
        if self.mutual_elimination_policy not in MUTUAL_ELIMINATION_POLICIES:
            raise ValueError(
                f"Invalid mutual_elimination_policy: {self.mutual_elimination_policy} "
                f"(must be one of {', '.join(MUTUAL_ELIMINATION_POLICIES)})"
            )
        if self.starting_metal < 0 or self.starting_energy < 0:
            raise ValueError("Starting resources must be >= 0")
        if len(self.starting_fleet) != 3 or any(n < 0 for n in self.starting_fleet):
            raise ValueError(
                f"Invalid starting_fleet: {self.starting_fleet} (need 3 counts >= 0)"
            )
        if self.economic_collapse_turns < 1:
            raise ValueError(
                f"Invalid economic_collapse_turns: {self.economic_collapse_turns} (must be >= 1)"
            )
