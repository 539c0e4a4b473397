"""Intelligence data models: scan tiers, scan results, and per-player intel."""

from dataclasses import dataclass, field
from enum import Enum

from ..errors import UnknownTypeError
from ..utils.constants import (
    SCAN_COSTS,
    STARTING_MISINFORMATION_CHANCE,
    STARTING_SCAN_ACCURACY,
)
from .fleet import FleetComposition


class ScanType(str, Enum):
    """Scan tiers, cheapest first."""

    BASIC = "basic"
    DEEP = "deep"
    ADVANCED = "advanced"


def parse_scan_type(value) -> ScanType:
    """Convert a string (or ScanType) to a ScanType.

    Raises:
        UnknownTypeError: If value names no scan tier
    """
    if isinstance(value, ScanType):
        return value
    try:
        return ScanType(str(value).strip().lower())
    except ValueError:
        raise UnknownTypeError(f"Unknown scan type: {value!r}") from None


def scan_cost(scan_type) -> int:
    """Energy cost of a scan tier."""
    return SCAN_COSTS[parse_scan_type(scan_type).value]


@dataclass
class ScanResult:
    """Snapshot of what a scan revealed about the opponent.

    Attributes:
        scan_type: Tier that produced this result
        timestamp: Turn the scan was taken
        fleet_data: Estimated ship counts ("total" for basic scans, per type for deep)
        fleet_size_category: "small", "medium", or "large" (advanced scans only)
        economic_data: Estimated structure counts (deep scans only)
        strategic_intent: Free-text read on the opponent (advanced scans only)
        accuracy: Reported accuracy in [0, 1], decays as the data ages
        is_misinformation: True if the opponent fed false data into this scan
        data_age: Turns since the scan was taken
        base_accuracy: Accuracy when the scan was taken
    """

    scan_type: ScanType
    timestamp: int
    fleet_data: dict[str, int] = field(default_factory=dict)
    economic_data: dict[str, int] | None = None
    strategic_intent: str | None = None
    accuracy: float = 1.0
    is_misinformation: bool = False
    data_age: int = 0
    fleet_size_category: str | None = None
    base_accuracy: float | None = None

    def __post_init__(self):
        """Validate scan result data."""
        self.scan_type = parse_scan_type(self.scan_type)
        if self.base_accuracy is None:
            self.base_accuracy = self.accuracy
        if not 0.0 <= self.accuracy <= 1.0:
            raise ValueError(f"Invalid accuracy: {self.accuracy} (must be in [0, 1])")
        if self.data_age < 0:
            raise ValueError(f"Invalid data_age: {self.data_age} (must be >= 0)")


@dataclass
class IntelligenceState:
    """Per-player intelligence. Opaque to the turn pipeline."""

    scan_history: list[ScanResult] = field(default_factory=list)
    last_scan_turn: int | None = None
    known_enemy_fleet: FleetComposition = field(default_factory=FleetComposition)
    scan_accuracy: float = STARTING_SCAN_ACCURACY
    misinformation_chance: float = STARTING_MISINFORMATION_CHANCE

    @property
    def latest_scan(self) -> ScanResult | None:
        return self.scan_history[-1] if self.scan_history else None
