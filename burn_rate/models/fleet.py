"""Fleet data models: unit types, fleet compositions, and missions."""

from dataclasses import dataclass
from enum import Enum

from ..errors import InsufficientFleetError, UnknownTypeError
from ..utils.constants import UNIT_STATS


class UnitType(str, Enum):
    """The three warship classes."""

    FRIGATE = "frigate"
    CRUISER = "cruiser"
    BATTLESHIP = "battleship"


class MissionType(str, Enum):
    """Lifecycle stage of a fleet mission."""

    OUTBOUND = "outbound"
    COMBAT = "combat"
    RETURNING = "returning"


UNIT_TYPES = (UnitType.FRIGATE, UnitType.CRUISER, UnitType.BATTLESHIP)

# FleetComposition attribute holding each unit type
_FIELDS = {
    UnitType.FRIGATE: "frigates",
    UnitType.CRUISER: "cruisers",
    UnitType.BATTLESHIP: "battleships",
}


def parse_unit_type(value) -> UnitType:
    """Convert a string (or UnitType) to a UnitType.

    Accepts singular or plural names, case-insensitive.

    Args:
        value: Unit name such as "frigate", "Cruisers", or a UnitType

    Returns:
        Matching UnitType

    Raises:
        UnknownTypeError: If value names no unit type
    """
    if isinstance(value, UnitType):
        return value
    name = str(value).strip().lower()
    if name.endswith("s"):
        name = name[:-1]
    try:
        return UnitType(name)
    except ValueError:
        raise UnknownTypeError(f"Unknown unit type: {value!r}") from None


@dataclass(frozen=True)
class UnitStats:
    """Static per-unit statistics.

    Attributes:
        build_time: Turns spent in the construction queue
        cost_metal: Upfront metal cost per unit
        cost_energy: Upfront energy cost per unit
        upkeep_metal: Metal upkeep per unit per turn while in the home garrison
        upkeep_energy: Energy upkeep per unit per turn while in the home garrison
    """

    build_time: int
    cost_metal: int
    cost_energy: int
    upkeep_metal: int
    upkeep_energy: int


def unit_stats(unit_type) -> UnitStats:
    """Look up the stats for a unit type.

    Raises:
        UnknownTypeError: If unit_type is not a known unit
    """
    unit_type = parse_unit_type(unit_type)
    build_time, (cost_metal, cost_energy), (upkeep_metal, upkeep_energy) = UNIT_STATS[
        unit_type.value
    ]
    return UnitStats(build_time, cost_metal, cost_energy, upkeep_metal, upkeep_energy)


@dataclass
class FleetComposition:
    """Ship counts per unit type. Counts are never negative."""

    frigates: int = 0
    cruisers: int = 0
    battleships: int = 0

    def __post_init__(self):
        """Validate fleet counts."""
        for name in _FIELDS.values():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Invalid {name}: {value!r} (must be an integer)")
            if value < 0:
                raise ValueError(f"Invalid {name}: {value} (must be >= 0)")

    @classmethod
    def from_dict(cls, data: dict) -> "FleetComposition":
        """Build a composition from a mapping keyed by unit or field name."""
        counts = {name: 0 for name in _FIELDS.values()}
        for key, value in data.items():
            counts[_FIELDS[parse_unit_type(key)]] = value
        return cls(**counts)

    def count(self, unit_type) -> int:
        """Return the number of ships of the given type."""
        return getattr(self, _FIELDS[parse_unit_type(unit_type)])

    def items(self) -> list[tuple[UnitType, int]]:
        """Return (unit_type, count) pairs in frigate, cruiser, battleship order."""
        return [(unit_type, self.count(unit_type)) for unit_type in UNIT_TYPES]

    def to_dict(self) -> dict[str, int]:
        """Return counts keyed by field name."""
        return {
            "frigates": self.frigates,
            "cruisers": self.cruisers,
            "battleships": self.battleships,
        }

    def total(self) -> int:
        """Return the total number of ships."""
        return self.frigates + self.cruisers + self.battleships

    def is_empty(self) -> bool:
        return self.total() == 0

    def copy(self) -> "FleetComposition":
        return FleetComposition(self.frigates, self.cruisers, self.battleships)

    def __add__(self, other: "FleetComposition") -> "FleetComposition":
        return FleetComposition(
            self.frigates + other.frigates,
            self.cruisers + other.cruisers,
            self.battleships + other.battleships,
        )

    def minus(self, other: "FleetComposition") -> "FleetComposition":
        """Return a derived view with other's ships removed, clamped at zero.

        Use remove() for authoritative decrements.
        """
        return FleetComposition(
            max(0, self.frigates - other.frigates),
            max(0, self.cruisers - other.cruisers),
            max(0, self.battleships - other.battleships),
        )

    def covers(self, required: "FleetComposition") -> bool:
        """Check whether this fleet has at least the required ships of every type."""
        return (
            self.frigates >= required.frigates
            and self.cruisers >= required.cruisers
            and self.battleships >= required.battleships
        )

    def add_units(self, unit_type, quantity: int) -> None:
        """Add ships of one type in place."""
        if quantity < 0:
            raise ValueError(f"Invalid quantity: {quantity} (must be >= 0)")
        name = _FIELDS[parse_unit_type(unit_type)]
        setattr(self, name, getattr(self, name) + quantity)

    def merge(self, other: "FleetComposition") -> None:
        """Add another composition's ships in place."""
        for unit_type, count in other.items():
            self.add_units(unit_type, count)

    def remove(self, required: "FleetComposition") -> None:
        """Remove ships in place.

        Raises:
            InsufficientFleetError: If any type has fewer ships than required
        """
        if not self.covers(required):
            raise InsufficientFleetError(
                f"Cannot remove {required.to_dict()} from {self.to_dict()}"
            )
        self.frigates -= required.frigates
        self.cruisers -= required.cruisers
        self.battleships -= required.battleships

    def scaled(self, ratio: float) -> "FleetComposition":
        """Return floor(count * ratio) for every type."""
        if ratio < 0:
            raise ValueError(f"Invalid ratio: {ratio} (must be >= 0)")
        return FleetComposition(
            int(self.frigates * ratio),
            int(self.cruisers * ratio),
            int(self.battleships * ratio),
        )

    def __str__(self) -> str:
        return f"{self.frigates}F/{self.cruisers}C/{self.battleships}B"


@dataclass
class FleetMovement:
    """A fleet sent on an attack mission.

    The movement is created on the turn the attack commits and mutated in
    place as the turn counter passes its milestones:

        turn < arrival_turn                 outbound
        turn == arrival_turn                combat
        arrival_turn < turn < return_turn   returning
        turn == return_turn                 merged home and removed
    """

    composition: FleetComposition
    target: str
    arrival_turn: int
    return_turn: int
    mission_type: MissionType = MissionType.OUTBOUND
    launch_turn: int = 0

    def __post_init__(self):
        """Validate movement data after initialization."""
        self.mission_type = MissionType(self.mission_type)
        if not self.target:
            raise ValueError("Invalid target: must be non-empty")
        if self.arrival_turn <= self.launch_turn:
            raise ValueError(
                f"Invalid arrival_turn: {self.arrival_turn} (must be > launch_turn {self.launch_turn})"
            )
        if self.return_turn <= self.arrival_turn:
            raise ValueError(
                f"Invalid return_turn: {self.return_turn} (must be > arrival_turn {self.arrival_turn})"
            )
