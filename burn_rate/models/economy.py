"""Economy data models: resources, structures, and build orders."""

import math
from dataclasses import dataclass, field, replace
from enum import Enum

from ..errors import UnknownTypeError
from ..utils.constants import (
    STRUCTURE_COST_EXPONENT,
    STRUCTURE_COST_SCALING,
    STRUCTURE_STATS,
)
from .fleet import UnitType, parse_unit_type


class StructureType(str, Enum):
    """Income structures."""

    REACTOR = "reactor"
    MINE = "mine"


def parse_structure_type(value) -> StructureType:
    """Convert a string (or StructureType) to a StructureType.

    Raises:
        UnknownTypeError: If value names no structure type
    """
    if isinstance(value, StructureType):
        return value
    name = str(value).strip().lower()
    if name.endswith("s"):
        name = name[:-1]
    try:
        return StructureType(name)
    except ValueError:
        raise UnknownTypeError(f"Unknown structure type: {value!r}") from None


def parse_buildable(value) -> UnitType | StructureType:
    """Convert a string to the unit or structure type it names.

    Raises:
        UnknownTypeError: If value is neither a unit nor a structure
    """
    if isinstance(value, (UnitType, StructureType)):
        return value
    try:
        return parse_unit_type(value)
    except UnknownTypeError:
        pass
    try:
        return parse_structure_type(value)
    except UnknownTypeError:
        raise UnknownTypeError(f"Unknown build target: {value!r}") from None


@dataclass(frozen=True)
class ResourceAmount:
    """A metal/energy pair used for costs, drains, and income terms."""

    metal: int = 0
    energy: int = 0

    def __add__(self, other: "ResourceAmount") -> "ResourceAmount":
        return ResourceAmount(self.metal + other.metal, self.energy + other.energy)

    def __sub__(self, other: "ResourceAmount") -> "ResourceAmount":
        return ResourceAmount(self.metal - other.metal, self.energy - other.energy)

    def times(self, factor: int) -> "ResourceAmount":
        return ResourceAmount(self.metal * factor, self.energy * factor)

    def is_positive(self) -> bool:
        """Both metal and energy are strictly positive."""
        return self.metal > 0 and self.energy > 0


@dataclass(frozen=True)
class StructureStats:
    """Static per-structure statistics.

    Attributes:
        build_time: Turns spent in the construction queue
        base_cost: Cost of the first structure of this type
        income_bonus: Income added per completed structure
    """

    build_time: int
    base_cost: ResourceAmount
    income_bonus: ResourceAmount


def structure_stats(structure_type) -> StructureStats:
    """Look up the stats for a structure type.

    Raises:
        UnknownTypeError: If structure_type is not a known structure
    """
    structure_type = parse_structure_type(structure_type)
    build_time, cost, bonus = STRUCTURE_STATS[structure_type.value]
    return StructureStats(build_time, ResourceAmount(*cost), ResourceAmount(*bonus))


def scaled_structure_cost(structure_type, existing: int) -> ResourceAmount:
    """Cost of the next structure given how many already exist.

    cost = ceil(base * (1 + 0.5 * existing) ** 1.2)

    Args:
        structure_type: Reactor or mine
        existing: Number of structures of this type already built

    Returns:
        Cost of one more structure
    """
    if existing < 0:
        raise ValueError(f"Invalid structure count: {existing} (must be >= 0)")
    base = structure_stats(structure_type).base_cost
    multiplier = (1 + STRUCTURE_COST_SCALING * existing) ** STRUCTURE_COST_EXPONENT
    return ResourceAmount(
        math.ceil(base.metal * multiplier),
        math.ceil(base.energy * multiplier),
    )


@dataclass
class Resources:
    """Resource stocks and the net income computed last turn.

    Stocks are never negative. Income may be negative, which signals a
    stalled economy, and is recomputed every turn rather than accumulated.
    """

    metal: int
    energy: int
    metal_income: int = 0
    energy_income: int = 0

    def __post_init__(self):
        """Validate resource stocks."""
        if self.metal < 0:
            raise ValueError(f"Invalid metal: {self.metal} (must be >= 0)")
        if self.energy < 0:
            raise ValueError(f"Invalid energy: {self.energy} (must be >= 0)")

    @property
    def stock(self) -> ResourceAmount:
        return ResourceAmount(self.metal, self.energy)

    def covers(self, amount: ResourceAmount) -> bool:
        return self.metal >= amount.metal and self.energy >= amount.energy

    def spend(self, amount: ResourceAmount) -> None:
        """Deduct an amount already validated against the stock."""
        if not self.covers(amount):
            raise ValueError(
                f"Cannot spend {amount.metal}M/{amount.energy}E from {self.metal}M/{self.energy}E"
            )
        self.metal -= amount.metal
        self.energy -= amount.energy


@dataclass(frozen=True)
class BuildOrder:
    """An item in the construction queue.

    Quantity and drain are fixed at creation; advancing the order produces a
    new BuildOrder with one fewer turn remaining.
    """

    unit_type: UnitType | StructureType
    quantity: int
    turns_remaining: int
    resource_drain_per_turn: ResourceAmount

    def __post_init__(self):
        """Validate build order data."""
        object.__setattr__(self, "unit_type", parse_buildable(self.unit_type))
        if self.quantity <= 0:
            raise ValueError(f"Invalid quantity: {self.quantity} (must be > 0)")
        if self.turns_remaining < 0:
            raise ValueError(
                f"Invalid turns_remaining: {self.turns_remaining} (must be >= 0)"
            )

    @property
    def is_structure(self) -> bool:
        return isinstance(self.unit_type, StructureType)

    @property
    def is_complete(self) -> bool:
        return self.turns_remaining == 0

    def advanced(self) -> "BuildOrder":
        """Return this order with one turn of construction done."""
        return replace(self, turns_remaining=max(0, self.turns_remaining - 1))


@dataclass
class EconomyState:
    """Structure counts and the construction queue."""

    reactors: int = 0
    mines: int = 0
    construction_queue: list[BuildOrder] = field(default_factory=list)

    def __post_init__(self):
        """Validate structure counts."""
        if self.reactors < 0:
            raise ValueError(f"Invalid reactors: {self.reactors} (must be >= 0)")
        if self.mines < 0:
            raise ValueError(f"Invalid mines: {self.mines} (must be >= 0)")

    def structure_count(self, structure_type) -> int:
        structure_type = parse_structure_type(structure_type)
        return self.reactors if structure_type == StructureType.REACTOR else self.mines
