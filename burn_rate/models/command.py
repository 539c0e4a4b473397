"""Command data models for player and AI actions.

A Command is one of BuildCommand, AttackCommand, ScanCommand, CancelCommand,
or EndTurnCommand. Humans and AI personas produce the same values, and the
orchestrator validates them through the same path.
"""

from dataclasses import dataclass, field
from typing import Union

from ..utils.constants import MAX_BUILD_QUANTITY
from .economy import StructureType, parse_buildable
from .fleet import FleetComposition, UnitType
from .intelligence import ScanType, parse_scan_type


@dataclass(frozen=True)
class BuildCommand:
    """Queue `quantity` units (or structures) of one type."""

    buildable: UnitType | StructureType
    quantity: int

    kind = "build"

    def __post_init__(self):
        """Validate build payload."""
        object.__setattr__(self, "buildable", parse_buildable(self.buildable))
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(f"Invalid quantity: {self.quantity!r} (must be an integer)")
        if not 0 < self.quantity <= MAX_BUILD_QUANTITY:
            raise ValueError(
                f"Invalid quantity: {self.quantity} (must be between 1 and {MAX_BUILD_QUANTITY})"
            )

    def __str__(self) -> str:
        return f"build {self.quantity} {self.buildable.value}"


@dataclass(frozen=True)
class AttackCommand:
    """Send part of the home garrison against a target."""

    fleet: FleetComposition
    target: str

    kind = "attack"

    def __post_init__(self):
        """Validate attack payload."""
        if not isinstance(self.fleet, FleetComposition):
            raise ValueError(f"Invalid fleet: {self.fleet!r}")
        if self.fleet.is_empty():
            raise ValueError("Attack fleet cannot be empty")
        if not self.target:
            raise ValueError("target cannot be empty")

    def __str__(self) -> str:
        return f"attack {self.fleet} -> {self.target}"


@dataclass(frozen=True)
class ScanCommand:
    scan_type: ScanType

    kind = "scan"

    def __post_init__(self):
        """Validate scan payload."""
        object.__setattr__(self, "scan_type", parse_scan_type(self.scan_type))

    def __str__(self) -> str:
        return f"scan {self.scan_type.value}"


@dataclass(frozen=True)
class CancelCommand:
    """Remove an order from the construction queue (no refund)."""

    index: int

    kind = "cancel"

    def __post_init__(self):
        """Validate cancel payload."""
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise ValueError(f"Invalid index: {self.index!r} (must be an integer)")

    def __str__(self) -> str:
        return f"cancel order {self.index}"


@dataclass(frozen=True)
class EndTurnCommand:
    kind = "end_turn"

    def __str__(self) -> str:
        return "end turn"


Command = Union[BuildCommand, AttackCommand, ScanCommand, CancelCommand, EndTurnCommand]


@dataclass
class CommandResult:
    """Outcome of submitting a command.

    Rule violations come back here with success=False; they are never raised.
    """

    success: bool
    errors: list[str] = field(default_factory=list)
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> "CommandResult":
        return cls(success=True, message=message)

    @classmethod
    def rejected(cls, *errors: str) -> "CommandResult":
        return cls(success=False, errors=list(errors))
