"""Exception hierarchy for engine invariant violations.

Rule violations (not enough metal, not enough ships, stalled economy) are
never raised; they come back as failed CommandResults. The exceptions here
signal programming errors and corrupt state, and are caught at the turn
boundary by the orchestrator.
"""


class EngineError(Exception):
    """Base class for all engine errors."""


class InvariantError(EngineError):
    """Raised when an operation would break a state invariant."""


class InsufficientFleetError(InvariantError):
    """Raised when removing more ships than a fleet holds."""


class UnknownTypeError(EngineError, ValueError):
    """Raised when looking up an unknown unit, structure, or scan type."""
