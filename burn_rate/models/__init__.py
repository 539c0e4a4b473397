"""Data models for Burn Rate."""

from .combat import BattleOutcome, CombatEvent
from .command import (
    AttackCommand,
    BuildCommand,
    CancelCommand,
    Command,
    CommandResult,
    EndTurnCommand,
    ScanCommand,
)
from .economy import BuildOrder, EconomyState, ResourceAmount, Resources, StructureType
from .fleet import FleetComposition, FleetMovement, MissionType, UnitType
from .game import GamePhase, GameState, phase_for_turn
from .intelligence import IntelligenceState, ScanResult, ScanType
from .player import PlayerState

__all__ = [
    "AttackCommand",
    "BattleOutcome",
    "BuildCommand",
    "BuildOrder",
    "CancelCommand",
    "CombatEvent",
    "Command",
    "CommandResult",
    "EconomyState",
    "EndTurnCommand",
    "FleetComposition",
    "FleetMovement",
    "GamePhase",
    "GameState",
    "IntelligenceState",
    "MissionType",
    "PlayerState",
    "ResourceAmount",
    "Resources",
    "ScanCommand",
    "ScanResult",
    "ScanType",
    "StructureType",
    "UnitType",
    "phase_for_turn",
]
