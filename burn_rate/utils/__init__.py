"""Utility functions and constants for Burn Rate."""

from .config import EngineConfig
from .constants import (
    AI,
    AI_ARCHETYPES,
    HOME_TARGETS,
    PLAYER,
    SIDES,
)
from .rng import GameRNG

__all__ = [
    "AI",
    "AI_ARCHETYPES",
    "HOME_TARGETS",
    "PLAYER",
    "SIDES",
    "EngineConfig",
    "GameRNG",
]
