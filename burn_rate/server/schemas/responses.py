"""Pydantic response schemas for API endpoints."""

from pydantic import BaseModel, Field


class GameStateResponse(BaseModel):
    """Response containing current game state."""

    gameId: str  # noqa: N815
    turn: int
    phase: str
    winner: str | None
    victoryType: str | None = None  # noqa: N815
    state: dict
    events: dict | None = None


class CreateGameResponse(BaseModel):
    """Response after creating a new game."""

    gameId: str  # noqa: N815
    aiArchetype: str  # noqa: N815
    seed: int
    state: dict


class SubmitCommandResponse(BaseModel):
    """Response after submitting a command."""

    accepted: bool
    errors: list[str] = Field(default_factory=list)
    message: str = ""
    pending: list[str] = Field(default_factory=list)


class EndTurnResponse(BaseModel):
    """Response after resolving a turn."""

    success: bool
    turn: int
    errors: list[str] = Field(default_factory=list)
    events: dict | None = None
    gameEnded: bool = False  # noqa: N815
    winner: str | None = None
    victoryType: str | None = None  # noqa: N815
    state: dict
