"""Pydantic request schemas for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class CreateGameRequest(BaseModel):
    """Request to create a new game."""

    aiArchetype: str = Field(  # noqa: N815
        default="hybrid",
        description="AI personality: 'aggressor', 'economist', 'trickster', or 'hybrid'",
    )
    seed: int | None = Field(default=None, description="Optional RNG seed for determinism")


class FleetRequest(BaseModel):
    """Ship counts for an attack."""

    frigates: int = Field(default=0, ge=0)
    cruisers: int = Field(default=0, ge=0)
    battleships: int = Field(default=0, ge=0)


class CommandRequest(BaseModel):
    """A single command, either as typed text or as structured fields.

    Examples:
        {"text": "build 10 frigates"}
        {"type": "build", "buildable": "frigate", "quantity": 10}
        {"type": "attack", "fleet": {"frigates": 20}}
        {"type": "scan", "scanType": "deep"}
        {"type": "cancel", "index": 0}
    """

    text: str | None = Field(default=None, description="Command in CLI syntax")
    type: Literal["build", "attack", "scan", "cancel", "end_turn"] | None = None
    buildable: str | None = None
    quantity: int | None = None
    fleet: FleetRequest | None = None
    target: str = "ai_system"
    scanType: str | None = None  # noqa: N815
    index: int | None = None
