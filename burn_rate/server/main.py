"""FastAPI server for Burn Rate.

Provides an HTTP API for human players to play against AI personas.
Handlers never await while touching a session, so each session is only
ever accessed by one request at a time.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from ..interface.command_parser import CommandParseError, CommandParser, MetaCommand
from ..models.command import (
    AttackCommand,
    BuildCommand,
    CancelCommand,
    Command,
    EndTurnCommand,
    ScanCommand,
)
from ..models.fleet import FleetComposition
from ..utils.constants import PLAYER
from .schemas.requests import CommandRequest, CreateGameRequest
from .schemas.responses import (
    CreateGameResponse,
    EndTurnResponse,
    GameStateResponse,
    SubmitCommandResponse,
)
from .session import GameSession, GameSessionManager

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

sessions = GameSessionManager()
parser = CommandParser()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    logger.info("Burn Rate server starting...")
    yield
    logger.info("Burn Rate server shutting down...")
    sessions.cleanup_all()


app = FastAPI(
    title="Burn Rate API",
    description="Web API for human vs AI gameplay in Burn Rate",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_session(game_id: str) -> GameSession:
    session = sessions.get(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")
    return session


def _require_running(session: GameSession) -> None:
    if session.orchestrator.is_game_over:
        raise HTTPException(
            status_code=400,
            detail=f"Game already ended. Winner: {session.orchestrator.winner}",
        )


def command_from_request(request: CommandRequest) -> Command:
    """Convert a request body to a Command.

    Raises:
        CommandParseError: If typed text does not parse
        ValueError: If the structured fields are missing or invalid
    """
    if request.text is not None:
        parsed = parser.parse(request.text)
        if isinstance(parsed, MetaCommand):
            raise ValueError(f"'{parsed.value}' is not a game command")
        return parsed

    if request.type == "build":
        if request.buildable is None or request.quantity is None:
            raise ValueError("build needs 'buildable' and 'quantity'")
        return BuildCommand(request.buildable, request.quantity)
    if request.type == "attack":
        if request.fleet is None:
            raise ValueError("attack needs 'fleet'")
        fleet = FleetComposition(**request.fleet.model_dump())
        return AttackCommand(fleet=fleet, target=request.target)
    if request.type == "scan":
        if request.scanType is None:
            raise ValueError("scan needs 'scanType'")
        return ScanCommand(request.scanType)
    if request.type == "cancel":
        if request.index is None:
            raise ValueError("cancel needs 'index'")
        return CancelCommand(request.index)
    if request.type == "end_turn":
        return EndTurnCommand()
    raise ValueError("Provide either 'text' or 'type'")


# ============================================
# API ENDPOINTS
# ============================================


@app.get("/api")
async def api_root():
    """API root endpoint - server health check."""
    return {
        "service": "Burn Rate",
        "status": "operational",
        "activeGames": len(sessions.sessions),
    }


@app.post("/api/games", response_model=CreateGameResponse)
async def create_game(request: CreateGameRequest):
    """Create a new Human vs AI game.

    Example:
        POST /api/games
        {"aiArchetype": "trickster", "seed": 42}
    """
    try:
        session = sessions.create_session(ai_archetype=request.aiArchetype, seed=request.seed)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CreateGameResponse(
        gameId=session.id,
        aiArchetype=session.ai_state.archetype,
        seed=session.seed,
        state=session.get_state_for_human(),
    )


@app.get("/api/games/{game_id}/state", response_model=GameStateResponse)
async def get_game_state(game_id: str):
    """Get current game state with the last turn's events."""
    session = _get_session(game_id)
    orchestrator = session.orchestrator
    return GameStateResponse(
        gameId=game_id,
        turn=orchestrator.current_turn,
        phase=session.phase,
        winner=orchestrator.winner,
        victoryType=orchestrator.victory_type,
        state=session.get_state_for_human(),
        events=session.get_last_turn_events(),
    )


@app.post("/api/games/{game_id}/commands", response_model=SubmitCommandResponse)
async def submit_command(game_id: str, request: CommandRequest):
    """Validate and stage one human command for the current turn.

    Rule violations and malformed commands come back with accepted=False;
    nothing is staged.

    Example:
        POST /api/games/game-abc123/commands
        {"text": "build 10 frigates"}
    """
    session = _get_session(game_id)
    _require_running(session)

    try:
        command = command_from_request(request)
    except CommandParseError as e:
        return SubmitCommandResponse(accepted=False, errors=[e.message])
    except ValueError as e:
        return SubmitCommandResponse(accepted=False, errors=[str(e)])

    result = session.submit_command(command)
    return SubmitCommandResponse(
        accepted=result.success,
        errors=result.errors,
        message=result.message,
        pending=[str(c) for c in session.orchestrator.pending(PLAYER)],
    )


@app.post("/api/games/{game_id}/end-turn", response_model=EndTurnResponse)
async def end_turn(game_id: str):
    """Let the AI commit its command and resolve the turn."""
    session = _get_session(game_id)
    _require_running(session)

    result = session.execute_turn()
    if not result.success:
        logger.error(f"Game {game_id}: turn {result.turn} failed: {result.errors}")

    return EndTurnResponse(
        success=result.success,
        turn=result.turn,
        errors=result.errors,
        events=session.get_last_turn_events() if result.success else None,
        gameEnded=result.game_ended,
        winner=result.winner,
        victoryType=result.victory_type,
        state=session.get_state_for_human(),
    )


@app.delete("/api/games/{game_id}")
async def delete_game(game_id: str):
    """Delete a game session."""
    if sessions.delete(game_id):
        return {"message": f"Game {game_id} deleted"}
    raise HTTPException(status_code=404, detail="Game not found")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
