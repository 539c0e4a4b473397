"""Game session management for Human vs AI gameplay."""

import logging
import math
import uuid
from dataclasses import asdict, dataclass

from ..engine.ai import AIState, create_ai_state, play_ai_turn
from ..engine.economy import get_income_breakdown, validate_economic_state
from ..engine.intelligence import calculate_intelligence_gap
from ..engine.missions import get_counter_attack_window, is_home_system_vulnerable
from ..engine.turn_executor import TurnOrchestrator, TurnResult
from ..models.combat import CombatEvent
from ..models.command import Command, CommandResult
from ..models.intelligence import ScanResult
from ..utils.config import EngineConfig
from ..utils.constants import AI, PLAYER
from ..utils.rng import GameRNG

logger = logging.getLogger(__name__)


def serialize_combat_event(event: CombatEvent) -> dict:
    """Convert CombatEvent to a JSON-safe dict (an infinite ratio becomes None)."""
    data = asdict(event)
    data["outcome"] = event.outcome.value
    data["winner"] = event.winner
    if math.isinf(event.strength_ratio):
        data["strength_ratio"] = None
    return data


def serialize_scan_result(result: ScanResult) -> dict:
    """Convert ScanResult to dict, hiding whether it was misinformation."""
    data = asdict(result)
    data["scan_type"] = result.scan_type.value
    del data["is_misinformation"]
    return data


@dataclass
class GameSession:
    """Manages one game session (Human vs AI).

    Holds the orchestrator, the AI persona's memory, and the persona's own
    random stream. Access is serialized by the server.
    """

    id: str
    seed: int
    orchestrator: TurnOrchestrator
    ai_state: AIState
    ai_rng: GameRNG
    last_turn: TurnResult | None = None

    @property
    def phase(self) -> str:
        return "COMPLETED" if self.orchestrator.is_game_over else "AWAITING_COMMANDS"

    def get_state_for_human(self) -> dict:
        """Serialize game state from the human's perspective.

        The AI's garrison, economy, and missions stay hidden; the human sees
        only what its scans reported.

        Returns:
            Dictionary with the human's full state and their intelligence
        """
        game = self.orchestrator.get_game_state()
        player = game.player
        breakdown = get_income_breakdown(player)
        report = validate_economic_state(player)
        intel = player.intelligence
        gap = calculate_intelligence_gap(intel, game.turn)
        return {
            "turn": game.turn,
            "gamePhase": game.game_phase.value,
            "isGameOver": game.is_game_over,
            "winner": game.winner,
            "victoryType": game.victory_type,
            "resources": asdict(player.resources),
            "income": {
                "net": asdict(breakdown.net_income),
                "constructionDrain": asdict(breakdown.construction_drain),
                "fleetUpkeep": asdict(breakdown.fleet_upkeep),
            },
            "stalledTurns": player.stalled_turns,
            "economyWarnings": report.warnings,
            "economyRecommendations": report.recommendations,
            "homeVulnerable": is_home_system_vulnerable(
                player.home_fleet, player.missions, game.turn
            ),
            "counterAttackWindow": get_counter_attack_window(player.missions, game.turn),
            "homeFleet": player.home_fleet.to_dict(),
            "missions": [
                {
                    "fleet": movement.composition.to_dict(),
                    "target": movement.target,
                    "arrivalTurn": movement.arrival_turn,
                    "returnTurn": movement.return_turn,
                    "missionType": movement.mission_type.value,
                }
                for movement in player.missions
            ],
            "structures": {"reactors": player.economy.reactors, "mines": player.economy.mines},
            "constructionQueue": [
                {
                    "index": index,
                    "type": order.unit_type.value,
                    "quantity": order.quantity,
                    "turnsRemaining": order.turns_remaining,
                    "drainPerTurn": asdict(order.resource_drain_per_turn),
                }
                for index, order in enumerate(player.economy.construction_queue)
            ],
            "pendingCommands": [str(command) for command in self.orchestrator.pending(PLAYER)],
            "intelligence": {
                "lastScanTurn": intel.last_scan_turn,
                "knownEnemyFleet": intel.known_enemy_fleet.to_dict(),
                "scans": [serialize_scan_result(result) for result in intel.scan_history],
                "confidence": gap.confidence,
                "estimatedInTransit": gap.estimated_in_transit,
            },
            "combatLog": [serialize_combat_event(event) for event in game.combat_log],
        }

    def get_last_turn_events(self) -> dict | None:
        if self.last_turn is None:
            return None
        return {
            "turn": self.last_turn.turn,
            "combat": [serialize_combat_event(e) for e in self.last_turn.combat_events],
            "scans": [
                serialize_scan_result(r) for r in self.last_turn.scan_results.get(PLAYER, [])
            ],
        }

    def submit_command(self, command: Command) -> CommandResult:
        return self.orchestrator.submit(PLAYER, command)

    def execute_turn(self) -> TurnResult:
        """Let the AI commit its command, then resolve the turn.

        Returns:
            TurnResult for the resolved turn
        """
        _, self.ai_state = play_ai_turn(self.orchestrator, self.ai_state, self.ai_rng, side=AI)
        result, _ = self.orchestrator.end_turn()
        if result.success:
            self.last_turn = result
            logger.info(
                f"Game {self.id}: turn {result.turn} resolved, "
                f"{len(result.combat_events)} battle(s)"
            )
        return result


class GameSessionManager:
    """Manages all active game sessions.

    In-memory storage; sessions are lost on restart.
    """

    def __init__(self):
        self.sessions: dict[str, GameSession] = {}

    def create_session(self, ai_archetype: str = "hybrid", seed: int | None = None) -> GameSession:
        """Create a new game session with an AI opponent.

        Args:
            ai_archetype: AI personality
            seed: Optional RNG seed for determinism

        Returns:
            Newly created GameSession

        Raises:
            ValueError: If the archetype is unknown
        """
        game_id = f"game-{uuid.uuid4().hex[:8]}"
        if seed is None:
            seed = uuid.uuid4().int % (2**32)

        config = EngineConfig(ai_archetype=ai_archetype, seed=seed)
        orchestrator = TurnOrchestrator(config=config)
        ai_rng = GameRNG(seed + 1)
        session = GameSession(
            id=game_id,
            seed=seed,
            orchestrator=orchestrator,
            ai_state=create_ai_state(ai_archetype, ai_rng),
            ai_rng=ai_rng,
        )
        self.sessions[game_id] = session

        logger.info(f"Created game {game_id}: AI={ai_archetype}, seed={seed}")
        return session

    def get(self, game_id: str) -> GameSession | None:
        return self.sessions.get(game_id)

    def delete(self, game_id: str) -> bool:
        """Delete a game session.

        Returns:
            True if deleted, False if not found
        """
        if game_id in self.sessions:
            del self.sessions[game_id]
            logger.info(f"Deleted game {game_id}")
            return True
        return False

    def cleanup_all(self):
        """Clean up all sessions (called on shutdown)."""
        logger.info(f"Cleaning up {len(self.sessions)} game sessions")
        self.sessions.clear()
