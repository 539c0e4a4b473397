"""Turn orchestrator: command intake and the per-turn resolution pipeline.

Commands are submitted one at a time during a turn and validated right away
against the projected state: committed state less whatever earlier pending
commands already reserved. Nothing is mutated until end_turn, which runs the
steps below for both sides, one step at a time, so neither side moves first:

1. Commit pending commands (cancels, builds paid and queued, attack fleets
   launched, scan fees paid)
2. Advance construction queues (capture drain, complete finished orders)
3. Apply income (structures - construction drain - upkeep; clamp at 0)
4. Advance missions; missions arriving this turn fight the target garrison
5. Merge returning missions into their home garrison
6. Victory check
7. Run scans, advance the turn counter, recompute the game phase

Architecture:
Each step is an independent method operating on a working copy of the game
state. The copy replaces committed state only when every step succeeds; any
exception leaves committed state (and pending commands) untouched.
"""

import copy
import logging
from dataclasses import dataclass, field

from ..errors import InvariantError
from ..models.combat import CombatEvent
from ..models.command import (
    AttackCommand,
    BuildCommand,
    CancelCommand,
    Command,
    CommandResult,
    EndTurnCommand,
    ScanCommand,
)
from ..models.economy import BuildOrder, ResourceAmount
from ..models.fleet import FleetComposition
from ..models.game import GameState, phase_for_turn
from ..models.intelligence import ScanResult, ScanType, scan_cost
from ..utils.config import EngineConfig
from ..utils.constants import HOME_TARGETS, SIDES
from ..utils.rng import GameRNG
from .combat import resolve_combat
from .construction import (
    add_build_order,
    build_order_for,
    cancel_build_order,
    process_construction,
    upfront_cost,
)
from .economy import (
    build_commitment,
    calculate_income,
    calculate_salvage_refund,
    can_afford_and_sustain_build_order,
    get_net_income,
    is_economy_stalled,
    validate_economic_state,
)
from .game_setup import create_game
from .intelligence import age_intelligence_data, perform_scan, store_scan_result
from .missions import (
    MissionUpdate,
    complete_combat_mission,
    create_fleet_movement,
    process_fleet_movements,
)
from .victory import evaluate_victory

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Outcome of resolving one turn.

    Attributes:
        success: False if resolution failed and state was left unchanged
        errors: Failure descriptions
        combat_events: Battles fought this turn
        game_ended: True if the game is over
        winner: "player", "ai", "draw", or None
        victory_type: "military", "economic", or None
        turn: Turn number that was resolved
        scan_results: Scans taken this turn, keyed by scanning side
    """

    success: bool
    errors: list[str] = field(default_factory=list)
    combat_events: list[CombatEvent] = field(default_factory=list)
    game_ended: bool = False
    winner: str | None = None
    victory_type: str | None = None
    turn: int = 0
    scan_results: dict[str, list[ScanResult]] = field(default_factory=dict)


@dataclass
class PendingBuild:
    command: BuildCommand
    order: BuildOrder
    cost: ResourceAmount


@dataclass
class PendingCommands:
    """Commands accepted for one side this turn, not yet committed."""

    builds: list[PendingBuild] = field(default_factory=list)
    attacks: list[AttackCommand] = field(default_factory=list)
    scans: list[ScanCommand] = field(default_factory=list)
    cancels: list[CancelCommand] = field(default_factory=list)

    def reserved_resources(self) -> ResourceAmount:
        """Resources promised to pending builds and scans.

        A build holds its full commitment (drain over every build turn),
        not just the upfront cost paid at commit.
        """
        reserved = ResourceAmount()
        for build in self.builds:
            reserved += build_commitment(build.order, build.cost)
        for scan in self.scans:
            reserved += ResourceAmount(0, scan_cost(scan.scan_type))
        return reserved

    def pending_drain(self) -> ResourceAmount:
        drain = ResourceAmount()
        for build in self.builds:
            drain += build.order.resource_drain_per_turn
        return drain

    def pending_structures(self, buildable) -> int:
        """Structures of one type ordered earlier this turn."""
        return sum(
            build.command.quantity for build in self.builds if build.order.unit_type == buildable
        )

    def reserved_fleet(self) -> FleetComposition:
        """Ships promised to pending attacks."""
        reserved = FleetComposition()
        for attack in self.attacks:
            reserved = reserved + attack.fleet
        return reserved

    def commands(self) -> list[Command]:
        return (
            list(self.cancels)
            + [build.command for build in self.builds]
            + list(self.attacks)
            + list(self.scans)
        )


class TurnOrchestrator:
    """Owns the game state and resolves turns for both sides at once.

    Humans and AI personas go through the same submit() path; the
    orchestrator never knows which produced a command.
    """

    def __init__(
        self,
        game: GameState | None = None,
        config: EngineConfig | None = None,
        rng: GameRNG | None = None,
    ):
        """Initialize orchestrator.

        Args:
            game: Starting state (a new game from config if None)
            config: Game settings
            rng: Random source for combat and scans (seeded from config if None)
        """
        self.config = config or EngineConfig()
        self.rng = rng or GameRNG(self.config.seed)
        self._game = game if game is not None else create_game(self.config)
        self._pending = {side: PendingCommands() for side in SIDES}

    # =========================================================================
    # READ ACCESSORS
    # =========================================================================

    def get_game_state(self) -> GameState:
        """Return a copy of the committed game state."""
        return copy.deepcopy(self._game)

    @property
    def current_turn(self) -> int:
        return self._game.turn

    @property
    def is_game_over(self) -> bool:
        return self._game.is_game_over

    @property
    def winner(self) -> str | None:
        return self._game.winner

    @property
    def victory_type(self) -> str | None:
        return self._game.victory_type

    @property
    def combat_log(self) -> list[CombatEvent]:
        return copy.deepcopy(self._game.combat_log)

    def pending(self, side: str) -> list[Command]:
        """Commands accepted for a side this turn."""
        return self._pending_for(side).commands()

    # =========================================================================
    # COMMAND INTAKE
    # =========================================================================

    def submit(self, side: str, command: Command) -> CommandResult:
        """Validate a command and stage it for the end of the turn.

        Rule violations are returned as a failed CommandResult and the
        command is not staged. Nothing in the committed state changes.

        Args:
            side: "player" or "ai"
            command: Command to submit

        Returns:
            CommandResult describing acceptance or the reasons for rejection
        """
        if side not in SIDES:
            result = CommandResult.rejected(f"Invalid side: {side} (must be 'player' or 'ai')")
            logger.warning(f"Command rejected for unknown side {side!r}: {command!r}")
            return result

        pending = self._pending[side]
        if self._game.is_game_over:
            result = CommandResult.rejected("Game is over")
        elif isinstance(command, BuildCommand):
            result = self._submit_build(side, command, pending)
        elif isinstance(command, AttackCommand):
            result = self._submit_attack(side, command, pending)
        elif isinstance(command, ScanCommand):
            result = self._submit_scan(side, command, pending)
        elif isinstance(command, CancelCommand):
            result = self._submit_cancel(side, command, pending)
        elif isinstance(command, EndTurnCommand):
            result = CommandResult.ok("Ready to end turn")
        else:
            result = CommandResult.rejected(f"Unknown command: {command!r}")

        if result.success:
            logger.debug(f"{side} command accepted: {command}")
        else:
            logger.warning(f"{side} command rejected: {command} ({'; '.join(result.errors)})")
        return result

    def clear_pending(self, side: str) -> None:
        """Drop every command a side has staged this turn."""
        self._pending_for(side)
        self._pending[side] = PendingCommands()

    def _pending_for(self, side: str) -> PendingCommands:
        if side not in SIDES:
            raise ValueError(f"Invalid side: {side} (must be 'player' or 'ai')")
        return self._pending[side]

    def _submit_build(
        self, side: str, command: BuildCommand, pending: PendingCommands
    ) -> CommandResult:
        player = self._game.get_player(side)
        if is_economy_stalled(player):
            net = get_net_income(player)
            return CommandResult.rejected(
                f"Economy stalled ({net.metal}M/{net.energy}E net income): no new construction"
            )

        ordered = pending.pending_structures(command.buildable)
        order = build_order_for(player, command.buildable, command.quantity, pending=ordered)
        cost = upfront_cost(player, command.buildable, command.quantity, pending=ordered)
        check = can_afford_and_sustain_build_order(
            player,
            order,
            cost,
            reserved=pending.reserved_resources(),
            pending_drain=pending.pending_drain(),
        )
        if not check.accepted:
            return CommandResult(success=False, errors=check.errors)

        pending.builds.append(PendingBuild(command=command, order=order, cost=cost))
        return CommandResult.ok(
            f"Queued {command.quantity} {command.buildable.value}(s) for {cost.metal}M/{cost.energy}E"
        )

    def _submit_attack(
        self, side: str, command: AttackCommand, pending: PendingCommands
    ) -> CommandResult:
        player = self._game.get_player(side)
        opponent = self._game.opponent(side)
        if command.target != HOME_TARGETS[opponent.side]:
            return CommandResult.rejected(
                f"Invalid target: {command.target} (expected {HOME_TARGETS[opponent.side]})"
            )

        available = player.home_fleet.minus(pending.reserved_fleet())
        if not available.covers(command.fleet):
            return CommandResult.rejected(
                f"Insufficient fleet: need {command.fleet}, have {available} available"
            )

        pending.attacks.append(command)
        return CommandResult.ok(f"Attack on {command.target} with {command.fleet} launches this turn")

    def _submit_scan(
        self, side: str, command: ScanCommand, pending: PendingCommands
    ) -> CommandResult:
        player = self._game.get_player(side)
        cost = scan_cost(command.scan_type)
        available = player.resources.energy - pending.reserved_resources().energy
        if available < cost:
            return CommandResult.rejected(
                f"Insufficient energy for {command.scan_type.value} scan: need {cost}, have {available}"
            )
        pending.scans.append(command)
        return CommandResult.ok(f"{command.scan_type.value.capitalize()} scan scheduled")

    def _submit_cancel(
        self, side: str, command: CancelCommand, pending: PendingCommands
    ) -> CommandResult:
        queue = self._game.get_player(side).economy.construction_queue
        if not 0 <= command.index < len(queue):
            return CommandResult.rejected("Invalid build order index")
        if any(cancel.index == command.index for cancel in pending.cancels):
            return CommandResult.rejected(f"Build order {command.index} is already being cancelled")
        pending.cancels.append(command)
        return CommandResult.ok(f"Build order {command.index} will be cancelled (no refund)")

    # =========================================================================
    # INDEPENDENT STEP METHODS
    # Each method runs ONE step for both sides on the working copy
    # =========================================================================

    def execute_step_commit(
        self, game: GameState, pending: dict[str, PendingCommands]
    ) -> dict[str, list[ScanType]]:
        """Step 1: commit every staged command.

        Returns:
            Scan types paid for this turn, keyed by side
        """
        scans = {}
        for side in SIDES:
            player = game.get_player(side)
            orders = pending[side]

            # Descending so earlier indexes stay valid
            for cancel in sorted(orders.cancels, key=lambda c: c.index, reverse=True):
                result = cancel_build_order(player, cancel.index)
                if not result.success:
                    raise InvariantError(f"{side} cancel of order {cancel.index} failed at commit")

            for build in orders.builds:
                player.resources.spend(build.cost)
                add_build_order(player, build.order)

            for attack in orders.attacks:
                player.home_fleet.remove(attack.fleet)
                movement = create_fleet_movement(attack.fleet, attack.target, game.turn)
                player.missions.append(movement)
                logger.info(f"{side} launched {attack.fleet} against {attack.target}")

            scans[side] = []
            for scan in orders.scans:
                player.resources.spend(ResourceAmount(0, scan_cost(scan.scan_type)))
                scans[side].append(scan.scan_type)
        return scans

    def execute_step_construction(self, game: GameState) -> dict[str, ResourceAmount]:
        """Step 2: advance construction.

        Returns:
            Construction drain charged this turn, keyed by side
        """
        drains = {}
        for side in SIDES:
            drains[side], _ = process_construction(game.get_player(side))
        return drains

    def execute_step_income(self, game: GameState, drains: dict[str, ResourceAmount]) -> None:
        """Step 3: apply income."""
        for side in SIDES:
            player = game.get_player(side)
            calculate_income(player, drains[side])
            for warning in validate_economic_state(player).warnings:
                logger.debug(f"{side} economy: {warning}")

    def execute_step_missions(
        self, game: GameState
    ) -> tuple[list[CombatEvent], dict[str, MissionUpdate], str | None]:
        """Step 4: advance missions and fight battles that arrive this turn.

        Battles are fought in SIDES order, but the deciding defender does not
        depend on it: it is the defender of the battle that emptied a home
        garrison, and only when exactly one garrison was emptied this turn.

        Returns:
            Tuple of (combat events, mission updates keyed by side,
            deciding defender or None)
        """
        events = []
        updates = {}
        emptied = []

        for side in SIDES:
            player = game.get_player(side)
            defender = game.opponent(side)
            update = process_fleet_movements(player.missions, game.turn)
            updates[side] = update

            for movement in update.combat:
                attacking_fleet = movement.composition.copy()
                defending_fleet = defender.home_fleet.copy()
                result = resolve_combat(attacking_fleet, defending_fleet, rng=self.rng)

                defender.home_fleet = result.defender_survivors
                refund = calculate_salvage_refund(result.attacker_casualties)
                player.resources.metal += refund.metal
                player.resources.energy += refund.energy
                refund = calculate_salvage_refund(result.defender_casualties)
                defender.resources.metal += refund.metal
                defender.resources.energy += refund.energy

                event = CombatEvent(
                    turn=game.turn,
                    attacker=side,
                    defender=defender.side,
                    attacker_fleet=attacking_fleet,
                    defender_fleet=defending_fleet,
                    outcome=result.outcome,
                    attacker_casualties=result.attacker_casualties,
                    defender_casualties=result.defender_casualties,
                    attacker_survivors=result.attacker_survivors,
                    defender_survivors=result.defender_survivors,
                    strength_ratio=result.strength_ratio,
                )
                game.combat_log.append(event)
                events.append(event)
                if defender.home_fleet.is_empty() and defender.side not in emptied:
                    emptied.append(defender.side)
                logger.info(
                    f"Turn {game.turn}: {side} attacked {defender.side} "
                    f"({attacking_fleet} vs {defending_fleet}) -> {result.outcome.value}"
                )

                if complete_combat_mission(movement, result.attacker_survivors) is None:
                    player.missions.remove(movement)
                    logger.info(f"{side} mission destroyed, no survivors")

        # None when no garrison, or both, fell this turn
        deciding_defender = emptied[0] if len(emptied) == 1 else None
        return events, updates, deciding_defender

    def execute_step_returns(self, game: GameState, updates: dict[str, MissionUpdate]) -> None:
        """Step 5: merge missions reaching their return turn."""
        for side in SIDES:
            player = game.get_player(side)
            for movement in updates[side].arrived_home:
                player.home_fleet.merge(movement.composition)
                player.missions.remove(movement)
                logger.info(f"{side} fleet {movement.composition} returned home")

    def execute_step_victory(self, game: GameState, deciding_defender: str | None) -> None:
        """Step 6: check victory conditions."""
        result = evaluate_victory(
            game,
            defender=deciding_defender,
            policy=self.config.mutual_elimination_policy,
            collapse_turns=self.config.economic_collapse_turns,
        )
        if result.game_ended:
            game.is_game_over = True
            game.winner = result.winner
            game.victory_type = result.victory_type
            logger.info(f"Game over on turn {game.turn}: {result.winner} ({result.victory_type})")

    def execute_step_advance(
        self, game: GameState, scans: dict[str, list[ScanType]]
    ) -> dict[str, list[ScanResult]]:
        """Step 7: run scans, then advance the turn and phase.

        Returns:
            Scan results keyed by scanning side
        """
        results = {}
        for side in SIDES:
            scanner = game.get_player(side)
            target = game.opponent(side)
            results[side] = []
            for scan_type in scans.get(side, []):
                result = perform_scan(target, scan_type, game.turn, self.rng)
                store_scan_result(scanner.intelligence, result)
                results[side].append(result)
            age_intelligence_data(scanner.intelligence, game.turn)

        if not game.is_game_over:
            game.turn += 1
        game.game_phase = phase_for_turn(game.turn)
        return results

    # =========================================================================
    # ORCHESTRATION
    # =========================================================================

    def end_turn(self) -> tuple[TurnResult, GameState]:
        """Resolve the current turn for both sides.

        Returns:
            Tuple of (TurnResult, copy of the committed game state). On
            failure the state is unchanged and pending commands are kept.
        """
        resolved_turn = self._game.turn
        if self._game.is_game_over:
            result = TurnResult(
                success=False,
                errors=["Game is over"],
                game_ended=True,
                winner=self._game.winner,
                victory_type=self._game.victory_type,
                turn=resolved_turn,
            )
            return result, self.get_game_state()

        work = copy.deepcopy(self._game)
        rng_state = self.rng.get_state()
        try:
            scans = self.execute_step_commit(work, self._pending)
            drains = self.execute_step_construction(work)
            self.execute_step_income(work, drains)
            events, updates, deciding_defender = self.execute_step_missions(work)
            self.execute_step_returns(work, updates)
            self.execute_step_victory(work, deciding_defender)
            scan_results = self.execute_step_advance(work, scans)
        except Exception as e:
            self.rng.set_state(rng_state)
            logger.error(f"Turn {resolved_turn} failed, state unchanged: {e}", exc_info=True)
            result = TurnResult(
                success=False,
                errors=[f"{type(e).__name__}: {e}"],
                turn=resolved_turn,
            )
            return result, self.get_game_state()

        self._game = work
        self._pending = {side: PendingCommands() for side in SIDES}
        logger.info(
            f"Turn {resolved_turn} resolved: {len(events)} battle(s), "
            f"player {work.player.home_fleet} vs ai {work.ai.home_fleet}"
        )

        result = TurnResult(
            success=True,
            combat_events=events,
            game_ended=work.is_game_over,
            winner=work.winner,
            victory_type=work.victory_type,
            turn=resolved_turn,
            scan_results=scan_results,
        )
        return result, self.get_game_state()

    # =========================================================================
    # DIAGNOSTICS
    # =========================================================================

    def get_game_statistics(self) -> dict:
        """Summary numbers for both sides."""
        game = self._game
        stats = {
            "turn": game.turn,
            "game_phase": game.game_phase.value,
            "battles": len(game.combat_log),
            "is_game_over": game.is_game_over,
            "winner": game.winner,
        }
        for side in SIDES:
            player = game.get_player(side)
            stats[side] = {
                "home_ships": player.home_fleet.total(),
                "total_ships": player.total_fleet().total(),
                "active_missions": len(player.missions),
                "metal": player.resources.metal,
                "energy": player.resources.energy,
                "metal_income": player.resources.metal_income,
                "energy_income": player.resources.energy_income,
                "reactors": player.economy.reactors,
                "mines": player.economy.mines,
                "queued_orders": len(player.economy.construction_queue),
                "battles_won": sum(1 for event in game.combat_log if event.winner == side),
            }
        return stats

    def validate_game_state(self) -> list[str]:
        """Check the committed state for inconsistencies.

        Returns:
            Problem descriptions (empty if the state is consistent)
        """
        game = self._game
        problems = []
        if game.game_phase != phase_for_turn(game.turn):
            problems.append(f"Phase {game.game_phase.value} does not match turn {game.turn}")
        if game.is_game_over and game.winner is None:
            problems.append("Game is over but has no winner")
        if not game.is_game_over and game.winner is not None:
            problems.append("Game has a winner but is not over")
        for side in SIDES:
            player = game.get_player(side)
            for movement in player.missions:
                if movement.return_turn < game.turn:
                    problems.append(f"{side} mission should have returned on turn {movement.return_turn}")
                if movement.composition.is_empty():
                    problems.append(f"{side} has an empty mission")
        return problems
