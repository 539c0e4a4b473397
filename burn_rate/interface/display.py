"""Text output for the command-line game.

DisplayManager renders game state, battles, scans, and the final result as
plain text. The format_* methods return strings; the show_* methods print
them.
"""

import math

from ..engine.economy import get_income_breakdown, validate_economic_state
from ..engine.intelligence import calculate_intelligence_gap
from ..engine.missions import (
    get_counter_attack_window,
    is_fleet_in_transit,
    is_home_system_vulnerable,
)
from ..models.combat import BattleOutcome, CombatEvent
from ..models.economy import ResourceAmount
from ..models.game import GameState
from ..models.intelligence import ScanResult
from ..models.player import PlayerState
from ..utils.constants import AI, PLAYER
from .command_parser import HELP_TEXT

SIDE_NAMES = {PLAYER: "You", AI: "Enemy"}

OUTCOME_TEXT = {
    BattleOutcome.DECISIVE_ATTACKER: "decisive attacker victory",
    BattleOutcome.DECISIVE_DEFENDER: "decisive defender victory",
    BattleOutcome.CLOSE_BATTLE: "close battle",
}


def _signed(amount: int) -> str:
    return f"{amount:+,}"


def _amount(amount: ResourceAmount) -> str:
    return f"{amount.metal:,} metal / {amount.energy:,} energy"


class DisplayManager:
    """Render game information for a human at the terminal."""

    def __init__(self, viewer: str = PLAYER):
        """Initialize display manager.

        Args:
            viewer: Side whose point of view is rendered
        """
        self.viewer = viewer

    def _name(self, side: str) -> str:
        if self.viewer == PLAYER:
            return SIDE_NAMES[side]
        return "You" if side == self.viewer else "Player"

    # =========================================================================
    # STATE
    # =========================================================================

    def format_status(self, game: GameState) -> str:
        """Empire overview for the viewing side."""
        player = game.get_player(self.viewer)
        lines = [
            f"=== Turn {game.turn} ({game.game_phase.value.replace('_', ' ')}) ===",
            "",
            self.format_resources(player),
            "",
            f"Home fleet: {player.home_fleet} ({player.home_fleet.total()} ships)",
        ]
        if player.missions:
            lines.append("Missions:")
            for movement in player.missions:
                lines.append(
                    f"  {movement.composition} -> {movement.target}, "
                    f"arrives turn {movement.arrival_turn}, home turn {movement.return_turn}"
                )
        else:
            lines.append("Missions: none")
        exposure = self.format_exposure(player, game.turn)
        if exposure:
            lines.append(exposure)

        lines.append(
            f"Structures: {player.economy.reactors} reactor(s), {player.economy.mines} mine(s)"
        )
        lines.append(self.format_construction_queue(player))
        lines.append(self.format_intelligence(player, game.turn))
        if player.stalled_turns:
            lines.append(f"WARNING: economy stalled for {player.stalled_turns} turn(s)")
        report = validate_economic_state(player)
        lines.extend(f"Advisor: {warning}" for warning in report.warnings)
        lines.extend(f"Advisor: {tip}" for tip in report.recommendations)
        return "\n".join(lines)

    def format_exposure(self, player: PlayerState, turn: int) -> str | None:
        """Warning line while any of the fleet is in transit, else None."""
        if not is_home_system_vulnerable(player.home_fleet, player.missions, turn):
            return None
        away = sum(
            movement.composition.total()
            for movement in player.missions
            if is_fleet_in_transit(movement, turn)
        )
        window = get_counter_attack_window(player.missions, turn)
        return (
            f"Home system exposed: {away} ship(s) in transit, "
            f"counter-attack window {window} turn(s)"
        )

    def format_intelligence(self, player: PlayerState, turn: int) -> str:
        gap = calculate_intelligence_gap(player.intelligence, turn)
        if gap.last_scan_turn == 0:
            return "Intelligence: no scans yet"
        line = (
            f"Intelligence: last scan turn {gap.last_scan_turn}, "
            f"confidence {gap.confidence:.0%}"
        )
        if gap.estimated_in_transit:
            line += f", ~{gap.estimated_in_transit} enemy ship(s) may be unseen"
        return line

    def format_resources(self, player: PlayerState) -> str:
        breakdown = get_income_breakdown(player)
        net = breakdown.net_income
        return "\n".join(
            [
                f"Metal:  {player.resources.metal:>10,}  ({_signed(net.metal)}/turn)",
                f"Energy: {player.resources.energy:>10,}  ({_signed(net.energy)}/turn)",
                f"  structures {_amount(breakdown.base_income + breakdown.structure_bonus)}",
                f"  construction -{_amount(breakdown.construction_drain)}",
                f"  upkeep -{_amount(breakdown.fleet_upkeep)}",
            ]
        )

    def format_construction_queue(self, player: PlayerState) -> str:
        queue = player.economy.construction_queue
        if not queue:
            return "Construction queue: empty"
        lines = ["Construction queue:"]
        for index, order in enumerate(queue):
            lines.append(
                f"  [{index}] {order.quantity} x {order.unit_type.value}, "
                f"{order.turns_remaining} turn(s) left, "
                f"drain {_amount(order.resource_drain_per_turn)}/turn"
            )
        return "\n".join(lines)

    def show_status(self, game: GameState) -> None:
        print(self.format_status(game))
        print()

    # =========================================================================
    # TURN EVENTS
    # =========================================================================

    def format_combat_event(self, event: CombatEvent) -> str:
        """Describe one battle, including casualties on both sides."""
        attacker = self._name(event.attacker)
        defender = self._name(event.defender)
        if math.isinf(event.strength_ratio):
            ratio = "overwhelming"
        else:
            ratio = f"{event.strength_ratio:.2f}"
        return "\n".join(
            [
                f"Battle on turn {event.turn}: {attacker} attacked {defender} home system",
                f"  {attacker}: {event.attacker_fleet} -> {event.attacker_survivors} "
                f"(lost {event.attacker_casualties.total()})",
                f"  {defender}: {event.defender_fleet} -> {event.defender_survivors} "
                f"(lost {event.defender_casualties.total()})",
                f"  Result: {OUTCOME_TEXT[event.outcome]} (strength ratio {ratio})",
            ]
        )

    def format_scan_result(self, result: ScanResult) -> str:
        """Describe a scan report. Misinformation is never revealed."""
        lines = [
            f"{result.scan_type.value.capitalize()} scan (turn {result.timestamp}, "
            f"accuracy {result.accuracy:.0%})"
        ]
        if result.fleet_data:
            fleet = ", ".join(f"{name}: ~{count}" for name, count in result.fleet_data.items())
            lines.append(f"  Fleet: {fleet}")
        if result.fleet_size_category:
            lines.append(f"  Fleet size: {result.fleet_size_category}")
        if result.economic_data:
            economy = ", ".join(
                f"{name}: ~{count}" for name, count in result.economic_data.items()
            )
            lines.append(f"  Economy: {economy}")
        if result.strategic_intent:
            lines.append(f"  Intent: {result.strategic_intent}")
        return "\n".join(lines)

    def show_turn_report(
        self,
        combat_events: list[CombatEvent],
        scan_results: list[ScanResult] | None = None,
    ) -> None:
        """Print battles and the viewer's scan reports from the last turn."""
        if not combat_events and not scan_results:
            print("Quiet turn: no battles, no scan reports.\n")
            return
        for event in combat_events:
            print(self.format_combat_event(event))
            print()
        for result in scan_results or []:
            print(self.format_scan_result(result))
            print()

    def show_help(self) -> None:
        print("\n=== Burn Rate - Command Help ===\n")
        print(HELP_TEXT)
        print()

    # =========================================================================
    # GAME OVER
    # =========================================================================

    def format_victory(self, game: GameState) -> str:
        if game.winner == "draw":
            headline = "The game ended in a DRAW!"
        elif game.winner == self.viewer:
            headline = "VICTORY!"
        else:
            headline = "DEFEAT!"

        reason = {
            "military": "Fleet eliminated.",
            "economic": "Economy collapsed.",
        }.get(game.victory_type, "")
        return "\n".join(
            [
                "=" * 60,
                "GAME OVER",
                "=" * 60,
                headline,
                reason,
                f"Game lasted {game.turn} turns with {len(game.combat_log)} battle(s).",
            ]
        )

    def show_victory(self, game: GameState) -> None:
        print()
        print(self.format_victory(game))
        print()
