"""Tests for the command-line interface: display and human input loop."""

import math

import pytest

from burn_rate.engine.game_setup import create_game
from burn_rate.engine.intelligence import store_scan_result
from burn_rate.engine.missions import create_fleet_movement
from burn_rate.engine.turn_executor import TurnOrchestrator
from burn_rate.interface.display import DisplayManager
from burn_rate.interface.human_player import HumanPlayer
from burn_rate.models.combat import BattleOutcome, CombatEvent
from burn_rate.models.fleet import FleetComposition
from burn_rate.models.intelligence import ScanResult, ScanType
from burn_rate.utils.config import EngineConfig


def scripted(*lines):
    """input() replacement that replays lines, then signals EOF."""
    remaining = list(lines)

    def fake_input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return fake_input


def create_event(ratio=2.5):
    return CombatEvent(
        turn=3,
        attacker="ai",
        defender="player",
        attacker_fleet=FleetComposition(10, 0, 0),
        defender_fleet=FleetComposition(),
        outcome=BattleOutcome.DECISIVE_ATTACKER,
        attacker_casualties=FleetComposition(2, 0, 0),
        defender_casualties=FleetComposition(),
        attacker_survivors=FleetComposition(8, 0, 0),
        defender_survivors=FleetComposition(),
        strength_ratio=ratio,
    )


# ============================================================================
# HUMAN INPUT LOOP
# ============================================================================


def test_play_turn_submits_commands_until_end(capsys):
    orchestrator = TurnOrchestrator(config=EngineConfig(seed=1))
    human = HumanPlayer(input_func=scripted("build 10 frigates", "", "scan deep", "end"))

    human.play_turn(orchestrator)

    assert [str(c) for c in orchestrator.pending("player")] == ["build 10 frigate", "scan deep"]
    out = capsys.readouterr().out
    assert "Queued: build 10 frigate" in out
    assert "Ending turn with 2 commands" in out


def test_play_turn_reports_errors_and_continues(capsys):
    orchestrator = TurnOrchestrator(config=EngineConfig(seed=1))
    human = HumanPlayer(input_func=scripted("attack 99 0 0", "fly home", "build 0 mines", "end"))

    human.play_turn(orchestrator)

    assert orchestrator.pending("player") == []
    out = capsys.readouterr().out
    assert "Error: Insufficient fleet" in out
    assert "Error: Unknown command: 'fly'" in out
    assert "Available commands" in out
    assert "Invalid quantity" in out


def test_play_turn_list_and_clear(capsys):
    orchestrator = TurnOrchestrator(config=EngineConfig(seed=1))
    human = HumanPlayer(input_func=scripted("attack 5 0 0", "list", "clear", "list", "end"))

    human.play_turn(orchestrator)

    assert orchestrator.pending("player") == []
    out = capsys.readouterr().out
    assert "1. attack" in out
    assert "Cleared 1 command" in out
    assert "No commands queued" in out


def test_play_turn_quit_exits():
    orchestrator = TurnOrchestrator(config=EngineConfig(seed=1))
    human = HumanPlayer(input_func=scripted("quit"))
    with pytest.raises(SystemExit):
        human.play_turn(orchestrator)


def test_play_turn_eof_exits():
    orchestrator = TurnOrchestrator(config=EngineConfig(seed=1))
    human = HumanPlayer(input_func=scripted())
    with pytest.raises(SystemExit):
        human.play_turn(orchestrator)


# ============================================================================
# DISPLAY
# ============================================================================


def test_format_status():
    text = DisplayManager().format_status(create_game())
    assert "Turn 1 (early)" in text
    assert "Metal:" in text
    assert "+9,700/turn" in text
    assert "Missions: none" in text
    assert "Construction queue: empty" in text


def test_format_combat_event_names_sides():
    text = DisplayManager().format_combat_event(create_event())
    assert "Enemy attacked You home system" in text
    assert "(lost 2)" in text
    assert "strength ratio 2.50" in text


def test_format_combat_event_infinite_ratio():
    text = DisplayManager().format_combat_event(create_event(ratio=math.inf))
    assert "overwhelming" in text


def test_format_scan_result_hides_misinformation():
    result = ScanResult(
        scan_type=ScanType.BASIC,
        timestamp=2,
        fleet_data={"total": 80},
        accuracy=0.35,
        is_misinformation=True,
    )
    text = DisplayManager().format_scan_result(result)
    assert "Basic scan (turn 2, accuracy 35%)" in text
    assert "total: ~80" in text
    assert "misinformation" not in text.lower()


def test_format_victory():
    game = create_game()
    game.is_game_over = True
    game.winner = "player"
    game.victory_type = "economic"
    assert "VICTORY!" in DisplayManager().format_victory(game)
    assert "DEFEAT!" in DisplayManager("ai").format_victory(game)
    assert "Economy collapsed." in DisplayManager().format_victory(game)


def test_format_status_flags_fleet_in_transit():
    game = create_game()
    game.player.home_fleet = FleetComposition(40, 20, 10)
    game.player.missions.append(create_fleet_movement(FleetComposition(10, 0, 0), "ai_system", turn=1))

    text = DisplayManager().format_status(game)
    assert "Home system exposed: 10 ship(s) in transit, counter-attack window 3 turn(s)" in text

    game.turn = 2
    assert "Home system exposed" not in DisplayManager().format_status(game)


def test_format_status_reports_intelligence_gap():
    game = create_game()
    assert "Intelligence: no scans yet" in DisplayManager().format_status(game)

    scan = ScanResult(
        scan_type=ScanType.DEEP,
        timestamp=2,
        fleet_data={"frigates": 40, "cruisers": 10, "battleships": 5},
        accuracy=0.9,
    )
    store_scan_result(game.player.intelligence, scan)
    game.turn = 6

    text = DisplayManager().format_status(game)
    assert "Intelligence: last scan turn 2, confidence 60%" in text
    assert "~16 enemy ship(s) may be unseen" in text


def test_format_status_shows_economy_advice():
    game = create_game()
    game.player.economy.reactors = 10
    game.player.resources.metal = 60000

    text = DisplayManager().format_status(game)
    assert "Advisor: Additional reactors may not be cost-effective" in text
    assert "Advisor: Consider investing excess metal" in text
    assert "Advisor" not in DisplayManager().format_status(create_game())
