"""Tests for the turn orchestrator - full turn integration."""

import pytest

from burn_rate.engine.combat import CombatResult
from burn_rate.engine.construction import create_unit_build_order
from burn_rate.engine.game_setup import create_game
from burn_rate.engine.turn_executor import TurnOrchestrator
from burn_rate.models.combat import BattleOutcome
from burn_rate.models.command import (
    AttackCommand,
    BuildCommand,
    CancelCommand,
    EndTurnCommand,
    ScanCommand,
)
from burn_rate.models.economy import ResourceAmount, StructureType, scaled_structure_cost
from burn_rate.models.fleet import FleetComposition, UnitType
from burn_rate.models.game import GamePhase
from burn_rate.utils.config import EngineConfig
from burn_rate.utils.rng import GameRNG


def create_orchestrator(seed=42, game=None, **config):
    """Create an orchestrator on a fresh (or given) game with a fixed seed."""
    return TurnOrchestrator(game=game, config=EngineConfig(seed=seed, **config))


def attack(frigates=0, cruisers=0, battleships=0, target="ai_system"):
    return AttackCommand(fleet=FleetComposition(frigates, cruisers, battleships), target=target)


# ============================================================================
# SETUP AND QUIET TURNS
# ============================================================================


def test_new_game_starting_state():
    game = create_orchestrator().get_game_state()
    assert game.turn == 1
    assert game.game_phase == GamePhase.EARLY
    for player in (game.player, game.ai):
        assert player.resources.stock == ResourceAmount(10000, 10000)
        assert player.home_fleet == FleetComposition(50, 20, 10)
        assert player.missions == []


def test_quiet_turn_applies_income_and_advances():
    orchestrator = create_orchestrator()
    result, game = orchestrator.end_turn()

    assert result.success
    assert result.turn == 1
    assert game.turn == 2
    # Starting fleet upkeep is 300 metal / 170 energy
    assert game.player.resources.stock == ResourceAmount(19700, 19830)
    assert game.player.resources.metal_income == 9700
    assert game.ai.resources.stock == ResourceAmount(19700, 19830)


def test_phase_follows_turn():
    orchestrator = create_orchestrator()
    for _ in range(5):
        orchestrator.end_turn()
    game = orchestrator.get_game_state()
    assert game.turn == 6
    assert game.game_phase == GamePhase.MID


def test_get_game_state_returns_copy():
    orchestrator = create_orchestrator()
    game = orchestrator.get_game_state()
    game.player.home_fleet.frigates = 0
    assert orchestrator.get_game_state().player.home_fleet.frigates == 50


# ============================================================================
# COMMAND INTAKE
# ============================================================================


def test_build_is_staged_until_end_turn():
    orchestrator = create_orchestrator()
    result = orchestrator.submit("player", BuildCommand(UnitType.FRIGATE, 10))

    assert result.success
    assert orchestrator.get_game_state().player.resources.metal == 10000
    assert len(orchestrator.pending("player")) == 1

    _, game = orchestrator.end_turn()
    # Frigates build in one turn: paid, drained once, then join the garrison
    assert game.player.home_fleet == FleetComposition(60, 20, 10)
    assert game.player.resources.stock == ResourceAmount(9960 + 9640, 9980 + 9800)
    assert orchestrator.pending("player") == []


def test_multi_turn_build_completes_later():
    orchestrator = create_orchestrator()
    assert orchestrator.submit("player", BuildCommand(UnitType.BATTLESHIP, 2)).success

    _, game = orchestrator.end_turn()
    assert game.player.home_fleet.battleships == 10
    assert game.player.economy.construction_queue[0].turns_remaining == 3

    for _ in range(3):
        _, game = orchestrator.end_turn()
    assert game.player.home_fleet.battleships == 12
    assert game.player.economy.construction_queue == []


def test_structure_build_raises_income():
    orchestrator = create_orchestrator()
    assert orchestrator.submit("player", BuildCommand("mine", 1)).success
    orchestrator.end_turn()
    _, game = orchestrator.end_turn()
    assert game.player.economy.mines == 1
    assert game.player.resources.metal_income == 10500 - 300


def test_scans_reserve_energy():
    """Later commands only see resources not already promised this turn."""
    orchestrator = create_orchestrator()
    assert orchestrator.submit("player", ScanCommand("advanced")).success
    assert orchestrator.submit("player", ScanCommand("advanced")).success

    third = orchestrator.submit("player", ScanCommand("advanced"))
    assert not third.success
    assert "Insufficient energy" in third.errors[0]
    assert orchestrator.submit("player", ScanCommand("basic")).success


def test_build_rejected_when_reserved_resources_run_out():
    orchestrator = create_orchestrator()
    assert orchestrator.submit("player", ScanCommand("advanced")).success
    assert orchestrator.submit("player", ScanCommand("advanced")).success
    # 2000 energy left; a reactor needs 1200, a second one more than is left
    assert orchestrator.submit("player", BuildCommand("reactor", 1)).success
    result = orchestrator.submit("player", BuildCommand("reactor", 1))
    assert not result.success
    assert "Insufficient resources" in result.errors[0]


def test_build_needs_full_construction_drain_in_stock():
    """A battleship drains 20M/12E per turn for 4 turns, so 30 metal is not enough."""
    game = create_game()
    game.player.resources.metal = 30
    orchestrator = create_orchestrator(game=game)

    result = orchestrator.submit("player", BuildCommand(UnitType.BATTLESHIP, 1))
    assert not result.success
    assert "Insufficient resources: need 80M/48E" in result.errors[0]
    assert orchestrator.pending("player") == []

    game = create_game()
    game.player.resources.metal = 80
    assert create_orchestrator(game=game).submit("player", BuildCommand(UnitType.BATTLESHIP, 1)).success


def test_pending_builds_reserve_their_construction_drain():
    game = create_game()
    game.player.resources.metal = 120
    orchestrator = create_orchestrator(game=game)

    assert orchestrator.submit("player", BuildCommand(UnitType.BATTLESHIP, 1)).success
    second = orchestrator.submit("player", BuildCommand(UnitType.BATTLESHIP, 1))
    assert not second.success
    assert "have 40M" in second.errors[0]


def test_structures_ordered_in_one_turn_climb_the_cost_curve():
    orchestrator = create_orchestrator()
    first = orchestrator.submit("player", BuildCommand("mine", 1))
    second = orchestrator.submit("player", BuildCommand("mine", 1))

    base = scaled_structure_cost(StructureType.MINE, 0)
    next_cost = scaled_structure_cost(StructureType.MINE, 1)
    assert next_cost.metal > base.metal
    assert f"for {base.metal}M/{base.energy}E" in first.message
    assert f"for {next_cost.metal}M/{next_cost.energy}E" in second.message

    _, game = orchestrator.end_turn()
    assert game.player.economy.mines == 2


def test_unsustainable_build_rejected():
    orchestrator = create_orchestrator(starting_metal=10**6, starting_energy=10**6)
    result = orchestrator.submit("player", BuildCommand(UnitType.FRIGATE, 5000))
    assert not result.success
    assert any("Unsustainable" in error for error in result.errors)


def test_attacks_reserve_ships():
    orchestrator = create_orchestrator()
    assert orchestrator.submit("player", attack(frigates=30)).success

    second = orchestrator.submit("player", attack(frigates=30))
    assert not second.success
    assert "Insufficient fleet" in second.errors[0]
    assert orchestrator.submit("player", attack(frigates=20)).success


def test_attack_must_target_opponent_home():
    orchestrator = create_orchestrator()
    assert not orchestrator.submit("player", attack(frigates=1, target="player_home")).success
    assert not orchestrator.submit("ai", attack(frigates=1, target="ai_system")).success
    assert orchestrator.submit("ai", attack(frigates=1, target="player_home")).success


def test_rejected_command_changes_nothing():
    orchestrator = create_orchestrator()
    before = orchestrator.get_game_state()
    result = orchestrator.submit("player", attack(frigates=51))

    assert not result.success
    assert orchestrator.pending("player") == []
    assert orchestrator.get_game_state() == before


def test_cancel_commands():
    game = create_game()
    game.player.economy.construction_queue = [
        create_unit_build_order(UnitType.CRUISER, 1),
        create_unit_build_order(UnitType.BATTLESHIP, 1),
    ]
    orchestrator = create_orchestrator(game=game)

    assert orchestrator.submit("player", CancelCommand(0)).success
    assert not orchestrator.submit("player", CancelCommand(0)).success
    assert not orchestrator.submit("player", CancelCommand(5)).success
    assert orchestrator.submit("player", CancelCommand(1)).success

    _, game = orchestrator.end_turn()
    assert game.player.economy.construction_queue == []
    assert game.player.home_fleet == FleetComposition(50, 20, 10)


def test_end_turn_command_is_accepted():
    orchestrator = create_orchestrator()
    assert orchestrator.submit("player", EndTurnCommand()).success
    assert orchestrator.pending("player") == []


def test_clear_pending():
    orchestrator = create_orchestrator()
    orchestrator.submit("player", attack(frigates=10))
    orchestrator.submit("player", ScanCommand("basic"))
    orchestrator.clear_pending("player")
    assert orchestrator.pending("player") == []
    assert orchestrator.submit("player", attack(frigates=50)).success


def test_invalid_side_is_rejected():
    orchestrator = create_orchestrator()
    result = orchestrator.submit("p1", EndTurnCommand())
    assert not result.success
    assert "Invalid side: p1" in result.errors[0]


def test_unknown_command_is_rejected():
    orchestrator = create_orchestrator()
    result = orchestrator.submit("player", "build 5 frigates")
    assert not result.success
    assert result.errors[0].startswith("Unknown command")
    assert orchestrator.pending("player") == []


def test_pending_still_checks_side():
    with pytest.raises(ValueError):
        create_orchestrator().pending("p1")


# ============================================================================
# STALLED ECONOMY
# ============================================================================


def test_stalled_economy_blocks_new_builds_but_queue_completes():
    """With -500 metal income, new builds are refused but queued orders finish."""
    game = create_game()
    game.player.home_fleet = FleetComposition(frigates=5250)
    game.player.economy.construction_queue = [create_unit_build_order(UnitType.FRIGATE, 1)]
    orchestrator = create_orchestrator(game=game)

    result = orchestrator.submit("player", BuildCommand(UnitType.FRIGATE, 1))
    assert not result.success
    assert "stalled" in result.errors[0]

    _, game = orchestrator.end_turn()
    assert game.player.home_fleet.frigates == 5251
    assert game.player.economy.construction_queue == []
    assert game.player.resources.metal == 10000 + 10000 - 4 - 5251 * 2
    assert game.player.stalled_turns == 1


# ============================================================================
# MISSIONS AND COMBAT
# ============================================================================


def test_attack_mission_timeline():
    """Launched on turn 1, fights on turn 2, home again on turn 4."""
    orchestrator = create_orchestrator()
    assert orchestrator.submit("player", attack(frigates=10)).success

    result, game = orchestrator.end_turn()
    assert result.combat_events == []
    assert game.player.home_fleet == FleetComposition(40, 20, 10)
    mission = game.player.missions[0]
    assert (mission.arrival_turn, mission.return_turn) == (2, 4)

    result, game = orchestrator.end_turn()
    assert len(result.combat_events) == 1
    event = result.combat_events[0]
    assert event.turn == 2
    assert event.attacker == "player"
    assert event.defender == "ai"
    assert event.defender_fleet == FleetComposition(50, 20, 10)
    assert game.ai.home_fleet == event.defender_survivors
    survivors = event.attacker_survivors

    result, game = orchestrator.end_turn()
    assert result.combat_events == []
    if survivors.is_empty():
        assert game.player.missions == []
    else:
        assert game.player.missions[0].composition == survivors

    _, game = orchestrator.end_turn()
    assert game.player.missions == []
    assert game.player.home_fleet == FleetComposition(40, 20, 10) + survivors
    assert len(game.combat_log) == 1


def test_ships_on_missions_pay_no_upkeep():
    orchestrator = create_orchestrator()
    orchestrator.submit("player", attack(frigates=50, cruisers=20))
    _, game = orchestrator.end_turn()
    # Only the 10 battleships at home pay upkeep
    assert game.player.resources.metal_income == 10000 - 100
    assert game.player.resources.energy_income == 10000 - 60


def test_both_sides_attack_in_the_same_turn():
    orchestrator = create_orchestrator()
    orchestrator.submit("player", attack(frigates=20))
    orchestrator.submit("ai", attack(cruisers=10, target="player_home"))
    orchestrator.end_turn()

    result, game = orchestrator.end_turn()
    attackers = sorted(event.attacker for event in result.combat_events)
    assert attackers == ["ai", "player"]
    for event in result.combat_events:
        assert event.defender_fleet == FleetComposition(50, 20, 10).minus(
            FleetComposition(20, 0, 0) if event.defender == "player" else FleetComposition(0, 10, 0)
        )


def test_submission_order_does_not_matter():
    """Both sides' commands resolve together regardless of who submitted first."""
    first = create_orchestrator(seed=7)
    first.submit("player", attack(frigates=25, battleships=5))
    first.submit("ai", attack(cruisers=15, target="player_home"))
    first.submit("player", BuildCommand("cruiser", 3))

    second = create_orchestrator(seed=7)
    second.submit("ai", attack(cruisers=15, target="player_home"))
    second.submit("player", BuildCommand("cruiser", 3))
    second.submit("player", attack(frigates=25, battleships=5))

    for _ in range(4):
        first.end_turn()
        second.end_turn()
    assert first.get_game_state() == second.get_game_state()


def test_same_seed_same_game():
    states = []
    for _ in range(2):
        orchestrator = create_orchestrator(seed=11)
        orchestrator.submit("player", attack(frigates=40, cruisers=10))
        orchestrator.submit("ai", attack(battleships=8, target="player_home"))
        for _ in range(3):
            orchestrator.end_turn()
        states.append(orchestrator.get_game_state())
    assert states[0] == states[1]


# ============================================================================
# VICTORY
# ============================================================================


def test_military_victory_ends_game():
    game = create_game()
    game.ai.home_fleet = FleetComposition()
    orchestrator = create_orchestrator(game=game)

    result, game = orchestrator.end_turn()
    assert result.success
    assert result.game_ended
    assert result.winner == "player"
    assert result.victory_type == "military"
    assert game.turn == 1
    assert orchestrator.is_game_over


def test_finished_game_rejects_commands_and_turns():
    game = create_game()
    game.ai.home_fleet = FleetComposition()
    orchestrator = create_orchestrator(game=game)
    orchestrator.end_turn()

    assert not orchestrator.submit("player", BuildCommand(UnitType.FRIGATE, 1)).success
    result, game = orchestrator.end_turn()
    assert not result.success
    assert result.errors == ["Game is over"]
    assert result.winner == "player"
    assert game.turn == 1


def test_mutual_elimination_draw_policy():
    game = create_game()
    game.player.home_fleet = FleetComposition()
    game.ai.home_fleet = FleetComposition()
    orchestrator = create_orchestrator(game=game, mutual_elimination_policy="draw")

    result, _ = orchestrator.end_turn()
    assert result.winner == "draw"


def test_mutual_elimination_defender_policy_without_battle():
    game = create_game()
    game.player.home_fleet = FleetComposition()
    game.ai.home_fleet = FleetComposition()
    orchestrator = create_orchestrator(game=game)

    result, _ = orchestrator.end_turn()
    assert result.winner == "ai"


def annihilate(attacker, defender, rng=None):
    """Combat stand-in where both fleets are destroyed outright."""
    return CombatResult(
        outcome=BattleOutcome.CLOSE_BATTLE,
        attacker_survivors=FleetComposition(),
        defender_survivors=FleetComposition(),
        attacker_casualties=attacker.copy(),
        defender_casualties=defender.copy(),
        strength_ratio=1.0,
    )


def test_mutual_elimination_awards_defender_of_emptied_garrison(monkeypatch):
    """The AI throws its last frigate at a one-frigate garrison; both die."""
    monkeypatch.setattr("burn_rate.engine.turn_executor.resolve_combat", annihilate)
    game = create_game()
    game.player.home_fleet = FleetComposition(1, 0, 0)
    game.ai.home_fleet = FleetComposition(1, 0, 0)
    orchestrator = create_orchestrator(game=game)

    assert orchestrator.submit("ai", attack(frigates=1, target="player_home")).success
    assert not orchestrator.end_turn()[0].game_ended

    result, _ = orchestrator.end_turn()
    assert result.game_ended
    assert result.victory_type == "military"
    assert result.winner == "player"


def test_mutual_elimination_from_crossing_attacks_ignores_battle_order(monkeypatch):
    """Both garrisons fall in the same turn, so no single battle decides."""
    monkeypatch.setattr("burn_rate.engine.turn_executor.resolve_combat", annihilate)
    game = create_game()
    game.player.home_fleet = FleetComposition(2, 0, 0)
    game.ai.home_fleet = FleetComposition(2, 0, 0)
    orchestrator = create_orchestrator(game=game)

    orchestrator.submit("player", attack(frigates=1))
    orchestrator.submit("ai", attack(frigates=1, target="player_home"))
    orchestrator.end_turn()

    result, _ = orchestrator.end_turn()
    assert len(result.combat_events) == 2
    assert result.winner == "ai"


def test_economic_collapse_ends_game():
    """Empty stocks and negative income for both resources lose the game."""
    game = create_game()
    game.player.resources.metal = 0
    game.player.resources.energy = 0
    # 1667 battleships cost 16670 metal / 10002 energy per turn in upkeep
    game.player.home_fleet = FleetComposition(battleships=1667)
    orchestrator = create_orchestrator(game=game)

    result, game = orchestrator.end_turn()
    assert result.game_ended
    assert result.winner == "ai"
    assert result.victory_type == "economic"
    assert game.player.resources.stock == ResourceAmount(0, 0)


# ============================================================================
# SCANS
# ============================================================================


def test_scan_results_reach_scanner():
    orchestrator = create_orchestrator()
    orchestrator.submit("player", ScanCommand("deep"))

    result, game = orchestrator.end_turn()
    assert len(result.scan_results["player"]) == 1
    assert result.scan_results["ai"] == []
    assert len(game.player.intelligence.scan_history) == 1
    assert game.player.intelligence.last_scan_turn == 1
    assert game.player.resources.energy == 10000 - 2500 + 9830


# ============================================================================
# FAILURE HANDLING
# ============================================================================


def test_failed_turn_leaves_state_untouched(monkeypatch):
    orchestrator = create_orchestrator()
    orchestrator.submit("player", attack(frigates=10))
    orchestrator.submit("player", BuildCommand(UnitType.CRUISER, 2))
    before = orchestrator.get_game_state()
    rng_state = orchestrator.rng.get_state()

    def boom(game, deciding_defender):
        raise RuntimeError("victory check exploded")

    monkeypatch.setattr(orchestrator, "execute_step_victory", boom)
    result, game = orchestrator.end_turn()

    assert not result.success
    assert "victory check exploded" in result.errors[0]
    assert game == before
    assert orchestrator.get_game_state() == before
    assert orchestrator.rng.get_state() == rng_state
    assert len(orchestrator.pending("player")) == 2


def test_turn_succeeds_after_failure_is_fixed(monkeypatch):
    orchestrator = create_orchestrator()
    orchestrator.submit("player", attack(frigates=10))

    def boom(game, deciding_defender):
        raise RuntimeError("boom")

    monkeypatch.setattr(orchestrator, "execute_step_victory", boom)
    assert not orchestrator.end_turn()[0].success
    monkeypatch.undo()

    result, game = orchestrator.end_turn()
    assert result.success
    assert game.player.home_fleet.frigates == 40


# ============================================================================
# DIAGNOSTICS
# ============================================================================


def test_game_statistics():
    orchestrator = create_orchestrator()
    orchestrator.submit("player", attack(frigates=10))
    orchestrator.end_turn()
    stats = orchestrator.get_game_statistics()

    assert stats["turn"] == 2
    assert stats["player"]["home_ships"] == 70
    assert stats["player"]["total_ships"] == 80
    assert stats["player"]["active_missions"] == 1
    assert stats["ai"]["battles_won"] == 0


def test_validate_game_state_clean_over_several_turns():
    orchestrator = create_orchestrator()
    orchestrator.submit("player", attack(frigates=10))
    for _ in range(5):
        orchestrator.end_turn()
        assert orchestrator.validate_game_state() == []


def test_injected_rng_is_used():
    rng = GameRNG(3)
    orchestrator = TurnOrchestrator(rng=rng)
    assert orchestrator.rng is rng
