"""Tests for victory conditions."""

from burn_rate.engine.game_setup import create_game
from burn_rate.engine.missions import create_fleet_movement
from burn_rate.engine.victory import (
    ONGOING,
    check_fleet_elimination,
    check_victory_conditions,
    evaluate_victory,
    is_economically_collapsed,
)
from burn_rate.models.fleet import FleetComposition

EMPTY = FleetComposition()


def test_fleet_elimination_requires_empty_home_and_missions():
    mission = create_fleet_movement(FleetComposition(1, 0, 0), "ai_system", turn=1)
    assert check_fleet_elimination(EMPTY, [])
    assert not check_fleet_elimination(FleetComposition(1, 0, 0), [])
    assert not check_fleet_elimination(EMPTY, [mission])


def test_check_victory_ongoing():
    home = FleetComposition(1, 0, 0)
    assert check_victory_conditions(home, [], home, []) == ONGOING


def test_check_victory_player_wins_when_ai_eliminated():
    assert check_victory_conditions(FleetComposition(1, 0, 0), [], EMPTY, []) == "player"


def test_check_victory_ai_wins_when_player_eliminated():
    assert check_victory_conditions(EMPTY, [], FleetComposition(0, 0, 1), []) == "ai"


def test_fleet_away_on_mission_is_not_eliminated():
    """An empty garrison with ships still on a mission keeps the side alive."""
    mission = create_fleet_movement(FleetComposition(5, 0, 0), "ai_system", turn=1)
    assert check_victory_conditions(EMPTY, [mission], FleetComposition(1, 0, 0), []) == ONGOING


def test_mutual_elimination_defender_policy():
    assert check_victory_conditions(EMPTY, [], EMPTY, [], defender="player") == "player"
    assert check_victory_conditions(EMPTY, [], EMPTY, [], defender="ai") == "ai"


def test_mutual_elimination_defender_policy_without_battle_favors_ai():
    assert check_victory_conditions(EMPTY, [], EMPTY, [], defender=None) == "ai"


def test_mutual_elimination_draw_policy():
    result = check_victory_conditions(EMPTY, [], EMPTY, [], defender="player", policy="draw")
    assert result == "draw"


def test_economic_collapse_needs_empty_stocks_and_stall():
    game = create_game()
    player = game.player
    player.resources.metal = 0
    player.resources.energy = 0
    assert not is_economically_collapsed(player)

    player.stalled_turns = 1
    assert is_economically_collapsed(player)
    assert not is_economically_collapsed(player, required_turns=3)

    player.resources.energy = 1
    assert not is_economically_collapsed(player)


def test_evaluate_victory_military():
    game = create_game()
    game.ai.home_fleet = FleetComposition()
    result = evaluate_victory(game)
    assert result.game_ended
    assert result.winner == "player"
    assert result.victory_type == "military"


def test_evaluate_victory_economic():
    game = create_game()
    game.player.resources.metal = 0
    game.player.resources.energy = 0
    game.player.stalled_turns = 2
    result = evaluate_victory(game)
    assert result.game_ended
    assert result.winner == "ai"
    assert result.victory_type == "economic"


def test_evaluate_victory_military_checked_before_economic():
    game = create_game()
    game.player.resources.metal = 0
    game.player.resources.energy = 0
    game.player.stalled_turns = 2
    game.ai.home_fleet = FleetComposition()
    result = evaluate_victory(game)
    assert result.winner == "player"
    assert result.victory_type == "military"


def test_evaluate_victory_ongoing():
    result = evaluate_victory(create_game())
    assert not result.game_ended
    assert result.winner is None
