"""Tests for fleet mission lifecycle."""

from burn_rate.engine.missions import (
    can_recall_fleet,
    complete_combat_mission,
    create_fleet_movement,
    get_counter_attack_window,
    is_fleet_in_transit,
    is_home_system_vulnerable,
    mission_stage,
    process_fleet_movements,
)
from burn_rate.models.fleet import FleetComposition, MissionType


def test_create_fleet_movement_timeline():
    """Committed on T: arrives T+1, returns T+3."""
    movement = create_fleet_movement(FleetComposition(10, 0, 0), "ai_system", turn=4)
    assert movement.launch_turn == 4
    assert movement.arrival_turn == 5
    assert movement.return_turn == 7
    assert movement.mission_type == MissionType.OUTBOUND


def test_create_fleet_movement_copies_composition():
    fleet = FleetComposition(10, 0, 0)
    movement = create_fleet_movement(fleet, "ai_system", turn=1)
    fleet.add_units("frigate", 5)
    assert movement.composition.frigates == 10


def test_mission_stage_over_time():
    movement = create_fleet_movement(FleetComposition(1, 0, 0), "ai_system", turn=1)
    assert mission_stage(movement, 1) == MissionType.OUTBOUND
    assert mission_stage(movement, 2) == MissionType.COMBAT
    assert mission_stage(movement, 3) == MissionType.RETURNING
    assert mission_stage(movement, 4) is None


def test_process_fleet_movements_groups_by_stage():
    outbound = create_fleet_movement(FleetComposition(1, 0, 0), "ai_system", turn=5)
    fighting = create_fleet_movement(FleetComposition(2, 0, 0), "ai_system", turn=4)
    returning = create_fleet_movement(FleetComposition(3, 0, 0), "ai_system", turn=3)
    home = create_fleet_movement(FleetComposition(4, 0, 0), "ai_system", turn=2)

    update = process_fleet_movements([outbound, fighting, returning, home], turn=5)

    assert update.outbound == [outbound]
    assert update.combat == [fighting]
    assert update.returning == [returning]
    assert update.arrived_home == [home]
    assert fighting.mission_type == MissionType.COMBAT
    assert returning.mission_type == MissionType.RETURNING


def test_complete_combat_mission_keeps_survivors():
    movement = create_fleet_movement(FleetComposition(10, 5, 0), "ai_system", turn=1)
    result = complete_combat_mission(movement, FleetComposition(7, 2, 0))
    assert result is movement
    assert movement.composition == FleetComposition(7, 2, 0)
    assert movement.mission_type == MissionType.RETURNING


def test_complete_combat_mission_without_survivors():
    movement = create_fleet_movement(FleetComposition(10, 0, 0), "ai_system", turn=1)
    assert complete_combat_mission(movement, FleetComposition()) is None


def test_is_fleet_in_transit():
    movement = create_fleet_movement(FleetComposition(1, 0, 0), "ai_system", turn=1)
    assert is_fleet_in_transit(movement, 1)
    assert not is_fleet_in_transit(movement, 2)
    assert is_fleet_in_transit(movement, 3)
    assert not is_fleet_in_transit(movement, 4)


def test_home_system_vulnerable_while_fleet_in_transit():
    home = FleetComposition(40, 20, 10)
    movement = create_fleet_movement(FleetComposition(10, 0, 0), "ai_system", turn=1)
    assert not is_home_system_vulnerable(home, [], 1)
    assert is_home_system_vulnerable(home, [movement], 1)
    assert is_home_system_vulnerable(home, [movement], 3)
    assert not is_home_system_vulnerable(home, [movement], 4)


def test_fleet_in_combat_does_not_leave_home_vulnerable():
    home = FleetComposition(40, 20, 10)
    fighting = create_fleet_movement(FleetComposition(10, 0, 0), "ai_system", turn=1)
    assert not is_home_system_vulnerable(home, [fighting], 2)

    outbound = create_fleet_movement(FleetComposition(5, 0, 0), "ai_system", turn=2)
    assert is_home_system_vulnerable(home, [fighting, outbound], 2)


def test_counter_attack_window():
    early = create_fleet_movement(FleetComposition(1, 0, 0), "ai_system", turn=1)
    late = create_fleet_movement(FleetComposition(1, 0, 0), "ai_system", turn=2)
    assert get_counter_attack_window([early, late], 2) == 3
    assert get_counter_attack_window([], 2) == 0


def test_missions_cannot_be_recalled():
    movement = create_fleet_movement(FleetComposition(1, 0, 0), "ai_system", turn=1)
    assert not can_recall_fleet(movement, 1)
