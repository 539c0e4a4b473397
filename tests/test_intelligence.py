"""Tests for scanning and intelligence."""

import pytest

from burn_rate.engine.construction import create_structure_build_order
from burn_rate.engine.intelligence import (
    age_intelligence_data,
    apply_misinformation,
    calculate_intelligence_gap,
    categorize_fleet_size,
    determine_strategic_intent,
    perform_scan,
    store_scan_result,
)
from burn_rate.engine.missions import create_fleet_movement
from burn_rate.models.economy import EconomyState, Resources, StructureType
from burn_rate.models.fleet import FleetComposition
from burn_rate.models.intelligence import IntelligenceState, ScanResult, ScanType
from burn_rate.models.player import PlayerState
from burn_rate.utils.rng import GameRNG


def create_target(fleet=None, misinformation_chance=0.0, **economy):
    """Scan target with misinformation disabled by default."""
    return PlayerState(
        side="ai",
        resources=Resources(metal=10000, energy=10000),
        home_fleet=fleet or FleetComposition(50, 20, 10),
        economy=EconomyState(**economy),
        intelligence=IntelligenceState(misinformation_chance=misinformation_chance),
    )


def test_basic_scan_reports_total_within_variance():
    target = create_target()
    for seed in range(20):
        result = perform_scan(target, "basic", turn=3, rng=GameRNG(seed))
        assert result.scan_type == ScanType.BASIC
        assert result.timestamp == 3
        assert 56 <= result.fleet_data["total"] <= 104
        assert result.accuracy == pytest.approx(0.7)
        assert not result.is_misinformation


def test_deep_scan_reports_types_and_structures():
    target = create_target(reactors=2, mines=1)
    result = perform_scan(target, ScanType.DEEP, turn=1, rng=GameRNG(7))

    assert set(result.fleet_data) == {"frigates", "cruisers", "battleships"}
    assert 45 <= result.fleet_data["frigates"] <= 55
    assert result.economic_data == {"reactors": 2, "mines": 1}
    assert result.accuracy == pytest.approx(0.9)


def test_advanced_scan_reports_category_and_intent():
    target = create_target()
    result = perform_scan(target, "advanced", turn=1, rng=GameRNG(1))
    assert result.fleet_size_category == "small"
    assert result.strategic_intent
    assert result.fleet_data == {}


def test_scan_ignores_fleets_on_missions():
    """Ships away on a mission are invisible to scans."""
    target = create_target(fleet=FleetComposition())
    target.missions.append(
        create_fleet_movement(FleetComposition(500, 0, 0), "player_home", turn=1)
    )
    result = perform_scan(target, "basic", turn=1, rng=GameRNG(2))
    assert result.fleet_data["total"] == 0


def test_misinformation_halves_accuracy():
    result = ScanResult(
        scan_type=ScanType.BASIC, timestamp=1, fleet_data={"total": 100}, accuracy=0.7
    )
    apply_misinformation(result, chance=1.0, rng=GameRNG(4))
    assert result.is_misinformation
    assert result.accuracy == pytest.approx(0.35)
    assert 50 <= result.fleet_data["total"] <= 150


def test_no_misinformation_with_zero_chance():
    result = ScanResult(scan_type=ScanType.BASIC, timestamp=1, fleet_data={"total": 100})
    apply_misinformation(result, chance=0.0, rng=GameRNG(4))
    assert not result.is_misinformation
    assert result.fleet_data == {"total": 100}


@pytest.mark.parametrize(
    "total,category", [(0, "small"), (99, "small"), (100, "medium"), (499, "medium"), (500, "large")]
)
def test_categorize_fleet_size(total, category):
    assert categorize_fleet_size(total) == category


def test_strategic_intent_economic_focus():
    target = create_target()
    target.economy.construction_queue.append(
        create_structure_build_order(StructureType.MINE, 1, existing=0)
    )
    assert "economic expansion" in determine_strategic_intent(target)


def test_strategic_intent_rebuilding():
    target = create_target(fleet=FleetComposition(10, 5, 0))
    assert "Rebuilding" in determine_strategic_intent(target)


def test_store_scan_result_caps_history():
    intel = IntelligenceState()
    for turn in range(1, 15):
        store_scan_result(intel, ScanResult(scan_type=ScanType.BASIC, timestamp=turn))
    assert len(intel.scan_history) == 10
    assert intel.scan_history[0].timestamp == 5
    assert intel.last_scan_turn == 14


def test_store_deep_scan_updates_known_fleet():
    intel = IntelligenceState()
    result = ScanResult(
        scan_type=ScanType.DEEP,
        timestamp=2,
        fleet_data={"frigates": 48, "cruisers": 21, "battleships": 9},
        accuracy=0.9,
    )
    store_scan_result(intel, result)
    assert intel.known_enemy_fleet == FleetComposition(48, 21, 9)
    assert intel.scan_accuracy == pytest.approx(0.9)


def test_age_intelligence_decays_accuracy_to_floor():
    intel = IntelligenceState()
    store_scan_result(intel, ScanResult(scan_type=ScanType.DEEP, timestamp=1, accuracy=0.9))

    age_intelligence_data(intel, turn=4)
    scan = intel.scan_history[0]
    assert scan.data_age == 3
    assert scan.accuracy == pytest.approx(0.6)

    age_intelligence_data(intel, turn=30)
    assert scan.accuracy == pytest.approx(0.1)


def test_aging_is_not_cumulative():
    """Aging twice at the same turn gives the same accuracy."""
    intel = IntelligenceState()
    store_scan_result(intel, ScanResult(scan_type=ScanType.DEEP, timestamp=1, accuracy=0.9))
    age_intelligence_data(intel, turn=3)
    age_intelligence_data(intel, turn=3)
    assert intel.scan_history[0].accuracy == pytest.approx(0.7)


def test_intelligence_gap_without_scans():
    gap = calculate_intelligence_gap(IntelligenceState(), turn=5)
    assert gap.last_scan_turn == 0
    assert gap.confidence == 0.0


def test_intelligence_gap_estimates_ships_in_transit():
    intel = IntelligenceState()
    store_scan_result(
        intel,
        ScanResult(
            scan_type=ScanType.DEEP,
            timestamp=1,
            fleet_data={"frigates": 60, "cruisers": 30, "battleships": 10},
        ),
    )
    fresh = calculate_intelligence_gap(intel, turn=2)
    assert fresh.estimated_in_transit == 0
    assert fresh.confidence == pytest.approx(0.9)

    stale = calculate_intelligence_gap(intel, turn=5)
    assert stale.estimated_in_transit == 30
