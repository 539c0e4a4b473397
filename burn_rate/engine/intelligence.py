"""Scanning and intelligence.

Scans are informational. They read the target's home garrison (fleets away
on missions are invisible) and produce a ScanResult for the scanner's
history; nothing in turn resolution ever reads scan data.

Tiers:
    basic     1000 energy  total ship count, +/-30%
    deep      2500 energy  per-type counts +/-10%, structure counts
    advanced  4000 energy  fleet size category and a read on strategic intent

The target's misinformation chance can corrupt any scan: fleet numbers swing
up to +/-50% and accuracy is halved.
"""

import logging
from dataclasses import dataclass

from ..models.economy import StructureType
from ..models.fleet import FleetComposition, UnitType
from ..models.intelligence import IntelligenceState, ScanResult, ScanType, parse_scan_type
from ..models.player import PlayerState
from ..utils.constants import (
    BASIC_SCAN_VARIANCE,
    CONFIDENCE_DECAY_RATE,
    DEEP_SCAN_VARIANCE,
    FLEET_SIZE_MEDIUM,
    FLEET_SIZE_SMALL,
    MIN_CONFIDENCE,
    MISINFORMATION_VARIANCE,
    SCAN_ACCURACY,
    SCAN_HISTORY_LIMIT,
)
from ..utils.rng import GameRNG
from .missions import get_visible_fleet

logger = logging.getLogger(__name__)


@dataclass
class IntelligenceGap:
    """How stale a player's picture of the opponent is.

    Attributes:
        last_known_fleet: Fleet from the most recent per-type scan
        last_scan_turn: Turn of the most recent scan (0 if never scanned)
        estimated_in_transit: Ships that may have left unseen since then
        confidence: 1.0 for a scan this turn, minus 0.1 per turn since
    """

    last_known_fleet: FleetComposition
    last_scan_turn: int
    estimated_in_transit: int
    confidence: float


def _vary(value: int, variance: float, rng: GameRNG) -> int:
    return max(0, round(value * rng.uniform(1 - variance, 1 + variance)))


def categorize_fleet_size(total_ships: int) -> str:
    if total_ships < FLEET_SIZE_SMALL:
        return "small"
    if total_ships < FLEET_SIZE_MEDIUM:
        return "medium"
    return "large"


def determine_strategic_intent(target: PlayerState) -> str:
    """Read the target's likely plan from its garrison and construction queue."""
    fleet = target.home_fleet
    queue = target.economy.construction_queue
    military_orders = sum(1 for order in queue if isinstance(order.unit_type, UnitType))
    economic_orders = sum(1 for order in queue if isinstance(order.unit_type, StructureType))

    if military_orders > economic_orders and fleet.total() > 100:
        return "Major offensive operations planned within 2-3 turns. Heavy military buildup detected."
    if economic_orders > military_orders:
        return "Focusing on economic expansion. Defensive posture likely for next few turns."
    if fleet.total() < 50:
        return "Rebuilding phase detected. Vulnerable to immediate pressure."
    if fleet.battleships > fleet.frigates + fleet.cruisers:
        return "Heavy battleship focus suggests anti-frigate strategy preparation."
    if fleet.frigates > fleet.cruisers + fleet.battleships:
        return "Frigate swarm tactics detected. Likely targeting cruiser-heavy fleets."
    return "Balanced development approach. Strategic intentions unclear."


def _basic_scan(target: PlayerState, turn: int, rng: GameRNG) -> ScanResult:
    visible = get_visible_fleet(target.home_fleet)
    return ScanResult(
        scan_type=ScanType.BASIC,
        timestamp=turn,
        fleet_data={"total": _vary(visible.total(), BASIC_SCAN_VARIANCE, rng)},
        accuracy=SCAN_ACCURACY["basic"],
    )


def _deep_scan(target: PlayerState, turn: int, rng: GameRNG) -> ScanResult:
    visible = get_visible_fleet(target.home_fleet)
    return ScanResult(
        scan_type=ScanType.DEEP,
        timestamp=turn,
        fleet_data={
            name: _vary(count, DEEP_SCAN_VARIANCE, rng)
            for name, count in visible.to_dict().items()
        },
        economic_data={"reactors": target.economy.reactors, "mines": target.economy.mines},
        accuracy=SCAN_ACCURACY["deep"],
    )


def _advanced_scan(target: PlayerState, turn: int) -> ScanResult:
    visible = get_visible_fleet(target.home_fleet)
    return ScanResult(
        scan_type=ScanType.ADVANCED,
        timestamp=turn,
        fleet_size_category=categorize_fleet_size(visible.total()),
        strategic_intent=determine_strategic_intent(target),
        accuracy=SCAN_ACCURACY["advanced"],
    )


def apply_misinformation(result: ScanResult, chance: float, rng: GameRNG) -> ScanResult:
    """Corrupt a scan result with the given probability (in place).

    Args:
        result: Fresh scan result
        chance: Target's misinformation chance in [0, 1]
        rng: Random source

    Returns:
        The same result, possibly marked as misinformation
    """
    if rng.random() >= chance:
        return result
    result.is_misinformation = True
    result.fleet_data = {
        name: _vary(count, MISINFORMATION_VARIANCE, rng)
        for name, count in result.fleet_data.items()
    }
    result.accuracy *= 0.5
    result.base_accuracy = result.accuracy
    return result


def perform_scan(
    target: PlayerState, scan_type, turn: int, rng: GameRNG | None = None
) -> ScanResult:
    """Scan the target's home system.

    Args:
        target: Side being scanned
        scan_type: basic, deep, or advanced
        turn: Current turn
        rng: Random source (unseeded if None)

    Returns:
        ScanResult for the scanner's history

    Raises:
        UnknownTypeError: If scan_type is unknown
    """
    rng = rng or GameRNG()
    scan_type = parse_scan_type(scan_type)
    if scan_type == ScanType.BASIC:
        result = _basic_scan(target, turn, rng)
    elif scan_type == ScanType.DEEP:
        result = _deep_scan(target, turn, rng)
    else:
        result = _advanced_scan(target, turn)
    result = apply_misinformation(result, target.intelligence.misinformation_chance, rng)
    logger.debug(
        f"{scan_type.value} scan of {target.side} on turn {turn} "
        f"(misinformation={result.is_misinformation})"
    )
    return result


def store_scan_result(intel: IntelligenceState, result: ScanResult) -> None:
    """Append a scan to the history, keeping only the newest ten."""
    result.data_age = 0
    intel.scan_history.append(result)
    intel.scan_history = intel.scan_history[-SCAN_HISTORY_LIMIT:]
    intel.last_scan_turn = result.timestamp
    intel.scan_accuracy = result.accuracy
    if {"frigates", "cruisers", "battleships"} <= result.fleet_data.keys():
        intel.known_enemy_fleet = FleetComposition.from_dict(result.fleet_data)


def age_intelligence_data(intel: IntelligenceState, turn: int) -> None:
    """Recompute every scan's age and decay its accuracy.

    accuracy = max(0.1, base_accuracy - 0.1 * age)
    """
    for scan in intel.scan_history:
        scan.data_age = max(0, turn - scan.timestamp)
        decayed = scan.base_accuracy - scan.data_age * CONFIDENCE_DECAY_RATE
        scan.accuracy = max(MIN_CONFIDENCE, decayed)


def calculate_intelligence_gap(intel: IntelligenceState, turn: int) -> IntelligenceGap:
    """Estimate how much the scanner may be missing.

    If more than two turns have passed since the last scan, up to 30% of the
    last known fleet may be away on missions unseen.
    """
    latest = intel.latest_scan
    if latest is None:
        return IntelligenceGap(FleetComposition(), 0, 0, 0.0)

    turns_since = turn - latest.timestamp
    confidence = max(0.0, 1 - turns_since * CONFIDENCE_DECAY_RATE)
    known = intel.known_enemy_fleet
    in_transit = int(known.total() * 0.3) if turns_since > 2 else 0
    return IntelligenceGap(
        last_known_fleet=known.copy(),
        last_scan_turn=latest.timestamp,
        estimated_in_transit=in_transit,
        confidence=confidence,
    )
