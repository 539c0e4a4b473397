"""Fleet mission tracker: mission lifecycle and home vulnerability.

A mission committed on turn T arrives on T+1, where it fights the target's
home garrison, and its survivors rejoin their own garrison on T+3. Ships
away on a mission cannot defend, cannot be scanned, and cannot be recalled.
"""

import logging
from dataclasses import dataclass, field

from ..models.fleet import FleetComposition, FleetMovement, MissionType
from ..utils.constants import MISSION_ARRIVAL_OFFSET, MISSION_RETURN_OFFSET

logger = logging.getLogger(__name__)


@dataclass
class MissionUpdate:
    """Movements grouped by the stage they reached this turn."""

    outbound: list[FleetMovement] = field(default_factory=list)
    combat: list[FleetMovement] = field(default_factory=list)
    returning: list[FleetMovement] = field(default_factory=list)
    arrived_home: list[FleetMovement] = field(default_factory=list)


def create_fleet_movement(composition: FleetComposition, target: str, turn: int) -> FleetMovement:
    """Create a mission committed on the given turn.

    Args:
        composition: Ships sent (already removed from the home garrison)
        target: Target identifier
        turn: Turn the attack commits

    Returns:
        Outbound FleetMovement arriving next turn and returning two turns later
    """
    return FleetMovement(
        composition=composition.copy(),
        target=target,
        arrival_turn=turn + MISSION_ARRIVAL_OFFSET,
        return_turn=turn + MISSION_RETURN_OFFSET,
        mission_type=MissionType.OUTBOUND,
        launch_turn=turn,
    )


def mission_stage(movement: FleetMovement, turn: int) -> MissionType | None:
    """Stage a movement is in on the given turn.

    Returns:
        OUTBOUND, COMBAT, or RETURNING; None once the return turn is reached
    """
    if turn < movement.arrival_turn:
        return MissionType.OUTBOUND
    if turn == movement.arrival_turn:
        return MissionType.COMBAT
    if turn < movement.return_turn:
        return MissionType.RETURNING
    return None


def update_mission_type(movement: FleetMovement, turn: int) -> FleetMovement:
    """Move a movement's mission_type to its stage for this turn (in place)."""
    stage = mission_stage(movement, turn)
    if stage is not None:
        movement.mission_type = stage
    return movement


def process_fleet_movements(movements: list[FleetMovement], turn: int) -> MissionUpdate:
    """Advance every movement to the given turn and group them by stage.

    Args:
        movements: A player's missions (mutated in place)
        turn: Current turn

    Returns:
        MissionUpdate; `combat` holds the movements that fight this turn and
        `arrived_home` holds those whose return turn has come
    """
    update = MissionUpdate()
    for movement in movements:
        stage = mission_stage(movement, turn)
        if stage is None:
            update.arrived_home.append(movement)
            continue
        update_mission_type(movement, turn)
        if stage == MissionType.OUTBOUND:
            update.outbound.append(movement)
        elif stage == MissionType.COMBAT:
            update.combat.append(movement)
        else:
            update.returning.append(movement)
    return update


def complete_combat_mission(
    movement: FleetMovement, survivors: FleetComposition
) -> FleetMovement | None:
    """Turn a movement that just fought into its return leg.

    Args:
        movement: Movement that fought this turn (mutated in place)
        survivors: Ships that survived the battle

    Returns:
        The returning movement, or None if nothing survived
    """
    if survivors.is_empty():
        return None
    movement.composition = survivors.copy()
    movement.mission_type = MissionType.RETURNING
    return movement


def is_fleet_in_transit(movement: FleetMovement, turn: int) -> bool:
    """True while a movement is outbound or returning."""
    return mission_stage(movement, turn) in (MissionType.OUTBOUND, MissionType.RETURNING)


def is_home_system_vulnerable(
    home_fleet: FleetComposition, movements: list[FleetMovement], turn: int
) -> bool:
    """Signal that part of the fleet is in transit.

    True while any movement is outbound or returning. A fleet fighting this
    turn is at the enemy system, not on the way, so it does not count.
    Advisory only; nothing prevents a thin garrison.
    """
    return any(is_fleet_in_transit(m, turn) for m in movements)


def get_counter_attack_window(movements: list[FleetMovement], turn: int) -> int:
    """Turns until the last away fleet is back home (0 if none are away)."""
    pending = [m.return_turn - turn for m in movements if m.return_turn > turn]
    return max(pending, default=0)


def get_visible_fleet(home_fleet: FleetComposition) -> FleetComposition:
    """What an opponent's scan can see: the home garrison only."""
    return home_fleet.copy()


def can_recall_fleet(movement: FleetMovement, turn: int) -> bool:
    """Missions can never be recalled once committed."""
    return False
