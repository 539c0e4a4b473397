"""Construction queue: build order creation and per-turn advancement."""

import logging

from ..models.command import CommandResult
from ..models.economy import (
    BuildOrder,
    ResourceAmount,
    StructureType,
    parse_buildable,
    scaled_structure_cost,
    structure_stats,
)
from ..models.fleet import UnitType, unit_stats
from ..models.player import PlayerState
from ..utils.constants import CONSTRUCTION_DRAIN_MULTIPLIER
from .economy import calculate_construction_drain

logger = logging.getLogger(__name__)


def create_unit_build_order(unit_type, quantity: int) -> BuildOrder:
    """Create a build order for warships.

    Units under construction drain twice their steady-state upkeep per turn.

    Args:
        unit_type: Frigate, cruiser, or battleship
        quantity: Number of ships

    Returns:
        New BuildOrder with the unit's full build time remaining
    """
    stats = unit_stats(unit_type)
    drain = ResourceAmount(stats.upkeep_metal, stats.upkeep_energy).times(
        CONSTRUCTION_DRAIN_MULTIPLIER * quantity
    )
    return BuildOrder(
        unit_type=unit_type,
        quantity=quantity,
        turns_remaining=stats.build_time,
        resource_drain_per_turn=drain,
    )


def create_structure_build_order(structure_type, quantity: int, existing: int) -> BuildOrder:
    """Create a build order for reactors or mines.

    Args:
        structure_type: Reactor or mine
        quantity: Number of structures
        existing: Structures of this type already built (drives cost scaling)

    Returns:
        New BuildOrder draining the scaled cost per structure each turn
    """
    stats = structure_stats(structure_type)
    drain = scaled_structure_cost(structure_type, existing).times(quantity)
    return BuildOrder(
        unit_type=structure_type,
        quantity=quantity,
        turns_remaining=stats.build_time,
        resource_drain_per_turn=drain,
    )


def structures_in_progress(player: PlayerState, structure_type) -> int:
    """Structures of one type sitting in the construction queue."""
    structure_type = parse_buildable(structure_type)
    return sum(
        order.quantity
        for order in player.economy.construction_queue
        if order.unit_type == structure_type
    )


def _pricing_count(player: PlayerState, structure_type, pending: int) -> int:
    # Built, queued, and ordered earlier this turn all push the price up
    return (
        player.economy.structure_count(structure_type)
        + structures_in_progress(player, structure_type)
        + pending
    )


def build_order_for(player: PlayerState, buildable, quantity: int, pending: int = 0) -> BuildOrder:
    """Create the right kind of build order for a unit or structure.

    Args:
        player: Player placing the order
        buildable: Unit or structure type
        quantity: Number to build
        pending: Structures of the same type ordered earlier this turn
    """
    buildable = parse_buildable(buildable)
    if isinstance(buildable, StructureType):
        existing = _pricing_count(player, buildable, pending)
        return create_structure_build_order(buildable, quantity, existing)
    return create_unit_build_order(buildable, quantity)


def upfront_cost(player: PlayerState, buildable, quantity: int, pending: int = 0) -> ResourceAmount:
    """Cost paid when a build order commits.

    Structures are priced from everything already built, queued, or ordered
    earlier this turn, so back-to-back orders keep climbing the cost curve.

    Args:
        player: Player placing the order
        buildable: Unit or structure type
        quantity: Number to build
        pending: Structures of the same type ordered earlier this turn

    Returns:
        Total upfront cost
    """
    buildable = parse_buildable(buildable)
    if isinstance(buildable, StructureType):
        existing = _pricing_count(player, buildable, pending)
        return scaled_structure_cost(buildable, existing).times(quantity)
    stats = unit_stats(buildable)
    return ResourceAmount(stats.cost_metal, stats.cost_energy).times(quantity)


def add_build_order(player: PlayerState, order: BuildOrder) -> None:
    """Append an already-paid order to the queue."""
    player.economy.construction_queue.append(order)


def cancel_build_order(player: PlayerState, index: int) -> CommandResult:
    """Remove an order from the queue. Nothing is refunded.

    Args:
        player: Player owning the queue
        index: Position in the queue

    Returns:
        CommandResult; an out-of-range index is a rule violation
    """
    queue = player.economy.construction_queue
    if not 0 <= index < len(queue):
        return CommandResult.rejected("Invalid build order index")
    order = queue.pop(index)
    return CommandResult.ok(f"Cancelled {order.quantity} {order.unit_type.value}(s)")


def _complete_order(player: PlayerState, order: BuildOrder) -> None:
    if isinstance(order.unit_type, UnitType):
        player.home_fleet.add_units(order.unit_type, order.quantity)
    elif order.unit_type == StructureType.REACTOR:
        player.economy.reactors += order.quantity
    else:
        player.economy.mines += order.quantity


def process_construction(player: PlayerState) -> tuple[ResourceAmount, list[BuildOrder]]:
    """Advance every order in the queue by one turn.

    Orders reaching zero turns remaining leave the queue and are applied:
    units join the home garrison, structures increment their counter.
    Completion is additive, so the order among orders finishing together
    does not matter.

    Args:
        player: Player whose queue advances (mutated in place)

    Returns:
        Tuple of (drain of every order under construction this turn,
        orders completed this turn)
    """
    queue = player.economy.construction_queue
    drain = calculate_construction_drain(queue)

    remaining = []
    completed = []
    for order in queue:
        order = order.advanced()
        if order.is_complete:
            completed.append(order)
        else:
            remaining.append(order)
    player.economy.construction_queue = remaining

    for order in completed:
        _complete_order(player, order)
        logger.info(f"{player.side} completed {order.quantity} {order.unit_type.value}(s)")

    return drain, completed
