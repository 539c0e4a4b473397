"""Resource ledger: income arithmetic and build affordability.

Net income per resource is:

    structure income - construction drain - home fleet upkeep

where structure income is the base income plus 500 per mine (metal) or
reactor (energy). Ships away on missions pay no upkeep. Income is recomputed
every turn and added to the stock, which is then clamped at zero.
"""

import logging
from dataclasses import dataclass, field

from ..models.economy import (
    BuildOrder,
    EconomyState,
    ResourceAmount,
    StructureType,
    parse_structure_type,
    scaled_structure_cost,
    structure_stats,
)
from ..models.fleet import FleetComposition, unit_stats
from ..models.player import PlayerState
from ..utils.constants import (
    BASE_ENERGY_INCOME,
    BASE_METAL_INCOME,
    CONSTRUCTION_DRAIN_WARNING_RATIO,
    HOARDING_INCOME_THRESHOLD,
    HOARDING_STOCK_THRESHOLD,
    LOW_INCOME_WARNING,
    SALVAGE_REFUND_TURNS,
    STRUCTURE_VIABILITY_TURNS,
    UPKEEP_WARNING_RATIO,
)

logger = logging.getLogger(__name__)

BASE_INCOME = ResourceAmount(BASE_METAL_INCOME, BASE_ENERGY_INCOME)


@dataclass
class IncomeBreakdown:
    """Every term of a player's net income."""

    base_income: ResourceAmount
    structure_bonus: ResourceAmount
    construction_drain: ResourceAmount
    fleet_upkeep: ResourceAmount
    net_income: ResourceAmount


@dataclass
class Affordability:
    """Result of checking a prospective build order.

    Attributes:
        can_afford: Stock (minus reservations) covers the build commitment
        can_sustain: Net income stays positive with the order's drain added
        errors: Human-readable reasons for each failed check
    """

    can_afford: bool
    can_sustain: bool
    errors: list[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.can_afford and self.can_sustain


@dataclass
class EconomicReport:
    """Warnings and recommendations about an economy's health."""

    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def calculate_structure_income(economy: EconomyState) -> ResourceAmount:
    """Base income plus the bonus from every completed reactor and mine."""
    income = BASE_INCOME
    income += structure_stats(StructureType.MINE).income_bonus.times(economy.mines)
    income += structure_stats(StructureType.REACTOR).income_bonus.times(economy.reactors)
    return income


def calculate_construction_drain(queue: list[BuildOrder]) -> ResourceAmount:
    """Sum of the per-turn drain of every order in the queue."""
    drain = ResourceAmount()
    for order in queue:
        drain += order.resource_drain_per_turn
    return drain


def calculate_fleet_upkeep(home_fleet: FleetComposition) -> ResourceAmount:
    """Per-turn upkeep of the home garrison."""
    upkeep = ResourceAmount()
    for unit_type, count in home_fleet.items():
        stats = unit_stats(unit_type)
        upkeep += ResourceAmount(stats.upkeep_metal, stats.upkeep_energy).times(count)
    return upkeep


def get_income_breakdown(
    player: PlayerState, construction_drain: ResourceAmount | None = None
) -> IncomeBreakdown:
    """Compute every term of a player's net income without mutating anything.

    Args:
        player: Player to evaluate
        construction_drain: Drain to charge instead of the current queue's drain

    Returns:
        IncomeBreakdown with the net income and each of its terms
    """
    structure_income = calculate_structure_income(player.economy)
    if construction_drain is None:
        construction_drain = calculate_construction_drain(player.economy.construction_queue)
    upkeep = calculate_fleet_upkeep(player.home_fleet)
    return IncomeBreakdown(
        base_income=BASE_INCOME,
        structure_bonus=structure_income - BASE_INCOME,
        construction_drain=construction_drain,
        fleet_upkeep=upkeep,
        net_income=structure_income - construction_drain - upkeep,
    )


def get_net_income(
    player: PlayerState, construction_drain: ResourceAmount | None = None
) -> ResourceAmount:
    return get_income_breakdown(player, construction_drain).net_income


def calculate_income(
    player: PlayerState, construction_drain: ResourceAmount | None = None
) -> ResourceAmount:
    """Apply one turn of income to a player's resources.

    Sets metal_income/energy_income to the net income, adds it to the stock,
    clamps the stock at zero, and updates the stalled-turn counter.

    Args:
        player: Player to update (mutated in place)
        construction_drain: Drain captured while advancing the construction
            queue this turn; orders that just completed still pay for the
            turn they were being built. Defaults to the current queue.

    Returns:
        Net income applied this turn
    """
    net = get_net_income(player, construction_drain)
    resources = player.resources
    resources.metal_income = net.metal
    resources.energy_income = net.energy
    resources.metal = max(0, resources.metal + net.metal)
    resources.energy = max(0, resources.energy + net.energy)

    if net.is_positive():
        player.stalled_turns = 0
    else:
        player.stalled_turns += 1
        logger.debug(
            f"{player.side} economy stalled ({net.metal}M/{net.energy}E), "
            f"{player.stalled_turns} turn(s) running"
        )
    return net


def is_economy_stalled(player: PlayerState) -> bool:
    """True if net metal or net energy income is not positive."""
    return not get_net_income(player).is_positive()


def build_commitment(order: BuildOrder, upfront_cost: ResourceAmount) -> ResourceAmount:
    """Stock a build order ties up when it is accepted.

    The order must be able to pay its whole construction drain
    (per-turn drain times turns remaining) from the stock, and never less
    than its upfront cost.

    Args:
        order: Order being placed
        upfront_cost: Cost paid when the order commits

    Returns:
        Per-resource maximum of the upfront cost and the total drain
    """
    total_drain = order.resource_drain_per_turn.times(order.turns_remaining)
    return ResourceAmount(
        max(upfront_cost.metal, total_drain.metal),
        max(upfront_cost.energy, total_drain.energy),
    )


def can_afford_and_sustain_build_order(
    player: PlayerState,
    order: BuildOrder,
    upfront_cost: ResourceAmount,
    reserved: ResourceAmount | None = None,
    pending_drain: ResourceAmount | None = None,
) -> Affordability:
    """Check a prospective build order against the player's economy.

    Both checks must pass to accept the order:
    (a) the stock, less anything already reserved this turn, covers the
        order's commitment: its drain over every remaining build turn
        (at least the upfront cost);
    (b) net income, less the drain of orders already accepted this turn and
        this order's drain, stays positive for metal and energy.

    Args:
        player: Player placing the order
        order: Order to check
        upfront_cost: Cost paid when the order commits
        reserved: Resources already promised to earlier commands this turn
        pending_drain: Per-turn drain of orders accepted earlier this turn

    Returns:
        Affordability with both check results and error messages
    """
    reserved = reserved or ResourceAmount()
    pending_drain = pending_drain or ResourceAmount()
    errors = []

    needed = build_commitment(order, upfront_cost)
    available = player.resources.stock - reserved
    can_afford = available.metal >= needed.metal and available.energy >= needed.energy
    if not can_afford:
        errors.append(
            f"Insufficient resources: need {needed.metal}M/{needed.energy}E "
            f"over {order.turns_remaining} build turn(s), "
            f"have {available.metal}M/{available.energy}E available"
        )

    projected = get_net_income(player) - pending_drain - order.resource_drain_per_turn
    can_sustain = projected.is_positive()
    if not can_sustain:
        errors.append(
            f"Unsustainable drain: net income would drop to {projected.metal}M/{projected.energy}E per turn"
        )

    return Affordability(can_afford=can_afford, can_sustain=can_sustain, errors=errors)


def calculate_salvage_refund(casualties: FleetComposition) -> ResourceAmount:
    """Upkeep returned to the owner of ships destroyed in battle."""
    return calculate_fleet_upkeep(casualties).times(SALVAGE_REFUND_TURNS)


def structure_payback_turns(structure_type, existing: int) -> float:
    """Turns of bonus income needed to pay back the next structure's cost.

    Only the resource the structure produces counts: a reactor's energy cost
    against its energy bonus, a mine's metal cost against its metal bonus.

    Args:
        structure_type: Reactor or mine
        existing: Structures of this type already built

    Returns:
        Cost in the produced resource divided by the per-turn bonus
    """
    structure_type = parse_structure_type(structure_type)
    cost = scaled_structure_cost(structure_type, existing)
    bonus = structure_stats(structure_type).income_bonus
    if structure_type == StructureType.REACTOR:
        return cost.energy / bonus.energy
    return cost.metal / bonus.metal


def is_structure_viable(
    structure_type, existing: int, max_payback_turns: int = STRUCTURE_VIABILITY_TURNS
) -> bool:
    """True if the next structure pays for itself within max_payback_turns."""
    return structure_payback_turns(structure_type, existing) <= max_payback_turns


def _check_structure_viability(player: PlayerState, report: EconomicReport) -> None:
    for structure_type in (StructureType.REACTOR, StructureType.MINE):
        built = player.economy.structure_count(structure_type)
        if built > 0 and not is_structure_viable(structure_type, built):
            report.warnings.append(
                f"Additional {structure_type.value}s may not be cost-effective "
                f"(payback > {STRUCTURE_VIABILITY_TURNS} turns)"
            )


def _check_hoarding(player: PlayerState, net: ResourceAmount, report: EconomicReport) -> None:
    resources = player.resources
    if resources.metal > HOARDING_STOCK_THRESHOLD and net.metal > HOARDING_INCOME_THRESHOLD:
        report.recommendations.append("Consider investing excess metal in fleet or economic expansion")
    if resources.energy > HOARDING_STOCK_THRESHOLD and net.energy > HOARDING_INCOME_THRESHOLD:
        report.recommendations.append("Consider investing excess energy in scans or fleet")


def validate_economic_state(player: PlayerState) -> EconomicReport:
    """Inspect an economy for trouble signs.

    Args:
        player: Player to inspect

    Returns:
        EconomicReport with warnings and matching recommendations
    """
    report = EconomicReport()
    breakdown = get_income_breakdown(player)
    net = breakdown.net_income

    if not net.is_positive():
        report.warnings.append("Economy is stalled: net income is not positive")
        report.recommendations.append("Cancel construction or let upkeep-heavy ships see combat")
    elif net.metal < LOW_INCOME_WARNING or net.energy < LOW_INCOME_WARNING:
        report.warnings.append(f"Net income critically low ({net.metal}M/{net.energy}E)")
        report.recommendations.append("Build mines or reactors before more ships")

    drain = breakdown.construction_drain
    if (
        drain.metal > BASE_INCOME.metal * CONSTRUCTION_DRAIN_WARNING_RATIO
        or drain.energy > BASE_INCOME.energy * CONSTRUCTION_DRAIN_WARNING_RATIO
    ):
        report.warnings.append("Construction drain exceeds 80% of base income")
        report.recommendations.append("Spread construction over more turns")

    upkeep = breakdown.fleet_upkeep
    if (
        upkeep.metal > BASE_INCOME.metal * UPKEEP_WARNING_RATIO
        or upkeep.energy > BASE_INCOME.energy * UPKEEP_WARNING_RATIO
    ):
        report.warnings.append("Fleet upkeep exceeds 70% of base income")
        report.recommendations.append("Send part of the garrison on a mission")

    _check_structure_viability(player, report)
    _check_hoarding(player, net, report)
    return report
