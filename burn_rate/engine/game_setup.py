"""Initial game state construction."""

from ..models import (
    EconomyState,
    FleetComposition,
    GameState,
    IntelligenceState,
    PlayerState,
    Resources,
    phase_for_turn,
)
from ..utils.config import EngineConfig
from ..utils.constants import AI, PLAYER, STARTING_TURN
from .economy import get_net_income


def create_player(side: str, config: EngineConfig) -> PlayerState:
    """Create one side's starting state.

    Both sides start with the same stock, no structures, an empty queue,
    and the configured starting garrison. Income starts at the projected
    net income so it is meaningful before the first turn resolves.
    """
    frigates, cruisers, battleships = config.starting_fleet
    player = PlayerState(
        side=side,
        resources=Resources(metal=config.starting_metal, energy=config.starting_energy),
        home_fleet=FleetComposition(frigates, cruisers, battleships),
        economy=EconomyState(),
        intelligence=IntelligenceState(),
    )
    net = get_net_income(player)
    player.resources.metal_income = net.metal
    player.resources.energy_income = net.energy
    return player


def create_game(config: EngineConfig | None = None) -> GameState:
    """Create a new game on turn 1.

    Args:
        config: Game settings (defaults if None)

    Returns:
        Fresh GameState
    """
    config = config or EngineConfig()
    return GameState(
        turn=STARTING_TURN,
        player=create_player(PLAYER, config),
        ai=create_player(AI, config),
        game_phase=phase_for_turn(STARTING_TURN),
    )
