#!/usr/bin/env python3
"""Burn Rate - Main entry point.

A turn-based space strategy game where every ship and structure keeps
costing resources, and the first side to lose its whole fleet (or run its
economy into the ground) loses.
"""

import argparse
import logging
import sys

from burn_rate.engine.ai import create_ai_state, play_ai_turn
from burn_rate.engine.turn_executor import TurnOrchestrator
from burn_rate.interface.display import DisplayManager
from burn_rate.interface.human_player import HumanPlayer
from burn_rate.utils.config import EngineConfig
from burn_rate.utils.constants import AI, AI_ARCHETYPES, DEFAULT_AI_ARCHETYPE, PLAYER
from burn_rate.utils.rng import GameRNG


class GameOrchestrator:
    """Manages the turn loop between a human (or auto persona) and the AI."""

    def __init__(self, config: EngineConfig, auto_archetype: str | None = None, max_turns=200):
        """Initialize game orchestrator.

        Args:
            config: Game settings
            auto_archetype: Persona playing the human's seat, or None for a human
            max_turns: Turn limit for auto games
        """
        self.config = config
        self.turns = TurnOrchestrator(config=config)
        # Personas draw from their own stream so their choices never shift combat rolls
        self.ai_rng = GameRNG(None if config.seed is None else config.seed + 1)
        self.ai_state = create_ai_state(config.ai_archetype, self.ai_rng)
        self.display = DisplayManager(PLAYER)
        self.max_turns = max_turns
        if auto_archetype is None:
            self.human = HumanPlayer(PLAYER)
            self.auto_state = None
        else:
            self.human = None
            self.auto_state = create_ai_state(auto_archetype, self.ai_rng)

    def run(self):
        """Main game loop.

        Returns:
            Final game state
        """
        print("\n" + "=" * 60)
        print("Burn Rate")
        print("=" * 60)
        print("\nGoal: Destroy the enemy fleet before your economy burns out.")
        print("Press Ctrl+C at any time to quit.\n")

        try:
            while not self.turns.is_game_over:
                if self.human is None and self.turns.current_turn > self.max_turns:
                    print(f"Turn limit ({self.max_turns}) reached.")
                    break
                self._collect_commands()
                result, game = self.turns.end_turn()
                if not result.success:
                    print(f"Error resolving turn: {'; '.join(result.errors)}")
                    print("Game cannot continue. Exiting...")
                    sys.exit(1)
                self.display.show_turn_report(
                    result.combat_events, result.scan_results.get(PLAYER)
                )
        except KeyboardInterrupt:
            print("\n\nGame interrupted by user. Exiting...")
            sys.exit(0)

        game = self.turns.get_game_state()
        if game.is_game_over:
            self.display.show_victory(game)
        return game

    def _collect_commands(self) -> None:
        # The AI commits first; the human never sees its pending commands
        _, self.ai_state = play_ai_turn(self.turns, self.ai_state, self.ai_rng, side=AI)
        if self.human is not None:
            self.human.play_turn(self.turns)
        else:
            _, self.auto_state = play_ai_turn(
                self.turns, self.auto_state, self.ai_rng, side=PLAYER
            )
            self.display.show_status(self.turns.get_game_state())


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Burn Rate - Turn-based space strategy with a burning economy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  # Human vs hybrid AI
  %(prog)s --archetype aggressor            # Human vs aggressor AI
  %(prog)s --seed 42                        # Reproducible game
  %(prog)s --auto economist --seed 7        # Economist persona plays your seat
        """,
    )
    parser.add_argument(
        "--archetype",
        choices=AI_ARCHETYPES,
        default=DEFAULT_AI_ARCHETYPE,
        help=f"AI opponent personality (default: {DEFAULT_AI_ARCHETYPE})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for combat, scans, and AI decisions (default: unseeded)",
    )
    parser.add_argument(
        "--auto",
        choices=AI_ARCHETYPES,
        default=None,
        metavar="ARCHETYPE",
        help="Let a persona play the human seat (AI vs AI)",
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=200,
        help="Turn limit for --auto games (default: 200)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (economy warnings, accepted commands, scan rolls)",
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.debug else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    config = EngineConfig(ai_archetype=args.archetype, seed=args.seed)
    orchestrator = GameOrchestrator(config, auto_archetype=args.auto, max_turns=args.max_turns)
    orchestrator.run()


if __name__ == "__main__":
    main()
