"""Human player controller for CLI interaction.

This module provides the HumanPlayer class which reads typed commands and
submits them to the orchestrator until the player ends the turn.
"""

from ..engine.turn_executor import TurnOrchestrator
from ..models.command import Command, EndTurnCommand
from ..utils.constants import PLAYER
from .command_parser import CommandParseError, CommandParser, ErrorType, MetaCommand
from .display import DisplayManager


class HumanPlayer:
    """Human player controller class.

    Commands are submitted as soon as they are typed, so rule violations
    (unaffordable builds, ships already committed) are reported right away.
    """

    def __init__(self, side: str = PLAYER, input_func=input):
        """Initialize human player controller.

        Args:
            side: Side this human controls
            input_func: Prompt function (replaceable in tests)
        """
        self.side = side
        self.display = DisplayManager(side)
        self.parser = CommandParser()
        self._input = input_func

    def _format_error_message(self, error_type: ErrorType, message: str) -> str:
        formatted = f"Error: {message}"
        if error_type == ErrorType.UNKNOWN_COMMAND:
            formatted += "\n\nAvailable commands: build, attack, scan, cancel, end, list, clear, help"
            formatted += "\nExample: build 10 frigates"
        return formatted

    def _show_queued_commands(self, commands: list[Command]) -> None:
        if not commands:
            print("No commands queued")
            return
        print(f"Queued commands ({len(commands)}):")
        for index, command in enumerate(commands, 1):
            print(f"  {index}. {command}")

    def play_turn(self, orchestrator: TurnOrchestrator) -> None:
        """Read and submit commands until the player ends the turn.

        Args:
            orchestrator: Game being played

        Raises:
            SystemExit: If the player quits
        """
        game = orchestrator.get_game_state()
        self.display.show_status(game)
        print("Enter commands (type 'end' to resolve the turn, 'help' for commands):")

        while True:
            try:
                text = self._input(f"[Turn {game.turn}] > ")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting game.")
                raise SystemExit(0) from None

            if not text.strip():
                continue

            try:
                parsed = self.parser.parse(text)
            except CommandParseError as e:
                print(self._format_error_message(e.error_type, e.message))
                continue

            if parsed == MetaCommand.HELP:
                self.display.show_help()
            elif parsed == MetaCommand.STATUS:
                self.display.show_status(orchestrator.get_game_state())
            elif parsed == MetaCommand.LIST:
                self._show_queued_commands(orchestrator.pending(self.side))
            elif parsed == MetaCommand.CLEAR:
                count = len(orchestrator.pending(self.side))
                orchestrator.clear_pending(self.side)
                print(f"Cleared {count} command{'s' if count != 1 else ''}")
            elif parsed == MetaCommand.QUIT:
                print("\nExiting game. Thanks for playing!")
                raise SystemExit(0)
            elif isinstance(parsed, EndTurnCommand):
                count = len(orchestrator.pending(self.side))
                print(f"Ending turn with {count} command{'s' if count != 1 else ''}...")
                return
            else:
                result = orchestrator.submit(self.side, parsed)
                if result.success:
                    print(f"Queued: {parsed}")
                else:
                    for error in result.errors:
                        print(self._format_error_message(ErrorType.VALIDATION_ERROR, error))
