"""Text command parser for human players.

This module parses typed commands like "build 10 frigates" or
"attack 20 5 0" into Command objects the orchestrator accepts.
"""

import re
from enum import Enum

from ..errors import UnknownTypeError
from ..models.command import (
    AttackCommand,
    BuildCommand,
    CancelCommand,
    Command,
    EndTurnCommand,
    ScanCommand,
)
from ..models.fleet import FleetComposition
from ..utils.constants import AI_HOME, MAX_BUILD_QUANTITY


class ErrorType(Enum):
    """Classification of command input errors."""

    UNKNOWN_COMMAND = "unknown_command"
    SYNTAX_ERROR = "syntax_error"
    VALIDATION_ERROR = "validation_error"


class CommandParseError(Exception):
    """Raised when command parsing fails with classification."""

    def __init__(self, error_type: ErrorType, message: str):
        """Initialize parse error.

        Args:
            error_type: Classification of the error
            message: Human-readable error message
        """
        self.error_type = error_type
        self.message = message
        super().__init__(message)


class MetaCommand(Enum):
    """Inputs handled by the input loop rather than the engine."""

    HELP = "help"
    STATUS = "status"
    LIST = "list"
    CLEAR = "clear"
    QUIT = "quit"


META_ALIASES = {
    "help": MetaCommand.HELP,
    "h": MetaCommand.HELP,
    "?": MetaCommand.HELP,
    "status": MetaCommand.STATUS,
    "st": MetaCommand.STATUS,
    "list": MetaCommand.LIST,
    "ls": MetaCommand.LIST,
    "clear": MetaCommand.CLEAR,
    "reset": MetaCommand.CLEAR,
    "quit": MetaCommand.QUIT,
    "exit": MetaCommand.QUIT,
    "q": MetaCommand.QUIT,
}

END_ALIASES = ("end", "endturn", "end_turn", "done", "pass", "wait")

BUILD_FORMAT = "Correct format: build <quantity> <frigate|cruiser|battleship|reactor|mine>"
ATTACK_FORMAT = "Correct format: attack <frigates> <cruisers> <battleships>"
SCAN_FORMAT = "Correct format: scan <basic|deep|advanced>"
CANCEL_FORMAT = "Correct format: cancel <queue index>"

HELP_TEXT = """Commands:
  build <qty> <type>        Queue frigates, cruisers, battleships, reactors, or mines
  attack <f> <c> <b>        Send ships against the enemy home system
  scan <basic|deep|adv>     Scan the enemy (1000 / 2500 / 4000 energy)
  cancel <index>            Cancel a queued build order (no refund)
  end                       Resolve the turn
  status                    Show your empire
  list                      Show commands queued this turn
  clear                     Drop commands queued this turn
  quit                      Leave the game"""


class CommandParser:
    """Parse typed commands into Commands."""

    def parse(self, text: str) -> Command | MetaCommand:
        """Parse a command string.

        Supported formats:
        - "build <qty> <type>"
        - "attack <frigates> <cruisers> <battleships> [target]"
        - "scan <basic|deep|advanced>"
        - "cancel <index>"
        - "end" (also "endturn", "end_turn", "done", "pass", "wait")

        Args:
            text: Command string to parse

        Returns:
            Command for the engine, or a MetaCommand for the input loop

        Raises:
            CommandParseError: If the input is empty, unknown, or malformed
        """
        cmd = text.strip().lower()
        if not cmd:
            raise CommandParseError(ErrorType.SYNTAX_ERROR, "Empty command")

        if cmd in META_ALIASES:
            return META_ALIASES[cmd]
        if cmd in END_ALIASES:
            return EndTurnCommand()

        parts = cmd.split()
        verb, args = parts[0], parts[1:]
        if verb == "build":
            return self._parse_build(args)
        if verb == "attack":
            return self._parse_attack(args)
        if verb == "scan":
            return self._parse_scan(args)
        if verb == "cancel":
            return self._parse_cancel(args)

        raise CommandParseError(ErrorType.UNKNOWN_COMMAND, f"Unknown command: '{verb}'")

    def _parse_int(self, value: str, what: str, usage: str) -> int:
        if not re.fullmatch(r"-?\d+", value):
            raise CommandParseError(
                ErrorType.SYNTAX_ERROR, f"Invalid {what}: '{value}' is not a number\n{usage}"
            )
        return int(value)

    def _parse_build(self, args: list[str]) -> BuildCommand:
        """Parse 'build <qty> <type>' (also accepts 'build <type> <qty>')."""
        if len(args) != 2:
            raise CommandParseError(ErrorType.SYNTAX_ERROR, f"Syntax error\n{BUILD_FORMAT}")

        quantity_text, type_text = args
        if not quantity_text.lstrip("-").isdigit() and type_text.lstrip("-").isdigit():
            quantity_text, type_text = type_text, quantity_text
        quantity = self._parse_int(quantity_text, "quantity", BUILD_FORMAT)
        if not 0 < quantity <= MAX_BUILD_QUANTITY:
            raise CommandParseError(
                ErrorType.VALIDATION_ERROR,
                f"Invalid quantity: must be between 1 and {MAX_BUILD_QUANTITY} (got {quantity})",
            )
        try:
            return BuildCommand(type_text, quantity)
        except UnknownTypeError:
            raise CommandParseError(
                ErrorType.VALIDATION_ERROR, f"Unknown build target: '{type_text}'\n{BUILD_FORMAT}"
            ) from None

    def _parse_attack(self, args: list[str]) -> AttackCommand:
        """Parse 'attack <frigates> <cruisers> <battleships> [target]'."""
        if len(args) not in (3, 4):
            raise CommandParseError(ErrorType.SYNTAX_ERROR, f"Syntax error\n{ATTACK_FORMAT}")

        counts = [self._parse_int(value, "ship count", ATTACK_FORMAT) for value in args[:3]]
        if any(count < 0 for count in counts):
            raise CommandParseError(
                ErrorType.VALIDATION_ERROR, "Invalid ship count: counts cannot be negative"
            )
        fleet = FleetComposition(*counts)
        if fleet.is_empty():
            raise CommandParseError(
                ErrorType.VALIDATION_ERROR, "Invalid attack: send at least one ship"
            )
        target = args[3] if len(args) == 4 else AI_HOME
        return AttackCommand(fleet=fleet, target=target)

    def _parse_scan(self, args: list[str]) -> ScanCommand:
        if len(args) != 1:
            raise CommandParseError(ErrorType.SYNTAX_ERROR, f"Syntax error\n{SCAN_FORMAT}")
        scan_type = "advanced" if args[0] == "adv" else args[0]
        try:
            return ScanCommand(scan_type)
        except UnknownTypeError:
            raise CommandParseError(
                ErrorType.VALIDATION_ERROR, f"Unknown scan type: '{args[0]}'\n{SCAN_FORMAT}"
            ) from None

    def _parse_cancel(self, args: list[str]) -> CancelCommand:
        if len(args) != 1:
            raise CommandParseError(ErrorType.SYNTAX_ERROR, f"Syntax error\n{CANCEL_FORMAT}")
        return CancelCommand(self._parse_int(args[0], "index", CANCEL_FORMAT))
