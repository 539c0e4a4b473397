"""Command-line interface: text command parsing, display, and input loop."""
