"""Burn Rate: a turn-based economy and fleet strategy game."""

__version__ = "0.1.0"
