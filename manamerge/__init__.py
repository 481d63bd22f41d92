"""Mana Merge: simulation core of a grid-based merge idle game."""

__version__ = "0.1.0"
