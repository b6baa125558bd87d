"""Command line interface for Invest or Defend."""

from .app import main, play_game

__all__ = ["main", "play_game"]
