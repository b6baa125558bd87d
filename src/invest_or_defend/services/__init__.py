"""Services for Invest or Defend."""

from .game_service import GameService

__all__ = ["GameService"]
