"""Invest or Defend models.

This module exports the core data structures for the game.
"""

from .catalog import (
    Asset,
    Control,
    ImplementedControl,
    SecurityArea,
    ThreatActor,
    new_id,
    security_area_sort_key,
)
from .event import Event, ExperiencedEvent
from .game import GAME_TYPE_LABELS, Game, GameState, GameType
from .organisation import Organisation

__all__ = [
    # Catalog
    "Asset",
    "Control",
    "ImplementedControl",
    "SecurityArea",
    "ThreatActor",
    "new_id",
    "security_area_sort_key",
    # Events
    "Event",
    "ExperiencedEvent",
    # Game
    "Game",
    "GameState",
    "GameType",
    "GAME_TYPE_LABELS",
    # Organisations
    "Organisation",
]
