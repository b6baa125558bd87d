"""Route blueprints for the webapp."""

from . import games, organisations, settings

__all__ = ["games", "organisations", "settings"]
