"""JSON API for Invest or Defend."""

from .app import create_app

__all__ = ["create_app"]
