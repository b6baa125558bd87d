"""Invest or Defend: turn simulation server for a security-investment game."""

__version__ = "0.1.0"
