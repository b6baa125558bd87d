"""Game defaults for Invest or Defend.

This module is the single source of truth for the default game settings used
when a game is created without overriding them, and for the fixed ranges used
by the event generator.

Usage:
    from invest_or_defend.parameters import DEFAULT_MONEY_PER_TURN
"""

# =============================================================================
# GAME LENGTH AND INCOME
# =============================================================================

DEFAULT_MAX_TURNS = 12
"""Number of turns a game lasts.

The last simulation happens on turn ``max_turns``; the game is then ENDED.
"""

DEFAULT_MONEY_PER_TURN = 1000.0
"""Income credited to every organisation at the end of each simulated turn.

Credited after all events of the turn have been applied, so the same turn's
income never offsets that turn's losses.
"""

DEFAULT_STARTING_BALANCE = 0.0
"""Balance of a newly created organisation."""


# =============================================================================
# EVENT GENERATION
# =============================================================================

DEFAULT_MIN_NUM_OF_EVENTS = 1
DEFAULT_MAX_NUM_OF_EVENTS = 3
"""Inclusive bounds on the number of events generated per turn."""

DEFAULT_MIN_COST_PER_EVENT = 250.0
DEFAULT_MAX_COST_PER_EVENT = 3000.0
"""Inclusive bounds on the base cost of an event, before the threat actor's
cost modifier is applied."""

MIN_SECURITY_AREAS_PER_EVENT = 1
MAX_SECURITY_AREAS_PER_EVENT = 3
"""Inclusive bounds on the number of security areas tagging one event.

Capped at the number of security areas available in the game's source.
"""

COST_DECIMAL_PLACES = 2
"""Base costs are rounded to this many decimal places before the actor's cost
modifier is applied."""


# =============================================================================
# CATALOG
# =============================================================================

DEFAULT_SOURCE = "original"
"""Control and security area catalog used when a game does not name one."""

THREAT_ACTORS_SETTING = "threatActors"
ASSETS_SETTING = "assets"
"""Setting keys holding the threat actor and asset catalogs."""
