"""Game model and the enums describing its lifecycle.

The game loop runs as follows:

- PURCHASING: organisations buy controls; the only state in which a turn
  can be requested.
- SIMULATING: events are generated and applied to every organisation.
- RESULTS: client-side display state, never set by the server.
- ENDED: terminal; no further actions.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from invest_or_defend.models.catalog import new_id
from invest_or_defend.parameters import (
    DEFAULT_MAX_COST_PER_EVENT,
    DEFAULT_MAX_NUM_OF_EVENTS,
    DEFAULT_MAX_TURNS,
    DEFAULT_MIN_COST_PER_EVENT,
    DEFAULT_MIN_NUM_OF_EVENTS,
    DEFAULT_MONEY_PER_TURN,
    DEFAULT_SOURCE,
)


class GameState(Enum):
    """Current state of a game."""

    PURCHASING = "purchasing"
    SIMULATING = "simulating"
    RESULTS = "results"  # Client display only
    ENDED = "ended"


class GameType(Enum):
    """How organisations and players are arranged in a game.

    - SINGLE_PLAYER: one organisation, one player
    - COOPERATIVE: one organisation, several players
    - COMPETITIVE: several organisations, one player each; a turn is only
      simulated once every organisation has asked for it
    """

    SINGLE_PLAYER = "single-player"
    COOPERATIVE = "cooperative"
    COMPETITIVE = "competitive"


GAME_TYPE_LABELS = {
    GameType.SINGLE_PLAYER: "single-player",
    GameType.COOPERATIVE: "co-operative multiplayer",
    GameType.COMPETITIVE: "competitive multiplayer",
}


class Game(BaseModel):
    """A game and its simulation settings.

    Attributes:
        game_type: Arrangement of organisations and players
        current_turn: Turn the game is on (1 to max_turns)
        max_turns: Number of turns in the game
        money_per_turn: Income credited to each organisation per turn
        state: Current lifecycle state
        source: Control and security area catalog in use
        min_num_of_events / max_num_of_events: Inclusive bounds on events per turn
        min_cost_per_event / max_cost_per_event: Inclusive bounds on base event cost
        allow_unavoidable_incidents: Whether events may target assets that no
            control in the source protects
        show_available_controls: Display flag for clients
        organisations: IDs of the organisations in the game
        ready_organisations: Competitive games only; organisations that asked
            to simulate the current turn
        events: IDs of every event generated in the game
    """

    id: str = Field(default_factory=new_id)
    game_type: GameType = GameType.SINGLE_PLAYER
    current_turn: int = Field(default=1, ge=1)
    max_turns: int = Field(default=DEFAULT_MAX_TURNS, ge=1)
    money_per_turn: float = DEFAULT_MONEY_PER_TURN
    state: GameState = GameState.PURCHASING
    source: str = DEFAULT_SOURCE
    min_num_of_events: int = Field(default=DEFAULT_MIN_NUM_OF_EVENTS, ge=0)
    max_num_of_events: int = Field(default=DEFAULT_MAX_NUM_OF_EVENTS, ge=0)
    min_cost_per_event: float = Field(default=DEFAULT_MIN_COST_PER_EVENT, ge=0.0)
    max_cost_per_event: float = Field(default=DEFAULT_MAX_COST_PER_EVENT, ge=0.0)
    allow_unavoidable_incidents: bool = True
    show_available_controls: bool = True
    organisations: list[str] = Field(default_factory=list)
    ready_organisations: list[str] = Field(default_factory=list)
    events: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_ranges(self) -> Game:
        """Validate min/max pairs and the turn counter."""
        if self.min_num_of_events > self.max_num_of_events:
            raise ValueError(
                f"min_num_of_events ({self.min_num_of_events}) exceeds "
                f"max_num_of_events ({self.max_num_of_events})"
            )
        if self.min_cost_per_event > self.max_cost_per_event:
            raise ValueError(
                f"min_cost_per_event ({self.min_cost_per_event}) exceeds "
                f"max_cost_per_event ({self.max_cost_per_event})"
            )
        if self.current_turn > self.max_turns:
            raise ValueError(
                f"current_turn ({self.current_turn}) exceeds max_turns ({self.max_turns})"
            )
        return self

    @property
    def progress(self) -> float:
        """Fraction of the game played so far, used to unlock threat actors."""
        return self.current_turn / self.max_turns

    @property
    def is_ended(self) -> bool:
        return self.state == GameState.ENDED

    @property
    def is_last_turn(self) -> bool:
        return self.current_turn >= self.max_turns

    def mark_ready(self, organisation_id: str) -> bool:
        """Add an organisation to the readiness list.

        Returns:
            True if the organisation was added, False if it was already ready
        """
        if organisation_id in self.ready_organisations:
            return False
        self.ready_organisations.append(organisation_id)
        return True

    def all_ready(self) -> bool:
        """Check whether every organisation in the game is ready."""
        return set(self.organisations) <= set(self.ready_organisations)
