"""Request bodies accepted by the API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from invest_or_defend.models import GameType


class GameSettings(BaseModel):
    """Settings a client may choose when creating a game."""

    model_config = ConfigDict(extra="forbid")

    game_type: GameType = GameType.SINGLE_PLAYER
    max_turns: Optional[int] = Field(default=None, ge=1)
    money_per_turn: Optional[float] = None
    source: Optional[str] = None
    min_num_of_events: Optional[int] = Field(default=None, ge=0)
    max_num_of_events: Optional[int] = Field(default=None, ge=0)
    min_cost_per_event: Optional[float] = Field(default=None, ge=0.0)
    max_cost_per_event: Optional[float] = Field(default=None, ge=0.0)
    allow_unavoidable_incidents: Optional[bool] = None
    show_available_controls: Optional[bool] = None


class CreateGameRequest(BaseModel):
    organisation_name: str = Field(min_length=1)
    settings: GameSettings = Field(default_factory=GameSettings)


class AddOrganisationRequest(BaseModel):
    name: str = Field(min_length=1)


class SimulateTurnRequest(BaseModel):
    game_id: str
    organisation_id: Optional[str] = None


class PurchaseControlRequest(BaseModel):
    control_id: str
