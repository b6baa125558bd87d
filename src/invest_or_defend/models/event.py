"""Event models.

An ``Event`` is generated once per incident per turn and never changes. When
it is applied to an organisation, a copy annotated with the mitigation
outcome is stored on the organisation as an ``ExperiencedEvent``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from invest_or_defend.models.catalog import new_id


class Event(BaseModel):
    """A generated incident.

    Attributes:
        game: ID of the game the event occurred in
        turn: Turn on which it occurred
        cost: Base (unmitigated) cost, after the actor's cost modifier
        asset: Slug of the targeted asset
        threat_actor: Slug of the attributed threat actor
        security_areas: IDs of the security areas tagging the event
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    game: str
    turn: int = Field(ge=1)
    cost: float = Field(ge=0.0)
    asset: str
    threat_actor: str
    security_areas: tuple[str, ...] = ()


class ExperiencedEvent(Event):
    """An event as experienced by one organisation.

    Attributes:
        mitigated: Whether an implemented control matched the event
        mitigated_by: ID of the matching control
        mitigated_cost: Residual cost after mitigation (None if unmitigated)
    """

    mitigated: bool = False
    mitigated_by: str | None = None
    mitigated_cost: float | None = None

    @property
    def cost_incurred(self) -> float:
        """Amount actually debited from the organisation."""
        if self.mitigated:
            return self.mitigated_cost
        return self.cost
