"""Catalog models: threat actors, assets, security areas and controls.

Catalog entries are configuration. They are read by the simulation but never
modified by it; the only catalog-derived object that changes during a game is
``ImplementedControl.mitigation``.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field, field_validator


def new_id() -> str:
    """Generate a document ID."""
    return uuid.uuid4().hex


class ThreatActor(BaseModel):
    """An actor to which incidents are attributed.

    Attributes:
        slug: Unique identifier, stored on events
        name: Display name
        probability: Selection weight in [0, 1]; None means 1/n
        include_from: Game progress (0-1) below which the actor never appears
        cost_modifier: Multiplier applied to the base cost of its events
    """

    slug: str
    name: str = ""
    probability: float | None = Field(default=None, ge=0.0, le=1.0)
    include_from: float | None = Field(default=None, ge=0.0, le=1.0)
    cost_modifier: float = Field(default=1.0, ge=0.0)
    description: str | None = None


class Asset(BaseModel):
    """An asset that incidents target and controls protect.

    Attributes:
        slug: Unique identifier, stored on events and controls
        name: Display name
        probability: Selection weight in [0, 1]; None means 1/n
        location: Where the asset lives (display only)
    """

    slug: str
    name: str = ""
    probability: float | None = Field(default=None, ge=0.0, le=1.0)
    location: str = "Organisation"
    description: str | None = None


class SecurityArea(BaseModel):
    """A classification shared by events and the controls that mitigate them.

    ``number`` does not have to be numeric; it is however the area is
    identified in the imported standard (e.g. "1.3" or "A.5.1").
    """

    id: str = Field(default_factory=new_id)
    number: str
    name: str
    source: str
    summary: str | None = None
    parent: str | None = None


def security_area_sort_key(number: str) -> tuple:
    """Sort key for dotted security area numbers.

    Numeric segments compare numerically and sort before non-numeric ones,
    so "2" < "10" and "1.2" < "1.10".

    Examples:
        >>> sorted(["10", "2", "1.10", "1.2"], key=security_area_sort_key)
        ['1.2', '1.10', '2', '10']
    """
    key = []
    for segment in number.split("."):
        if segment.isdigit():
            key.append((0, int(segment), ""))
        else:
            key.append((1, 0, segment))
    return tuple(key)


class Control(BaseModel):
    """A security control organisations can implement.

    Attributes:
        cost: Purchase price
        effectiveness: Fraction of an event's cost removed on mitigation.
            Values above 1 are read as percentages (50.0 -> 0.5).
        asset: The asset the control is implemented on (None = organisation-wide)
        security_areas: IDs of the security areas the control covers
        source: Catalog the control belongs to
    """

    id: str = Field(default_factory=new_id)
    number: str = ""
    name: str
    summary: str | None = None
    cost: float = Field(ge=0.0)
    effectiveness: float = Field(ge=0.0, le=1.0)
    asset: str | None = None
    security_areas: list[str] = Field(default_factory=list)
    source: str

    @field_validator("effectiveness", mode="before")
    @classmethod
    def percentage_to_fraction(cls, v: float) -> float:
        """Convert percentage effectiveness values to fractions."""
        if isinstance(v, bool) or not isinstance(v, (int, float, str)):
            raise ValueError(f"effectiveness must be a number, got {v!r}")
        v = float(v)
        if v > 1.0:
            return v / 100.0
        return v


class ImplementedControl(Control):
    """A control purchased by an organisation.

    Attributes:
        turn_implemented: Turn on which the control was bought
        mitigation: Total amount of event cost this control has removed so far
    """

    turn_implemented: int = Field(default=0, ge=0)
    mitigation: float = Field(default=0.0, ge=0.0)

    @classmethod
    def from_control(cls, control: Control, turn: int) -> ImplementedControl:
        """Create an implemented copy of a catalog control."""
        return cls(**control.model_dump(), turn_implemented=turn, mitigation=0.0)
