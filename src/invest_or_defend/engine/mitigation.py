"""Matching events against an organisation's implemented controls.

A control mitigates an event when it is implemented on the event's asset and
shares at least one security area with it. Controls are tried in purchase
order and the first match wins, even if a later control would be more
effective.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from invest_or_defend.models import Event, ExperiencedEvent, ImplementedControl, Organisation

logger = logging.getLogger(__name__)


def control_matches(control: ImplementedControl, event: Event) -> bool:
    """Check whether a control covers an event's asset and a security area."""
    if control.asset != event.asset:
        return False
    return any(area in event.security_areas for area in control.security_areas)


def find_mitigating_control(
    controls: Sequence[ImplementedControl],
    event: Event,
) -> Optional[ImplementedControl]:
    """Return the first control, in purchase order, that matches the event."""
    for control in controls:
        if control_matches(control, event):
            return control
    return None


def mitigated_cost(cost: float, effectiveness: float) -> float:
    """Residual cost after a control removes ``effectiveness`` of it.

    Examples:
        >>> mitigated_cost(1000.0, 0.25)
        750.0
    """
    return cost - cost * effectiveness


def apply_event(organisation: Organisation, event: Event) -> ExperiencedEvent:
    """Apply an event to an organisation.

    Debits the residual cost if a control mitigates the event, or the full
    cost otherwise; adds the amount mitigated to the control's running total;
    and appends the annotated event to the organisation's history. The
    organisation is modified in place and not persisted here.

    Returns:
        The event as experienced by the organisation
    """
    control = find_mitigating_control(organisation.controls, event)

    if control is not None:
        residual = mitigated_cost(event.cost, control.effectiveness)
        control.mitigation += event.cost - residual
        experienced = ExperiencedEvent(
            **event.model_dump(),
            mitigated=True,
            mitigated_by=control.id,
            mitigated_cost=residual,
        )
    else:
        experienced = ExperiencedEvent(**event.model_dump(), mitigated=False)

    organisation.balance -= experienced.cost_incurred
    organisation.events.append(experienced)

    logger.debug(
        f"Organisation {organisation.id}: event {event.id} "
        + (f"mitigated by {control.id}, " if control is not None else "unmitigated, ")
        + f"cost {experienced.cost_incurred:.2f}"
    )
    return experienced
