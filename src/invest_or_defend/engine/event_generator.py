"""Incident event generation.

Each event is built from four independent draws:

1. a threat actor, weighted, filtered by game progress
2. a target asset, weighted, optionally limited to assets that some control
   in the game's source protects
3. one to three security areas of the game's source, without replacement
4. a base cost in the game's cost range, scaled by the actor's cost modifier
"""

from __future__ import annotations

import logging

from invest_or_defend.engine.catalog import SimulationCatalog
from invest_or_defend.engine.probability import select_weighted
from invest_or_defend.engine.randomness import (
    RandomSource,
    draw_int,
    draw_uniform,
    sample_without_replacement,
)
from invest_or_defend.models import Asset, Event, Game, SecurityArea, ThreatActor, security_area_sort_key
from invest_or_defend.parameters import (
    COST_DECIMAL_PLACES,
    MAX_SECURITY_AREAS_PER_EVENT,
    MIN_SECURITY_AREAS_PER_EVENT,
)
from invest_or_defend.storage import SimulationRepository

logger = logging.getLogger(__name__)


def generate_cost(
    rng: RandomSource,
    min_cost: float,
    max_cost: float,
    cost_modifier: float = 1.0,
) -> float:
    """Draw an event cost.

    The base cost is uniform in [min_cost, max_cost], rounded to two decimal
    places, then multiplied by the threat actor's cost modifier.
    """
    base_cost = round(draw_uniform(rng, min_cost, max_cost), COST_DECIMAL_PLACES)
    return base_cost * cost_modifier


def order_security_areas(
    selected: list[SecurityArea],
    catalog_order: tuple[SecurityArea, ...],
) -> list[SecurityArea]:
    """Sort security areas by number, breaking ties by catalog position."""
    position = {area.id: index for index, area in enumerate(catalog_order)}
    return sorted(
        selected,
        key=lambda area: (security_area_sort_key(area.number), position.get(area.id, len(position))),
    )


class EventGenerator:
    """Generates the incident events of a turn.

    Attributes:
        repository: Where generated events are persisted
        catalog: Catalog loaded for the current turn
    """

    def __init__(
        self,
        repository: SimulationRepository,
        catalog: SimulationCatalog,
        rng: RandomSource,
    ) -> None:
        self.repository = repository
        self.catalog = catalog
        self._random = rng

    def select_threat_actor(self, progress: float) -> ThreatActor:
        return select_weighted(self.catalog.threat_actors, self._random, progress)

    def select_asset(self, allow_unavoidable_incidents: bool) -> Asset:
        return select_weighted(
            self.catalog.candidate_assets(allow_unavoidable_incidents), self._random
        )

    def select_security_areas(self) -> list[SecurityArea]:
        """Pick between one and three distinct security areas, in number order."""
        count = draw_int(self._random, MIN_SECURITY_AREAS_PER_EVENT, MAX_SECURITY_AREAS_PER_EVENT)
        selected = sample_without_replacement(self._random, self.catalog.security_areas, count)
        return order_security_areas(selected, self.catalog.security_areas)

    def generate(self, game: Game) -> Event:
        """Generate and persist one event for the game's current turn."""
        threat_actor = self.select_threat_actor(game.progress)
        asset = self.select_asset(game.allow_unavoidable_incidents)
        security_areas = self.select_security_areas()
        cost = generate_cost(
            self._random,
            game.min_cost_per_event,
            game.max_cost_per_event,
            threat_actor.cost_modifier,
        )

        event = self.repository.create_event(Event(
            game=game.id,
            turn=game.current_turn,
            cost=cost,
            asset=asset.slug,
            threat_actor=threat_actor.slug,
            security_areas=tuple(area.id for area in security_areas),
        ))
        logger.debug(
            f"Game {game.id} turn {game.current_turn}: {threat_actor.slug} -> {asset.slug} "
            f"({', '.join(area.number for area in security_areas)}) cost {cost:.2f}"
        )
        return event

    def generate_turn(self, game: Game) -> list[Event]:
        """Generate every event of the game's current turn.

        The number of events is uniform in [min_num_of_events,
        max_num_of_events], both inclusive. Events are generated one after
        the other, in order.
        """
        count = draw_int(self._random, game.min_num_of_events, game.max_num_of_events)
        logger.info(f"Simulating turn {game.current_turn} of game {game.id}: {count} events")
        return [self.generate(game) for _ in range(count)]
