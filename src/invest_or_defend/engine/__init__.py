"""Simulation engine for Invest or Defend.

This module contains the turn simulation logic:
- probability: weighted selection of threat actors and assets
- event_generator: incident event generation
- mitigation: matching events against implemented controls
- turn_simulator: applying a turn's events and income to every organisation
- lifecycle: the simulate-turn entry point and competitive readiness

Usage:
    from invest_or_defend.engine import GameLifecycle
    from invest_or_defend.storage import get_repository, seed_catalog

    repository = get_repository()
    seed_catalog(repository)

    lifecycle = GameLifecycle(repository, random_seed=42)
    game = lifecycle.simulate_turn(game_id)
"""

from invest_or_defend.engine.catalog import (
    SimulationCatalog,
    filter_assets_with_controls,
    load_simulation_catalog,
)
from invest_or_defend.engine.event_generator import EventGenerator, generate_cost
from invest_or_defend.engine.lifecycle import GameLifecycle
from invest_or_defend.engine.mitigation import (
    apply_event,
    control_matches,
    find_mitigating_control,
    mitigated_cost,
)
from invest_or_defend.engine.probability import (
    filter_by_progress,
    normalised_probabilities,
    select_weighted,
)
from invest_or_defend.engine.randomness import (
    RandomSource,
    draw_int,
    draw_uniform,
    sample_without_replacement,
)
from invest_or_defend.engine.turn_simulator import OrganisationTurn, TurnReport, TurnSimulator

__all__ = [
    # Lifecycle
    "GameLifecycle",
    # Turn simulation
    "TurnSimulator",
    "TurnReport",
    "OrganisationTurn",
    # Event generation
    "EventGenerator",
    "generate_cost",
    "SimulationCatalog",
    "load_simulation_catalog",
    "filter_assets_with_controls",
    # Mitigation
    "apply_event",
    "control_matches",
    "find_mitigating_control",
    "mitigated_cost",
    # Probability
    "filter_by_progress",
    "normalised_probabilities",
    "select_weighted",
    # Randomness
    "RandomSource",
    "draw_int",
    "draw_uniform",
    "sample_without_replacement",
]
