"""Per-turn simulation catalog.

The threat actor and asset settings, the security areas of the game's source
and the set of assets that have controls are loaded fresh for every turn, so
a settings change takes effect on the next turn without a restart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from invest_or_defend.engine.probability import filter_by_progress
from invest_or_defend.errors import ConfigurationError
from invest_or_defend.models import Asset, Game, SecurityArea, ThreatActor
from invest_or_defend.parameters import ASSETS_SETTING, THREAT_ACTORS_SETTING
from invest_or_defend.storage import SimulationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationCatalog:
    """Everything the event generator draws from.

    Attributes:
        source: Control and security area catalog identifier
        threat_actors: All configured threat actors
        assets: All configured assets
        assets_with_controls: Assets with at least one control in ``source``
        security_areas: Security areas of ``source`` in catalog order
    """

    source: str
    threat_actors: tuple[ThreatActor, ...]
    assets: tuple[Asset, ...]
    assets_with_controls: tuple[Asset, ...]
    security_areas: tuple[SecurityArea, ...]

    def candidate_assets(self, allow_unavoidable_incidents: bool) -> tuple[Asset, ...]:
        """Assets an event may target."""
        if allow_unavoidable_incidents:
            return self.assets
        return self.assets_with_controls


def filter_assets_with_controls(
    repository: SimulationRepository,
    assets: list[Asset],
    source: str,
) -> list[Asset]:
    """Keep the assets that have at least one control in ``source``."""
    return [asset for asset in assets if repository.count_controls(source, asset.slug) > 0]


def load_simulation_catalog(repository: SimulationRepository, game: Game) -> SimulationCatalog:
    """Load and check the catalog for the game's current turn.

    Raises:
        ConfigurationError: If any catalog the turn draws from is empty, or
            no threat actor is available at the game's progress
    """
    source = game.source
    threat_actors = [
        ThreatActor.model_validate(a) for a in repository.get_setting(THREAT_ACTORS_SETTING) or []
    ]
    assets = [Asset.model_validate(a) for a in repository.get_setting(ASSETS_SETTING) or []]
    security_areas = repository.find_security_areas(source)
    assets_with_controls = filter_assets_with_controls(repository, assets, source)

    if not threat_actors:
        raise ConfigurationError("No threat actors configured")
    if not assets:
        raise ConfigurationError("No assets configured")
    if not filter_by_progress(threat_actors, game.progress):
        raise ConfigurationError(f"No threat actors available at game progress {game.progress:.2f}")
    if not game.allow_unavoidable_incidents and not assets_with_controls:
        raise ConfigurationError(f"No assets have controls in source '{source}'")
    if not security_areas:
        raise ConfigurationError(f"No security areas in source '{source}'")

    logger.debug(
        f"Loaded catalog for source '{source}': {len(threat_actors)} threat actors, "
        f"{len(assets)} assets ({len(assets_with_controls)} with controls), "
        f"{len(security_areas)} security areas"
    )
    return SimulationCatalog(
        source=source,
        threat_actors=tuple(threat_actors),
        assets=tuple(assets),
        assets_with_controls=tuple(assets_with_controls),
        security_areas=tuple(security_areas),
    )
