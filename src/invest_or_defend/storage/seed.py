"""Catalog seeding.

Loads a catalog file into a repository. A catalog file is a JSON object:

    {
        "threat_actors": [{"slug": ..., "probability": ..., ...}],
        "assets": [{"slug": ..., ...}],
        "security_areas": [{"id": ..., "number": ..., "name": ..., "source": ...}],
        "controls": [{"id": ..., "name": ..., "cost": ..., "source": ..., ...}]
    }

Threat actors and assets are stored as settings; security areas and controls
are stored as catalog documents, in file order.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Optional

from invest_or_defend.models import Asset, Control, SecurityArea, ThreatActor
from invest_or_defend.parameters import ASSETS_SETTING, THREAT_ACTORS_SETTING

from .repository import SimulationRepository

logger = logging.getLogger(__name__)


def default_catalog_path() -> Path:
    """Path of the catalog shipped with the package."""
    return Path(str(resources.files("invest_or_defend") / "data" / "default_catalog.json"))


def load_catalog_file(path: Optional[str | Path] = None) -> dict:
    """Read and validate a catalog file.

    Args:
        path: Catalog file; the packaged default if None

    Returns:
        Dict of validated model lists keyed like the file
    """
    path = Path(path) if path is not None else default_catalog_path()
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    return {
        "threat_actors": [ThreatActor.model_validate(a) for a in data.get("threat_actors", [])],
        "assets": [Asset.model_validate(a) for a in data.get("assets", [])],
        "security_areas": [SecurityArea.model_validate(s) for s in data.get("security_areas", [])],
        "controls": [Control.model_validate(c) for c in data.get("controls", [])],
    }


def seed_catalog(repository: SimulationRepository, path: Optional[str | Path] = None) -> dict:
    """Store a catalog file in a repository.

    Returns:
        The validated catalog, as returned by ``load_catalog_file``
    """
    catalog = load_catalog_file(path)

    with repository.transaction():
        repository.save_setting(
            THREAT_ACTORS_SETTING,
            [actor.model_dump(mode="json") for actor in catalog["threat_actors"]],
        )
        repository.save_setting(
            ASSETS_SETTING,
            [asset.model_dump(mode="json") for asset in catalog["assets"]],
        )
        for security_area in catalog["security_areas"]:
            repository.save_security_area(security_area)
        for control in catalog["controls"]:
            repository.save_control(control)

    logger.info(
        f"Seeded catalog: {len(catalog['threat_actors'])} threat actors, "
        f"{len(catalog['assets'])} assets, {len(catalog['security_areas'])} security areas, "
        f"{len(catalog['controls'])} controls"
    )
    return catalog
