"""Test helpers: a scripted random source and a small catalog."""

from invest_or_defend.models import Asset, Control, Game, Organisation, SecurityArea, ThreatActor
from invest_or_defend.parameters import ASSETS_SETTING, THREAT_ACTORS_SETTING


class ScriptedRandom:
    """Random source returning a fixed list of floats, in order.

    Raises AssertionError once the script runs out, so a test fails loudly
    if the simulation makes more draws than expected.
    """

    def __init__(self, values):
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        if not self._values:
            raise AssertionError(f"Scripted random values exhausted after {self.calls} draws")
        self.calls += 1
        return self._values.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._values)


# Small catalog used across the engine tests:
#   actors: criminal (always available), nation-state (from half way, cost x2)
#   assets: laptop, server (equal odds)
#   areas:  area-1 ("1"), area-2 ("2"), area-10 ("10") in that catalog order
#   controls: laptop-firewall (laptop, area-1, 25%), server-backup (server, area-2, 50%)

THREAT_ACTORS = [
    ThreatActor(slug="criminal", name="Criminal"),
    ThreatActor(slug="nation-state", name="Nation state", include_from=0.5, cost_modifier=2.0),
]
ASSETS = [Asset(slug="laptop", name="Laptop"), Asset(slug="server", name="Server")]
SECURITY_AREAS = [
    SecurityArea(id="area-1", number="1", name="Firewalls", source="original"),
    SecurityArea(id="area-2", number="2", name="Backups", source="original"),
    SecurityArea(id="area-10", number="10", name="Data protection", source="original"),
]
CONTROLS = [
    Control(id="laptop-firewall", name="Laptop firewall", cost=500.0, effectiveness=0.25,
            asset="laptop", security_areas=["area-1"], source="original"),
    Control(id="server-backup", name="Server backup", cost=1000.0, effectiveness=0.5,
            asset="server", security_areas=["area-2"], source="original"),
]


def seed_test_catalog(repository):
    """Store the small test catalog in a repository."""
    repository.save_setting(THREAT_ACTORS_SETTING, [a.model_dump(mode="json") for a in THREAT_ACTORS])
    repository.save_setting(ASSETS_SETTING, [a.model_dump(mode="json") for a in ASSETS])
    for area in SECURITY_AREAS:
        repository.save_security_area(area)
    for control in CONTROLS:
        repository.save_control(control)


def create_game(repository, organisations=1, **settings):
    """Create and store a game with fresh organisations.

    Returns:
        (game, [organisation, ...])
    """
    orgs = [Organisation(name=f"Org {i + 1}") for i in range(organisations)]
    game = Game(organisations=[org.id for org in orgs], **settings)
    for org in orgs:
        repository.save_organisation(org)
    repository.save_game(game)
    return game, orgs
