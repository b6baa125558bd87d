"""Game service - the operations the API and CLI call into.

Wraps the repository and the game lifecycle behind plain methods that take
and return models.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from invest_or_defend.engine import GameLifecycle, RandomSource
from invest_or_defend.errors import InvalidRequestError, NotFoundError, StateViolationError
from invest_or_defend.models import (
    GAME_TYPE_LABELS,
    Asset,
    Control,
    Game,
    GameState,
    GameType,
    ImplementedControl,
    Organisation,
    ThreatActor,
)
from invest_or_defend.parameters import ASSETS_SETTING, THREAT_ACTORS_SETTING
from invest_or_defend.storage import SimulationRepository

logger = logging.getLogger(__name__)

SETTING_MODELS = {
    THREAT_ACTORS_SETTING: ThreatActor,
    ASSETS_SETTING: Asset,
}


class GameService:
    """Game management over a repository.

    Attributes:
        repository: Storage backend
        lifecycle: Turn simulation entry point
    """

    def __init__(
        self,
        repository: SimulationRepository,
        rng: Optional[RandomSource] = None,
        random_seed: Optional[int] = None,
    ) -> None:
        self.repository = repository
        self.lifecycle = GameLifecycle(repository, rng=rng, random_seed=random_seed)

    @staticmethod
    def get_game_types() -> list[dict[str, str]]:
        """List the game types with their display labels."""
        return [{"id": game_type.value, "name": GAME_TYPE_LABELS[game_type]} for game_type in GameType]

    def create_game(self, settings: dict[str, Any], organisation_name: str) -> Game:
        """Create a game together with its first organisation.

        Args:
            settings: Game fields to override (max_turns, game_type, ...)
            organisation_name: Name of the initial organisation

        Raises:
            pydantic.ValidationError: If the settings are invalid
        """
        organisation = Organisation(name=organisation_name)
        game = Game.model_validate({
            **settings,
            "organisations": [organisation.id],
            "ready_organisations": [],
            "events": [],
        })
        if game.state != GameState.PURCHASING or game.current_turn != 1:
            raise InvalidRequestError("New games must start purchasing on turn 1")

        with self.repository.transaction():
            self.repository.save_organisation(organisation)
            self.repository.save_game(game)

        logger.info(f"Created {game.game_type.value} game {game.id} with organisation {organisation.id}")
        return game

    def get_game(self, game_id: str) -> Game:
        return self.repository.get_game(game_id)

    def get_organisations(self, game: Game) -> list[Organisation]:
        return [self.repository.get_organisation(org_id) for org_id in game.organisations]

    def add_organisation(self, game_id: str, name: str) -> Game:
        """Create a new organisation and add it to a game.

        Only allowed before the first turn has been simulated.
        """
        with self.lifecycle.locked(game_id), self.repository.transaction():
            game = self.repository.get_game(game_id)
            if game.game_type != GameType.COMPETITIVE and game.organisations:
                raise InvalidRequestError(
                    f"{GAME_TYPE_LABELS[game.game_type]} games have a single organisation"
                )
            if game.state != GameState.PURCHASING or game.current_turn != 1:
                raise StateViolationError(f"Game {game_id} has already started")

            organisation = Organisation(name=name)
            game.organisations.append(organisation.id)
            self.repository.save_organisation(organisation)
            self.repository.save_game(game)

        logger.info(f"Added organisation {organisation.id} to game {game_id}")
        return game

    def get_organisation(self, organisation_id: str) -> Organisation:
        return self.repository.get_organisation(organisation_id)

    def _game_for(self, organisation_id: str) -> Game:
        game = self.repository.find_game_by_organisation(organisation_id)
        if game is None:
            raise NotFoundError(f"No game found for organisation {organisation_id}")
        return game

    def get_new_controls(self, organisation_id: str) -> list[Control]:
        """Controls of the game's source the organisation has not implemented."""
        organisation = self.repository.get_organisation(organisation_id)
        game = self._game_for(organisation_id)
        return [
            control for control in self.repository.find_controls(game.source)
            if not organisation.has_control(control.id)
        ]

    def purchase_control(self, organisation_id: str, control_id: str) -> Organisation:
        """Implement a control for an organisation, debiting its cost.

        The balance may go negative.

        Raises:
            StateViolationError: If the game is not in its purchasing phase
            InvalidRequestError: If the control is from another source or
                already implemented
        """
        game_id = self._game_for(organisation_id).id
        with self.lifecycle.locked(game_id), self.repository.transaction():
            # Re-read under the lock; a turn may have run since the lookup
            game = self.repository.get_game(game_id)
            control = self.repository.get_control(control_id)
            organisation = self.repository.get_organisation(organisation_id)
            self._check_purchase(game, organisation, control)

            organisation.controls.append(ImplementedControl.from_control(control, game.current_turn))
            organisation.balance -= control.cost
            self.repository.save_organisation(organisation)

        logger.info(
            f"Organisation {organisation_id} implemented control {control_id} "
            f"on turn {game.current_turn} for {control.cost:.2f}"
        )
        return organisation

    @staticmethod
    def _check_purchase(game: Game, organisation: Organisation, control: Control) -> None:
        if game.state != GameState.PURCHASING:
            raise StateViolationError(
                f"Controls can only be purchased while game {game.id} is purchasing"
            )
        if game.game_type == GameType.COMPETITIVE and organisation.id in game.ready_organisations:
            raise StateViolationError(
                f"Organisation {organisation.id} is already waiting for turn {game.current_turn}"
            )
        if control.source != game.source:
            raise InvalidRequestError(
                f"Control {control.id} is not part of source '{game.source}'"
            )
        if organisation.has_control(control.id):
            raise InvalidRequestError(
                f"Organisation {organisation.id} has already implemented control {control.id}"
            )

    def simulate_turn(self, game_id: str, organisation_id: Optional[str] = None) -> Game:
        """Request a turn simulation; see ``GameLifecycle.simulate_turn``."""
        return self.lifecycle.simulate_turn(game_id, organisation_id)

    # -- settings -----------------------------------------------------------

    def get_settings(self) -> list[dict[str, Any]]:
        """List the stored threat actor and asset settings as ``{key, value}``."""
        settings = []
        for key in SETTING_MODELS:
            value = self.repository.get_setting(key)
            if value is not None:
                settings.append({"key": key, "value": value})
        return settings

    def get_setting(self, key: str) -> list[dict[str, Any]]:
        """Get one setting's value.

        Raises:
            NotFoundError: If the key is unknown or has never been stored
        """
        value = self.repository.get_setting(key) if key in SETTING_MODELS else None
        if value is None:
            raise NotFoundError(f"No setting found with key {key}")
        return value

    def update_setting(self, key: str, value: Any) -> list[dict[str, Any]]:
        """Replace a threat actor or asset setting.

        The next simulated turn of every game reads the new value.

        Args:
            key: ``threatActors`` or ``assets``
            value: List of entries, validated against the matching model

        Returns:
            The stored value

        Raises:
            NotFoundError: If the key is not a known setting
            InvalidRequestError: If the value is not a list or repeats a slug
            pydantic.ValidationError: If an entry is invalid
        """
        model = SETTING_MODELS.get(key)
        if model is None:
            raise NotFoundError(f"No setting found with key {key}")
        if not isinstance(value, list):
            raise InvalidRequestError(f"Setting {key} must be a list")

        entries = [model.model_validate(entry) for entry in value]
        slugs = [entry.slug for entry in entries]
        if len(set(slugs)) != len(slugs):
            raise InvalidRequestError(f"Setting {key} repeats a slug")

        stored = [entry.model_dump(mode="json") for entry in entries]
        self.repository.save_setting(key, stored)
        logger.info(f"Updated setting {key}: {len(stored)} entries")
        return stored
