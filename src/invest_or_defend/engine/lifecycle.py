"""Game lifecycle: the simulate-turn entry point.

State transitions:

    PURCHASING --simulate request--> SIMULATING --turn done--> PURCHASING
                                                         \\--> ENDED (after max_turns)

In competitive games a simulate request only marks the requesting
organisation as ready; the turn runs once every organisation is ready. In
single-player and cooperative games any request runs the turn at once.

Requests for the same game are serialised with a per-game lock, and every
write of a simulated turn is committed as one unit of work. Other writers to
a game (joining, purchasing) take the same lock through ``locked()``.
"""

from __future__ import annotations

import logging
import random
import threading
import weakref
from contextlib import contextmanager
from typing import Iterator, Optional

from invest_or_defend.engine.catalog import load_simulation_catalog
from invest_or_defend.engine.randomness import RandomSource
from invest_or_defend.engine.turn_simulator import TurnReport, TurnSimulator
from invest_or_defend.errors import GameEndedError, InvalidRequestError
from invest_or_defend.models import Game, GameState, GameType
from invest_or_defend.storage import SimulationRepository

logger = logging.getLogger(__name__)


class GameLifecycle:
    """Drives games through their turns.

    Per-game locks live in this process only. Running several server
    processes against one SQLite database does not serialise requests for
    the same game across processes; run a single worker process per
    database.

    Attributes:
        repository: Storage for games, organisations, events and catalogs
        last_report: Report of the most recent simulated turn (None before any)
    """

    def __init__(
        self,
        repository: SimulationRepository,
        rng: Optional[RandomSource] = None,
        random_seed: Optional[int] = None,
    ) -> None:
        """Initialize the lifecycle.

        Args:
            repository: Storage backend
            rng: Random source; a ``random.Random(random_seed)`` if None
            random_seed: Seed used when no random source is given
        """
        self.repository = repository
        self._random = rng if rng is not None else random.Random(random_seed)
        self._simulator = TurnSimulator(repository, self._random)
        # Entries disappear once no request holds the lock
        self._locks: weakref.WeakValueDictionary[str, threading.RLock] = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()
        self.last_report: Optional[TurnReport] = None

    def _game_lock(self, game_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[game_id] = lock
            return lock

    @contextmanager
    def locked(self, game_id: str) -> Iterator[None]:
        """Hold the game's lock for a read-check-write on the game or its
        organisations."""
        with self._game_lock(game_id):
            yield

    def simulate_turn(self, game_id: str, organisation_id: Optional[str] = None) -> Game:
        """Request the simulation of a game's current turn.

        Args:
            game_id: Game to simulate
            organisation_id: Organisation making the request; required for
                competitive games

        Returns:
            The game after the request: unchanged apart from readiness if a
            competitive game is still waiting, otherwise advanced by one turn

        Raises:
            GameEndedError: If the game has already ended
            InvalidRequestError: If a competitive request names no
                organisation, or one that is not in the game
            PastBalanceAlreadySetError: If the turn was already simulated
            ConfigurationError: If the catalog cannot support a simulation
        """
        with self.locked(game_id):
            game = self.repository.get_game(game_id)

            if game.is_ended:
                logger.warning(f"Rejected simulate request for finished game {game_id}")
                raise GameEndedError(f"Game {game_id} is already finished")

            if game.game_type == GameType.COMPETITIVE:
                self._mark_ready(game, organisation_id)
                if not game.all_ready():
                    self.repository.save_game(game)
                    logger.info(
                        f"Game {game_id}: {len(game.ready_organisations)}/"
                        f"{len(game.organisations)} organisations ready for turn {game.current_turn}"
                    )
                    return game

            return self._simulate(game)

    def _mark_ready(self, game: Game, organisation_id: Optional[str]) -> None:
        if organisation_id is None:
            raise InvalidRequestError(
                f"Competitive game {game.id} requires the requesting organisation"
            )
        if organisation_id not in game.organisations:
            raise InvalidRequestError(
                f"Organisation {organisation_id} is not part of game {game.id}"
            )
        if not game.mark_ready(organisation_id):
            logger.debug(f"Organisation {organisation_id} already ready in game {game.id}")

    def _simulate(self, game: Game) -> Game:
        # Catalog and past-balance checks happen before anything is written
        catalog = load_simulation_catalog(self.repository, game)
        self._simulator.load_organisations(game)

        with self.repository.transaction():
            game.state = GameState.SIMULATING
            self.repository.save_game(game)
            report = self._simulator.run(game, catalog)

        self.last_report = report
        return report.game
