"""Repository interfaces for Invest or Defend storage.

``SimulationRepository`` is the narrow persistence interface the simulation
core depends on. ``DocumentRepository`` implements it once on top of a small
set of document primitives, so the memory and SQLite backends only need to
store and fetch JSON-compatible dicts.

Writes made inside ``transaction()`` are staged per thread and committed
together when the block exits, or discarded if it raises. Reads inside the
block see the staged writes.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from invest_or_defend.errors import NotFoundError
from invest_or_defend.models import Control, Event, Game, Organisation, SecurityArea

logger = logging.getLogger(__name__)

GAMES = "games"
ORGANISATIONS = "organisations"
EVENTS = "events"
CONTROLS = "controls"
SECURITY_AREAS = "security_areas"
SETTINGS = "settings"

COLLECTIONS = (GAMES, ORGANISATIONS, EVENTS, CONTROLS, SECURITY_AREAS, SETTINGS)


class SimulationRepository(ABC):
    """Abstract base class for simulation storage."""

    @abstractmethod
    def get_game(self, game_id: str) -> Game:
        """Load a game.

        Raises:
            NotFoundError: If no game has this ID
        """
        pass

    @abstractmethod
    def save_game(self, game: Game) -> None:
        """Insert or replace a game."""
        pass

    @abstractmethod
    def find_game_by_organisation(self, organisation_id: str) -> Optional[Game]:
        """Find the game an organisation plays in, or None."""
        pass

    @abstractmethod
    def get_organisation(self, organisation_id: str) -> Organisation:
        """Load an organisation.

        Raises:
            NotFoundError: If no organisation has this ID
        """
        pass

    @abstractmethod
    def save_organisation(self, organisation: Organisation) -> None:
        """Insert or replace an organisation."""
        pass

    @abstractmethod
    def create_event(self, event: Event) -> Event:
        """Persist a newly generated event and return it."""
        pass

    @abstractmethod
    def get_event(self, event_id: str) -> Event:
        """Load an event.

        Raises:
            NotFoundError: If no event has this ID
        """
        pass

    @abstractmethod
    def get_control(self, control_id: str) -> Control:
        """Load a catalog control.

        Raises:
            NotFoundError: If no control has this ID
        """
        pass

    @abstractmethod
    def save_control(self, control: Control) -> None:
        """Insert or replace a catalog control."""
        pass

    @abstractmethod
    def find_controls(self, source: str, asset: Optional[str] = None) -> list[Control]:
        """Return controls of a source, optionally only those on one asset.

        Controls are returned in insertion order.
        """
        pass

    def count_controls(self, source: str, asset: Optional[str] = None) -> int:
        """Count controls of a source, optionally only those on one asset."""
        return len(self.find_controls(source, asset))

    @abstractmethod
    def save_security_area(self, security_area: SecurityArea) -> None:
        """Insert or replace a security area."""
        pass

    @abstractmethod
    def find_security_areas(self, source: str) -> list[SecurityArea]:
        """Return the security areas of a source in insertion (catalog) order."""
        pass

    @abstractmethod
    def get_setting(self, key: str) -> Any:
        """Return a setting's value, or None if unset."""
        pass

    @abstractmethod
    def save_setting(self, key: str, value: Any) -> None:
        """Insert or replace a setting."""
        pass

    @abstractmethod
    def transaction(self):
        """Context manager grouping writes into one unit of work."""
        pass


class DocumentRepository(SimulationRepository):
    """Repository built on JSON document primitives.

    Subclasses implement ``_read``, ``_scan`` and ``_write_batch``.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    # -- primitives ---------------------------------------------------------

    @abstractmethod
    def _read(self, collection: str, key: str) -> Optional[dict]:
        """Return one stored document, or None."""
        pass

    @abstractmethod
    def _scan(self, collection: str) -> list[tuple[str, dict]]:
        """Return all stored (key, document) pairs in insertion order."""
        pass

    @abstractmethod
    def _write_batch(self, writes: list[tuple[str, str, dict]]) -> None:
        """Store (collection, key, document) triples all at once."""
        pass

    # -- unit of work -------------------------------------------------------

    @property
    def _pending(self) -> Optional[dict[tuple[str, str], dict]]:
        return getattr(self._local, "pending", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Stage writes until the block exits.

        Nested blocks join the outermost one. On exception every staged write
        is discarded and the exception propagates.
        """
        if self._pending is not None:
            yield
            return

        self._local.pending = {}
        try:
            yield
            writes = [(collection, key, doc) for (collection, key), doc in self._local.pending.items()]
            if writes:
                self._write_batch(writes)
                logger.debug(f"Committed {len(writes)} staged writes")
        except BaseException:
            logger.debug(f"Rolled back {len(self._local.pending)} staged writes")
            raise
        finally:
            self._local.pending = None

    def _get(self, collection: str, key: str) -> Optional[dict]:
        pending = self._pending
        if pending is not None and (collection, key) in pending:
            return pending[(collection, key)]
        return self._read(collection, key)

    def _all(self, collection: str) -> list[dict]:
        documents = dict(self._scan(collection))
        pending = self._pending
        if pending is not None:
            for (pending_collection, key), doc in pending.items():
                if pending_collection == collection:
                    documents[key] = doc
        return list(documents.values())

    def _put(self, collection: str, key: str, document: dict) -> None:
        pending = self._pending
        if pending is not None:
            pending[(collection, key)] = document
        else:
            self._write_batch([(collection, key, document)])

    def _require(self, collection: str, key: str, label: str) -> dict:
        document = self._get(collection, key)
        if document is None:
            raise NotFoundError(f"No {label} found with ID {key}")
        return document

    # -- games --------------------------------------------------------------

    def get_game(self, game_id: str) -> Game:
        return Game.model_validate(self._require(GAMES, game_id, "game"))

    def save_game(self, game: Game) -> None:
        self._put(GAMES, game.id, game.model_dump(mode="json"))

    def find_game_by_organisation(self, organisation_id: str) -> Optional[Game]:
        for document in self._all(GAMES):
            if organisation_id in document.get("organisations", []):
                return Game.model_validate(document)
        return None

    # -- organisations ------------------------------------------------------

    def get_organisation(self, organisation_id: str) -> Organisation:
        return Organisation.model_validate(
            self._require(ORGANISATIONS, organisation_id, "organisation")
        )

    def save_organisation(self, organisation: Organisation) -> None:
        self._put(ORGANISATIONS, organisation.id, organisation.model_dump(mode="json"))

    # -- events -------------------------------------------------------------

    def create_event(self, event: Event) -> Event:
        self._put(EVENTS, event.id, event.model_dump(mode="json"))
        return event

    def get_event(self, event_id: str) -> Event:
        return Event.model_validate(self._require(EVENTS, event_id, "event"))

    # -- catalog ------------------------------------------------------------

    def get_control(self, control_id: str) -> Control:
        return Control.model_validate(self._require(CONTROLS, control_id, "control"))

    def save_control(self, control: Control) -> None:
        self._put(CONTROLS, control.id, control.model_dump(mode="json"))

    def find_controls(self, source: str, asset: Optional[str] = None) -> list[Control]:
        return [
            Control.model_validate(document)
            for document in self._all(CONTROLS)
            if document["source"] == source and (asset is None or document.get("asset") == asset)
        ]

    def save_security_area(self, security_area: SecurityArea) -> None:
        self._put(SECURITY_AREAS, security_area.id, security_area.model_dump(mode="json"))

    def find_security_areas(self, source: str) -> list[SecurityArea]:
        return [
            SecurityArea.model_validate(document)
            for document in self._all(SECURITY_AREAS)
            if document["source"] == source
        ]

    # -- settings -----------------------------------------------------------

    def get_setting(self, key: str) -> Any:
        document = self._get(SETTINGS, key)
        if document is None:
            return None
        return document["value"]

    def save_setting(self, key: str, value: Any) -> None:
        self._put(SETTINGS, key, {"key": key, "value": value})
