"""In-memory repository implementation.

Documents live in per-collection dicts for the lifetime of the process.
Suitable for tests, the CLI and single-process development servers.
"""

import copy
import threading
from typing import Optional

from .repository import COLLECTIONS, DocumentRepository


class MemoryRepository(DocumentRepository):
    """Dict-backed repository.

    Stored documents are deep-copied on the way in and out so callers never
    share mutable state with the store.
    """

    def __init__(self) -> None:
        super().__init__()
        self._collections: dict[str, dict[str, dict]] = {name: {} for name in COLLECTIONS}
        self._lock = threading.Lock()

    def _read(self, collection: str, key: str) -> Optional[dict]:
        with self._lock:
            document = self._collections[collection].get(key)
            return copy.deepcopy(document)

    def _scan(self, collection: str) -> list[tuple[str, dict]]:
        with self._lock:
            return [(key, copy.deepcopy(doc)) for key, doc in self._collections[collection].items()]

    def _write_batch(self, writes: list[tuple[str, str, dict]]) -> None:
        with self._lock:
            for collection, key, document in writes:
                self._collections[collection][key] = copy.deepcopy(document)
