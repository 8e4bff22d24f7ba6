"""Process-lifetime memo of postal code -> coordinate resolutions."""

from __future__ import annotations

import threading

from ...models.domain import Coordinate, PostalLookupKey


class CoordinateCache:
    """Unbounded, lock-guarded map from postal lookup key to coordinate.

    Entries are never evicted; the postal-to-coordinate mapping does not change
    within a process lifetime.
    """

    def __init__(self) -> None:
        self._entries: dict[PostalLookupKey, Coordinate] = {}
        self._lock = threading.Lock()

    def get(self, key: PostalLookupKey) -> Coordinate | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: PostalLookupKey, coordinate: Coordinate) -> None:
        # last write wins
        with self._lock:
            self._entries[key] = coordinate

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
