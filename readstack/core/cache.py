"""
Per-owner cache of dashboard listings.
"""
import time
from typing import Any, Dict, Hashable, Optional, Tuple
from uuid import UUID


class ListingCache:
    """
    Holds rendered listings per owner for a short TTL.

    Any write to an owner's readings must call ``invalidate`` so the next
    listing observes it.
    """

    def __init__(self, ttl_seconds: float = 30.0):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[UUID, Dict[Hashable, Tuple[float, Any]]] = {}

    def get(self, owner_id: UUID, key: Hashable = None) -> Optional[Any]:
        entry = self._entries.get(owner_id, {}).get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if time.monotonic() - stored_at > self.ttl_seconds:
            self._entries[owner_id].pop(key, None)
            return None
        return value

    def put(self, owner_id: UUID, value: Any, key: Hashable = None) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries.setdefault(owner_id, {})[key] = (time.monotonic(), value)

    def invalidate(self, owner_id: UUID) -> None:
        self._entries.pop(owner_id, None)

    def clear(self) -> None:
        self._entries.clear()
