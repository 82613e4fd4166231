"""
Thread-safe front for a counter registry.

Reseeding and drawing must never interleave: two calls reseeding from the
same prior state would draw from the same stream. ``SerializedRegistry``
runs every call, reads included, under one lock.
"""

import threading
from typing import List, Optional

from .registry.account import AccountId
from .registry.registry import CounterRecord, CounterRegistry


class SerializedRegistry:
    """Wraps a :class:`CounterRegistry` so that calls execute one at a time."""

    def __init__(self, registry: CounterRegistry):
        self._registry = registry
        self._lock = threading.RLock()

    @property
    def registry(self) -> CounterRegistry:
        """The wrapped registry; callers must not use it concurrently."""
        return self._registry

    def initialize(self) -> 'SerializedRegistry':
        with self._lock:
            self._registry.initialize()
        return self

    def get_counter(self, counter_id: str) -> int:
        with self._lock:
            return self._registry.get_counter(counter_id)

    def get_owner(self, counter_id: str) -> AccountId:
        with self._lock:
            return self._registry.get_owner(counter_id)

    def get_record(self, counter_id: str) -> CounterRecord:
        with self._lock:
            return self._registry.get_record(counter_id)

    def create_counter(self, caller: Optional[str] = None) -> str:
        with self._lock:
            return self._registry.create_counter(caller)

    def increment(self, caller: Optional[str], counter_id: str) -> None:
        with self._lock:
            self._registry.increment(caller, counter_id)

    def decrement(self, caller: Optional[str], counter_id: str) -> None:
        with self._lock:
            self._registry.decrement(caller, counter_id)

    def ids(self) -> List[str]:
        """Snapshot of the current counter ids."""
        with self._lock:
            return list(self._registry.ids())

    def __len__(self) -> int:
        with self._lock:
            return len(self._registry)
