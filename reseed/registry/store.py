"""
Key-value maps backing the counter registry.

Each map lives under its own key prefix inside a shared storage mapping, so
the registry's value table and owner table can sit side by side in one
key-value store and be looked up point by point.
"""

from typing import Dict, Generic, Iterator, MutableMapping, Optional, TypeVar

V = TypeVar('V')


class PrefixedMap(Generic[V]):
    """
    String-keyed map stored under a byte prefix.

    Supports point lookups, insertion, membership and key iteration. There is
    no removal; records live as long as the registry does.
    """

    def __init__(self, prefix: bytes, storage: Optional[MutableMapping[bytes, V]] = None):
        """
        Initialize the map.

        Args:
            prefix: Byte prefix that namespaces this map's keys
            storage: Shared backing store; a private dict when omitted
        """
        if not prefix:
            raise ValueError("Prefix must be non-empty")

        self.prefix = bytes(prefix)
        self._storage: MutableMapping[bytes, V] = storage if storage is not None else {}
        self._length = sum(1 for _ in self._own_keys())

    def _raw_key(self, key: str) -> bytes:
        return self.prefix + key.encode('utf-8')

    def _own_keys(self) -> Iterator[bytes]:
        return (k for k in self._storage if k.startswith(self.prefix))

    def get(self, key: str, default: Optional[V] = None) -> Optional[V]:
        """Look up ``key``, returning ``default`` when absent."""
        return self._storage.get(self._raw_key(key), default)

    def insert(self, key: str, value: V) -> Optional[V]:
        """
        Store ``value`` under ``key``.

        Returns:
            The previous value, or None if the key was new
        """
        raw = self._raw_key(key)
        previous = self._storage.get(raw)
        if raw not in self._storage:
            self._length += 1
        self._storage[raw] = value
        return previous

    def keys(self) -> Iterator[str]:
        """Iterate over stored keys in no particular order."""
        offset = len(self.prefix)
        return (k[offset:].decode('utf-8') for k in self._own_keys())

    def to_dict(self) -> Dict[str, V]:
        """Copy of the map's contents."""
        return {key: self.get(key) for key in self.keys()}

    def __contains__(self, key: str) -> bool:
        return self._raw_key(key) in self._storage

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[str]:
        return self.keys()

    def __repr__(self) -> str:
        return f"PrefixedMap(prefix={self.prefix!r}, size={self._length})"
