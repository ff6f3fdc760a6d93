"""Cache port: Protocol for a weak-valued key-value cache."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class WeakCachePort(Protocol):
    """Port for a cache whose values may be reclaimed by the collector.

    ``None`` is the single absent marker: missing keys, reclaimed values and
    stored ``None`` all read back as ``None``.
    """

    @property
    def size(self) -> int:
        """Return the number of entries currently in the store."""
        ...

    def put(self, key: Hashable, value: Any, **options: Any) -> Any:
        """Store a value and return it unchanged."""
        ...

    def get(self, key: Hashable) -> Any:
        """Retrieve a value, evicting the entry if it is gone."""
        ...

    def has(self, key: Hashable) -> bool:
        """Return whether an entry exists for the key."""
        ...

    def delete(self, key: Hashable) -> bool | None:
        """Remove an entry; ``None`` when there was nothing to remove."""
        ...

    def keys(self) -> Iterator[Hashable]:
        """Iterate over present keys in insertion order."""
        ...

    def release(self) -> None:
        """Stop background housekeeping."""
        ...
