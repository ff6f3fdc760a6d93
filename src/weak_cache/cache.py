"""Key-value cache with weakly referenced values.

Values may be reclaimed by the garbage collector while their entry is still
in the store. A reclaimed entry is evicted lazily by ``get`` or proactively
by the cleanup sweeper. Keys are always held strongly: using an object as a
key keeps that object alive for as long as the entry exists.

When a cleanup interval is configured, call ``release()`` (or use the cache
as a context manager) before discarding it so the sweeper job is shut down.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from typing import Any

import structlog

from weak_cache.config import DEFAULT_CLEANUP_INTERVAL, WeakCacheSettings
from weak_cache.exceptions import InvalidKeyError
from weak_cache.finalization import FinalizationCallback, chain_callbacks
from weak_cache.holders import Retention, ValueHolder, build_holder, classify
from weak_cache.sweeper import CleanupSweeper

logger = structlog.get_logger()


class WeakCache:
    """Cache whose values the garbage collector may reclaim.

    Args:
        cleanup_interval: Seconds between cleanup sweeps. ``None`` disables
            the sweeper; stale entries are then only dropped by ``get`` or by
            calling ``cleanup()`` directly.
        global_finalization_callback: Called with the value reference when
            any weakly held value is reclaimed.
        primitives_always_hard: Hold primitive values strongly unless ``put``
            is given an explicit ``hard_ref``.
    """

    def __init__(
        self,
        *,
        cleanup_interval: float | None = DEFAULT_CLEANUP_INTERVAL,
        global_finalization_callback: FinalizationCallback | None = None,
        primitives_always_hard: bool = False,
    ) -> None:
        self._store: dict[Hashable, ValueHolder] = {}
        self._size = 0
        self._lock = threading.RLock()
        self._global_finalization_callback = global_finalization_callback
        self._primitives_always_hard = primitives_always_hard

        self._sweeper: CleanupSweeper | None = None
        if cleanup_interval is not None:
            self._sweeper = CleanupSweeper(self.cleanup, cleanup_interval)
            self._sweeper.start()

    @classmethod
    def from_settings(
        cls,
        settings: WeakCacheSettings,
        *,
        global_finalization_callback: FinalizationCallback | None = None,
    ) -> WeakCache:
        return cls(
            cleanup_interval=settings.cleanup_interval,
            global_finalization_callback=global_finalization_callback,
            primitives_always_hard=settings.primitives_always_hard,
        )

    @property
    def size(self) -> int:
        with self._lock:
            return self._size

    @property
    def primitives_always_hard(self) -> bool:
        return self._primitives_always_hard

    @property
    def sweeper(self) -> CleanupSweeper | None:
        return self._sweeper

    def put(
        self,
        key: Hashable,
        value: Any,
        *,
        finalization_callback: FinalizationCallback | None = None,
        hard_ref: bool | None = None,
    ) -> Any:
        """Add or replace the value stored under ``key`` and return ``value``.

        ``hard_ref=True`` forces a strong reference; ``hard_ref=False`` forces
        weak retention even when ``primitives_always_hard`` is set.

        Raises:
            InvalidKeyError: If ``key`` is ``None``.
        """
        if key is None:
            raise InvalidKeyError(key)

        retention = classify(
            value,
            hard_ref=hard_ref,
            primitives_always_hard=self._primitives_always_hard,
        )
        on_reclaim = chain_callbacks(self._global_finalization_callback, finalization_callback)
        holder = build_holder(value, retention, on_reclaim)

        with self._lock:
            previous = self._store.get(key)
            if previous is None:
                self._size += 1
            self._store[key] = holder
        # a replaced holder is dropped on return, outside the lock
        return value

    def get(self, key: Hashable) -> Any:
        """Return the value for ``key``, or ``None`` if missing or reclaimed.

        A ``None`` result evicts the entry, including entries that stored
        ``None`` explicitly.
        """
        with self._lock:
            value = self._resolve(key)
            # an evicted holder is dropped on return, outside the lock
            evicted = self._evict(key) if value is None else None  # noqa: F841
        return value

    def retention(self, key: Hashable) -> Retention | None:
        """How the entry for ``key`` holds its value, or ``None`` if absent."""
        with self._lock:
            holder = self._store.get(key)
        return None if holder is None else holder.retention

    def has(self, key: Hashable) -> bool:
        """Structural membership; may be true for a reclaimed, unswept entry."""
        with self._lock:
            return key in self._store

    def delete(self, key: Hashable) -> bool | None:
        """Remove ``key``. Returns ``True`` if removed, ``None`` if absent."""
        with self._lock:
            evicted = self._evict(key)
        return None if evicted is None else True

    def keys(self) -> Iterator[Hashable]:
        """Iterate over the present keys in first-insertion order.

        The iterator walks a snapshot taken at call time, so entries may be
        read or deleted while iterating.
        """
        with self._lock:
            snapshot = list(self._store)
        return iter(snapshot)

    def items(self) -> Iterator[tuple[Hashable, Any]]:
        """Iterate over ``(key, value)`` pairs of live entries.

        Each value is read through ``get``, so reclaimed entries are evicted
        and skipped.
        """
        for key in self.keys():
            value = self.get(key)
            if value is not None:
                yield key, value

    def cleanup(self) -> int:
        """Evict every entry whose weakly held value is gone.

        Boxed primitives only live through their holder, so every boxed entry
        is dropped here: a primitive stored with weak retention survives until
        the first pass after it was put. Returns the number of entries evicted.

        Evicted holders are released after the lock, so finalization callbacks
        fired by the pass run outside the critical section and may call back
        into the cache.
        """
        with self._lock:
            stale = [key for key, holder in list(self._store.items()) if holder.collectable()]
            evicted = [self._evict(key) for key in stale]
            remaining = self._size

        count = len(evicted)
        evicted.clear()

        if count:
            logger.info("Cleanup sweep evicted entries", evicted=count, size=remaining)
        else:
            logger.debug("Cleanup sweep found nothing to evict", size=remaining)
        return count

    def release(self) -> None:
        """Stop the cleanup sweeper. Safe to call more than once."""
        if self._sweeper is not None:
            self._sweeper.stop()

    def _resolve(self, key: Hashable) -> Any:
        # Pure read: never evicts, never calls back into the public surface.
        holder = self._store.get(key)
        if holder is None:
            return None
        return holder.resolve()

    def _evict(self, key: Hashable) -> ValueHolder | None:
        # Callers keep the returned holder alive until they leave the lock.
        holder = self._store.pop(key, None)
        if holder is not None:
            self._size -= 1
        return holder

    def __len__(self) -> int:
        return self.size

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Hashable]:
        return self.keys()

    def __enter__(self) -> WeakCache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size})"
