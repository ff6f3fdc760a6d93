"""Finalization callback chaining.

Callbacks run from the garbage collector, at an unspecified time and possibly
after the entry was evicted or the cache released. Errors are logged here
instead of surfacing inside the collector.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger()

FinalizationCallback = Callable[[Any], None]


def _invoke(callback: FinalizationCallback, reference: Any, scope: str) -> None:
    try:
        callback(reference)
    except Exception as e:
        logger.error(
            "Finalization callback failed",
            scope=scope,
            callback=getattr(callback, "__qualname__", repr(callback)),
            error=str(e),
        )


def chain_callbacks(
    global_callback: FinalizationCallback | None,
    local_callback: FinalizationCallback | None,
) -> FinalizationCallback | None:
    """Combine the cache-wide and per-put callbacks into one reclaim hook.

    The cache-wide callback runs first, then the per-put one. Returns
    ``None`` when neither is configured.
    """
    if global_callback is None and local_callback is None:
        return None

    def on_reclaim(reference: Any) -> None:
        if global_callback is not None:
            _invoke(global_callback, reference, "global")
        if local_callback is not None:
            _invoke(local_callback, reference, "put")

    return on_reclaim
