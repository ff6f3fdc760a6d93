"""Test helpers for driving the garbage collector and the sweeper."""

from __future__ import annotations

import gc
import time
from collections.abc import Callable


class Payload:
    """Plain object that supports weak references (unlike dict/list)."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Payload({self.name!r})"


def collect() -> None:
    """Run a full collection so unreachable values are reclaimed now."""
    gc.collect()


def wait_until(predicate: Callable[[], bool], timeout: float = 3.0, step: float = 0.02) -> bool:
    """Poll ``predicate`` until it holds or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()
