"""Custom exceptions for weak-cache.

Only malformed input is an error here. Missing keys and reclaimed values
are ordinary results and are reported as ``None``.
"""

from __future__ import annotations


class WeakCacheError(Exception):
    """Base class for weak-cache errors."""


class InvalidKeyError(WeakCacheError):
    """Raised by ``put`` when the key is ``None``.

    ``None`` is the absent-value marker, so it can never identify an entry.
    """

    def __init__(self, key: object = None) -> None:
        self.key = key
        super().__init__(f"WeakCache does not support {key!r} keys.")
