"""Key-value cache with garbage-collectable values.

Usage:
    with WeakCache(cleanup_interval=30) as cache:
        cache.put("report", build_report())
        report = cache.get("report")  # None once reclaimed
"""

from weak_cache.cache import WeakCache
from weak_cache.config import WeakCacheSettings, get_settings
from weak_cache.exceptions import InvalidKeyError, WeakCacheError
from weak_cache.holders import Retention
from weak_cache.port import WeakCachePort

__all__ = [
    "InvalidKeyError",
    "Retention",
    "WeakCache",
    "WeakCacheError",
    "WeakCachePort",
    "WeakCacheSettings",
    "get_settings",
]
__version__ = "0.1.0"
