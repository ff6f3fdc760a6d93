"""End-to-end reclamation scenarios with the real collector and sweeper."""

from __future__ import annotations

import time

from structlog.testing import capture_logs

from tests.helpers import Payload, collect, wait_until
from weak_cache.cache import WeakCache


class TestLazyEviction:
    def test_get_evicts_reclaimed_value_without_sweeper(self):
        cache = WeakCache(cleanup_interval=None)
        value = Payload("x")
        cache.put("a", value)

        del value
        collect()

        # structurally present until someone looks
        assert cache.has("a") is True
        assert cache.size == 1

        assert cache.get("a") is None
        assert cache.has("a") is False
        assert cache.size == 0


class TestSweeperConvergence:
    def test_size_converges_without_get(self, sweeping_cache):
        kept = Payload("kept")
        first, second = Payload("1"), Payload("2")
        sweeping_cache.put("kept", kept)
        sweeping_cache.put("first", first)
        sweeping_cache.put("second", second)
        assert sweeping_cache.size == 3

        del first, second
        collect()

        assert wait_until(lambda: sweeping_cache.size == 1)
        assert list(sweeping_cache.keys()) == ["kept"]
        assert sweeping_cache.get("kept") is kept

    def test_boxed_primitives_expire_after_a_sweep(self, sweeping_cache):
        sweeping_cache.put("s", "text")
        sweeping_cache.put("h", "hard", hard_ref=True)

        assert wait_until(lambda: sweeping_cache.size == 1)
        assert sweeping_cache.get("h") == "hard"

    def test_finalization_and_sweep_together(self):
        reclaimed = []
        with WeakCache(
            cleanup_interval=0.05,
            global_finalization_callback=reclaimed.append,
        ) as cache:
            value = Payload("x")
            cache.put("a", value)
            del value
            collect()

            assert len(reclaimed) == 1
            assert wait_until(lambda: cache.size == 0)
            assert cache.has("a") is False

    def test_released_cache_stops_sweeping(self):
        cache = WeakCache(cleanup_interval=0.05)
        cache.release()

        value = Payload("x")
        cache.put("a", value)
        del value
        collect()

        assert not wait_until(lambda: cache.size == 0, timeout=0.3)
        assert cache.has("a") is True


class TestConcurrentSweeps:
    def test_mutations_while_sweeping_keep_size_consistent(self):
        cache = WeakCache(cleanup_interval=0.01)
        kept = [Payload(str(i)) for i in range(10)]

        with capture_logs() as logs:
            deadline = time.monotonic() + 0.5
            i = 0
            while time.monotonic() < deadline:
                key = i % 50
                if i % 3 == 0:
                    cache.put(key, f"v{i}")
                elif i % 3 == 1:
                    cache.put(key, kept[i % 10])
                else:
                    cache.put(key, i, hard_ref=True)
                if i % 7 == 0:
                    cache.delete((i * 5) % 50)
                if i % 11 == 0:
                    cache.get((i * 3) % 50)
                i += 1
            cache.release()
            # let an in-flight sweep finish
            time.sleep(0.1)

        assert cache.size == sum(1 for k in range(50) if cache.has(k))
        assert cache.size == len(list(cache.keys()))
        assert not [e for e in logs if e["event"] == "Cleanup sweep failed"]
