#!/usr/bin/env python3
"""
Unit tests for per-entity locking.
"""

import threading
import time

import pytest

from entity_assets.utils.entity_locks import EntityLockRegistry


@pytest.mark.unit
class TestEntityLockRegistry:
    def test_held_locks_are_registered(self):
        locks = EntityLockRegistry()

        with locks.lock("product/000001"):
            with locks.lock("product/000002"):
                assert len(locks) == 2
            assert len(locks) == 1

    def test_released_locks_are_dropped(self):
        locks = EntityLockRegistry()

        for entity_id in range(100):
            with locks.lock(f"product/{entity_id:06d}"):
                pass

        assert len(locks) == 0

    def test_lock_is_reentrant(self):
        locks = EntityLockRegistry()

        with locks.lock("product/000001"):
            with locks.lock("product/000001"):
                assert len(locks) == 1
        assert len(locks) == 0

    def test_entry_dropped_when_body_raises(self):
        locks = EntityLockRegistry()

        with pytest.raises(RuntimeError):
            with locks.lock("product/000001"):
                raise RuntimeError("ingest failed")

        assert len(locks) == 0

    def test_same_key_is_serialized(self):
        locks = EntityLockRegistry()
        events = []

        def worker(name):
            with locks.lock("product/000001"):
                events.append(f"{name}-start")
                time.sleep(0.05)
                events.append(f"{name}-end")

        threads = [threading.Thread(target=worker, args=(n,)) for n in ("a", "b")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert events[0].endswith("start") and events[1].endswith("end")
        assert events[0][0] == events[1][0]

    def test_different_keys_do_not_contend(self):
        locks = EntityLockRegistry()
        acquired = threading.Event()

        def other_entity():
            with locks.lock("product/000002"):
                acquired.set()

        with locks.lock("product/000001"):
            thread = threading.Thread(target=other_entity)
            thread.start()
            assert acquired.wait(timeout=2)
            thread.join()
