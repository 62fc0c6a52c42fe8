"""Unit tests for PermissionCache."""

from __future__ import annotations

import threading

import pytest

from mp_authz.application.cache import PermissionCache
from mp_authz.kernel.security import Permission, Principal, PrincipalType
from mp_authz.kernel.time import FrozenClock


@pytest.fixture
def cache(clock: FrozenClock) -> PermissionCache:
    return PermissionCache(ttl=300, clock=clock)


ALICE = Principal("alice", PrincipalType.USER)
BOB = Principal("bob", PrincipalType.USER)
PERMS = (Permission("o", 1, "alice", "read"),)


class TestGetPut:
    def test_miss_returns_none(self, cache: PermissionCache) -> None:
        assert cache.get(ALICE) is None

    def test_put_then_get(self, cache: PermissionCache) -> None:
        cache.put(ALICE, list(PERMS))
        assert cache.get(ALICE) == PERMS

    def test_put_returns_immutable_snapshot(self, cache: PermissionCache) -> None:
        source = list(PERMS)
        snapshot = cache.put(ALICE, source)
        source.clear()
        assert snapshot == PERMS
        assert isinstance(cache.get(ALICE), tuple)

    def test_empty_set_is_cached(self, cache: PermissionCache) -> None:
        cache.put(ALICE, [])
        assert cache.get(ALICE) == ()

    def test_put_overwrites(self, cache: PermissionCache) -> None:
        cache.put(ALICE, PERMS)
        cache.put(ALICE, [])
        assert cache.get(ALICE) == ()

    def test_ttl_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            PermissionCache(ttl=0)


class TestExpiry:
    def test_entry_alive_before_ttl(self, cache: PermissionCache, clock: FrozenClock) -> None:
        cache.put(ALICE, PERMS)
        clock.advance(seconds=299)
        assert cache.get(ALICE) == PERMS
        assert ALICE in cache

    def test_entry_expires_at_ttl(self, cache: PermissionCache, clock: FrozenClock) -> None:
        cache.put(ALICE, PERMS)
        clock.advance(minutes=5)
        assert ALICE not in cache
        assert cache.get(ALICE) is None
        assert len(cache) == 0

    def test_refresh_restamps(self, cache: PermissionCache, clock: FrozenClock) -> None:
        cache.put(ALICE, PERMS)
        clock.advance(seconds=200)
        cache.put(ALICE, PERMS)
        clock.advance(seconds=200)
        assert cache.get(ALICE) == PERMS

    def test_sweep_removes_only_expired(self, cache: PermissionCache, clock: FrozenClock) -> None:
        cache.put(ALICE, PERMS)
        clock.advance(seconds=250)
        cache.put(BOB, [])
        clock.advance(seconds=100)
        assert cache.sweep() == 1
        assert len(cache) == 1
        assert cache.get(BOB) == ()


class TestInvalidation:
    def test_invalidate_single(self, cache: PermissionCache) -> None:
        cache.put(ALICE, PERMS)
        cache.put(BOB, [])
        cache.invalidate(ALICE)
        assert cache.get(ALICE) is None
        assert cache.get(BOB) == ()

    def test_invalidate_many(self, cache: PermissionCache) -> None:
        cache.put(ALICE, PERMS)
        cache.put(BOB, [])
        cache.invalidate_many([ALICE, BOB])
        assert len(cache) == 0

    def test_invalidate_absent_is_noop(self, cache: PermissionCache) -> None:
        cache.invalidate(ALICE)
        assert len(cache) == 0

    def test_clear(self, cache: PermissionCache) -> None:
        cache.put(ALICE, PERMS)
        cache.clear()
        assert cache.get(ALICE) is None


class TestGeneration:
    def test_matching_generation_is_stored(self, cache: PermissionCache) -> None:
        token = cache.generation(ALICE)
        cache.put(ALICE, PERMS, generation=token)
        assert cache.get(ALICE) == PERMS

    def test_put_after_invalidation_is_dropped(self, cache: PermissionCache) -> None:
        token = cache.generation(ALICE)
        cache.invalidate(ALICE)
        assert cache.put(ALICE, PERMS, generation=token) == PERMS
        assert ALICE not in cache

    def test_other_principal_unaffected(self, cache: PermissionCache) -> None:
        token = cache.generation(ALICE)
        cache.invalidate(BOB)
        cache.put(ALICE, PERMS, generation=token)
        assert ALICE in cache

    def test_put_after_clear_is_dropped(self, cache: PermissionCache) -> None:
        token = cache.generation(ALICE)
        cache.clear()
        cache.put(ALICE, PERMS, generation=token)
        assert ALICE not in cache


class TestConcurrency:
    def test_concurrent_put_and_invalidate(self, cache: PermissionCache) -> None:
        principals = [Principal(f"u{i}", PrincipalType.USER) for i in range(50)]

        def writer() -> None:
            for _ in range(20):
                for p in principals:
                    cache.put(p, PERMS)

        def invalidator() -> None:
            for _ in range(20):
                cache.invalidate_many(principals)

        threads = [threading.Thread(target=writer) for _ in range(4)]
        threads += [threading.Thread(target=invalidator) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        cache.invalidate_many(principals)
        assert len(cache) == 0
