"""Application cache – PermissionCache.

Holds each principal's *direct* permission snapshot for a bounded time.
Expiry is checked lazily on read; :meth:`PermissionCache.sweep` may be called
periodically to reclaim memory without changing what :meth:`get` returns.
"""
from __future__ import annotations

import dataclasses
import threading
from typing import Iterable

from mp_authz.kernel.security.permission import Permission
from mp_authz.kernel.security.principal import Principal
from mp_authz.kernel.time import Clock, SystemClock
from mp_authz.observability.logging import get_logger

__all__ = ["CacheEntry", "PermissionCache"]

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class CacheEntry:
    permissions: tuple[Permission, ...]
    stored_at: float


class PermissionCache:
    """Thread-safe TTL map of :class:`Principal` → direct permissions."""

    def __init__(self, ttl: float = 300.0, clock: Clock | None = None) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._clock: Clock = clock if clock is not None else SystemClock()
        self._entries: dict[Principal, CacheEntry] = {}
        # Bumped by invalidation; a put carrying an older generation is dropped.
        self._generations: dict[Principal, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self._ttl

    def get(self, principal: Principal) -> tuple[Permission, ...] | None:
        """Return the cached snapshot, or ``None`` when absent or expired."""
        now = self._clock.timestamp()
        with self._lock:
            entry = self._entries.get(principal)
            if entry is None:
                logger.debug("permission_cache_miss", principal=str(principal))
                return None
            if self._expired(entry, now):
                del self._entries[principal]
                logger.debug("permission_cache_expired", principal=str(principal))
                return None
            return entry.permissions

    def generation(self, principal: Principal) -> tuple[int, int]:
        """Return a token that changes whenever *principal* is invalidated.

        Take it before reading the store and hand it to :meth:`put`.
        """
        with self._lock:
            return self._epoch, self._generations.get(principal, 0)

    def put(
        self,
        principal: Principal,
        permissions: Iterable[Permission],
        generation: tuple[int, int] | None = None,
    ) -> tuple[Permission, ...]:
        """Cache and return a snapshot of *permissions*.

        When *generation* no longer matches, the snapshot predates an
        invalidation: it is returned to the caller but not stored.
        """
        snapshot = tuple(permissions)
        entry = CacheEntry(permissions=snapshot, stored_at=self._clock.timestamp())
        with self._lock:
            current = (self._epoch, self._generations.get(principal, 0))
            if generation is not None and generation != current:
                logger.debug("permission_cache_put_skipped", principal=str(principal))
                return snapshot
            self._entries[principal] = entry
        return snapshot

    def invalidate(self, principal: Principal) -> None:
        self.invalidate_many((principal,))

    def invalidate_many(self, principals: Iterable[Principal]) -> None:
        targets = list(principals)
        with self._lock:
            for principal in targets:
                self._entries.pop(principal, None)
                self._generations[principal] = self._generations.get(principal, 0) + 1
        logger.debug(
            "permission_cache_invalidated",
            principals=[str(p) for p in targets],
        )

    def sweep(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock.timestamp()
        with self._lock:
            stale = [p for p, e in self._entries.items() if self._expired(e, now)]
            for principal in stale:
                del self._entries[principal]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
            self._epoch += 1

    def __contains__(self, principal: object) -> bool:
        now = self._clock.timestamp()
        with self._lock:
            entry = self._entries.get(principal)  # type: ignore[arg-type]
            return entry is not None and not self._expired(entry, now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
