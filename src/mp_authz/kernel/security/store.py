"""Kernel security – PermissionStore port and InMemoryPermissionStore."""

from __future__ import annotations

import abc
import threading
from typing import Iterable, Sequence

from mp_authz.kernel.security.permission import Permission, PermissionKind
from mp_authz.kernel.security.principal import NULL_TYPE_ID


# ---------------------------------------------------------------------------
# PermissionStore port
# ---------------------------------------------------------------------------


class PermissionStore(abc.ABC):
    """Port — durable storage of :class:`Permission` records.

    Implementations live in ``adapters/``: e.g.
    :class:`~mp_authz.adapters.sqlalchemy.SQLAlchemyPermissionStore`.
    Use :class:`InMemoryPermissionStore` in unit tests.
    """

    @abc.abstractmethod
    def select(
        self,
        owner: str | None = None,
        principal_type: int | None = None,
        principal_key: str | None = None,
        activity: str | None = None,
        target: str | None = None,
        kind: PermissionKind | None = None,
    ) -> list[Permission]:
        """Return records matching all supplied filters, in storage order.

        ``None`` (and :data:`NULL_TYPE_ID` for *principal_type*) applies no
        filter for that dimension.  Returns an empty list when nothing matches.
        """

    @abc.abstractmethod
    def add(self, permissions: Sequence[Permission]) -> None: ...

    @abc.abstractmethod
    def update(self, permissions: Sequence[Permission]) -> None:
        """Set the kind of every stored record sharing each permission's identity.

        Records keep their position; nothing is inserted or merged.
        """

    @abc.abstractmethod
    def delete(self, permissions: Sequence[Permission]) -> None:
        """Remove stored records that share each permission's identity."""

    def new_instance(self, owner: str) -> Permission:
        """Return an unpersisted record scoped to *owner* with no principal."""
        return Permission(owner=owner)


def _matches(
    p: Permission,
    owner: str | None,
    principal_type: int | None,
    principal_key: str | None,
    activity: str | None,
    target: str | None,
    kind: PermissionKind | None,
) -> bool:
    return (
        (owner is None or p.owner == owner)
        and (principal_type in (None, NULL_TYPE_ID) or p.principal_type == principal_type)
        and (principal_key is None or p.principal_key == principal_key)
        and (activity is None or p.activity == activity)
        and (target is None or p.target == target)
        and (kind is None or p.kind == kind)
    )


# ---------------------------------------------------------------------------
# InMemoryPermissionStore
# ---------------------------------------------------------------------------


class InMemoryPermissionStore(PermissionStore):
    """List-backed store for unit tests and local development.

    Storage order is insertion order.  Records are not unique: an ``ALLOW``
    and a ``DENY`` for the same identity may coexist.
    """

    def __init__(self, permissions: Iterable[Permission] = ()) -> None:
        self._lock = threading.Lock()
        self._records: list[Permission] = []
        initial = list(permissions)
        if initial:
            self.add(initial)

    def select(
        self,
        owner: str | None = None,
        principal_type: int | None = None,
        principal_key: str | None = None,
        activity: str | None = None,
        target: str | None = None,
        kind: PermissionKind | None = None,
    ) -> list[Permission]:
        with self._lock:
            return [
                p
                for p in self._records
                if _matches(p, owner, principal_type, principal_key, activity, target, kind)
            ]

    def add(self, permissions: Sequence[Permission]) -> None:
        for p in permissions:
            p.validate()
        with self._lock:
            self._records.extend(permissions)

    def update(self, permissions: Sequence[Permission]) -> None:
        for p in permissions:
            p.validate()
        with self._lock:
            for new in permissions:
                self._records = [
                    new if old.identity == new.identity else old for old in self._records
                ]

    def delete(self, permissions: Sequence[Permission]) -> None:
        identities = {p.identity for p in permissions}
        with self._lock:
            self._records = [p for p in self._records if p.identity not in identities]

    def all(self) -> list[Permission]:
        """Return every stored record (helper for test assertions)."""
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


__all__ = ["InMemoryPermissionStore", "PermissionStore"]
