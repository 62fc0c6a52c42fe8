"""Authorization service — the permission resolution engine.

Answers "may principal P perform activity A on target T under owner O?" by
combining P's own permissions with those held by every group containing P.

Direct permission sets are served from a :class:`PermissionCache`.  Each
mutation invalidates the affected principals *before* the store is touched,
so a reader never sees a mutated store through a stale snapshot.  A failed
store call leaves the cache cleared and the store state unknown.

Example::

    service = AuthorizationService(store, groups)
    alice = service.new_principal("alice", PrincipalType.USER)
    if service.does_principal_have_permission(alice, "CHAN_ID.42", "SUBSCRIBE"):
        ...
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from mp_authz.application.authorization.inheritance import GroupInheritance
from mp_authz.application.authorization.managers import (
    PermissionManager,
    UpdatingPermissionManager,
)
from mp_authz.application.cache.permissions import PermissionCache
from mp_authz.config.settings import AuthorizationSettings
from mp_authz.kernel.errors import (
    AuthorizationError,
    InvalidQueryError,
    PermissionStoreError,
)
from mp_authz.kernel.security.groups import GroupHierarchy
from mp_authz.kernel.security.permission import Permission, PermissionFilter
from mp_authz.kernel.security.principal import (
    NULL_TYPE_ID,
    Principal,
    PrincipalFactory,
    PrincipalType,
)
from mp_authz.kernel.security.store import PermissionStore
from mp_authz.kernel.time import Clock
from mp_authz.observability.logging import get_logger

__all__ = ["AuthorizationService"]

logger = get_logger(__name__)

R = TypeVar("R")


class AuthorizationService:
    """Permission decisions, listings and mutations over a store and a group hierarchy."""

    def __init__(
        self,
        store: PermissionStore,
        groups: GroupHierarchy,
        *,
        settings: AuthorizationSettings | None = None,
        factory: PrincipalFactory | None = None,
        cache: PermissionCache | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._settings = settings if settings is not None else AuthorizationSettings()
        self._factory = factory if factory is not None else PrincipalFactory()
        if cache is None:
            cache = PermissionCache(ttl=self._settings.cache_ttl_seconds, clock=clock)
        self._cache = cache
        self._inheritance = GroupInheritance(groups, self._factory)

    @property
    def settings(self) -> AuthorizationSettings:
        return self._settings

    @property
    def cache(self) -> PermissionCache:
        return self._cache

    @property
    def factory(self) -> PrincipalFactory:
        return self._factory

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    def _call_store(self, operation: str, fn: Callable[..., R], *args: Any) -> R:
        try:
            return fn(*args)
        except AuthorizationError:
            raise
        except Exception as exc:
            raise PermissionStoreError(
                operation,
                f"Permission store '{operation}' failed: {exc}",
                cause=exc,
            ) from exc

    def _select(
        self,
        owner: str | None,
        principal_type: int | None,
        principal_key: str | None,
        activity: str | None,
        target: str | None,
    ) -> tuple[Permission, ...]:
        return tuple(
            self._call_store(
                "select",
                self._store.select,
                owner,
                principal_type,
                principal_key,
                activity,
                target,
                None,
            )
        )

    def _direct_permissions(self, principal: Principal) -> tuple[Permission, ...]:
        permissions = self._cache.get(principal)
        if permissions is None:
            # Concurrent misses may both hit the store.  A snapshot read
            # across an invalidation is returned but not cached.
            generation = self._cache.generation(principal)
            permissions = self._cache.put(
                principal,
                self.get_uncached_permissions_for_principal(principal),
                generation=generation,
            )
        return permissions

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def get_permissions_for_principal(
        self,
        principal: Principal,
        owner: str | None = None,
        activity: str | None = None,
        target: str | None = None,
    ) -> tuple[Permission, ...]:
        """Direct permissions of *principal* matching the filter."""
        return PermissionFilter(owner, activity, target).apply(self._direct_permissions(principal))

    def get_all_permissions_for_principal(
        self,
        principal: Principal,
        owner: str | None = None,
        activity: str | None = None,
        target: str | None = None,
    ) -> tuple[Permission, ...]:
        """Direct permissions followed by those of every containing group.

        Groups contribute in hierarchy order; duplicates are kept.
        """
        result = list(self.get_permissions_for_principal(principal, owner, activity, target))
        for inherited in self._inheritance.inherited_principals(principal):
            result.extend(self.get_permissions_for_principal(inherited, owner, activity, target))
        return tuple(result)

    def get_permissions_for_owner(
        self,
        owner: str | None = None,
        activity: str | None = None,
        target: str | None = None,
    ) -> tuple[Permission, ...]:
        """Every stored permission matching the filter, whatever its principal."""
        return self._select(owner, NULL_TYPE_ID, None, activity, target)

    def get_uncached_permissions_for_principal(
        self,
        principal: Principal,
        owner: str | None = None,
        activity: str | None = None,
        target: str | None = None,
    ) -> tuple[Permission, ...]:
        """Direct permissions read straight from the store."""
        type_id = self._factory.type_id(principal)
        return self._select(owner, type_id, principal.key, activity, target)

    def get_authorized_principals(
        self,
        owner: str | None = None,
        activity: str | None = None,
        target: str | None = None,
    ) -> tuple[Principal, ...]:
        """Distinct principals holding a matching permission, first-seen order."""
        return self._principals_from_permissions(
            self.get_permissions_for_owner(owner, activity, target)
        )

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def does_principal_have_permission(
        self,
        principal: Principal,
        owner: str,
        activity: str,
        target: str | None = None,
    ) -> bool:
        """Return ``True`` if *principal* or any containing group is granted the activity.

        ``target=None`` matches any target.  Raises :class:`GroupServiceError`
        when the group hierarchy fails and the direct check was negative.
        """
        if not owner or not activity:
            raise InvalidQueryError(
                "owner and activity are required",
                detail={"owner": owner, "activity": activity},
            )
        via: Principal | None = None
        if self._prim_does_principal_have_permission(principal, owner, activity, target):
            via = principal
        else:
            for inherited in self._inheritance.inherited_principals(principal):
                if self._prim_does_principal_have_permission(inherited, owner, activity, target):
                    via = inherited
                    break
        logger.debug(
            "permission_decision",
            principal=str(principal),
            owner=owner,
            activity=activity,
            target=target,
            granted=via is not None,
            via=str(via) if via is not None else None,
        )
        return via is not None

    def _prim_does_principal_have_permission(
        self,
        principal: Principal,
        owner: str,
        activity: str,
        target: str | None,
    ) -> bool:
        # A matching DENY is only a non-hit; it does not veto an ALLOW elsewhere.
        for p in self._direct_permissions(principal):
            if (
                owner == p.owner
                and activity == p.activity
                and (target is None or target == p.target)
                and not p.is_deny
            ):
                return True
        return False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_permissions(
        self, permissions: Iterable[Permission], principal: Principal | None = None
    ) -> None:
        self._mutate("add", self._store.add, permissions, principal)

    def update_permissions(
        self, permissions: Iterable[Permission], principal: Principal | None = None
    ) -> None:
        self._mutate("update", self._store.update, permissions, principal)

    def remove_permissions(
        self, permissions: Iterable[Permission], principal: Principal | None = None
    ) -> None:
        self._mutate("delete", self._store.delete, permissions, principal)

    def _mutate(
        self,
        operation: str,
        fn: Callable[[list[Permission]], None],
        permissions: Iterable[Permission],
        principal: Principal | None,
    ) -> None:
        records = list(permissions)
        if not records:
            return
        affected = (
            (principal,) if principal is not None else self._principals_from_permissions(records)
        )
        self._cache.invalidate_many(affected)
        self._call_store(operation, fn, records)
        logger.info(
            "permissions_mutated",
            op=operation,
            count=len(records),
            invalidated=[str(p) for p in affected],
        )

    def _principals_from_permissions(
        self, permissions: Iterable[Permission]
    ) -> tuple[Principal, ...]:
        return tuple(dict.fromkeys(self._factory.for_permission(p) for p in permissions))

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def new_principal(self, key: str, principal_type: PrincipalType) -> Principal:
        return self._factory.new_principal(key, principal_type)

    def new_permission(self, owner: str, principal: Principal | None = None) -> Permission:
        """Unpersisted record for *owner*, granted to *principal* when given."""
        permission = self._store.new_instance(owner)
        if principal is not None:
            permission = permission.for_principal(principal, self._factory)
        return permission

    def principal_string(self, principal: Principal) -> str:
        return str(principal)

    def new_permission_manager(self, owner: str) -> PermissionManager:
        return PermissionManager(owner, self)

    def new_updating_permission_manager(self, owner: str) -> UpdatingPermissionManager:
        return UpdatingPermissionManager(owner, self)
