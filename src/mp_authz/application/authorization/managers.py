"""Owner-scoped façades over :class:`AuthorizationService`."""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from mp_authz.kernel.errors import InvalidQueryError
from mp_authz.kernel.security.permission import Permission
from mp_authz.kernel.security.principal import Principal

if TYPE_CHECKING:
    from mp_authz.application.authorization.service import AuthorizationService

__all__ = ["PermissionManager", "UpdatingPermissionManager"]


class PermissionManager:
    """Read-only view of the permissions in one owner namespace."""

    def __init__(self, owner: str, service: "AuthorizationService") -> None:
        if not owner:
            raise InvalidQueryError("A permission manager needs an owner")
        self._owner = owner
        self._service = service

    @property
    def owner(self) -> str:
        return self._owner

    def get_authorized_principals(
        self, activity: str | None = None, target: str | None = None
    ) -> tuple[Principal, ...]:
        return self._service.get_authorized_principals(self._owner, activity, target)

    def get_permissions(
        self, activity: str | None = None, target: str | None = None
    ) -> tuple[Permission, ...]:
        return self._service.get_permissions_for_owner(self._owner, activity, target)

    def get_permissions_for_principal(
        self, principal: Principal, activity: str | None = None, target: str | None = None
    ) -> tuple[Permission, ...]:
        return self._service.get_permissions_for_principal(principal, self._owner, activity, target)

    def get_all_permissions_for_principal(
        self, principal: Principal, activity: str | None = None, target: str | None = None
    ) -> tuple[Permission, ...]:
        return self._service.get_all_permissions_for_principal(
            principal, self._owner, activity, target
        )

    def does_principal_have_permission(
        self, principal: Principal, activity: str, target: str | None = None
    ) -> bool:
        return self._service.does_principal_have_permission(
            principal, self._owner, activity, target
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(owner={self._owner!r})"


class UpdatingPermissionManager(PermissionManager):
    """:class:`PermissionManager` that can also create and mutate records for its owner."""

    def new_permission(self, principal: Principal | None = None) -> Permission:
        return self._service.new_permission(self._owner, principal)

    def add_permissions(
        self, permissions: Iterable[Permission], principal: Principal | None = None
    ) -> None:
        self._service.add_permissions(self._owned(permissions), principal)

    def update_permissions(
        self, permissions: Iterable[Permission], principal: Principal | None = None
    ) -> None:
        self._service.update_permissions(self._owned(permissions), principal)

    def remove_permissions(
        self, permissions: Iterable[Permission], principal: Principal | None = None
    ) -> None:
        self._service.remove_permissions(self._owned(permissions), principal)

    def _owned(self, permissions: Iterable[Permission]) -> list[Permission]:
        records = list(permissions)
        foreign = sorted({p.owner for p in records if p.owner != self._owner})
        if foreign:
            raise InvalidQueryError(
                f"Manager for {self._owner!r} cannot change permissions of other owners",
                detail={"owners": foreign},
            )
        return records
