"""Kernel security – Permission records and query filters."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import TYPE_CHECKING

from mp_authz.kernel.errors import ValidationError

if TYPE_CHECKING:
    from mp_authz.kernel.security.principal import Principal, PrincipalFactory


class PermissionKind(str, Enum):
    ALLOW = "ALLOW"
    DENY = "DENY"


@dataclasses.dataclass(frozen=True)
class Permission:
    """A grant (or denial) of *activity* on *target* within the *owner* namespace.

    ``target=None`` applies to any target.  ``principal_type`` holds the
    persisted type id; resolve it through a
    :class:`~mp_authz.kernel.security.principal.PrincipalTypeRegistry`.
    """

    owner: str
    principal_type: int | None = None
    principal_key: str | None = None
    activity: str | None = None
    target: str | None = None
    kind: PermissionKind = PermissionKind.ALLOW

    @property
    def is_deny(self) -> bool:
        return self.kind == PermissionKind.DENY

    @property
    def identity(self) -> tuple[str, int | None, str | None, str | None, str | None]:
        """Fields identifying a stored record; ``kind`` is the mutable part."""
        return (self.owner, self.principal_type, self.principal_key, self.activity, self.target)

    def for_principal(self, principal: "Principal", factory: "PrincipalFactory") -> "Permission":
        """Return a copy granted to *principal*."""
        return dataclasses.replace(
            self,
            principal_type=factory.type_id(principal),
            principal_key=principal.key,
        )

    def validate(self) -> None:
        """Raise :class:`ValidationError` unless this record may be stored."""
        errors = [
            {"field": name, "message": "must not be empty"}
            for name in ("owner", "activity", "principal_key")
            if not getattr(self, name)
        ]
        if self.principal_type is None:
            errors.append({"field": "principal_type", "message": "must be set"})
        if errors:
            raise ValidationError("Permission record is incomplete", errors=errors)


@dataclasses.dataclass(frozen=True)
class PermissionFilter:
    """``(owner, activity, target)`` query; an absent field matches any value."""

    owner: str | None = None
    activity: str | None = None
    target: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.owner is None and self.activity is None and self.target is None

    def matches(self, permission: Permission) -> bool:
        return (
            (self.owner is None or self.owner == permission.owner)
            and (self.activity is None or self.activity == permission.activity)
            and (self.target is None or self.target == permission.target)
        )

    def apply(self, permissions: tuple[Permission, ...]) -> tuple[Permission, ...]:
        if self.is_empty:
            return permissions
        return tuple(p for p in permissions if self.matches(p))


__all__ = ["Permission", "PermissionFilter", "PermissionKind"]
