"""Kernel security – PrincipalType, Principal, type registry and factory."""
from __future__ import annotations

import dataclasses
from enum import IntEnum
from typing import TYPE_CHECKING, Mapping

from mp_authz.kernel.errors import (
    AuthorizationError,
    InvalidQueryError,
    UnknownPrincipalTypeError,
)

if TYPE_CHECKING:
    from mp_authz.kernel.security.groups import EntityGroup
    from mp_authz.kernel.security.permission import Permission

# Store selects use this id to mean "any principal type".
NULL_TYPE_ID = -1


class PrincipalType(IntEnum):
    """Closed set of entity kinds that can hold permissions."""

    USER = 1
    GROUP = 2
    CHANNEL = 3

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]


_PREFIXES: dict[PrincipalType, str] = {
    PrincipalType.USER: "USER_ID",
    PrincipalType.GROUP: "GROUP_ID",
    PrincipalType.CHANNEL: "CHAN_ID",
}


@dataclasses.dataclass(frozen=True)
class Principal:
    """Identity that can hold permissions, unique by ``(key, type)``.

    Build instances through :class:`PrincipalFactory`; a principal carries no
    group membership or permission state of its own.
    """

    key: str
    type: PrincipalType

    def __str__(self) -> str:
        return f"{self.type.prefix}.{self.key}"


class PrincipalTypeRegistry:
    """Maps persisted principal type ids to :class:`PrincipalType` members.

    The default mapping uses each member's integer value.  Deployments whose
    store uses other ids can pass their own *mapping*.
    """

    def __init__(self, mapping: Mapping[int, PrincipalType] | None = None) -> None:
        self._by_id: dict[int, PrincipalType] = dict(
            mapping if mapping is not None else {t.value: t for t in PrincipalType}
        )
        self._by_type: dict[PrincipalType, int] = {t: i for i, t in self._by_id.items()}

    def type_for(self, type_id: int | None) -> PrincipalType:
        """Return the kind registered for *type_id*.

        Raises :class:`UnknownPrincipalTypeError` when nothing is registered.
        """
        try:
            return self._by_id[type_id]  # type: ignore[index]
        except (KeyError, TypeError) as exc:
            raise UnknownPrincipalTypeError(type_id, cause=exc) from exc

    def id_for(self, principal_type: PrincipalType) -> int:
        try:
            return self._by_type[principal_type]
        except KeyError as exc:
            raise UnknownPrincipalTypeError(principal_type, cause=exc) from exc

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._by_id


class PrincipalFactory:
    """Builds :class:`Principal` handles from keys, groups and stored records."""

    def __init__(self, registry: PrincipalTypeRegistry | None = None) -> None:
        self._registry = registry if registry is not None else PrincipalTypeRegistry()

    @property
    def registry(self) -> PrincipalTypeRegistry:
        return self._registry

    def new_principal(self, key: str, principal_type: PrincipalType) -> Principal:
        if not key:
            raise InvalidQueryError("Principal key must not be empty")
        try:
            kind = PrincipalType(principal_type)
        except ValueError as exc:
            raise UnknownPrincipalTypeError(principal_type, cause=exc) from exc
        return Principal(key=key, type=kind)

    def for_group(self, group: "EntityGroup") -> Principal:
        """Return the ``GROUP`` principal standing for *group*."""
        return self.new_principal(group.key, PrincipalType.GROUP)

    def for_permission(self, permission: "Permission") -> Principal:
        """Return the principal a stored record was granted to."""
        principal_type = self._registry.type_for(permission.principal_type)
        if not permission.principal_key:
            raise AuthorizationError(
                "Permission record has no principal key",
                detail={"owner": permission.owner, "activity": permission.activity},
            )
        return self.new_principal(permission.principal_key, principal_type)

    def type_id(self, principal: Principal) -> int:
        return self._registry.id_for(principal.type)


__all__ = [
    "NULL_TYPE_ID",
    "Principal",
    "PrincipalFactory",
    "PrincipalType",
    "PrincipalTypeRegistry",
]
