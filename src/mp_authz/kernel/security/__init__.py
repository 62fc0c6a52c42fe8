"""Kernel security – principals, permission records, store and group ports."""
from mp_authz.kernel.security.groups import EntityGroup, GroupHierarchy, InMemoryGroupHierarchy
from mp_authz.kernel.security.permission import Permission, PermissionFilter, PermissionKind
from mp_authz.kernel.security.principal import (
    NULL_TYPE_ID,
    Principal,
    PrincipalFactory,
    PrincipalType,
    PrincipalTypeRegistry,
)
from mp_authz.kernel.security.store import InMemoryPermissionStore, PermissionStore

__all__ = [
    "EntityGroup",
    "GroupHierarchy",
    "InMemoryGroupHierarchy",
    "InMemoryPermissionStore",
    "NULL_TYPE_ID",
    "Permission",
    "PermissionFilter",
    "PermissionKind",
    "PermissionStore",
    "Principal",
    "PrincipalFactory",
    "PrincipalType",
    "PrincipalTypeRegistry",
]
