"""Shared fixtures for the permission engine unit tests."""

from __future__ import annotations

import pytest

from mp_authz.application.authorization import AuthorizationService
from mp_authz.kernel.security import (
    InMemoryGroupHierarchy,
    InMemoryPermissionStore,
    Permission,
    PermissionKind,
    Principal,
    PrincipalType,
)
from mp_authz.kernel.time import FrozenClock


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def store() -> InMemoryPermissionStore:
    return InMemoryPermissionStore()


@pytest.fixture
def groups() -> InMemoryGroupHierarchy:
    return InMemoryGroupHierarchy()


@pytest.fixture
def service(store, groups, clock) -> AuthorizationService:
    return AuthorizationService(store, groups, clock=clock)


@pytest.fixture
def alice() -> Principal:
    return Principal("alice", PrincipalType.USER)


@pytest.fixture
def editors() -> Principal:
    return Principal("editors", PrincipalType.GROUP)


def _grant(
    principal: Principal,
    owner: str,
    activity: str,
    target: str | None = None,
    kind: PermissionKind = PermissionKind.ALLOW,
) -> Permission:
    """Build a record granted to *principal* using the default type ids."""
    return Permission(
        owner=owner,
        principal_type=int(principal.type),
        principal_key=principal.key,
        activity=activity,
        target=target,
        kind=kind,
    )


@pytest.fixture
def grant():
    return _grant

