"""Authorization-layer errors surfaced by the permission engine."""

from __future__ import annotations

from typing import Any

from mp_authz.kernel.errors.base import BaseError


class AuthorizationError(BaseError):
    """A permission query or mutation could not be completed."""

    default_code = "authorization_error"


class InvalidQueryError(AuthorizationError):
    """A query or mutation was issued with missing or inconsistent arguments."""

    default_code = "invalid_query"


class UnknownPrincipalTypeError(AuthorizationError):
    """A persisted principal type id has no registered principal kind."""

    default_code = "unknown_principal_type"

    def __init__(self, type_id: Any, **kwargs: Any) -> None:
        super().__init__(f"Unknown principal type id {type_id!r}", **kwargs)
        self.type_id = type_id


class GroupServiceError(AuthorizationError):
    """The group hierarchy could not be queried."""

    default_code = "group_service_error"


class PermissionStoreError(AuthorizationError):
    """The permission store failed during select, add, update or delete."""

    default_code = "permission_store_error"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Permission store '{operation}' failed", **kwargs)
        self.operation = operation


__all__ = [
    "AuthorizationError",
    "GroupServiceError",
    "InvalidQueryError",
    "PermissionStoreError",
    "UnknownPrincipalTypeError",
]
