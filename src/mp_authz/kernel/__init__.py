"""Kernel – framework-agnostic building blocks."""

from mp_authz.kernel.errors import (
    AuthorizationError,
    BaseError,
    GroupServiceError,
    InvalidQueryError,
    PermissionStoreError,
    UnknownPrincipalTypeError,
    ValidationError,
)

__all__ = [
    "AuthorizationError",
    "BaseError",
    "GroupServiceError",
    "InvalidQueryError",
    "PermissionStoreError",
    "UnknownPrincipalTypeError",
    "ValidationError",
]
