"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── ValidationError               (base.py)
    └── AuthorizationError            (authorization.py)
        ├── InvalidQueryError
        ├── UnknownPrincipalTypeError
        ├── GroupServiceError
        └── PermissionStoreError
"""

from mp_authz.kernel.errors.authorization import (
    AuthorizationError,
    GroupServiceError,
    InvalidQueryError,
    PermissionStoreError,
    UnknownPrincipalTypeError,
)
from mp_authz.kernel.errors.base import BaseError, ValidationError

__all__ = [
    "AuthorizationError",
    "BaseError",
    "GroupServiceError",
    "InvalidQueryError",
    "PermissionStoreError",
    "UnknownPrincipalTypeError",
    "ValidationError",
]
