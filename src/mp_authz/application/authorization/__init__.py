"""Application authorization – permission engine, managers and channel checks."""
from mp_authz.application.authorization.channels import ChannelPolicy
from mp_authz.application.authorization.inheritance import GroupInheritance
from mp_authz.application.authorization.managers import (
    PermissionManager,
    UpdatingPermissionManager,
)
from mp_authz.application.authorization.service import AuthorizationService

__all__ = [
    "AuthorizationService",
    "ChannelPolicy",
    "GroupInheritance",
    "PermissionManager",
    "UpdatingPermissionManager",
]
