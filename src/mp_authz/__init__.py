"""
mp_authz – permission resolution engine.

Import path convention::

    from mp_authz.kernel.security import Permission, PrincipalType
    from mp_authz.application.authorization import AuthorizationService
    from mp_authz.adapters.sqlalchemy import SQLAlchemyPermissionStore
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
