"""SQLAlchemy adapter – relational PermissionStore."""
from mp_authz.adapters.sqlalchemy.store import SQLAlchemyPermissionStore, permissions_table

__all__ = ["SQLAlchemyPermissionStore", "permissions_table"]
