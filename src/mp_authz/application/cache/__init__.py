"""Application cache – per-principal permission snapshots."""
from mp_authz.application.cache.permissions import CacheEntry, PermissionCache

__all__ = ["CacheEntry", "PermissionCache"]
