"""Group-inheritance closure: principal → principals of every containing group."""
from __future__ import annotations

from mp_authz.kernel.errors import AuthorizationError, GroupServiceError
from mp_authz.kernel.security.groups import EntityGroup, GroupHierarchy
from mp_authz.kernel.security.principal import Principal, PrincipalFactory
from mp_authz.observability.logging import get_logger

__all__ = ["GroupInheritance"]

logger = get_logger(__name__)


class GroupInheritance:
    """Resolves the principals a principal inherits permissions from.

    The :class:`GroupHierarchy` already flattens transitive membership and
    guards against cycles, so no further recursion happens here.
    """

    def __init__(self, groups: GroupHierarchy, factory: PrincipalFactory) -> None:
        self._groups = groups
        self._factory = factory

    def groups_for_principal(self, principal: Principal) -> list[EntityGroup]:
        try:
            return list(self._groups.all_containing_groups(principal))
        except AuthorizationError:
            raise
        except Exception as exc:
            logger.warning(
                "group_lookup_failed",
                principal=str(principal),
                error=repr(exc),
            )
            raise GroupServiceError(
                f"Could not retrieve groups for {principal}: {exc}",
                detail={"principal": str(principal)},
                cause=exc,
            ) from exc

    def inherited_principals(self, principal: Principal) -> tuple[Principal, ...]:
        """One ``GROUP`` principal per containing group, in hierarchy order."""
        return tuple(self._factory.for_group(g) for g in self.groups_for_principal(principal))
