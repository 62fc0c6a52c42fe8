"""Kernel security – GroupHierarchy port and InMemoryGroupHierarchy."""

from __future__ import annotations

import abc
import dataclasses
import threading
from collections import deque
from typing import Iterable

from mp_authz.kernel.security.principal import Principal, PrincipalType


@dataclasses.dataclass(frozen=True)
class EntityGroup:
    """Handle for a group as returned by the hierarchy service."""

    key: str
    name: str | None = None


class GroupHierarchy(abc.ABC):
    """Port — group membership service.

    The hierarchy owns transitive flattening and cycle safety; callers trust
    the returned sequence to be finite.
    """

    @abc.abstractmethod
    def all_containing_groups(self, member: Principal) -> Iterable[EntityGroup]:
        """Return every group that contains *member*, directly or transitively."""


class InMemoryGroupHierarchy(GroupHierarchy):
    """Dict-backed hierarchy for unit tests and local development.

    Members are principals; a group nested inside another is added as a
    ``GROUP`` principal member.  Flattening is breadth-first and visits each
    group once, so cycles terminate.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._groups: dict[str, EntityGroup] = {}
        # member -> keys of the groups that directly contain it
        self._parents: dict[Principal, list[str]] = {}

    def add_group(self, key: str, name: str | None = None) -> EntityGroup:
        with self._lock:
            return self._groups.setdefault(key, EntityGroup(key=key, name=name))

    def add_member(self, group_key: str, member: Principal) -> None:
        """Make *member* a direct member of group *group_key* (created if needed)."""
        self.add_group(group_key)
        with self._lock:
            parents = self._parents.setdefault(member, [])
            if group_key not in parents:
                parents.append(group_key)

    def remove_member(self, group_key: str, member: Principal) -> None:
        with self._lock:
            parents = self._parents.get(member)
            if parents and group_key in parents:
                parents.remove(group_key)

    def all_containing_groups(self, member: Principal) -> list[EntityGroup]:
        with self._lock:
            seen: set[str] = set()
            result: list[EntityGroup] = []
            queue = deque(self._parents.get(member, []))
            while queue:
                key = queue.popleft()
                if key in seen:
                    continue
                seen.add(key)
                result.append(self._groups[key])
                queue.extend(self._parents.get(Principal(key, PrincipalType.GROUP), []))
            return result


__all__ = ["EntityGroup", "GroupHierarchy", "InMemoryGroupHierarchy"]
