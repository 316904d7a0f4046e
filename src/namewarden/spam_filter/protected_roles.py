"""
Resolution of the high-ranking ("protected") roles and their current holders.

Two interchangeable strategies share one interface:

- :class:`StoreProtectedRoleResolver` reads the roles an admin configured for
  the server through the configuration workflow.
- :class:`FixedProtectedRoleResolver` uses role ids fixed in the application
  config, the same for every server.

An empty role set means the filter is inactive for that server; callers stop
before fetching any member.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Protocol, Set

from namewarden.database.spam_filter_store import SpamFilterStore
from namewarden.datatypes.spam_filter_datatypes import EntryQuery, MemberIdentity, SpamFilterObjectType
from namewarden.util.logger import get_logger

logger = get_logger("protected_roles")


class MemberSource(Protocol):
    async def fetch_all_members(self) -> List[MemberIdentity]: ...


class ProtectedRoleResolver(ABC):
    """Base class: subclasses decide which roles are high-ranking."""

    @abstractmethod
    async def get_protected_role_ids(self, server_id: int) -> Set[int]:
        """Return the high-ranking role ids for ``server_id``."""

    async def get_holders(self, directory: MemberSource, role_ids: Iterable[int]) -> List[MemberIdentity]:
        """Return the members holding at least one of ``role_ids``.

        One fetch of the full member list, filtered locally.
        """
        wanted = set(role_ids)
        members = await directory.fetch_all_members()
        return [member for member in members if member.has_any_role(wanted)]

    async def get_protected_members(self, server_id: int, directory: MemberSource) -> List[MemberIdentity]:
        role_ids = await self.get_protected_role_ids(server_id)
        if not role_ids:
            return []
        return await self.get_holders(directory, role_ids)


class StoreProtectedRoleResolver(ProtectedRoleResolver):
    """High-ranking roles configured per server in the Config Store."""

    def __init__(self, store: SpamFilterStore) -> None:
        self.store = store

    async def get_protected_role_ids(self, server_id: int) -> Set[int]:
        return await self.store.find_object_ids(
            EntryQuery(server_id, SpamFilterObjectType.HIGH_RANKING_ROLE)
        )


class FixedProtectedRoleResolver(ProtectedRoleResolver):
    """High-ranking roles fixed in the application config."""

    def __init__(self, role_ids: Iterable[int]) -> None:
        self.role_ids = frozenset(role_ids)
        if not self.role_ids:
            logger.warning("Fixed protected role source configured without any role ids; filter is inactive")

    async def get_protected_role_ids(self, server_id: int) -> Set[int]:
        return set(self.role_ids)
