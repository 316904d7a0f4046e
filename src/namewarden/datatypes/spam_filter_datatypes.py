"""
Data types for the username spam filter.

This module defines the Config Store row model (:class:`SpamFilterEntry`), the
query used to address rows (:class:`EntryQuery`), and the per-event snapshot
of a member (:class:`MemberIdentity`) that the match engine compares.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, List, Optional

import discord


class SpamFilterObjectType(Enum):
    """Kinds of Config Store rows, stored as their string value."""

    HIGH_RANKING_ROLE = "HIGH_RANKING_ROLE"
    ALLOWLIST_USER = "ALLOWLIST_USER"
    ALLOWLIST_ROLE = "ALLOWLIST_ROLE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SpamFilterEntry:
    """One row of the ``username_spam_filter`` table.

    Attributes:
        server_id: Guild the entry applies to
        object_type: What the row means (protected role, allowlisted user/role)
        object_id: Role or user snowflake
        object_name: Role name or username at the time of insertion
        server_name: Guild name at the time of insertion
    """
    server_id: int
    object_type: SpamFilterObjectType
    object_id: int
    object_name: str = ""
    server_name: str = ""


@dataclass(frozen=True, slots=True)
class EntryQuery:
    """Filter for Config Store reads and deletes. ``object_id=None`` matches any id."""
    server_id: int
    object_type: SpamFilterObjectType
    object_id: Optional[int] = None


@dataclass(slots=True)
class InsertManyResult:
    """Outcome of an unordered, non-atomic batch insert."""
    inserted: int = 0
    duplicates: int = 0
    failed: List[SpamFilterEntry] = field(default_factory=list)


def is_bannable(member: discord.Member) -> bool:
    """Return True when the bot can ban ``member`` in its guild.

    Mirrors Discord's own rules: the bot needs Ban Members, cannot act on the
    guild owner or itself, and its top role must sit above the member's.
    """
    guild = member.guild
    me = guild.me
    if me is None or member.id == me.id or member.id == guild.owner_id:
        return False
    if not me.guild_permissions.ban_members:
        return False
    return me.top_role > member.top_role


@dataclass(frozen=True, slots=True)
class MemberIdentity:
    """Snapshot of a guild member taken when an event is evaluated.

    Attributes:
        id: Member snowflake
        username: Account username
        nickname: Guild nickname, or None when unset
        role_ids: Ids of the roles the member holds
        bannable: Whether the bot is able to ban this member
        tag: Username with discriminator where Discord still has one
        member: The live py-cord member the snapshot was taken from, if any
    """
    id: int
    username: str
    nickname: Optional[str] = None
    role_ids: FrozenSet[int] = frozenset()
    bannable: bool = True
    tag: str = ""
    member: Any = field(default=None, compare=False, repr=False)

    @property
    def display_name(self) -> str:
        return self.nickname or self.username

    @property
    def audit_tag(self) -> str:
        return self.tag or self.username

    def has_any_role(self, role_ids) -> bool:
        return not self.role_ids.isdisjoint(role_ids)

    @classmethod
    def from_member(cls, member: discord.Member) -> "MemberIdentity":
        """Build a snapshot from a py-cord member."""
        return cls(
            id=member.id,
            username=member.name,
            nickname=member.nick,
            role_ids=frozenset(role.id for role in member.roles),
            bannable=is_bannable(member),
            tag=str(member),
            member=member,
        )
