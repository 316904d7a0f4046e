"""
Entry point of the username spam filter.

:meth:`UsernameSpamFilter.run` is called for every member join and nickname
change. It runs the skip checks, resolves the protected members for the
server, and bans the member when one of their names matches.
"""

from __future__ import annotations

from typing import List, Protocol

import discord

from namewarden.configuration.app_configuration import SpamFilterSettings
from namewarden.datatypes.spam_filter_datatypes import MemberIdentity
from namewarden.errors import StoreError
from namewarden.spam_filter.allowlist_resolver import AllowlistResolver
from namewarden.spam_filter.match_engine import MatchEngine
from namewarden.spam_filter.moderation_actuator import ModerationActuator
from namewarden.spam_filter.protected_roles import ProtectedRoleResolver
from namewarden.util.discord_utils import GuildMembershipDirectory
from namewarden.util.logger import get_logger

logger = get_logger("username_spam_filter")


class MembershipDirectory(Protocol):
    @property
    def server_id(self) -> int: ...

    @property
    def server_name(self) -> str: ...

    async def fetch_all_members(self) -> List[MemberIdentity]: ...

    async def ban(self, member: MemberIdentity, reason: str) -> None: ...

    async def direct_message(self, member: MemberIdentity, text: str) -> None: ...


class UsernameSpamFilter:
    """Bans members whose nickname or username impersonates a high-ranking member."""

    def __init__(
        self,
        settings: SpamFilterSettings,
        allowlist: AllowlistResolver,
        protected_roles: ProtectedRoleResolver,
        actuator: ModerationActuator,
        match_engine: MatchEngine | None = None,
    ) -> None:
        self.settings = settings
        self.allowlist = allowlist
        self.protected_roles = protected_roles
        self.actuator = actuator
        self.match_engine = match_engine or MatchEngine()

    async def should_skip(self, candidate: MemberIdentity, server_id: int) -> bool:
        """Return True when ``candidate`` must not be evaluated.

        Raises:
            StoreError: If the allowlist cannot be read.
        """
        if not self.settings.is_enabled_for(server_id):
            return True

        if not candidate.bannable:
            logger.info("Skipping username spam filter because %s is not bannable.", candidate.audit_tag)
            return True

        if await self.allowlist.is_user_allowlisted(server_id, candidate.id):
            logger.info("Skipping username spam filter because %s is on the allowlist.", candidate.audit_tag)
            return True

        if await self.allowlist.is_role_allowlisted(server_id, candidate.role_ids):
            logger.info(
                "Skipping username spam filter because %s has a role on the allowlist.", candidate.audit_tag
            )
            return True

        return False

    async def run(self, candidate: MemberIdentity, directory: MembershipDirectory) -> bool:
        """Evaluate ``candidate`` and enforce on a match.

        Returns True when a match was found and enforcement was attempted.
        Config Store failures skip the member (fail open) and are logged.
        """
        server_id = directory.server_id
        try:
            if await self.should_skip(candidate, server_id):
                return False
            protected_members = await self.protected_roles.get_protected_members(server_id, directory)
        except StoreError:
            logger.exception(
                "Config Store unavailable, skipping username spam filter for %s in server %s",
                candidate.audit_tag, server_id,
            )
            return False

        # Not configured for this server, or nobody holds the roles
        if not protected_members:
            return False

        matched = self.match_engine.find_match(candidate, protected_members)
        if matched is None:
            return False

        return await self.actuator.apply(candidate, matched, directory, directory.server_name)

    async def run_for_member(self, member: discord.Member) -> bool:
        """Evaluate a live py-cord member in its own guild."""
        return await self.run(MemberIdentity.from_member(member), GuildMembershipDirectory(member.guild))
