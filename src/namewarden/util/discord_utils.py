"""
discord_utils.py
================

Adapters between py-cord and the spam filter.

- :class:`GuildMembershipDirectory` wraps a ``discord.Guild`` and exposes the
  member/role lookups, the ban and the DM the filter needs, translating
  Discord failures into :class:`BanError` / :class:`DeliveryError`.
- :class:`ReactionPromptChannel` sends a DM prompt with reaction affordances
  and waits, with a deadline, for the first qualifying reaction.
- Permission helpers used to authorize the configuration workflow.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Union

import discord

from namewarden.datatypes.spam_filter_datatypes import MemberIdentity
from namewarden.errors import BanError, DeliveryError
from namewarden.util.logger import get_logger

logger = get_logger("discord_utils")


# ==========================================
# Permission checks
# ==========================================

def is_discord_admin(member: Union[discord.User, discord.Member]) -> bool:
    """Return True if ``member`` has the Administrator permission."""
    permissions = getattr(member, "guild_permissions", None)
    return bool(getattr(permissions, "administrator", False))


def is_discord_server_manager(member: Union[discord.User, discord.Member]) -> bool:
    """Return True if ``member`` has the Manage Server permission."""
    permissions = getattr(member, "guild_permissions", None)
    return bool(getattr(permissions, "manage_guild", False))


def can_configure_spam_filter(member: Union[discord.User, discord.Member]) -> bool:
    return is_discord_admin(member) or is_discord_server_manager(member)


# ==========================================
# Membership directory
# ==========================================

class GuildMembershipDirectory:
    """Member, role and enforcement access for one guild."""

    def __init__(self, guild: discord.Guild) -> None:
        self.guild = guild

    @property
    def server_id(self) -> int:
        return self.guild.id

    @property
    def server_name(self) -> str:
        return self.guild.name

    async def fetch_member(self, member_id: int) -> Optional[MemberIdentity]:
        """Return a snapshot of the member, or None if they are not in the guild."""
        member = self.guild.get_member(member_id)
        if member is None:
            try:
                member = await self.guild.fetch_member(member_id)
            except discord.NotFound:
                return None
        return MemberIdentity.from_member(member)

    async def fetch_all_members(self) -> List[MemberIdentity]:
        """Return snapshots of every guild member, chunking the guild first if needed."""
        if not self.guild.chunked:
            await self.guild.chunk()
        return [MemberIdentity.from_member(member) for member in self.guild.members]

    async def fetch_role(self, role_id: int) -> Optional[discord.Role]:
        role = self.guild.get_role(role_id)
        if role is not None:
            return role
        try:
            roles = await self.guild.fetch_roles()
        except discord.HTTPException as exc:
            logger.error("Failed to fetch roles for guild %s: %s", self.guild.id, exc)
            return None
        return discord.utils.get(roles, id=role_id)

    async def fetch_roles(self, role_ids: Iterable[Optional[int]]) -> List[discord.Role]:
        """Resolve role ids, silently dropping None and ids that no longer exist."""
        roles: List[discord.Role] = []
        for role_id in role_ids:
            if role_id is None:
                continue
            role = await self.fetch_role(int(role_id))
            if role is None:
                logger.info("Role %s not found in guild %s, skipping", role_id, self.guild.id)
                continue
            if role not in roles:
                roles.append(role)
        return roles

    async def ban(self, member: MemberIdentity, reason: str) -> None:
        """Ban ``member``. Banning an already-banned user is accepted by Discord."""
        target = member.member if member.member is not None else discord.Object(id=member.id)
        try:
            await self.guild.ban(target, reason=reason)
        except discord.Forbidden as exc:
            raise BanError(f"missing permission to ban {member.audit_tag}") from exc
        except discord.NotFound as exc:
            raise BanError(f"{member.audit_tag} is no longer available to ban") from exc
        except discord.HTTPException as exc:
            raise BanError(f"ban request for {member.audit_tag} failed: {exc}") from exc

    async def direct_message(self, member: MemberIdentity, text: str) -> None:
        """DM ``member``. Raises DeliveryError when the DM cannot be delivered."""
        try:
            target = member.member
            if target is None:
                target = await self.guild.fetch_member(member.id)
            await target.send(text)
        except discord.Forbidden as exc:
            raise DeliveryError(f"{member.audit_tag} does not accept DMs from the bot") from exc
        except discord.HTTPException as exc:
            raise DeliveryError(f"DM to {member.audit_tag} failed: {exc}") from exc


# ==========================================
# Reaction prompts
# ==========================================

class ReactionPromptChannel:
    """Sends reaction prompts over DM and waits for the first answer."""

    def __init__(self, bot: discord.Client) -> None:
        self.bot = bot

    async def send_prompt_with_reactions(
        self,
        recipient: discord.abc.Messageable,
        embeds: Sequence[discord.Embed],
        reactions: Sequence[str],
    ) -> discord.Message:
        message = await recipient.send(embeds=list(embeds))
        for emoji in reactions:
            await message.add_reaction(emoji)
        return message

    async def await_single_reaction(
        self,
        message: discord.Message,
        *,
        timeout: float,
        reactions: Sequence[str],
    ) -> str:
        """Return the emoji of the first reaction from a non-bot user on ``message``.

        Raises:
            asyncio.TimeoutError: If nobody reacts within ``timeout`` seconds. The
                listener registered by ``wait_for`` is discarded with the wait.
        """

        def check(reaction: discord.Reaction, user: Union[discord.User, discord.Member]) -> bool:
            return (
                reaction.message.id == message.id
                and str(reaction.emoji) in reactions
                and not user.bot
            )

        reaction, _user = await self.bot.wait_for("reaction_add", check=check, timeout=timeout)
        return str(reaction.emoji)

    async def send(
        self,
        recipient: discord.abc.Messageable,
        *,
        content: Optional[str] = None,
        embed: Optional[discord.Embed] = None,
    ) -> None:
        """Best-effort notice to ``recipient``; failures are logged."""
        try:
            await recipient.send(content=content, embed=embed)
        except discord.HTTPException as exc:
            logger.warning("Failed to send notice to %s: %s", getattr(recipient, "id", recipient), exc)
