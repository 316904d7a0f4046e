"""
Admin-facing workflow that adds or removes high-ranking roles.

State machine::

    INIT -> AWAITING_DECISION -> ADDED | REMOVED | EDIT_REQUESTED | TIMED_OUT
    INIT -> PROMPT_FAILED

The admin receives a DM listing the roles with three reactions: 👍 adds them
to the filter, ❌ removes them, 📝 abandons the setup. Only the first
qualifying reaction counts. Inserts and deletes are applied role by role;
a failure on one role is logged and does not undo the others.
"""

from __future__ import annotations

import asyncio
import datetime
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

import discord

from namewarden.database.spam_filter_store import SpamFilterStore
from namewarden.datatypes.spam_filter_datatypes import (
    EntryQuery,
    InsertManyResult,
    SpamFilterEntry,
    SpamFilterObjectType,
)
from namewarden.errors import EarlyTermination, StoreError, ValidationError
from namewarden.util.discord_utils import GuildMembershipDirectory, can_configure_spam_filter
from namewarden.util.logger import get_logger

logger = get_logger("config_workflow")

APPROVE_REACTION = "👍"
DENY_REACTION = "❌"
EDIT_REACTION = "📝"
DECISION_REACTIONS = (APPROVE_REACTION, DENY_REACTION, EDIT_REACTION)

MAX_ROLES = 3


class WorkflowState(Enum):
    INIT = "init"
    AWAITING_DECISION = "awaiting_decision"
    ADDED = "added"
    REMOVED = "removed"
    EDIT_REQUESTED = "edit_requested"
    TIMED_OUT = "timed_out"
    PROMPT_FAILED = "prompt_failed"

    @property
    def is_terminal(self) -> bool:
        return self not in (WorkflowState.INIT, WorkflowState.AWAITING_DECISION)


class PromptChannel(Protocol):
    async def send_prompt_with_reactions(
        self, recipient: discord.abc.Messageable, embeds: Sequence[discord.Embed], reactions: Sequence[str]
    ) -> discord.Message: ...

    async def await_single_reaction(
        self, message: discord.Message, *, timeout: float, reactions: Sequence[str]
    ) -> str: ...

    async def send(
        self,
        recipient: discord.abc.Messageable,
        *,
        content: Optional[str] = None,
        embed: Optional[discord.Embed] = None,
    ) -> None: ...


class RoleDirectory(Protocol):
    async def fetch_roles(self, role_ids: Sequence[Optional[int]]) -> List[discord.Role]: ...


def build_intro_embed(server_name: str) -> discord.Embed:
    embed = discord.Embed(
        title="Username Spam Filter Configuration",
        description=(
            "Welcome to Username Spam Filter configuration.\n\n"
            "This is used as a first-time setup of the username spam filter. I can help assign or remove "
            "high-ranking roles to be used by the username spam filter.\n\n"
            "The username spam filter will auto-ban any user that joins with or changes their nickname to a "
            "username or nickname of a member with a high-ranking role."
        ),
    )
    embed.set_footer(text=f"@{server_name}")
    return embed


def build_question_embed(roles: Sequence[discord.Role], timeout_minutes: int) -> discord.Embed:
    embed = discord.Embed(
        title="Add or remove from username spam filter?",
        description="Should the given list of roles be added or removed from the username spam filter?",
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    for role in roles:
        embed.add_field(name="Role", value=role.name, inline=True)
    embed.set_footer(
        text=(
            f"{APPROVE_REACTION} - approve | {DENY_REACTION} - remove | {EDIT_REACTION} - edit | "
            f"Please reply within {timeout_minutes} minutes"
        )
    )
    return embed


class ConfigurationWorkflow:
    """One run of the approve/deny/edit configuration prompt.

    The instance keeps its final :attr:`state` and the resolved :attr:`roles`
    so callers and tests can inspect what happened. A workflow runs once.
    """

    def __init__(
        self,
        store: SpamFilterStore,
        channel: PromptChannel,
        *,
        timeout_seconds: float = 60 * 60,
    ) -> None:
        self.store = store
        self.channel = channel
        self.timeout_seconds = timeout_seconds
        self.state = WorkflowState.INIT
        self.roles: List[discord.Role] = []

    async def run(
        self,
        invoker: discord.Member,
        role_ids: Sequence[Optional[int]],
        *,
        directory: Optional[RoleDirectory] = None,
        on_prompt_sent: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> WorkflowState:
        """Drive the workflow to a terminal state.

        Raises:
            ValidationError: Unauthorized invoker, no resolvable role, or the
                admin chose to edit.
            EarlyTermination: No reaction within the timeout, or the prompt
                DM could not be sent.
        """
        if self.state is not WorkflowState.INIT:
            raise RuntimeError(f"workflow already ran (state={self.state.value})")

        if not can_configure_spam_filter(invoker):
            raise ValidationError("Sorry, only discord admins and managers can configure spam filter settings.")

        if directory is None:
            directory = GuildMembershipDirectory(invoker.guild)
        roles = await directory.fetch_roles(list(role_ids)[:MAX_ROLES])
        if not roles:
            raise ValidationError("Please try again with at least 1 role.")
        self.roles = roles

        decision = await self.ask_for_grant_or_removal(invoker, roles, on_prompt_sent)
        guild = invoker.guild

        if decision == APPROVE_REACTION:
            logger.info("/spam-filter config add for guild %s", guild.id)
            await self.add_roles(guild.id, guild.name, roles)
            self.state = WorkflowState.ADDED
            confirmation = discord.Embed(
                title="Configuration Added",
                description="The roles are now protected by the username spam filter.",
            )
        elif decision == DENY_REACTION:
            logger.info("/spam-filter config remove for guild %s", guild.id)
            await self.remove_roles(guild.id, roles)
            self.state = WorkflowState.REMOVED
            confirmation = discord.Embed(
                title="Configuration Removed",
                description="The roles are no longer protected by the username spam filter.",
            )
        else:
            logger.info("/spam-filter config edit for guild %s", guild.id)
            self.state = WorkflowState.EDIT_REQUESTED
            await self.channel.send(invoker, content="Configuration setup ended.")
            raise ValidationError("Please re-initiate spam-filter configuration.")

        await self.channel.send(invoker, embed=confirmation)
        return self.state

    async def ask_for_grant_or_removal(
        self,
        invoker: discord.Member,
        roles: Sequence[discord.Role],
        on_prompt_sent: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> str:
        """Send the prompt and return the first qualifying reaction."""
        timeout_minutes = max(1, round(self.timeout_seconds / 60))
        try:
            message = await self.channel.send_prompt_with_reactions(
                invoker,
                [build_intro_embed(invoker.guild.name), build_question_embed(roles, timeout_minutes)],
                DECISION_REACTIONS,
            )
        except discord.HTTPException as exc:
            self.state = WorkflowState.PROMPT_FAILED
            logger.warning("/spam-filter config prompt could not be sent for guild %s: %s", invoker.guild.id, exc)
            raise EarlyTermination(
                "Unable to send you a DM, please allow direct messages and re-initiate spam-filter configuration."
            ) from exc
        self.state = WorkflowState.AWAITING_DECISION

        if on_prompt_sent is not None:
            await on_prompt_sent()

        try:
            return await self.channel.await_single_reaction(
                message, timeout=self.timeout_seconds, reactions=DECISION_REACTIONS
            )
        except asyncio.TimeoutError as exc:
            self.state = WorkflowState.TIMED_OUT
            logger.info("/spam-filter config timed out for guild %s", invoker.guild.id)
            raise EarlyTermination(
                "Timeout reached, please re-initiate spam-filter configuration."
            ) from exc

    async def add_roles(self, server_id: int, server_name: str, roles: Sequence[discord.Role]) -> InsertManyResult:
        entries = [
            SpamFilterEntry(server_id, SpamFilterObjectType.HIGH_RANKING_ROLE, role.id, role.name, server_name)
            for role in roles
        ]
        try:
            result = await self.store.insert_many(entries, tolerate_duplicate_key=True)
        except StoreError:
            logger.exception("failed to store username spam filter roles in db")
            return InsertManyResult(failed=entries)

        if result.failed:
            logger.error(
                "failed to store %d of %d username spam filter roles for server %s",
                len(result.failed), len(entries), server_id,
            )
        return result

    async def remove_roles(self, server_id: int, roles: Sequence[discord.Role]) -> int:
        removed = 0
        for role in roles:
            query = EntryQuery(server_id, SpamFilterObjectType.HIGH_RANKING_ROLE, role.id)
            try:
                if await self.store.delete_one(query):
                    removed += 1
            except StoreError:
                logger.exception("failed to remove username spam filter role %s from db", role.id)
        return removed
