"""
Spam filter cog: ``/spam-filter config`` to add or remove high-ranking roles.

The command takes up to three roles and hands them to the
:class:`ConfigurationWorkflow`, which continues in the invoker's DMs. The
slash command response only reports the outcome; it is ephemeral so the
configuration is not leaked in public channels.
"""

from typing import List, Optional

import discord
from discord.ext import commands

from namewarden.errors import EarlyTermination, ValidationError
from namewarden.spam_filter.services import SpamFilterServices
from namewarden.util.logger import get_logger

logger = get_logger("spam_filter_cog")

ROLE_OPTION_DESCRIPTION = "Role with high-ranking members."


class SpamFilterCog(commands.Cog):
    """Slash commands configuring the username spam filter."""

    spam_filter = discord.SlashCommandGroup("spam-filter", "Configure username spam filter")

    def __init__(self, discord_bot_instance, services: SpamFilterServices):
        self.discord_bot_instance = discord_bot_instance
        self.services = services
        logger.info("Spam filter cog loaded")

    async def _reply(self, ctx: discord.ApplicationContext, content: str) -> None:
        # The workflow can outlive the interaction token; the DM already carries the outcome
        try:
            await ctx.followup.send(content, ephemeral=True)
        except discord.HTTPException as exc:
            logger.warning("Could not deliver /spam-filter response: %s", exc)

    async def handle_config(self, ctx: discord.ApplicationContext, roles: List[Optional[discord.Role]]) -> None:
        """Run the configuration workflow for the invoking member."""
        if ctx.guild is None or ctx.user.bot:
            await ctx.respond("Please try /spam-filter within discord channel.", ephemeral=True)
            return

        await ctx.defer(ephemeral=True)

        async def notify_prompt_sent() -> None:
            await self._reply(ctx, f"Hey {ctx.user.mention}, I just sent you a DM!")

        workflow = self.services.new_workflow(self.discord_bot_instance)
        role_ids = [role.id if role is not None else None for role in roles]
        try:
            await workflow.run(ctx.author, role_ids, on_prompt_sent=notify_prompt_sent)
        except (ValidationError, EarlyTermination) as exc:
            await self._reply(ctx, str(exc))
            return
        except Exception:
            logger.exception("failed to handle spam-filter command")
            await self._reply(ctx, "Sorry something is not working and our devs are looking into it.")
            return

        await self._reply(ctx, "Successfully configured username spam filter.")

    @spam_filter.command(name="config", description="Configure roles that have high-ranking users.")
    async def config(
        self,
        application_context: discord.ApplicationContext,
        role_1: discord.Option(discord.Role, ROLE_OPTION_DESCRIPTION, name="role-1", required=False, default=None),
        role_2: discord.Option(discord.Role, ROLE_OPTION_DESCRIPTION, name="role-2", required=False, default=None),
        role_3: discord.Option(discord.Role, ROLE_OPTION_DESCRIPTION, name="role-3", required=False, default=None),
    ):
        await self.handle_config(application_context, [role_1, role_2, role_3])


def setup(discord_bot_instance, services: SpamFilterServices):
    """Register the SpamFilterCog with the bot."""
    discord_bot_instance.add_cog(SpamFilterCog(discord_bot_instance, services))
