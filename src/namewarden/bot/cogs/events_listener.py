"""Event listener Cog for Namewarden.

Runs the username spam filter on member joins and nickname changes,
allowlists members when they are unbanned, and handles command errors.
"""

import discord
from discord.ext import commands

from namewarden.errors import StoreError
from namewarden.spam_filter.services import SpamFilterServices
from namewarden.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing membership event handlers and command error handling."""

    def __init__(self, discord_bot_instance, services: SpamFilterServices):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        services:
            Spam filter collaborators built at startup.
        """
        self.bot = discord_bot_instance
        self.services = services
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name='on_ready')
    async def on_ready(self):
        if self.bot.user:
            logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

    @commands.Cog.listener(name='on_member_join')
    async def on_member_join(self, member: discord.Member):
        try:
            await self.services.spam_filter.run_for_member(member)
        except Exception:
            logger.exception("failed to process event on_member_join for %s", member)

    @commands.Cog.listener(name='on_member_update')
    async def on_member_update(self, before: discord.Member, after: discord.Member):
        if before.nick == after.nick:
            return
        try:
            await self.services.spam_filter.run_for_member(after)
        except Exception:
            logger.exception("failed to process event on_member_update for %s", after)

    @commands.Cog.listener(name='on_member_unban')
    async def on_member_unban(self, guild: discord.Guild, user: discord.User):
        """Allowlist unbanned users so the filter does not ban them again."""
        logger.debug("unbanning user: %s (user %s, guild %s)", user, user.id, guild.id)
        try:
            added = await self.services.allowlist.allowlist_user(guild.id, guild.name, user.id, user.name)
        except StoreError:
            logger.exception("failed to process event on_member_unban for %s", user)
            return
        if added:
            logger.info("Added %s to the username spam filter allowlist of guild %s", user, guild.id)

    @commands.Cog.listener(name='on_application_command_error')
    async def on_application_command_error(self, application_context: discord.ApplicationContext, error: Exception):
        """Handle errors from application commands with logging and user feedback."""
        if isinstance(error, commands.CommandNotFound):
            return

        command_name = getattr(application_context.command, 'name', '<unknown>')
        logger.error(f"Error in command '{command_name}': {error}", exc_info=error)

        error_message = "A :bug: showed up while running this command."
        try:
            await application_context.respond(error_message, ephemeral=True)
        except discord.InteractionResponded:
            await application_context.followup.send(error_message, ephemeral=True)


def setup(discord_bot_instance, services: SpamFilterServices):
    """Register the EventsListenerCog with the bot."""
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, services))
