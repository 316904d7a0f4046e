"""Wiring of the spam filter collaborators, shared by the cogs."""

from __future__ import annotations

from dataclasses import dataclass

import discord

from namewarden.configuration.app_configuration import SpamFilterSettings
from namewarden.database.db_connection import ConnectionManager
from namewarden.database.spam_filter_store import SpamFilterStore
from namewarden.spam_filter.allowlist_resolver import AllowlistResolver
from namewarden.spam_filter.config_workflow import ConfigurationWorkflow
from namewarden.spam_filter.moderation_actuator import ModerationActuator
from namewarden.spam_filter.protected_roles import (
    FixedProtectedRoleResolver,
    ProtectedRoleResolver,
    StoreProtectedRoleResolver,
)
from namewarden.spam_filter.username_spam_filter import UsernameSpamFilter
from namewarden.util.discord_utils import ReactionPromptChannel
from namewarden.util.logger import get_logger

logger = get_logger("spam_filter_services")


@dataclass(slots=True)
class SpamFilterServices:
    settings: SpamFilterSettings
    store: SpamFilterStore
    allowlist: AllowlistResolver
    spam_filter: UsernameSpamFilter

    def new_workflow(self, bot: discord.Client) -> ConfigurationWorkflow:
        return ConfigurationWorkflow(
            self.store,
            ReactionPromptChannel(bot),
            timeout_seconds=self.settings.configuration_timeout_seconds,
        )


def build_protected_role_resolver(settings: SpamFilterSettings, store: SpamFilterStore) -> ProtectedRoleResolver:
    if settings.protected_role_source == "fixed":
        return FixedProtectedRoleResolver(settings.fixed_protected_role_ids)
    return StoreProtectedRoleResolver(store)


def build_spam_filter_services(settings: SpamFilterSettings, db: ConnectionManager) -> SpamFilterServices:
    store = SpamFilterStore(db)
    allowlist = AllowlistResolver(store, settings.exempt_role_ids)
    spam_filter = UsernameSpamFilter(
        settings,
        allowlist,
        build_protected_role_resolver(settings, store),
        ModerationActuator(settings.escalation_contact_ids),
    )
    logger.info("Username spam filter ready (protected roles from %s)", settings.protected_role_source)
    return SpamFilterServices(settings=settings, store=store, allowlist=allowlist, spam_filter=spam_filter)
