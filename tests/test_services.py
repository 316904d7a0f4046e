from unittest.mock import MagicMock

from namewarden.configuration.app_configuration import SpamFilterSettings
from namewarden.database.db_connection import ConnectionManager
from namewarden.spam_filter.config_workflow import ConfigurationWorkflow
from namewarden.spam_filter.protected_roles import FixedProtectedRoleResolver, StoreProtectedRoleResolver
from namewarden.spam_filter.services import build_protected_role_resolver, build_spam_filter_services
from namewarden.util.discord_utils import ReactionPromptChannel


def test_store_source_by_default():
    services = build_spam_filter_services(SpamFilterSettings(), ConnectionManager())

    assert isinstance(services.spam_filter.protected_roles, StoreProtectedRoleResolver)
    assert services.spam_filter.allowlist is services.allowlist
    assert services.allowlist.store is services.store


def test_fixed_source_uses_configured_roles():
    settings = SpamFilterSettings(protected_role_source="fixed", fixed_protected_role_ids=(500,))

    resolver = build_protected_role_resolver(settings, MagicMock())

    assert isinstance(resolver, FixedProtectedRoleResolver)
    assert resolver.role_ids == frozenset({500})


def test_exempt_roles_and_contacts_are_wired():
    settings = SpamFilterSettings(exempt_role_ids=(600,), escalation_contact_ids=(111,))

    services = build_spam_filter_services(settings, ConnectionManager())

    assert services.allowlist.exempt_role_ids == (600,)
    assert services.spam_filter.actuator.escalation_contact_ids == (111,)


def test_new_workflow_uses_configured_timeout():
    settings = SpamFilterSettings(configuration_timeout_minutes=5)
    services = build_spam_filter_services(settings, ConnectionManager())
    bot = MagicMock()

    workflow = services.new_workflow(bot)

    assert isinstance(workflow, ConfigurationWorkflow)
    assert isinstance(workflow.channel, ReactionPromptChannel)
    assert workflow.channel.bot is bot
    assert workflow.timeout_seconds == 300
    assert workflow.store is services.store
