from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from namewarden.bot.cogs import spam_filter_cmds
from namewarden.errors import EarlyTermination, ValidationError


class FakeWorkflow:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def run(self, invoker, role_ids, *, on_prompt_sent=None):
        self.calls.append((invoker, role_ids))
        if on_prompt_sent is not None:
            await on_prompt_sent()
        if self.error is not None:
            raise self.error


class Ctx:
    def __init__(self, guild=True, bot=False):
        self.guild = SimpleNamespace(id=10, name="Genesis") if guild else None
        self.user = SimpleNamespace(bot=bot, mention="<@42>")
        self.author = self.user
        self.respond = AsyncMock()
        self.defer = AsyncMock()
        self.followup = SimpleNamespace(send=AsyncMock())

    @property
    def replies(self):
        return [call.args[0] for call in self.followup.send.await_args_list]


def _cog(workflow):
    services = SimpleNamespace(new_workflow=MagicMock(return_value=workflow))
    return spam_filter_cmds.SpamFilterCog(SimpleNamespace(), services)


def test_setup_adds_cog():
    captured = {}

    def fake_add_cog(cog):
        captured["cog"] = cog

    spam_filter_cmds.setup(SimpleNamespace(add_cog=fake_add_cog), SimpleNamespace())
    assert isinstance(captured["cog"], spam_filter_cmds.SpamFilterCog)


@pytest.mark.asyncio
async def test_config_success():
    workflow = FakeWorkflow()
    ctx = Ctx()

    await _cog(workflow).handle_config(ctx, [SimpleNamespace(id=500), None, SimpleNamespace(id=501)])

    ctx.defer.assert_awaited_once_with(ephemeral=True)
    assert workflow.calls == [(ctx.author, [500, None, 501])]
    assert ctx.replies == ["Hey <@42>, I just sent you a DM!", "Successfully configured username spam filter."]
    for call in ctx.followup.send.await_args_list:
        assert call.kwargs == {"ephemeral": True}


@pytest.mark.asyncio
async def test_config_outside_guild():
    workflow = FakeWorkflow()
    ctx = Ctx(guild=False)

    await _cog(workflow).handle_config(ctx, [None, None, None])

    ctx.respond.assert_awaited_once_with("Please try /spam-filter within discord channel.", ephemeral=True)
    assert workflow.calls == []


@pytest.mark.asyncio
async def test_config_from_bot_is_rejected():
    workflow = FakeWorkflow()
    ctx = Ctx(bot=True)

    await _cog(workflow).handle_config(ctx, [SimpleNamespace(id=500)])

    ctx.respond.assert_awaited_once()
    assert workflow.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ValidationError("Please try again with at least 1 role."),
        EarlyTermination("Timeout reached, please re-initiate spam-filter configuration."),
    ],
)
async def test_config_user_facing_errors_are_shown(error):
    ctx = Ctx()

    await _cog(FakeWorkflow(error)).handle_config(ctx, [SimpleNamespace(id=500)])

    assert ctx.replies[-1] == str(error)


@pytest.mark.asyncio
async def test_config_unexpected_error_is_generic():
    ctx = Ctx()

    await _cog(FakeWorkflow(RuntimeError("db exploded"))).handle_config(ctx, [SimpleNamespace(id=500)])

    assert ctx.replies[-1] == "Sorry something is not working and our devs are looking into it."


@pytest.mark.asyncio
async def test_config_command_passes_three_roles(monkeypatch):
    cog = _cog(FakeWorkflow())
    handle = AsyncMock()
    monkeypatch.setattr(cog, "handle_config", handle)
    ctx = Ctx()
    role = SimpleNamespace(id=500)

    cb = getattr(spam_filter_cmds.SpamFilterCog.config, "callback", None)
    assert cb is not None
    await cb(cog, ctx, role, None, None)

    handle.assert_awaited_once_with(ctx, [role, None, None])
