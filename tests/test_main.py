from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from namewarden import main


def test_resolve_base_dir_honours_env(monkeypatch, tmp_path):
    monkeypatch.setenv("NAMEWARDEN_HOME", str(tmp_path))
    assert main.resolve_base_dir() == tmp_path.resolve()


def test_resolve_base_dir_defaults_to_repo_root(monkeypatch):
    monkeypatch.delenv("NAMEWARDEN_HOME", raising=False)
    assert (main.resolve_base_dir() / "src" / "namewarden").is_dir()


def test_build_intents_enables_member_events():
    intents = main.build_intents()

    assert intents.members is True
    assert intents.bans is True
    assert intents.dm_reactions is True


def test_load_environment_exits_without_token(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda **kwargs: None)
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)

    with pytest.raises(SystemExit):
        main.load_environment()


def test_load_environment_returns_token(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda **kwargs: None)
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "token")

    assert main.load_environment() == "token"


@pytest.mark.asyncio
async def test_initialize_database_opens_and_creates_schema(monkeypatch, tmp_path):
    connection = MagicMock()
    connection.open = AsyncMock()
    schema = AsyncMock()
    monkeypatch.setattr(main.SchemaManager, "initialize_schema", schema)
    config = MagicMock(database_path=tmp_path / "app.db")

    await main.initialize_database(connection, config)

    connection.open.assert_awaited_once_with(tmp_path / "app.db")
    schema.assert_awaited_once_with(connection.connection)


@pytest.mark.asyncio
async def test_async_main_fails_when_database_cannot_open(monkeypatch):
    monkeypatch.setattr(main, "load_environment", lambda: "token")
    monkeypatch.setattr(main, "initialize_database", AsyncMock(side_effect=OSError("read-only")))
    close = AsyncMock()
    monkeypatch.setattr(main.db_connection, "close", close)

    assert await main.async_main() == 1
    close.assert_awaited_once()


@pytest.mark.asyncio
async def test_shutdown_runtime_closes_bot_and_database():
    bot = MagicMock()
    bot.is_closed.return_value = False
    bot.close = AsyncMock()
    connection = MagicMock()
    connection.close = AsyncMock()

    await main.shutdown_runtime(bot, connection)

    bot.close.assert_awaited_once()
    connection.close.assert_awaited_once()


def test_config_path_is_relative_to_base_dir():
    assert not main.CONFIG_PATH.is_absolute()
    assert isinstance(main.BASE_DIR, Path)
