"""Tests for the click CLI and the MCP tool helpers."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from click.testing import CliRunner

from discord_rest.cli.app import cli
from discord_rest.core.discord.client import TokenKind
from discord_rest.core.discord.models.user import RestUser, create_user
from discord_rest.core.discord.snowflake import Snowflake
from discord_rest.core.exceptions import ForbiddenError
from discord_rest.mcp import server as mcp_server
from discord_rest.mcp.server import user_to_dict
from tests.conftest import USER_ID, FakeDiscordClient, make_user_api_dict


class _CliClient(FakeDiscordClient):
    """FakeDiscordClient with the constructor and lifecycle DiscordClient has."""

    instances: list[_CliClient] = []

    def __init__(self, token: str, token_kind: TokenKind | None = TokenKind.BOT) -> None:
        super().__init__({Snowflake(USER_ID): make_user_api_dict()})
        self.token = token
        self.token_kind = token_kind
        _CliClient.instances.append(self)

    async def __aenter__(self) -> _CliClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        pass

    async def try_get_user(self, user_id, options=None) -> RestUser | None:
        if user_id != Snowflake(USER_ID):
            return None
        return create_user(self, await self.get_user(user_id, options))


@pytest.fixture
def runner(monkeypatch) -> CliRunner:
    _CliClient.instances = []
    monkeypatch.setattr("discord_rest.core.discord.client.DiscordClient", _CliClient)
    return CliRunner()


class TestUserCommand:
    def test_prints_profile(self, runner):
        result = runner.invoke(cli, ["user", "--token", "tok", str(USER_ID)])
        assert result.exit_code == 0, result.output
        assert "Nelly#1337" in result.output
        assert f"<@{USER_ID}>" in result.output
        assert "#ff0000" in result.output

    def test_accepts_mention(self, runner):
        result = runner.invoke(cli, ["user", "--token", "tok", f"<@{USER_ID}>"])
        assert result.exit_code == 0, result.output
        assert "Nelly#1337" in result.output

    def test_token_from_env(self, runner):
        result = runner.invoke(cli, ["user", str(USER_ID)], env={"DISCORD_TOKEN": "env-tok"})
        assert result.exit_code == 0, result.output
        assert _CliClient.instances[0].token == "env-tok"

    def test_token_kind_auto(self, runner):
        result = runner.invoke(
            cli, ["user", "--token", "tok", "--token-kind", "auto", str(USER_ID)]
        )
        assert result.exit_code == 0, result.output
        assert _CliClient.instances[0].token_kind is None

    def test_unknown_user(self, runner):
        result = runner.invoke(cli, ["user", "--token", "tok", "1"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_id(self, runner):
        result = runner.invoke(cli, ["user", "--token", "tok", "nobody"])
        assert result.exit_code == 2
        assert "Invalid user ID" in result.output

    def test_transport_error_reported(self, runner, monkeypatch):
        async def _forbidden(self, user_id, options=None):
            raise ForbiddenError("Request to 'users/1' failed: forbidden.")

        monkeypatch.setattr(_CliClient, "try_get_user", _forbidden)
        result = runner.invoke(cli, ["user", "--token", "tok", "1"])
        assert result.exit_code == 1
        assert "forbidden" in result.output


class TestDmCommand:
    def test_opens_channel(self, runner):
        result = runner.invoke(cli, ["dm", "--token", "tok", str(USER_ID)])
        assert result.exit_code == 0, result.output
        assert "319674150115610528 | Nelly" in result.output
        assert _CliClient.instances[0].calls[0][0] == "create_dm_channel"


class TestMcpUserToDict:
    def test_fields(self):
        user = create_user(None, make_user_api_dict(bot=True))
        data = user_to_dict(user)
        assert data["id"] == str(USER_ID)
        assert data["display"] == "Nelly#1337"
        assert data["is_bot"] is True
        assert data["is_webhook"] is False
        assert data["accent_color"] == "#ff0000"
        assert data["public_flags"] == 64

    def test_webhook_user(self):
        user = create_user(None, make_user_api_dict(), webhook_id=Snowflake(9))
        assert user_to_dict(user)["is_webhook"] is True


class TestMcpClientLifecycle:
    async def test_close_discord_client(self, monkeypatch):
        client = _CliClient("tok")
        client.close = AsyncMock()
        monkeypatch.setattr(mcp_server, "_discord_client", client)

        await mcp_server.close_discord_client()

        client.close.assert_awaited_once()
        assert mcp_server._discord_client is None

    async def test_lifespan_closes_on_exit(self, monkeypatch):
        client = _CliClient("tok")
        client.close = AsyncMock()
        monkeypatch.setattr(mcp_server, "_discord_client", client)

        async with mcp_server._lifespan(mcp_server.mcp):
            client.close.assert_not_awaited()

        client.close.assert_awaited_once()
        assert mcp_server._discord_client is None

    async def test_close_without_client_is_noop(self, monkeypatch):
        monkeypatch.setattr(mcp_server, "_discord_client", None)
        await mcp_server.close_discord_client()
        assert mcp_server._discord_client is None
