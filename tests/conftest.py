"""Shared fixtures: payload builders, a fake REST client and a mock transport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from discord_rest.core.discord.client import DiscordClient, TokenKind
from discord_rest.core.discord.models.channel import DMChannel
from discord_rest.core.discord.models.user import UserPayload
from discord_rest.core.discord.options import RequestOptions
from discord_rest.core.discord.snowflake import Snowflake
from discord_rest.core.exceptions import NotFoundError

USER_ID = 80351110224678912


def make_user_api_dict(**overrides) -> dict:
    """Build a complete Discord API user dict."""
    base = {
        "id": str(USER_ID),
        "username": "Nelly",
        "discriminator": "1337",
        "avatar": "8342729096ea3675442027381ff50dfe",
        "banner": "06c16474723fe537c283b8efa61a30c8",
        "bot": False,
        "public_flags": 64,
        "accent_color": 16711680,
    }
    base.update(overrides)
    return base


# ---------------------------------------------------------------------------
# Fake client for model-level tests
# ---------------------------------------------------------------------------


class FakeDiscordClient:
    """Duck-typed stand-in for the two calls RestUser makes."""

    def __init__(self, users: dict[Snowflake, dict] | None = None) -> None:
        self._users = users or {}
        self.calls: list[tuple[str, Snowflake, RequestOptions | None]] = []

    async def get_user(
        self, user_id: Snowflake, options: RequestOptions | None = None
    ) -> UserPayload:
        self.calls.append(("get_user", user_id, options))
        if user_id not in self._users:
            raise NotFoundError(f"Request to 'users/{user_id}' failed: not found.")
        return UserPayload.model_validate(self._users[user_id])

    async def create_dm_channel(
        self, user_id: Snowflake, options: RequestOptions | None = None
    ) -> DMChannel:
        self.calls.append(("create_dm_channel", user_id, options))
        return DMChannel.model_validate({
            "id": "319674150115610528",
            "type": 1,
            "recipients": [self._users.get(user_id, {"id": str(user_id)})],
        })


@pytest.fixture
def fake_client() -> FakeDiscordClient:
    return FakeDiscordClient({Snowflake(USER_ID): make_user_api_dict()})


# ---------------------------------------------------------------------------
# Mock HTTP transport for DiscordClient tests
# ---------------------------------------------------------------------------


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays responses."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self._respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def json_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.content]


@pytest.fixture
def make_client():
    """Build a DiscordClient whose HTTP traffic is served by *respond*."""

    def _make(respond, token_kind: TokenKind | None = TokenKind.BOT):
        handler = RecordingHandler(respond)
        client = DiscordClient("secret-token", token_kind, transport=httpx.MockTransport(handler))
        return client, handler

    return _make
