"""MCP server exposing Discord user lookups for LLM consumption."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from discord_rest.core.discord.client import DiscordClient, TokenKind
from discord_rest.core.discord.mentions import try_parse_user_mention
from discord_rest.core.discord.models.user import RestUser
from discord_rest.core.discord.snowflake import Snowflake

logger = logging.getLogger(__name__)

_discord_client: DiscordClient | None = None


@asynccontextmanager
async def _lifespan(server: FastMCP) -> AsyncIterator[dict]:
    try:
        yield {}
    finally:
        await close_discord_client()


mcp = FastMCP(name="discord-rest", lifespan=_lifespan)


async def _get_discord_client() -> DiscordClient:
    global _discord_client
    if _discord_client is None:
        token = os.environ.get("DISCORD_TOKEN")
        if not token:
            raise ValueError("DISCORD_TOKEN environment variable is required")
        kind_raw = os.environ.get("DISCORD_TOKEN_KIND", "bot").lower()
        token_kind = None if kind_raw == "auto" else TokenKind(kind_raw)
        _discord_client = DiscordClient(token, token_kind)
    return _discord_client


async def close_discord_client() -> None:
    """Close the shared client; the next tool call opens a fresh one."""
    global _discord_client
    if _discord_client is not None:
        logger.debug("Closing Discord client")
        await _discord_client.close()
        _discord_client = None


def _parse_user_id(user_id: str) -> Snowflake:
    result = Snowflake.try_parse(user_id) or try_parse_user_mention(user_id)
    if result is None:
        raise ValueError(f"Invalid user ID: {user_id!r}")
    return result


def user_to_dict(user: RestUser) -> dict:
    return {
        "id": str(user.id),
        "username": user.username,
        "discriminator": user.discriminator,
        "display": str(user),
        "mention": user.mention,
        "is_bot": user.is_bot,
        "is_webhook": user.is_webhook,
        "created_at": user.created_at.isoformat(),
        "avatar_url": user.get_display_avatar_url(),
        "banner_url": user.get_banner_url(),
        "accent_color": user.accent_color.to_hex() if user.accent_color else None,
        "public_flags": int(user.public_flags) if user.public_flags is not None else None,
    }


@mcp.tool
async def get_user(user_id: str) -> dict | None:
    """Look up a Discord user by ID or ``<@id>`` mention. Returns null if unknown."""
    client = await _get_discord_client()
    user = await client.try_get_user(_parse_user_id(user_id))
    return user_to_dict(user) if user is not None else None


@mcp.tool
async def create_dm_channel(user_id: str) -> dict:
    """Open (or reuse) a direct message channel with a user."""
    client = await _get_discord_client()
    channel = await client.create_dm_channel(_parse_user_id(user_id))
    return {
        "id": str(channel.id),
        "recipients": [str(r.id) for r in channel.recipients],
    }
