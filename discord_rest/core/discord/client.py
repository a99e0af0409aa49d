"""Async Discord REST client with rate-limit and retry handling."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

import httpx

from discord_rest.core.discord.models import DMChannel, RestUser, UserPayload
from discord_rest.core.discord.options import DEFAULT_OPTIONS, RequestOptions
from discord_rest.core.discord.snowflake import Snowflake
from discord_rest.core.exceptions import (
    ForbiddenError,
    HttpError,
    NotFoundError,
    RateLimitedError,
    UnauthorizedError,
)
from discord_rest.core.utils.http import create_async_client, response_retry

logger = logging.getLogger(__name__)

_BASE_URL = "https://discord.com/api/v10/"
_MAX_RATE_LIMIT_SLEEP = 60.0


class TokenKind(Enum):
    USER = "user"
    BOT = "bot"


class DiscordClient:
    """Async Discord REST client.

    Parameters
    ----------
    token:
        Discord authentication token (bot or user).
    token_kind:
        How to present the token. ``None`` probes ``users/@me`` once to find
        out, trying user-style auth first.
    """

    def __init__(
        self,
        token: str,
        token_kind: TokenKind | None = TokenKind.BOT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._resolved_token_kind = token_kind
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    # -- lifecycle ----------------------------------------------------------

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            if self._transport is not None:
                self._client = create_async_client(transport=self._transport)
            else:
                self._client = create_async_client()
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> DiscordClient:
        await self._get_client()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- low-level request helpers ------------------------------------------

    def _auth_header(self, token_kind: TokenKind) -> str:
        if token_kind == TokenKind.BOT:
            return f"Bot {self._token}"
        return self._token

    @response_retry
    async def _raw_request(
        self,
        method: str,
        url: str,
        token_kind: TokenKind,
        options: RequestOptions,
        json: Any = None,
    ) -> httpx.Response:
        """Execute a single request with retry (via ``response_retry``).

        If ``X-RateLimit-Remaining`` drops to 0 we sleep for the reset delay
        (capped at 60 s) before returning, so the next call is not rejected.
        """
        client = await self._get_client()

        kwargs: dict[str, Any] = {}
        if options.timeout is not None:
            kwargs["timeout"] = options.timeout
        if json is not None:
            kwargs["json"] = json

        response = await client.request(
            method,
            _BASE_URL + url,
            headers={
                "Authorization": self._auth_header(token_kind),
                **options.headers(),
            },
            **kwargs,
        )

        remaining_raw = response.headers.get("X-RateLimit-Remaining")
        reset_after_raw = response.headers.get("X-RateLimit-Reset-After")

        if remaining_raw is not None and reset_after_raw is not None:
            try:
                remaining = int(remaining_raw)
                reset_after = float(reset_after_raw)
            except (ValueError, TypeError):
                remaining = 1
                reset_after = 0.0

            if remaining <= 0:
                delay = min(max(reset_after + 1.0, 0.0), _MAX_RATE_LIMIT_SLEEP)
                logger.debug("Rate-limited on %s %s: sleeping %.1f s", method, url, delay)
                await asyncio.sleep(delay)

        return response

    async def _resolve_token_kind(self) -> TokenKind:
        if self._resolved_token_kind is not None:
            return self._resolved_token_kind

        for kind in (TokenKind.USER, TokenKind.BOT):
            response = await self._raw_request("GET", "users/@me", kind, DEFAULT_OPTIONS)
            if response.status_code == 401:
                continue
            # Any other failure says nothing about the token kind; keep it unresolved.
            _raise_for_status(response, "users/@me")
            logger.debug("Resolved token kind: %s", kind.value)
            self._resolved_token_kind = kind
            return kind

        raise UnauthorizedError()

    async def _request_json(
        self,
        method: str,
        url: str,
        options: RequestOptions | None = None,
        json: Any = None,
    ) -> Any:
        """Send an authenticated request and return the parsed JSON body.

        Non-success status codes are mapped onto the ``HttpError`` family.
        """
        token_kind = await self._resolve_token_kind()
        response = await self._raw_request(
            method, url, token_kind, options or DEFAULT_OPTIONS, json=json
        )
        _raise_for_status(response, url)
        return response.json()

    # -- public API ---------------------------------------------------------

    async def get_user(
        self, user_id: Snowflake, options: RequestOptions | None = None
    ) -> UserPayload:
        """Fetch the raw payload of a user by ID."""
        data = await self._request_json("GET", f"users/{user_id}", options)
        return UserPayload.model_validate(data)

    async def get_current_user(self, options: RequestOptions | None = None) -> UserPayload:
        data = await self._request_json("GET", "users/@me", options)
        return UserPayload.model_validate(data)

    async def try_get_user(
        self, user_id: Snowflake, options: RequestOptions | None = None
    ) -> RestUser | None:
        """Fetch a user as a bound snapshot, or ``None`` if it does not exist."""
        try:
            payload = await self.get_user(user_id, options)
        except NotFoundError:
            return None
        return RestUser.create(self, payload)

    async def create_dm_channel(
        self, user_id: Snowflake, options: RequestOptions | None = None
    ) -> DMChannel:
        """Open a DM channel with a user. Discord returns the existing one if any."""
        data = await self._request_json(
            "POST",
            "users/@me/channels",
            options,
            json={"recipient_id": str(user_id)},
        )
        return DMChannel.model_validate(data)


def _parse_retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _raise_for_status(response: httpx.Response, url: str) -> None:
    if response.is_success:
        return

    status = response.status_code
    if status == 401:
        raise UnauthorizedError()
    if status == 403:
        raise ForbiddenError(f"Request to '{url}' failed: forbidden.")
    if status == 404:
        raise NotFoundError(f"Request to '{url}' failed: not found.")
    if status == 429:
        raise RateLimitedError(
            f"Request to '{url}' failed: rate limited.",
            retry_after=_parse_retry_after(response),
        )

    raise HttpError(
        f"Request to '{url}' failed: {status}. Response content: {response.text}",
        status,
        is_fatal=status < 500,
    )
