"""User payload and REST user snapshot models."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Union

from pydantic import BaseModel, Field, PrivateAttr

from discord_rest.core.discord.mentions import mention_user
from discord_rest.core.discord.models.cdn import ImageCdn, ImageFormat
from discord_rest.core.discord.models.color import Color
from discord_rest.core.discord.models.flags import UserFlags
from discord_rest.core.discord.models.guild import Guild
from discord_rest.core.discord.models.presence import Activity, ClientType, UserStatus
from discord_rest.core.discord.snowflake import Snowflake

if TYPE_CHECKING:
    from discord_rest.core.discord.client import DiscordClient
    from discord_rest.core.discord.models.channel import DMChannel
    from discord_rest.core.discord.options import RequestOptions

logger = logging.getLogger(__name__)

_MAX_DISCRIMINATOR = 0xFFFF


def parse_discriminator(text: str) -> int:
    """Parse the wire discriminator (e.g. ``"0007"``) into an unsigned 16-bit int.

    Only plain ASCII digits are accepted: no sign, whitespace or separators.
    """
    if not text or not text.isascii() or not text.isdigit():
        raise ValueError(f"Invalid discriminator: {text!r}")
    value = int(text)
    if value > _MAX_DISCRIMINATOR:
        raise ValueError(f"Discriminator out of range: {text!r}")
    return value


class UserPayload(BaseModel):
    """The ``user`` object as returned by the REST API.

    Every field except ``id`` may be missing from a partial payload. Whether a
    field was actually sent (possibly as ``null``) is recorded by pydantic in
    ``model_fields_set``; use :meth:`is_specified` rather than comparing the
    value against its default.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    id: Snowflake
    username: str | None = None
    discriminator: str = "0"
    avatar: str | None = None
    banner: str | None = None
    bot: bool = False
    public_flags: int = 0
    accent_color: int | None = None

    def is_specified(self, name: str) -> bool:
        if name not in type(self).model_fields:
            raise KeyError(name)
        return name in self.model_fields_set


class RestUser(BaseModel):
    """Last-known state of a Discord user, fetched over REST.

    The id never changes once assigned. Everything else is overwritten by
    :meth:`update` when a newer payload arrives.
    """

    model_config = {"arbitrary_types_allowed": True}

    id: Snowflake = Field(frozen=True)
    is_bot: bool = False
    username: str | None = None
    discriminator_value: int = 0
    avatar_id: str | None = None
    banner_id: str | None = None
    accent_color: Color | None = None
    public_flags: UserFlags | None = None

    _client: DiscordClient | None = PrivateAttr(default=None)

    def __init__(self, client: DiscordClient | None = None, /, **data: Any) -> None:
        super().__init__(**data)
        self._client = client

    @classmethod
    def create(
        cls,
        client: DiscordClient | None,
        payload: UserPayload | dict,
        guild: Guild | None = None,
        webhook_id: Snowflake | None = None,
    ) -> AnyUser:
        """Build a snapshot from a full payload.

        A webhook id selects :class:`RestWebhookUser`; otherwise a plain
        :class:`RestUser` is returned.
        """
        if isinstance(payload, dict):
            payload = UserPayload.model_validate(payload)

        entity: AnyUser
        if webhook_id is not None:
            entity = RestWebhookUser(client, id=payload.id, webhook_id=webhook_id, guild=guild)
        else:
            entity = RestUser(client, id=payload.id)
        entity.update(payload)
        return entity

    def update(self, payload: UserPayload | dict) -> None:
        """Merge a (possibly partial) payload into this snapshot.

        Fields missing from the payload keep their current value. The accent
        color is the exception: it is recomputed on every call and cleared
        when the payload carries none.
        """
        if isinstance(payload, dict):
            payload = UserPayload.model_validate(payload)

        if payload.is_specified("avatar"):
            self.avatar_id = payload.avatar
        if payload.is_specified("banner"):
            self.banner_id = payload.banner
        if payload.is_specified("discriminator"):
            self.discriminator_value = parse_discriminator(payload.discriminator)
        if payload.is_specified("bot"):
            self.is_bot = payload.bot
        if payload.is_specified("username"):
            self.username = payload.username
        if payload.is_specified("public_flags"):
            self.public_flags = UserFlags(payload.public_flags)

        self.accent_color = Color(payload.accent_color) if payload.accent_color is not None else None

        logger.debug("Updated user %s (%s)", self.id, ", ".join(sorted(payload.model_fields_set)))

    def _require_client(self) -> DiscordClient:
        if self._client is None:
            raise RuntimeError(f"User {self.id} is not bound to a client")
        return self._client

    async def refresh(self, options: RequestOptions | None = None) -> None:
        """Re-fetch this user and merge the result. Transport errors propagate."""
        payload = await self._require_client().get_user(self.id, options)
        self.update(payload)

    async def create_dm_channel(self, options: RequestOptions | None = None) -> DMChannel:
        """Open (or return the existing) DM channel with this user."""
        return await self._require_client().create_dm_channel(self.id, options)

    # -- derived accessors --------------------------------------------------

    @property
    def created_at(self) -> datetime:
        return self.id.to_date()

    @property
    def discriminator(self) -> str:
        return f"{self.discriminator_value:04d}"

    @property
    def mention(self) -> str:
        return mention_user(self.id)

    def get_avatar_url(
        self, image_format: ImageFormat = ImageFormat.AUTO, size: int = 128
    ) -> str | None:
        return ImageCdn.get_user_avatar_url(self.id, self.avatar_id, size, image_format)

    def get_default_avatar_url(self) -> str:
        return ImageCdn.get_default_user_avatar_url(self.id, self.discriminator_value)

    def get_display_avatar_url(
        self, image_format: ImageFormat = ImageFormat.AUTO, size: int = 128
    ) -> str:
        return self.get_avatar_url(image_format, size) or self.get_default_avatar_url()

    def get_banner_url(
        self, image_format: ImageFormat = ImageFormat.AUTO, size: int = 4096
    ) -> str | None:
        return ImageCdn.get_user_banner_url(self.id, self.banner_id, size, image_format)

    # Presence is only known to gateway-backed users; REST users look offline.

    @property
    def activity(self) -> Activity | None:
        return None

    @property
    def status(self) -> UserStatus:
        return UserStatus.OFFLINE

    @property
    def active_clients(self) -> frozenset[ClientType]:
        return frozenset()

    @property
    def activities(self) -> tuple[Activity, ...]:
        return ()

    @property
    def is_webhook(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RestUser):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{self.username}#{self.discriminator}"

    def __repr__(self) -> str:
        bot = ", Bot" if self.is_bot else ""
        return f"<{type(self).__name__} {self} ({self.id}{bot})>"


class RestWebhookUser(RestUser):
    """Author of a message sent through a webhook."""

    webhook_id: Snowflake = Field(frozen=True)
    guild: Guild | None = None

    @property
    def is_webhook(self) -> bool:
        return True


AnyUser = Union[RestUser, RestWebhookUser]


def create_user(
    client: DiscordClient | None,
    payload: UserPayload | dict,
    guild: Guild | None = None,
    webhook_id: Snowflake | None = None,
) -> AnyUser:
    return RestUser.create(client, payload, guild, webhook_id)
