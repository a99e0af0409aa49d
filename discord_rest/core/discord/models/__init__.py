"""Discord data models."""

from discord_rest.core.discord.models.cdn import ImageCdn, ImageFormat
from discord_rest.core.discord.models.channel import ChannelKind, DMChannel
from discord_rest.core.discord.models.color import Color
from discord_rest.core.discord.models.flags import UserFlags
from discord_rest.core.discord.models.guild import Guild
from discord_rest.core.discord.models.presence import (
    Activity,
    ActivityType,
    ClientType,
    UserStatus,
)
from discord_rest.core.discord.models.user import (
    AnyUser,
    RestUser,
    RestWebhookUser,
    UserPayload,
    create_user,
    parse_discriminator,
)

__all__ = [
    "Activity",
    "ActivityType",
    "AnyUser",
    "ChannelKind",
    "ClientType",
    "Color",
    "DMChannel",
    "Guild",
    "ImageCdn",
    "ImageFormat",
    "RestUser",
    "RestWebhookUser",
    "UserFlags",
    "UserPayload",
    "UserStatus",
    "create_user",
    "parse_discriminator",
]
