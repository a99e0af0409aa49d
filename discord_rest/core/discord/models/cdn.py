"""Discord CDN URL helpers."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from discord_rest.core.discord.snowflake import Snowflake

CDN_URL = "https://cdn.discordapp.com/"

_MIN_SIZE = 16
_MAX_SIZE = 4096


class ImageFormat(Enum):
    AUTO = "auto"
    WEBP = "webp"
    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"


def _validate_size(size: int) -> int:
    # Powers of two between 16 and 4096 inclusive
    if not (_MIN_SIZE <= size <= _MAX_SIZE) or size & (size - 1):
        raise ValueError(f"Image size must be a power of two between 16 and 4096, got {size}")
    return size


def _extension(image_format: ImageFormat, image_hash: str) -> str:
    if image_format is ImageFormat.AUTO:
        return "gif" if image_hash.startswith("a_") else "png"
    return image_format.value


class ImageCdn:
    """Static helper for building Discord CDN image URLs."""

    @staticmethod
    def get_user_avatar_url(
        user_id: Snowflake,
        avatar_hash: str | None,
        size: int = 128,
        image_format: ImageFormat = ImageFormat.AUTO,
    ) -> str | None:
        if avatar_hash is None:
            return None
        ext = _extension(image_format, avatar_hash)
        return f"{CDN_URL}avatars/{user_id}/{avatar_hash}.{ext}?size={_validate_size(size)}"

    @staticmethod
    def get_default_user_avatar_url(user_id: Snowflake, discriminator: int = 0) -> str:
        """Fallback avatar for users without one.

        Legacy users pick one of five images by discriminator; users migrated
        to unique usernames (discriminator 0) pick one of six by account age.
        """
        index = discriminator % 5 if discriminator else (user_id.value >> 22) % 6
        return f"{CDN_URL}embed/avatars/{index}.png"

    @staticmethod
    def get_user_banner_url(
        user_id: Snowflake,
        banner_hash: str | None,
        size: int = 4096,
        image_format: ImageFormat = ImageFormat.AUTO,
    ) -> str | None:
        if banner_hash is None:
            return None
        ext = _extension(image_format, banner_hash)
        return f"{CDN_URL}banners/{user_id}/{banner_hash}.{ext}?size={_validate_size(size)}"

    @staticmethod
    def get_guild_icon_url(guild_id: Snowflake, icon_hash: str, size: int = 512) -> str:
        ext = _extension(ImageFormat.AUTO, icon_hash)
        return f"{CDN_URL}icons/{guild_id}/{icon_hash}.{ext}?size={_validate_size(size)}"
