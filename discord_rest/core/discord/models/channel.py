"""DM channel model and ChannelKind enum."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, model_validator

from discord_rest.core.discord.models.user import UserPayload
from discord_rest.core.discord.snowflake import Snowflake


class ChannelKind(IntEnum):
    GUILD_TEXT_CHAT = 0
    DIRECT_TEXT_CHAT = 1
    GUILD_VOICE_CHAT = 2
    DIRECT_GROUP_TEXT_CHAT = 3
    GUILD_CATEGORY = 4
    GUILD_NEWS = 5


class DMChannel(BaseModel):
    model_config = {"frozen": True}

    id: Snowflake
    kind: ChannelKind = ChannelKind.DIRECT_TEXT_CHAT
    recipients: list[UserPayload] = []
    last_message_id: Snowflake | None = None

    @property
    def recipient(self) -> UserPayload | None:
        return self.recipients[0] if self.recipients else None

    @property
    def is_group(self) -> bool:
        return self.kind == ChannelKind.DIRECT_GROUP_TEXT_CHAT

    @model_validator(mode="before")
    @classmethod
    def _from_api(cls, data: dict) -> dict:  # type: ignore[override]
        if not isinstance(data, dict) or "kind" in data:
            return data

        last_msg_raw = data.get("last_message_id")
        return {
            "id": data["id"],
            "kind": ChannelKind(data.get("type", ChannelKind.DIRECT_TEXT_CHAT)),
            "recipients": data.get("recipients", []),
            "last_message_id": Snowflake.parse(str(last_msg_raw)) if last_msg_raw else None,
        }

    def __str__(self) -> str:
        names = ", ".join(r.username for r in self.recipients if r.username)
        return names or str(self.id)
