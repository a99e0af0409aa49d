"""Guild (server) reference."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from discord_rest.core.discord.models.cdn import ImageCdn
from discord_rest.core.discord.snowflake import Snowflake


class Guild(BaseModel):
    model_config = {"frozen": True}

    id: Snowflake
    name: str
    icon_url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_api(cls, data: dict) -> dict:  # type: ignore[override]
        if not isinstance(data, dict) or "icon" not in data:
            return data
        gid = Snowflake.parse(str(data["id"]))
        icon_hash = data.get("icon")
        icon_url = ImageCdn.get_guild_icon_url(gid, icon_hash) if icon_hash else None
        return {"id": gid, "name": data["name"], "icon_url": icon_url}
