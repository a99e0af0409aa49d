"""Presence value types: status, client platforms and activities."""

from __future__ import annotations

from enum import Enum, IntEnum

from pydantic import BaseModel


class UserStatus(Enum):
    OFFLINE = "offline"
    ONLINE = "online"
    IDLE = "idle"
    DO_NOT_DISTURB = "dnd"
    INVISIBLE = "invisible"


class ClientType(Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"
    WEB = "web"


class ActivityType(IntEnum):
    PLAYING = 0
    STREAMING = 1
    LISTENING = 2
    WATCHING = 3
    CUSTOM = 4
    COMPETING = 5


class Activity(BaseModel):
    model_config = {"frozen": True}

    name: str
    type: ActivityType = ActivityType.PLAYING
    details: str | None = None
    state: str | None = None
    url: str | None = None
