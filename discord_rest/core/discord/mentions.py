"""Helpers for Discord's ``<@id>`` mention markup."""

from __future__ import annotations

import re

from discord_rest.core.discord.snowflake import Snowflake

# Accepts the legacy nickname form ``<@!id>`` as well
_USER_MENTION_RE = re.compile(r"^<@!?(\d+)>$")


def mention_user(user_id: Snowflake) -> str:
    return f"<@{user_id}>"


def try_parse_user_mention(text: str) -> Snowflake | None:
    m = _USER_MENTION_RE.match(text.strip())
    return Snowflake.try_parse(m.group(1)) if m else None
