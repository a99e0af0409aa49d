"""CLI application - main entry point with all commands."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from discord_rest.core.discord.models.user import RestUser
    from discord_rest.core.discord.snowflake import Snowflake

console = Console()


class UserIdParamType(click.ParamType):
    """Click parameter type for a user snowflake or a ``<@id>`` mention."""

    name = "user"

    def convert(
        self, value: str, param: click.Parameter | None, ctx: click.Context | None
    ) -> Snowflake:
        from discord_rest.core.discord.mentions import try_parse_user_mention
        from discord_rest.core.discord.snowflake import Snowflake

        result = Snowflake.try_parse(value) or try_parse_user_mention(value)
        if result is None:
            self.fail(f"Invalid user ID: {value!r}", param, ctx)
        return result


class TokenKindParamType(click.ParamType):
    name = "token-kind"

    def convert(self, value: str, param: click.Parameter | None, ctx: click.Context | None):
        from discord_rest.core.discord.client import TokenKind

        if not isinstance(value, str):
            return value
        normalized = value.lower()
        if normalized == "auto":
            return None
        for kind in TokenKind:
            if kind.value == normalized:
                return kind
        self.fail(f"Invalid token kind: {value!r}. Choose from: auto, bot, user", param, ctx)


USER_ID = UserIdParamType()
TOKEN_KIND = TokenKindParamType()

token_option = click.option(
    "-t", "--token", envvar="DISCORD_TOKEN", required=True, help="Discord token."
)
token_kind_option = click.option(
    "--token-kind",
    type=TOKEN_KIND,
    default="bot",
    help="How to send the token: bot, user or auto.",
)
timeout_option = click.option(
    "--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
    help="Per-request timeout in seconds.",
)


def _render_user(user: RestUser) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("ID", str(user.id))
    table.add_row("Name", str(user))
    table.add_row("Mention", user.mention)
    table.add_row("Bot", "yes" if user.is_bot else "no")
    table.add_row("Created", user.created_at.isoformat())
    table.add_row("Avatar", user.get_display_avatar_url())
    table.add_row("Banner", user.get_banner_url() or "-")
    table.add_row("Accent color", str(user.accent_color) if user.accent_color else "-")
    flags = user.public_flags
    names = [f.name for f in type(flags) if f and f in flags] if flags else []
    table.add_row("Flags", ", ".join(n for n in names if n) or "-")
    return table


@click.group()
@click.version_option(package_name="discord-rest")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Discord REST - inspect Discord users from the command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@token_option
@token_kind_option
@timeout_option
@click.argument("user_id", type=USER_ID)
def user(token: str, token_kind, timeout: float | None, user_id: Snowflake) -> None:
    """Show a user's profile."""

    async def _run() -> None:
        from discord_rest.core.discord.client import DiscordClient
        from discord_rest.core.discord.options import RequestOptions

        async with DiscordClient(token, token_kind) as client:
            found = await client.try_get_user(user_id, RequestOptions(timeout=timeout))
            if found is None:
                raise click.ClickException(f"User {user_id} not found.")
            console.print(_render_user(found))

    _run_command(_run)


@cli.command()
@token_option
@token_kind_option
@timeout_option
@click.argument("user_id", type=USER_ID)
def dm(token: str, token_kind, timeout: float | None, user_id: Snowflake) -> None:
    """Open a direct message channel with a user."""

    async def _run() -> None:
        from discord_rest.core.discord.client import DiscordClient
        from discord_rest.core.discord.models.user import RestUser
        from discord_rest.core.discord.options import RequestOptions

        async with DiscordClient(token, token_kind) as client:
            channel = await RestUser(client, id=user_id).create_dm_channel(
                RequestOptions(timeout=timeout)
            )
            console.print(f"{channel.id} | {channel}")

    _run_command(_run)


def _run_command(run) -> None:  # type: ignore[no-untyped-def]
    from discord_rest.core.exceptions import DiscordRestError

    try:
        asyncio.run(run())
    except DiscordRestError as exc:
        raise click.ClickException(str(exc)) from exc
