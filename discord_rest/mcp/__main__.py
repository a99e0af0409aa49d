"""Entry point for ``python -m discord_rest.mcp``."""

from __future__ import annotations

import click


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default="stdio",
    help="MCP transport to serve on.",
)
@click.option("--port", type=int, default=8000, help="Port for the http transport.")
def main(transport: str, port: int) -> None:
    """Serve the discord-rest MCP tools."""
    from discord_rest.mcp.server import mcp

    if transport == "http":
        mcp.run(transport="http", port=port)
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
