from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.config import ConfluenceConfig, load_config
from confluence_mcp.core.logging import setup_logging
from confluence_mcp.core.registry import register_discovered_tools

SERVER_NAME = "confluence-mcp"

log = logging.getLogger("confluence_mcp.server")


def build_app(client: ConfluenceClient) -> FastMCP:
    app = FastMCP(SERVER_NAME)
    register_discovered_tools(app, client)
    return app


async def serve(config: ConfluenceConfig) -> None:
    log.info(
        "Connecting to %s as %s",
        config.base_url,
        config.username or "<token>",
        extra={"mode": config.mode, "auth_mode": config.auth_mode},
    )
    if config.default_space:
        log.info("Default space: %s", config.default_space)

    async with ConfluenceClient(config) as client:
        app = build_app(client)
        log.info("Server running on stdio")
        await app.run_stdio_async()


def main() -> None:
    load_dotenv()
    result = load_config()
    config = result.config
    if config is None:
        # stdout is reserved for protocol frames
        print(f"Error: {result.error}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_level)
    asyncio.run(serve(config))


if __name__ == "__main__":
    main()
