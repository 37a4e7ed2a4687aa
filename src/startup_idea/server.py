"""Startup Idea MCP Server.

FastMCP server with one paid tool, served over streamable HTTP.
Run: startup-idea-mcp
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, ToolAnnotations

from . import __version__
from .config import load_settings
from .core.pipeline import run_idea_of_the_day
from .paywall import Paywall

logger = logging.getLogger(__name__)

SERVER_NAME = "startup-idea-mcp"

IDEA_TOOL = "idea_of_the_day"
IDEA_DESCRIPTION = "Generate a startup idea of the day from latest business news"
IDEA_PRICE = "$0.50"

PAID = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=False, openWorldHint=True)

settings = load_settings()
paywall = Paywall(settings)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging for the server process."""
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("%s %s listening on %s:%d", SERVER_NAME, __version__, settings.host, settings.port)
    yield


mcp = FastMCP(
    SERVER_NAME,
    instructions="Paid startup-idea generator. Each call reads the latest business news and returns one startup opportunity as JSON.",
    lifespan=lifespan,
    host=settings.host,
    port=settings.port,
)


# ─── Tool: Idea of the Day ($0.50) ───────────────────────────────────────────


@mcp.tool(name=IDEA_TOOL, description=IDEA_DESCRIPTION, annotations=PAID, structured_output=False)
async def idea_of_the_day(ctx: Context) -> CallToolResult:
    """Startup idea of the day, paid per call over x402."""

    async def run():
        return await run_idea_of_the_day(settings)

    return await paywall.charge(
        ctx,
        run,
        price=IDEA_PRICE,
        resource=f"mcp://tool/{IDEA_TOOL}",
        description=IDEA_DESCRIPTION,
    )


def main():
    """Entry point for the CLI command."""
    mcp.run(transport="streamable-http")


if __name__ == "__main__":
    main()
