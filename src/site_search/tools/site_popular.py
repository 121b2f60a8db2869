"""site_popular MCP tool: most viewed articles."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from site_search.errors import SearchError
from site_search.search.engine import SearchEngine
from site_search.tools.formatters import format_popular, format_result_list
from site_search.tools.site_search import SEARCH_FAILED

logger = logging.getLogger(__name__)


async def run_popular(engine: SearchEngine, limit: int = 5) -> str:
    """Ranked list of the most viewed articles."""
    try:
        posts = await engine.popular(limit)
    except SearchError:
        logger.exception("Popular lookup failed")
        return SEARCH_FAILED
    entries = [format_popular(post, rank) for rank, post in enumerate(posts, start=1)]
    return format_result_list(entries, header="Popular articles")


def register_site_popular(mcp: FastMCP) -> None:
    """Register the site_popular tool with the MCP server."""

    @mcp.tool()
    async def site_popular(
        limit: Annotated[int, Field(description="Number of articles (1-20)", ge=1, le=20)] = 5,
        ctx: Context | None = None,
    ) -> str:
        """List the most viewed published articles. Useful as a starting point for discovery."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        engine: SearchEngine = ctx.lifespan_context["engine"]
        return await run_popular(engine, limit)
