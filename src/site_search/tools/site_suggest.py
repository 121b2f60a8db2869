"""site_suggest MCP tool: query completions."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from site_search.errors import SearchError
from site_search.search.engine import SearchEngine
from site_search.tools.site_search import SEARCH_FAILED

logger = logging.getLogger(__name__)


async def run_suggest(engine: SearchEngine, query: str) -> str:
    """One suggestion per line, or a short notice when there are none."""
    try:
        suggestions = await engine.suggest(query)
    except SearchError:
        logger.exception("Suggestions failed for query: %s", query)
        return SEARCH_FAILED
    if not suggestions:
        return "No suggestions."
    return "\n".join(suggestions)


def register_site_suggest(mcp: FastMCP) -> None:
    """Register the site_suggest tool with the MCP server."""

    @mcp.tool()
    async def site_suggest(
        query: Annotated[str, Field(description="Partial search text (at least 2 characters)")],
        ctx: Context | None = None,
    ) -> str:
        """Suggest up to five completions from article titles, tag names and project titles."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        engine: SearchEngine = ctx.lifespan_context["engine"]
        return await run_suggest(engine, query)
