"""site_search MCP tool: ranked search across posts, tags and projects."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from site_search.config import get_default_limit, get_default_threshold
from site_search.errors import SearchError
from site_search.models.search import SearchResult, SearchResultType
from site_search.search.engine import SearchEngine
from site_search.tools.formatters import format_result_compact, format_result_list

logger = logging.getLogger(__name__)

SEARCH_FAILED = "Search failed."


def format_search_results(results: list[SearchResult], query: str) -> str:
    """Format ranked results as compact entries."""
    entries = [format_result_compact(r) for r in results]
    return format_result_list(entries, header=f'Results for "{query.strip()}"')


async def run_search(
    engine: SearchEngine,
    query: str,
    types: list[SearchResultType] | None = None,
    limit: int | None = None,
    threshold: float | None = None,
) -> str:
    """Run a search and format it, reporting store failures as a generic failure.

    Omitted limit and threshold fall back to SEARCH_DEFAULT_LIMIT and
    SEARCH_DEFAULT_THRESHOLD.
    """
    if limit is None:
        limit = get_default_limit()
    if threshold is None:
        threshold = get_default_threshold()
    try:
        results = await engine.search(query, types=types, limit=limit, threshold=threshold)
    except SearchError:
        logger.exception("Search failed for query: %s", query)
        return SEARCH_FAILED
    return format_search_results(results, query)


def register_site_search(mcp: FastMCP) -> None:
    """Register the site_search tool with the MCP server."""

    @mcp.tool()
    async def site_search(
        query: Annotated[str, Field(description="Search text (at least 2 characters)")],
        types: Annotated[
            list[SearchResultType] | None,
            Field(description="Restrict to entity types: post, tag, project"),
        ] = None,
        limit: Annotated[
            int | None, Field(description="Maximum results (1-50)", ge=1, le=50)
        ] = None,
        threshold: Annotated[
            float | None, Field(description="Minimum relevance score (0-1)", ge=0.0, le=1.0)
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Search the site's articles, tags and projects.

        Titles and names are scored exact > prefix > substring > fuzzy, the
        best weighted field wins, and results are ranked by that score.
        Matches in titles and descriptions are wrapped in <mark> tags.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        engine: SearchEngine = ctx.lifespan_context["engine"]
        return await run_search(engine, query, types=types, limit=limit, threshold=threshold)
