"""FastMCP server with lifespan management and tool registration."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from site_search.config import (
    get_cache_max_entries,
    get_cache_ttl,
    get_db_path,
    get_log_level,
    get_recall_multiplier,
    is_partial_results,
)
from site_search.db.connection import create_connection
from site_search.search.cache import ResultCache, TTLCache
from site_search.search.engine import SearchEngine
from site_search.store.content_store import ContentStore
from site_search.tools.site_popular import register_site_popular
from site_search.tools.site_search import register_site_search
from site_search.tools.site_suggest import register_site_suggest


def _create_cache() -> ResultCache | None:
    """Create a result cache when SEARCH_CACHE_TTL is positive."""
    ttl = get_cache_ttl()
    if ttl <= 0:
        return None
    return TTLCache(ttl, max_entries=get_cache_max_entries())


def create_engine(store: ContentStore) -> SearchEngine:
    """Build a search engine over the store using environment configuration."""
    return SearchEngine(
        store,
        cache=_create_cache(),
        recall_multiplier=get_recall_multiplier(),
        partial_results=is_partial_results(),
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Manage the content database connection and search engine."""
    # Configure logging to stderr (stdout is MCP stdio transport)
    logging.basicConfig(
        level=getattr(logging, get_log_level()),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    db_path = get_db_path()
    logger.info("Opening content database at %s", db_path)
    db = await create_connection(db_path)

    store = ContentStore(db)
    engine = create_engine(store)
    if engine.partial_results:
        logger.info("Partial results enabled, failed sources will be skipped")

    try:
        yield {"db": db, "store": store, "engine": engine}
    finally:
        await db.close()
        logger.info("Database connection closed")


_INSTRUCTIONS = """\
Search a content site's published articles, tags and projects.

- site_search: Ranked search. Exact title matches rank first, then prefix, \
substring and fuzzy matches. Restrict with types (post, tag, project), \
cap with limit, and tune the minimum relevance with threshold.
- site_suggest: Up to five completions for a partial query.
- site_popular: The most viewed articles.

Queries shorter than 2 characters return nothing.
"""


def create_server() -> FastMCP:
    """Create and configure the MCP server with all tools."""
    mcp = FastMCP(
        "site-search",
        instructions=_INSTRUCTIONS,
        lifespan=lifespan,
    )

    register_site_search(mcp)
    register_site_suggest(mcp)
    register_site_popular(mcp)

    return mcp
