"""Content source protocol consumed by the search engine."""

from typing import Protocol, runtime_checkable

from site_search.models.content import Post, Project, Tag
from site_search.models.search import PopularPost, SearchResultType


@runtime_checkable
class ContentSource(Protocol):
    """Coarse recall over stored content. Implementations filter, never rank."""

    async def find_candidates(
        self, entity_type: SearchResultType, text: str, row_limit: int
    ) -> list[Post] | list[Tag] | list[Project]:
        """Entities of one type containing ``text`` in a searchable field."""
        ...

    async def find_titles(
        self, entity_type: SearchResultType, text: str, row_limit: int
    ) -> list[str]:
        """Display titles of one type containing ``text`` in the title."""
        ...

    async def popular_posts(self, limit: int) -> list[PopularPost]:
        """Most viewed published posts."""
        ...
