"""Search engine: concurrent per-source matching, ranking, suggestions, popularity."""

import asyncio
import logging
from collections.abc import Hashable, Iterable
from typing import Any

from site_search.errors import RecallFailure
from site_search.models.search import (
    ALL_TYPES,
    PopularPost,
    SearchQuery,
    SearchResult,
    SearchResultType,
)
from site_search.search.cache import ResultCache
from site_search.search.matchers import SourceMatcher, default_matchers
from site_search.search.normalizer import normalize_query
from site_search.store.source import ContentSource

logger = logging.getLogger(__name__)

# Over-fetch candidates so database order truncates less before re-scoring
RECALL_MULTIPLIER = 3

MAX_SUGGESTIONS = 5
# Per-source suggestion quotas, in priority order
SUGGESTION_QUOTAS: tuple[tuple[SearchResultType, int], ...] = (
    (SearchResultType.POST, 3),
    (SearchResultType.TAG, 3),
    (SearchResultType.PROJECT, 2),
)


class SearchEngine:
    """Ranked search across posts, tags and projects.

    ``search`` fans out to one matcher per requested type, waits for all of
    them, then merges, sorts by score and truncates. By default a recall
    failure in any source fails the whole search; with ``partial_results``
    the failed sources are logged and skipped.
    """

    def __init__(
        self,
        source: ContentSource,
        *,
        cache: ResultCache | None = None,
        recall_multiplier: int = RECALL_MULTIPLIER,
        partial_results: bool = False,
        matchers: dict[SearchResultType, SourceMatcher] | None = None,
    ) -> None:
        """Initialize with a content source and optional cache and policies."""
        if recall_multiplier < 1:
            raise ValueError("recall_multiplier must be at least 1")
        self._source = source
        self._cache = cache
        self.recall_multiplier = recall_multiplier
        self.partial_results = partial_results
        self._matchers = matchers if matchers is not None else default_matchers(source)

    async def search(
        self,
        query: str | None,
        types: Iterable[SearchResultType | str] | None = None,
        limit: int = 20,
        threshold: float = 0.3,
    ) -> list[SearchResult]:
        """Search all requested entity types and return results ranked by score."""
        text = normalize_query(query)
        if text is None:
            return []

        if isinstance(types, str):
            types = [types]
        search_query = SearchQuery(
            text=text,
            types=ALL_TYPES if types is None else frozenset(types),
            limit=limit,
            threshold=threshold,
        )

        key: Hashable = (
            "search",
            search_query.text,
            tuple(sorted(search_query.types)),
            search_query.limit,
            search_query.threshold,
        )
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return [r.model_copy(deep=True) for r in cached]

        results = await self._run_matchers(search_query)

        if self._cache is not None:
            self._cache.set(key, [r.model_copy(deep=True) for r in results])
        return results

    async def _run_matchers(self, query: SearchQuery) -> list[SearchResult]:
        """Fan out to the selected matchers, join, merge and rank."""
        selected = [m for t, m in self._matchers.items() if t in query.types]
        if not selected:
            return []

        row_limit = query.limit * self.recall_multiplier
        outcomes = await asyncio.gather(
            *(m.match(query, row_limit) for m in selected),
            return_exceptions=True,
        )

        merged: list[SearchResult] = []
        for batch in self._join([m.entity_type for m in selected], outcomes):
            merged.extend(batch)

        # Stable sort keeps per-source order among equal scores
        merged.sort(key=lambda r: r.score, reverse=True)
        return merged[: query.limit]

    def _join(self, entity_types: list[SearchResultType], outcomes: list[Any]) -> list[Any]:
        """Apply the failure policy to gathered per-source outcomes, in source order.

        Raises the first failure unless ``partial_results`` is set, in which
        case failed sources are logged and dropped.
        """
        succeeded: list[Any] = []
        for entity_type, outcome in zip(entity_types, outcomes, strict=True):
            if isinstance(outcome, RecallFailure) and self.partial_results:
                logger.warning(
                    "Skipping %s results: %s",
                    entity_type.value,
                    outcome,
                    exc_info=outcome,
                )
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            succeeded.append(outcome)
        return succeeded

    async def suggest(self, query: str | None) -> list[str]:
        """Up to five distinct completions: post titles, then tag names, then project titles."""
        text = normalize_query(query)
        if text is None:
            return []

        key: Hashable = ("suggest", text)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return list(cached)

        outcomes = await asyncio.gather(
            *(self._titles(entity_type, text, quota) for entity_type, quota in SUGGESTION_QUOTAS),
            return_exceptions=True,
        )
        batches = self._join([entity_type for entity_type, _ in SUGGESTION_QUOTAS], outcomes)
        # dict keeps first-seen order, so source priority survives de-duplication
        suggestions = list(dict.fromkeys(title for batch in batches for title in batch))
        suggestions = suggestions[:MAX_SUGGESTIONS]

        if self._cache is not None:
            self._cache.set(key, tuple(suggestions))
        return suggestions

    async def _titles(self, entity_type: SearchResultType, text: str, quota: int) -> list[str]:
        try:
            return await self._source.find_titles(entity_type, text, quota)
        except Exception as e:
            raise RecallFailure(entity_type.value) from e

    async def popular(self, limit: int = 5) -> list[PopularPost]:
        """Most viewed published posts."""
        if limit < 1:
            return []

        key: Hashable = ("popular", limit)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return [p.model_copy() for p in cached]

        try:
            popular = await self._source.popular_posts(limit)
        except Exception as e:
            raise RecallFailure(SearchResultType.POST.value) from e

        if self._cache is not None:
            self._cache.set(key, [p.model_copy() for p in popular])
        return popular
