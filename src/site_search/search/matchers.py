"""Per-entity matchers: recall candidates, score them, shape results."""

import logging
import math
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from site_search.errors import RecallFailure
from site_search.models.content import Post, Project, Tag
from site_search.models.search import (
    Highlight,
    PostMetadata,
    ProjectMetadata,
    SearchQuery,
    SearchResult,
    SearchResultType,
    TagRef,
)
from site_search.search.highlight import highlight_text
from site_search.search.scoring import best_score, score_field
from site_search.search.weights import (
    POST_EXCERPT_WEIGHT,
    POST_TAG_WEIGHT,
    POST_TITLE_WEIGHT,
    PROJECT_DESCRIPTION_WEIGHT,
    PROJECT_TECH_WEIGHT,
    PROJECT_TITLE_WEIGHT,
    TAG_DESCRIPTION_WEIGHT,
    TAG_NAME_WEIGHT,
)
from site_search.store.source import ContentSource

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200

EntityT = TypeVar("EntityT", Post, Tag, Project)


class SourceMatcher(ABC, Generic[EntityT]):
    """Base matcher for one entity type.

    Subclasses provide ``score`` (weighted max of field scores) and
    ``to_result``. Matchers keep no state between calls, so several can
    run concurrently against the same source.
    """

    entity_type: SearchResultType

    def __init__(self, source: ContentSource) -> None:
        """Initialize with the content source to recall from."""
        self._source = source

    async def match(self, query: SearchQuery, row_limit: int) -> list[SearchResult]:
        """Recall candidates for the query and return those scoring above the threshold."""
        try:
            candidates = await self._source.find_candidates(
                self.entity_type, query.text, row_limit
            )
        except Exception as e:
            raise RecallFailure(self.entity_type.value) from e

        results: list[SearchResult] = []
        for candidate in candidates:
            score = self.score(query.text, candidate)
            if score > query.threshold:
                results.append(self.to_result(query.text, candidate, score))

        logger.debug(
            "%s: %d candidates, %d above threshold %.2f",
            self.entity_type.value,
            len(candidates),
            len(results),
            query.threshold,
        )
        return results

    @abstractmethod
    def score(self, query: str, entity: EntityT) -> float:
        """Weighted-max relevance of one entity."""

    @abstractmethod
    def to_result(self, query: str, entity: EntityT, score: float) -> SearchResult:
        """Shape a scored entity into a search result."""


class ArticleMatcher(SourceMatcher[Post]):
    """Matches published posts on title, excerpt and tag names."""

    entity_type = SearchResultType.POST

    def score(self, query: str, entity: Post) -> float:
        """Weighted max of title, excerpt and best tag name."""
        return max(
            score_field(query, entity.title) * POST_TITLE_WEIGHT,
            score_field(query, entity.excerpt) * POST_EXCERPT_WEIGHT,
            best_score(query, [tag.name for tag in entity.tags]) * POST_TAG_WEIGHT,
        )

    def to_result(self, query: str, entity: Post, score: float) -> SearchResult:
        """Post result with author, reading time, tags and views."""
        return SearchResult(
            id=entity.id,
            title=entity.title,
            description=entity.excerpt or "",
            type=self.entity_type,
            slug=entity.slug,
            url=entity.url,
            highlight=Highlight(
                title=highlight_text(entity.title, query),
                description=highlight_text(entity.excerpt, query),
            ),
            metadata=PostMetadata(
                published_at=entity.published_at,
                author=entity.author.name if entity.author else None,
                reading_time=math.ceil(entity.word_count / WORDS_PER_MINUTE),
                tags=[TagRef(name=t.name, slug=t.slug, color=t.color) for t in entity.tags],
                view_count=entity.view_count,
            ),
            score=score,
        )


class TagMatcher(SourceMatcher[Tag]):
    """Matches tags on name and description."""

    entity_type = SearchResultType.TAG

    def score(self, query: str, entity: Tag) -> float:
        """Weighted max of name and description."""
        return max(
            score_field(query, entity.name) * TAG_NAME_WEIGHT,
            score_field(query, entity.description) * TAG_DESCRIPTION_WEIGHT,
        )

    def to_result(self, query: str, entity: Tag, score: float) -> SearchResult:
        """Tag result; tags carry no metadata."""
        return SearchResult(
            id=f"tag-{entity.id}",
            title=entity.name,
            description=entity.description or f'View all content tagged "{entity.name}"',
            type=self.entity_type,
            slug=entity.slug,
            url=entity.url,
            highlight=Highlight(
                title=highlight_text(entity.name, query),
                description=highlight_text(entity.description, query),
            ),
            metadata=None,
            score=score,
        )


class ProjectMatcher(SourceMatcher[Project]):
    """Matches published projects on title, description and tech stack."""

    entity_type = SearchResultType.PROJECT

    def score(self, query: str, entity: Project) -> float:
        """Weighted max of title, description and best tech-stack entry."""
        return max(
            score_field(query, entity.title) * PROJECT_TITLE_WEIGHT,
            score_field(query, entity.description) * PROJECT_DESCRIPTION_WEIGHT,
            best_score(query, entity.tech_stack) * PROJECT_TECH_WEIGHT,
        )

    def to_result(self, query: str, entity: Project, score: float) -> SearchResult:
        """Project result with its tech stack."""
        return SearchResult(
            id=f"project-{entity.id}",
            title=entity.title,
            description=entity.description,
            type=self.entity_type,
            slug=entity.slug,
            url=entity.url,
            highlight=Highlight(
                title=highlight_text(entity.title, query),
                description=highlight_text(entity.description, query),
            ),
            metadata=ProjectMetadata(tech_stack=list(entity.tech_stack)),
            score=score,
        )


def default_matchers(source: ContentSource) -> dict[SearchResultType, SourceMatcher]:
    """One matcher per entity type, in the order results are merged."""
    return {
        SearchResultType.POST: ArticleMatcher(source),
        SearchResultType.TAG: TagMatcher(source),
        SearchResultType.PROJECT: ProjectMatcher(source),
    }
