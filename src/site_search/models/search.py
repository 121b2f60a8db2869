"""Search-related models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class SearchResultType(StrEnum):
    """Entity type discriminator for search results."""

    POST = "post"
    TAG = "tag"
    PROJECT = "project"


ALL_TYPES: frozenset[SearchResultType] = frozenset(SearchResultType)


class SearchQuery(BaseModel):
    """Parameters for a single search call.

    ``text`` is already normalized (trimmed) and keeps the caller's casing;
    comparisons case-fold it on the fly.
    """

    text: str
    types: frozenset[SearchResultType] = ALL_TYPES
    limit: int = Field(default=20, ge=1)
    threshold: float = Field(default=0.3, ge=0.0, le=1.0)


class Highlight(BaseModel):
    """Display fields with query occurrences wrapped in <mark> tags."""

    title: str = ""
    description: str = ""


class TagRef(BaseModel):
    """Tag summary attached to post results."""

    name: str
    slug: str
    color: str | None = None


class PostMetadata(BaseModel):
    """Extra display data for post results."""

    published_at: datetime | None = None
    author: str | None = None
    reading_time: int = 0
    tags: list[TagRef] = Field(default_factory=list)
    view_count: int = 0


class ProjectMetadata(BaseModel):
    """Extra display data for project results."""

    tech_stack: list[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    """A single ranked search hit."""

    id: str
    title: str
    description: str = ""
    type: SearchResultType
    slug: str
    url: str
    highlight: Highlight
    metadata: PostMetadata | ProjectMetadata | None = None
    score: float = Field(ge=0.0, le=1.0)


class PopularPost(BaseModel):
    """Lightweight summary of a frequently viewed post."""

    title: str
    slug: str
    url: str
    view_count: int
