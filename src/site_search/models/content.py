"""Content entity models: posts, tags, projects."""

from datetime import datetime
from enum import StrEnum
from urllib.parse import quote

from pydantic import BaseModel, Field


def post_url(slug: str) -> str:
    """Canonical link to an article page."""
    return f"/articles/{slug}"


def tag_url(slug: str) -> str:
    """Canonical link to the article list filtered by a tag."""
    return f"/articles?tag={quote(slug, safe='')}"


def project_url(slug: str) -> str:
    """Canonical link to a project page."""
    return f"/projects/{slug}"


class PostStatus(StrEnum):
    """Publication state of a post."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ProjectStatus(StrEnum):
    """Publication state of a project."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Author(BaseModel):
    """A post author."""

    id: str
    name: str


class Tag(BaseModel):
    """A tag that posts can be filed under."""

    id: int
    name: str
    slug: str
    description: str | None = None
    color: str | None = None
    post_count: int = 0

    @property
    def url(self) -> str:
        """Link to the posts filed under this tag."""
        return tag_url(self.slug)


class Post(BaseModel):
    """A blog article with its author and tags."""

    id: str
    title: str
    slug: str
    excerpt: str | None = None
    content: str = ""
    meta_keywords: str | None = None
    status: PostStatus = PostStatus.DRAFT
    author: Author | None = None
    tags: list[Tag] = Field(default_factory=list)
    word_count: int = 0
    view_count: int = 0
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def url(self) -> str:
        """Link to the article page."""
        return post_url(self.slug)


class Project(BaseModel):
    """A showcased project with its tech stack."""

    id: int
    title: str
    slug: str
    description: str = ""
    content: str = ""
    tech_stack: list[str] = Field(default_factory=list)
    status: ProjectStatus = ProjectStatus.DRAFT
    sort_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def url(self) -> str:
        """Link to the project page."""
        return project_url(self.slug)
