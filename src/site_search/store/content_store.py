"""Content store: seeding writes plus the recall queries the search engine consumes."""

import logging
from datetime import UTC, datetime

from site_search.db.backend import Database
from site_search.db.queries import (
    get_post,
    get_tags,
    insert_author,
    insert_post,
    insert_project,
    insert_tag,
    insert_view,
    next_post_id,
    select_popular_posts,
    select_post_titles,
    select_posts_matching,
    select_project_titles,
    select_projects_matching,
    select_tag_names,
    select_tags_matching,
)
from site_search.models.content import (
    Author,
    Post,
    PostStatus,
    Project,
    ProjectStatus,
    Tag,
    post_url,
)
from site_search.models.search import PopularPost, SearchResultType

logger = logging.getLogger(__name__)


class ContentStore:
    """Posts, tags and projects backed by the content database.

    The ``find_*`` methods are the coarse recall step of search: a
    case-insensitive substring filter bounded by a row limit. They never rank.
    """

    def __init__(self, db: Database):
        """Initialize with a database connection."""
        self.db = db

    async def create_author(self, author_id: str, name: str) -> Author:
        """Create a post author."""
        author = Author(id=author_id, name=name)
        await insert_author(self.db, author)
        return author

    async def create_tag(
        self,
        name: str,
        slug: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Tag:
        """Create a tag."""
        tag_id = await insert_tag(self.db, name, slug, description, color)
        logger.info("Created tag %d: %s", tag_id, name)
        return Tag(id=tag_id, name=name, slug=slug, description=description, color=color)

    async def create_post(
        self,
        title: str,
        slug: str,
        content: str = "",
        excerpt: str | None = None,
        meta_keywords: str | None = None,
        status: PostStatus = PostStatus.PUBLISHED,
        author: Author | None = None,
        tag_ids: list[int] | None = None,
        published_at: datetime | None = None,
    ) -> Post:
        """Create a post. Published posts default ``published_at`` to now."""
        post_id = await next_post_id(self.db)
        now = datetime.now(UTC)
        if status == PostStatus.PUBLISHED and published_at is None:
            published_at = now

        post = Post(
            id=post_id,
            title=title,
            slug=slug,
            excerpt=excerpt,
            content=content,
            meta_keywords=meta_keywords,
            status=status,
            author=author,
            tags=await get_tags(self.db, tag_ids or []),
            word_count=len(content.split()),
            published_at=published_at,
            created_at=now,
            updated_at=now,
        )
        await insert_post(self.db, post)

        logger.info("Created post %s: %s", post_id, title)
        return post

    async def create_project(
        self,
        title: str,
        slug: str,
        description: str = "",
        content: str = "",
        tech_stack: list[str] | None = None,
        status: ProjectStatus = ProjectStatus.PUBLISHED,
        sort_order: int = 0,
    ) -> Project:
        """Create a project."""
        now = datetime.now(UTC)
        project = Project(
            id=0,
            title=title,
            slug=slug,
            description=description,
            content=content,
            tech_stack=tech_stack or [],
            status=status,
            sort_order=sort_order,
            created_at=now,
            updated_at=now,
        )
        project_id = await insert_project(self.db, project)

        logger.info("Created project %d: %s", project_id, title)
        return project.model_copy(update={"id": project_id})

    async def record_view(self, post_id: str) -> None:
        """Count one view of a post toward its popularity."""
        await insert_view(self.db, post_id)

    async def get_post(self, post_id: str) -> Post | None:
        """Get a single post by ID."""
        return await get_post(self.db, post_id)

    # -- Recall --

    async def find_posts(self, text: str, row_limit: int) -> list[Post]:
        """Published posts containing ``text`` in any searchable field."""
        return await select_posts_matching(self.db, text, row_limit)

    async def find_tags(self, text: str, row_limit: int) -> list[Tag]:
        """Tags containing ``text`` in name or description."""
        return await select_tags_matching(self.db, text, row_limit)

    async def find_projects(self, text: str, row_limit: int) -> list[Project]:
        """Published projects containing ``text`` in any searchable field."""
        return await select_projects_matching(self.db, text, row_limit)

    async def find_candidates(
        self, entity_type: SearchResultType, text: str, row_limit: int
    ) -> list[Post] | list[Tag] | list[Project]:
        """Dispatch a recall query by entity type."""
        if entity_type == SearchResultType.POST:
            return await self.find_posts(text, row_limit)
        if entity_type == SearchResultType.TAG:
            return await self.find_tags(text, row_limit)
        if entity_type == SearchResultType.PROJECT:
            return await self.find_projects(text, row_limit)
        raise ValueError(f"Unknown entity type: {entity_type}")

    async def find_titles(
        self, entity_type: SearchResultType, text: str, row_limit: int
    ) -> list[str]:
        """Display titles (tag names for tags) whose title contains ``text``."""
        if entity_type == SearchResultType.POST:
            return await select_post_titles(self.db, text, row_limit)
        if entity_type == SearchResultType.TAG:
            return await select_tag_names(self.db, text, row_limit)
        if entity_type == SearchResultType.PROJECT:
            return await select_project_titles(self.db, text, row_limit)
        raise ValueError(f"Unknown entity type: {entity_type}")

    # -- Popularity --

    async def popular_posts(self, limit: int) -> list[PopularPost]:
        """Most viewed published posts."""
        rows = await select_popular_posts(self.db, limit)
        return [
            PopularPost(
                title=row["title"],
                slug=row["slug"],
                url=post_url(row["slug"]),
                view_count=row["view_count"],
            )
            for row in rows
        ]
