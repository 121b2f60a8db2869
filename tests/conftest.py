"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

from site_search.db.connection import create_connection
from site_search.models.content import PostStatus, ProjectStatus
from site_search.models.search import SearchResultType
from site_search.store.content_store import ContentStore


@pytest_asyncio.fixture
async def db():
    """In-memory database with full schema."""
    conn = await create_connection(":memory:")
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store(db):
    """Content store backed by in-memory DB."""
    return ContentStore(db)


@pytest_asyncio.fixture
async def corpus(store):
    """A small published site plus drafts that must never surface."""
    now = datetime.now(UTC)
    author = await store.create_author("u1", "Ada")

    react_tag = await store.create_tag("React", "react", color="#61dafb")
    tutorial = await store.create_tag("Tutorial", "tutorial", "Step-by-step guides")
    life = await store.create_tag("Life", "life", "Everyday notes")

    react_post = await store.create_post(
        title="React",
        slug="react",
        excerpt="A library for building UIs",
        content="Components and state.",
        author=author,
        tag_ids=[react_tag.id],
        published_at=now - timedelta(days=2),
    )
    next_post = await store.create_post(
        title="Next.js Guide",
        slug="nextjs-guide",
        excerpt="Server rendering with React",
        content="Pages, routing and deployment.",
        author=author,
        tag_ids=[tutorial.id],
        published_at=now - timedelta(days=1),
    )
    pasta_post = await store.create_post(
        title="Cooking Pasta",
        slug="cooking-pasta",
        excerpt="Simple dinner ideas",
        content="Boil water first.",
        tag_ids=[life.id],
        published_at=now - timedelta(days=3),
    )
    draft_post = await store.create_post(
        title="Draft about React",
        slug="draft-react",
        content="Unfinished.",
        status=PostStatus.DRAFT,
    )

    dashboard = await store.create_project(
        title="React Dashboard",
        slug="react-dashboard",
        description="Admin panel",
        tech_stack=["React", "TypeScript"],
        sort_order=1,
    )
    timer = await store.create_project(
        title="Pasta Timer",
        slug="pasta-timer",
        description="Kitchen helper",
        tech_stack=["Python"],
        sort_order=2,
    )
    secret = await store.create_project(
        title="React secret",
        slug="react-secret",
        status=ProjectStatus.DRAFT,
    )

    return {
        "author": author,
        "react_tag": react_tag,
        "tutorial_tag": tutorial,
        "life_tag": life,
        "react_post": react_post,
        "next_post": next_post,
        "pasta_post": pasta_post,
        "draft_post": draft_post,
        "dashboard": dashboard,
        "timer": timer,
        "secret": secret,
    }


class FakeSource:
    """In-memory content source with call recording and injectable failures.

    Candidates are returned as configured, without filtering, so tests
    control exactly what reaches the scorer.
    """

    def __init__(self):
        self.candidates: dict[SearchResultType, list] = {t: [] for t in SearchResultType}
        self.titles: dict[SearchResultType, list[str]] = {t: [] for t in SearchResultType}
        self.popular: list = []
        self.failing: set[SearchResultType] = set()
        self.calls: list[tuple] = []

    def _check(self, entity_type: SearchResultType) -> None:
        if entity_type in self.failing:
            raise ConnectionError(f"{entity_type} store unavailable")

    async def find_candidates(self, entity_type, text, row_limit):
        self.calls.append(("find_candidates", entity_type, text, row_limit))
        self._check(entity_type)
        return list(self.candidates[entity_type])[:row_limit]

    async def find_titles(self, entity_type, text, row_limit):
        self.calls.append(("find_titles", entity_type, text, row_limit))
        self._check(entity_type)
        return list(self.titles[entity_type])[:row_limit]

    async def popular_posts(self, limit):
        self.calls.append(("popular_posts", limit))
        self._check(SearchResultType.POST)
        return list(self.popular)[:limit]


@pytest.fixture
def fake_source():
    """Controllable fake content source."""
    return FakeSource()
