#!/usr/bin/env python3
"""Seed a content database with sample posts, tags and projects, then run a query.

Usage:
    uv run python scripts/seed_sample.py [QUERY]

Writes to SEARCH_DB_PATH. Refuses to seed a database that already has posts.
"""

import asyncio
import sys
from datetime import UTC, datetime, timedelta

from site_search.config import get_db_path
from site_search.db.connection import create_connection
from site_search.search.engine import SearchEngine
from site_search.store.content_store import ContentStore


async def seed(store: ContentStore) -> None:
    """Create a small but varied corpus."""
    author = await store.create_author("admin", "Site Admin")

    tech = await store.create_tag("Tech", "tech", "Programming and tooling", "#3b82f6")
    life = await store.create_tag("Life", "life", "Notes from everyday life", "#10b981")
    tutorial = await store.create_tag("Tutorial", "tutorial", "Step-by-step guides", "#f59e0b")
    react = await store.create_tag("React", "react", None, "#61dafb")

    now = datetime.now(UTC)
    posts = [
        ("React", "react", "Why I keep coming back to React.", [react.id, tech.id]),
        (
            "Next.js Guide",
            "nextjs-guide",
            "Routing, data fetching and deployment with Next.js.",
            [react.id, tutorial.id],
        ),
        ("Weekend Hiking", "weekend-hiking", "Trails near the city.", [life.id]),
        (
            "Typed Python at Work",
            "typed-python",
            "Gradual typing in a large codebase.",
            [tech.id],
        ),
    ]
    created = []
    for days_ago, (title, slug, excerpt, tag_ids) in enumerate(posts):
        created.append(
            await store.create_post(
                title=title,
                slug=slug,
                excerpt=excerpt,
                content=f"{excerpt} " * 50,
                author=author,
                tag_ids=tag_ids,
                published_at=now - timedelta(days=days_ago),
            )
        )

    for views, post in zip((12, 30, 3, 7), created, strict=True):
        for _ in range(views):
            await store.record_view(post.id)

    await store.create_project(
        title="Personal Blog",
        slug="personal-blog",
        description="This site, built with React and SQLite.",
        tech_stack=["React", "TypeScript", "SQLite"],
        sort_order=1,
    )
    await store.create_project(
        title="Trail Logger",
        slug="trail-logger",
        description="Offline-first hiking tracker.",
        tech_stack=["Python", "FastAPI"],
        sort_order=2,
    )


async def main() -> None:
    """Seed the configured database and show results for a sample query."""
    query = sys.argv[1] if len(sys.argv) > 1 else "react"
    db_path = get_db_path()
    db = await create_connection(db_path)
    try:
        cursor = await db.execute("SELECT COUNT(*) FROM posts")
        row = await cursor.fetchone()
        store = ContentStore(db)
        if row is not None and row[0] > 0:
            print(f"{db_path} already has {row[0]} posts, skipping seed")
        else:
            await seed(store)
            print(f"Seeded {db_path}")

        engine = SearchEngine(store)
        print(f"\nsearch({query!r}):")
        for result in await engine.search(query):
            print(f"  {result.score:.2f}  [{result.type.value}] {result.highlight.title}")
        print(f"\nsuggest({query!r}): {await engine.suggest(query)}")
        print("\npopular:")
        for post in await engine.popular(3):
            print(f"  {post.view_count:>3}  {post.title}")
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())
