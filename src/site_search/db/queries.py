"""Query helpers for the content tables."""

import json
from datetime import UTC, datetime

from site_search.db.backend import Database, Row
from site_search.models.content import (
    Author,
    Post,
    PostStatus,
    Project,
    ProjectStatus,
    Tag,
)

_LIKE_ESCAPE = "\\"

# Published posts with author name and view count
_POST_SELECT = """
    SELECT p.*, u.name AS author_name,
        (SELECT COUNT(*) FROM post_views v WHERE v.post_id = p.id) AS view_count
    FROM posts p
    LEFT JOIN users u ON u.id = p.author_id
"""

_TAG_SELECT = """
    SELECT t.*,
        (SELECT COUNT(*) FROM post_tags pt WHERE pt.tag_id = t.id) AS post_count
    FROM tags t
"""


def like_pattern(text: str) -> str:
    """Build a LIKE pattern that matches ``text`` literally anywhere in a column."""
    escaped = (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _parse_dt(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None


async def next_post_id(db: Database) -> str:
    """Get and increment the next post ID."""
    cursor = await db.execute("SELECT next_id FROM post_id_seq")
    row = await cursor.fetchone()
    if row is None:
        raise RuntimeError("post_id_seq table is empty")
    next_id = row[0]
    await db.execute("UPDATE post_id_seq SET next_id = ?", (next_id + 1,))
    return f"post-{next_id:05d}"


def row_to_tag(row: Row) -> Tag:
    """Convert a database row to a Tag."""
    col_names = row.keys()
    return Tag(
        id=row["id"],
        name=row["name"],
        slug=row["slug"],
        description=row["description"],
        color=row["color"],
        post_count=row["post_count"] if "post_count" in col_names else 0,
    )


def row_to_post(row: Row, tags: list[Tag] | None = None) -> Post:
    """Convert a posts row (joined with author name and view count) to a Post."""
    col_names = row.keys()
    author = None
    if row["author_id"] is not None and "author_name" in col_names:
        author = Author(id=row["author_id"], name=row["author_name"])
    return Post(
        id=row["id"],
        title=row["title"],
        slug=row["slug"],
        excerpt=row["excerpt"],
        content=row["content"],
        meta_keywords=row["meta_keywords"],
        status=PostStatus(row["status"]),
        author=author,
        tags=tags or [],
        word_count=row["word_count"],
        view_count=row["view_count"] if "view_count" in col_names else 0,
        published_at=_parse_dt(row["published_at"]),
        created_at=_parse_dt(row["created_at"]),
        updated_at=_parse_dt(row["updated_at"]),
    )


def row_to_project(row: Row) -> Project:
    """Convert a projects row to a Project."""
    return Project(
        id=row["id"],
        title=row["title"],
        slug=row["slug"],
        description=row["description"],
        content=row["content"],
        tech_stack=json.loads(row["tech_stack"]),
        status=ProjectStatus(row["status"]),
        sort_order=row["sort_order"],
        created_at=_parse_dt(row["created_at"]),
        updated_at=_parse_dt(row["updated_at"]),
    )


# -- Writes --


async def insert_author(db: Database, author: Author) -> None:
    """Insert an author."""
    await db.execute("INSERT INTO users (id, name) VALUES (?, ?)", (author.id, author.name))
    await db.commit()


async def insert_tag(
    db: Database,
    name: str,
    slug: str,
    description: str | None = None,
    color: str | None = None,
) -> int:
    """Insert a tag and return its generated id."""
    cursor = await db.execute(
        "INSERT INTO tags (name, slug, description, color) VALUES (?, ?, ?, ?)",
        (name, slug, description, color),
    )
    await db.commit()
    if cursor.lastrowid is None:
        raise RuntimeError(f"Tag {slug} was not inserted")
    return cursor.lastrowid


async def insert_post(db: Database, post: Post) -> None:
    """Insert a post and its tag links."""
    await db.execute(
        """INSERT INTO posts
        (id, title, slug, excerpt, content, meta_keywords, status, author_id,
         word_count, published_at, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            post.id,
            post.title,
            post.slug,
            post.excerpt,
            post.content,
            post.meta_keywords,
            post.status.value,
            post.author.id if post.author else None,
            post.word_count,
            post.published_at.isoformat() if post.published_at else None,
            post.created_at.isoformat() if post.created_at else _now_iso(),
            post.updated_at.isoformat() if post.updated_at else _now_iso(),
        ),
    )
    if post.tags:
        await db.executemany(
            "INSERT INTO post_tags (post_id, tag_id) VALUES (?, ?)",
            [(post.id, tag.id) for tag in post.tags],
        )
    await db.commit()


async def insert_project(db: Database, project: Project) -> int:
    """Insert a project and return its generated id. ``project.id`` is ignored."""
    cursor = await db.execute(
        """INSERT INTO projects
        (title, slug, description, content, tech_stack, status, sort_order,
         created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            project.title,
            project.slug,
            project.description,
            project.content,
            json.dumps(project.tech_stack),
            project.status.value,
            project.sort_order,
            project.created_at.isoformat() if project.created_at else _now_iso(),
            project.updated_at.isoformat() if project.updated_at else _now_iso(),
        ),
    )
    await db.commit()
    if cursor.lastrowid is None:
        raise RuntimeError(f"Project {project.slug} was not inserted")
    return cursor.lastrowid


async def insert_view(db: Database, post_id: str) -> None:
    """Record one page view for a post."""
    await db.execute(
        "INSERT INTO post_views (post_id, viewed_at) VALUES (?, ?)",
        (post_id, _now_iso()),
    )
    await db.commit()


# -- Reads --


async def get_tags(db: Database, tag_ids: list[int]) -> list[Tag]:
    """Fetch tags by id, in the order given. Unknown ids are skipped."""
    if not tag_ids:
        return []
    placeholders = ", ".join("?" for _ in tag_ids)
    cursor = await db.execute(f"{_TAG_SELECT} WHERE t.id IN ({placeholders})", tag_ids)
    by_id = {row["id"]: row_to_tag(row) for row in await cursor.fetchall()}
    return [by_id[tag_id] for tag_id in tag_ids if tag_id in by_id]


async def get_post_tags(db: Database, post_ids: list[str]) -> dict[str, list[Tag]]:
    """Fetch the tags of several posts in one query, keyed by post id."""
    if not post_ids:
        return {}
    placeholders = ", ".join("?" for _ in post_ids)
    cursor = await db.execute(
        f"""SELECT pt.post_id, t.id, t.name, t.slug, t.description, t.color
        FROM post_tags pt
        JOIN tags t ON t.id = pt.tag_id
        WHERE pt.post_id IN ({placeholders})
        ORDER BY pt.rowid""",
        post_ids,
    )
    tags: dict[str, list[Tag]] = {post_id: [] for post_id in post_ids}
    for row in await cursor.fetchall():
        tags[row["post_id"]].append(row_to_tag(row))
    return tags


async def get_post(db: Database, post_id: str) -> Post | None:
    """Get a single post (any status) by ID."""
    cursor = await db.execute(f"{_POST_SELECT} WHERE p.id = ?", (post_id,))
    row = await cursor.fetchone()
    if row is None:
        return None
    tags = await get_post_tags(db, [post_id])
    return row_to_post(row, tags[post_id])


async def select_posts_matching(db: Database, text: str, limit: int) -> list[Post]:
    """Published posts whose title, excerpt, content, keywords or tag names contain ``text``.

    Newest first. Containment ignores case, including non-ASCII letters.
    """
    pattern = like_pattern(text.casefold())
    cursor = await db.execute(
        f"""{_POST_SELECT}
        WHERE p.status = ?
        AND (
            casefold(p.title) LIKE ? ESCAPE '\\'
            OR casefold(p.excerpt) LIKE ? ESCAPE '\\'
            OR casefold(p.content) LIKE ? ESCAPE '\\'
            OR casefold(p.meta_keywords) LIKE ? ESCAPE '\\'
            OR EXISTS (
                SELECT 1 FROM post_tags pt JOIN tags t ON t.id = pt.tag_id
                WHERE pt.post_id = p.id AND casefold(t.name) LIKE ? ESCAPE '\\'
            )
        )
        ORDER BY p.published_at DESC, p.id
        LIMIT ?""",
        (PostStatus.PUBLISHED.value, pattern, pattern, pattern, pattern, pattern, limit),
    )
    rows = await cursor.fetchall()
    tags = await get_post_tags(db, [row["id"] for row in rows])
    return [row_to_post(row, tags[row["id"]]) for row in rows]


async def select_tags_matching(db: Database, text: str, limit: int) -> list[Tag]:
    """Tags whose name or description contains ``text``, in creation order."""
    pattern = like_pattern(text.casefold())
    cursor = await db.execute(
        f"""{_TAG_SELECT}
        WHERE casefold(t.name) LIKE ? ESCAPE '\\'
        OR casefold(t.description) LIKE ? ESCAPE '\\'
        ORDER BY t.id
        LIMIT ?""",
        (pattern, pattern, limit),
    )
    return [row_to_tag(row) for row in await cursor.fetchall()]


async def select_projects_matching(db: Database, text: str, limit: int) -> list[Project]:
    """Published projects whose title, description, content or tech stack contains ``text``.

    Ordered by the site's display order.
    """
    pattern = like_pattern(text.casefold())
    cursor = await db.execute(
        """SELECT p.* FROM projects p
        WHERE p.status = ?
        AND (
            casefold(p.title) LIKE ? ESCAPE '\\'
            OR casefold(p.description) LIKE ? ESCAPE '\\'
            OR casefold(p.content) LIKE ? ESCAPE '\\'
            OR EXISTS (
                SELECT 1 FROM json_each(p.tech_stack) ts
                WHERE casefold(ts.value) LIKE ? ESCAPE '\\'
            )
        )
        ORDER BY p.sort_order, p.id
        LIMIT ?""",
        (ProjectStatus.PUBLISHED.value, pattern, pattern, pattern, pattern, limit),
    )
    return [row_to_project(row) for row in await cursor.fetchall()]


async def select_post_titles(db: Database, text: str, limit: int) -> list[str]:
    """Titles of published posts containing ``text`` in the title."""
    cursor = await db.execute(
        """SELECT title FROM posts
        WHERE status = ? AND casefold(title) LIKE ? ESCAPE '\\'
        ORDER BY published_at DESC, id
        LIMIT ?""",
        (PostStatus.PUBLISHED.value, like_pattern(text.casefold()), limit),
    )
    return [row["title"] for row in await cursor.fetchall()]


async def select_tag_names(db: Database, text: str, limit: int) -> list[str]:
    """Names of tags containing ``text``."""
    cursor = await db.execute(
        "SELECT name FROM tags WHERE casefold(name) LIKE ? ESCAPE '\\' ORDER BY id LIMIT ?",
        (like_pattern(text.casefold()), limit),
    )
    return [row["name"] for row in await cursor.fetchall()]


async def select_project_titles(db: Database, text: str, limit: int) -> list[str]:
    """Titles of published projects containing ``text`` in the title."""
    cursor = await db.execute(
        """SELECT title FROM projects
        WHERE status = ? AND casefold(title) LIKE ? ESCAPE '\\'
        ORDER BY sort_order, id
        LIMIT ?""",
        (ProjectStatus.PUBLISHED.value, like_pattern(text.casefold()), limit),
    )
    return [row["title"] for row in await cursor.fetchall()]


async def select_popular_posts(db: Database, limit: int) -> list[Row]:
    """Published posts ordered by view count, most viewed first."""
    cursor = await db.execute(
        """SELECT p.title, p.slug, COUNT(v.id) AS view_count
        FROM posts p
        LEFT JOIN post_views v ON v.post_id = p.id
        WHERE p.status = ?
        GROUP BY p.id
        ORDER BY view_count DESC, p.published_at DESC, p.id
        LIMIT ?""",
        (PostStatus.PUBLISHED.value, limit),
    )
    return await cursor.fetchall()
