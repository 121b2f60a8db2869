"""Compact output formatters for MCP tool responses."""

from site_search.models.search import (
    PopularPost,
    PostMetadata,
    ProjectMetadata,
    SearchResult,
)


def format_result_header(result: SearchResult) -> str:
    """Format: [post-00003] post | <mark>React</mark> Hooks (80%)."""
    return f"[{result.id}] {result.type.value} | {result.highlight.title} ({result.score:.0%})"


def format_result_meta(result: SearchResult) -> str:
    """Format: url | author | 5 min | #react #hooks | 12 views (posts) or stack (projects)."""
    parts: list[str] = [result.url]
    metadata = result.metadata
    if isinstance(metadata, PostMetadata):
        if metadata.author:
            parts.append(metadata.author)
        if metadata.reading_time:
            parts.append(f"{metadata.reading_time} min")
        if metadata.tags:
            parts.append(" ".join(f"#{t.slug}" for t in metadata.tags))
        parts.append(f"{metadata.view_count} views")
    elif isinstance(metadata, ProjectMetadata) and metadata.tech_stack:
        parts.append(", ".join(metadata.tech_stack))
    return " | ".join(parts)


def format_result_compact(result: SearchResult) -> str:
    """Header + highlighted description + meta."""
    lines = [format_result_header(result)]
    description = result.highlight.description or result.description
    if description:
        lines.append(f"  {description}")
    lines.append(f"  {format_result_meta(result)}")
    return "\n".join(lines)


def format_popular(post: PopularPost, rank: int) -> str:
    """Format: 1. Title (42 views) /articles/slug."""
    return f"{rank}. {post.title} ({post.view_count} views) {post.url}"


def format_result_list(
    formatted_entries: list[str],
    header: str | None = None,
    note: str | None = None,
) -> str:
    """Count + note + entries joined by blank lines."""
    if not formatted_entries:
        return "No results found."

    lines: list[str] = []
    if header:
        lines.append(header)
    lines.append(f"{len(formatted_entries)} result(s)")
    if note:
        lines.append(f"Note: {note}")
    lines.append("")
    lines.append("\n\n".join(formatted_entries))
    return "\n".join(lines)
