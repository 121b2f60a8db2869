"""Query normalization shared by search and suggestions."""

MIN_QUERY_LENGTH = 2


def normalize_query(raw: str | None) -> str | None:
    """Trim a raw query. Returns None when it is too short to search.

    Short queries are not an error: callers return no results without
    touching the content store.
    """
    if raw is None:
        return None
    text = raw.strip()
    if len(text) < MIN_QUERY_LENGTH:
        return None
    return text
