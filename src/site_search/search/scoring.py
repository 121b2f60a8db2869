"""Tiered single-field relevance scoring.

A field scores by the first rule that applies, comparing Unicode case-folded text:

    exact match      1.0
    prefix match     0.8
    substring match  0.6
    otherwise        fuzzy subsequence ratio * 0.4

The fuzzy tier gives nothing unless the whole query is an ordered
subsequence of the field.
"""

EXACT_SCORE = 1.0
PREFIX_SCORE = 0.8
SUBSTRING_SCORE = 0.6
FUZZY_WEIGHT = 0.4


def score_field(query: str, text: str | None) -> float:
    """Score how well one text field matches the query, in [0, 1]."""
    if not text:
        return 0.0

    folded_query = query.casefold()
    folded_text = text.casefold()

    if folded_text == folded_query:
        return EXACT_SCORE
    if folded_text.startswith(folded_query):
        return PREFIX_SCORE
    if folded_query in folded_text:
        return SUBSTRING_SCORE
    return fuzzy_match(folded_query, folded_text) * FUZZY_WEIGHT


def fuzzy_match(query: str, text: str) -> float:
    """Fraction of query characters found in order within text.

    Single forward pass, no backtracking. Returns 0 unless every query
    character is matched.
    """
    if not query:
        return 0.0

    cursor = 0
    matched = 0
    for char in text:
        if char == query[cursor]:
            matched += 1
            cursor += 1
            if cursor == len(query):
                break

    return matched / len(query) if cursor == len(query) else 0.0


def best_score(query: str, texts: list[str]) -> float:
    """Highest field score among several texts (e.g. tag names), 0 if none."""
    return max((score_field(query, text) for text in texts), default=0.0)
