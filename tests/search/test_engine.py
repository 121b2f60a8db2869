"""Tests for the search engine: fan-out, ranking, failure policy, caching."""

import logging

import pytest
from pydantic import ValidationError

from site_search.errors import RecallFailure
from site_search.models.content import Post, Project, Tag
from site_search.models.search import PopularPost, SearchResultType
from site_search.search.cache import TTLCache
from site_search.search.engine import RECALL_MULTIPLIER, SearchEngine


def _post(post_id: str, title: str) -> Post:
    return Post(id=post_id, title=title, slug=post_id)


def _tag(tag_id: int, name: str) -> Tag:
    return Tag(id=tag_id, name=name, slug=name.lower())


def _project(project_id: int, title: str) -> Project:
    return Project(id=project_id, title=title, slug=title.lower().replace(" ", "-"))


@pytest.fixture
def mixed_source(fake_source):
    fake_source.candidates[SearchResultType.POST] = [
        _post("p-sub", "Why React"),  # 0.6
        _post("p-exact", "React"),  # 1.0
    ]
    fake_source.candidates[SearchResultType.TAG] = [_tag(1, "React Native")]  # 0.8
    fake_source.candidates[SearchResultType.PROJECT] = [_project(1, "My React app")]  # 0.6
    return fake_source


# --- short queries ---


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", " ", "a", "  b  ", None])
async def test_short_query_skips_store(fake_source, query):
    engine = SearchEngine(fake_source)
    assert await engine.search(query) == []
    assert await engine.suggest(query) == []
    assert fake_source.calls == []


# --- ranking ---


@pytest.mark.asyncio
async def test_results_sorted_by_score_descending(mixed_source):
    results = await SearchEngine(mixed_source).search("react")
    assert [r.id for r in results] == ["p-exact", "tag-1", "p-sub", "project-1"]
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.asyncio
async def test_equal_scores_keep_source_order(mixed_source):
    """Post and project both score 0.6; the post source comes first."""
    results = await SearchEngine(mixed_source).search("react")
    tied = [r.id for r in results if r.score == pytest.approx(0.6)]
    assert tied == ["p-sub", "project-1"]


@pytest.mark.asyncio
async def test_limit_truncates(mixed_source):
    results = await SearchEngine(mixed_source).search("react", limit=2)
    assert [r.id for r in results] == ["p-exact", "tag-1"]


@pytest.mark.asyncio
async def test_threshold_excludes_weaker_results(mixed_source):
    results = await SearchEngine(mixed_source).search("react", threshold=0.6)
    assert all(r.score > 0.6 for r in results)
    assert [r.id for r in results] == ["p-exact", "tag-1"]


@pytest.mark.asyncio
async def test_zero_threshold_is_honoured(fake_source):
    fake_source.candidates[SearchResultType.POST] = [
        _post("fuzzy", "r.e.a.c.t"),  # 0.4
        _post("none", "Cooking"),  # 0.0
    ]
    engine = SearchEngine(fake_source)
    assert [r.id for r in await engine.search("react", threshold=0.0)] == ["fuzzy"]
    assert await engine.search("react", threshold=0.5) == []


@pytest.mark.asyncio
async def test_invalid_options_rejected(fake_source):
    engine = SearchEngine(fake_source)
    with pytest.raises(ValidationError):
        await engine.search("react", limit=0)
    with pytest.raises(ValidationError):
        await engine.search("react", threshold=1.5)
    with pytest.raises(ValidationError):
        await engine.search("react", types=["user"])


# --- type selection and recall cap ---


@pytest.mark.asyncio
async def test_types_restrict_matchers(mixed_source):
    results = await SearchEngine(mixed_source).search("react", types=["tag"])
    assert [r.type for r in results] == [SearchResultType.TAG]
    assert [c[1] for c in mixed_source.calls] == [SearchResultType.TAG]


@pytest.mark.asyncio
async def test_single_type_string_accepted(mixed_source):
    results = await SearchEngine(mixed_source).search("react", types="project")
    assert [r.type for r in results] == [SearchResultType.PROJECT]


@pytest.mark.asyncio
async def test_empty_types_runs_nothing(mixed_source):
    assert await SearchEngine(mixed_source).search("react", types=[]) == []
    assert mixed_source.calls == []


@pytest.mark.asyncio
async def test_all_types_queried_with_recall_cap(fake_source):
    await SearchEngine(fake_source).search("  React ", limit=7)
    assert sorted(fake_source.calls) == sorted(
        ("find_candidates", t, "React", 7 * RECALL_MULTIPLIER) for t in SearchResultType
    )


@pytest.mark.asyncio
async def test_custom_recall_multiplier(fake_source):
    await SearchEngine(fake_source, recall_multiplier=5).search("react", limit=4, types=["post"])
    assert fake_source.calls == [("find_candidates", SearchResultType.POST, "react", 20)]


def test_recall_multiplier_must_be_positive(fake_source):
    with pytest.raises(ValueError, match="recall_multiplier"):
        SearchEngine(fake_source, recall_multiplier=0)


# --- failure policy ---


@pytest.mark.asyncio
async def test_recall_failure_fails_whole_search(mixed_source):
    mixed_source.failing.add(SearchResultType.TAG)
    with pytest.raises(RecallFailure) as exc_info:
        await SearchEngine(mixed_source).search("react")
    assert exc_info.value.entity_type == "tag"
    # The join waited for every source before failing
    assert len(mixed_source.calls) == 3


@pytest.mark.asyncio
async def test_partial_results_skip_failed_source(mixed_source, caplog):
    mixed_source.failing.add(SearchResultType.TAG)
    engine = SearchEngine(mixed_source, partial_results=True)
    with caplog.at_level(logging.WARNING, logger="site_search.search.engine"):
        results = await engine.search("react")
    assert [r.id for r in results] == ["p-exact", "p-sub", "project-1"]
    assert "Skipping tag results" in caplog.text


@pytest.mark.asyncio
async def test_partial_results_all_sources_failed(fake_source):
    fake_source.failing.update(SearchResultType)
    engine = SearchEngine(fake_source, partial_results=True)
    assert await engine.search("react") == []


# --- caching ---


@pytest.mark.asyncio
async def test_cache_serves_repeat_searches(mixed_source):
    engine = SearchEngine(mixed_source, cache=TTLCache(60))
    first = await engine.search("react")
    calls_after_first = len(mixed_source.calls)
    second = await engine.search("react")
    assert len(mixed_source.calls) == calls_after_first
    assert [r.model_dump() for r in first] == [r.model_dump() for r in second]


@pytest.mark.asyncio
async def test_cached_results_are_not_shared(mixed_source):
    engine = SearchEngine(mixed_source, cache=TTLCache(60))
    first = await engine.search("react")
    first[0].title = "mutated"
    second = await engine.search("react")
    assert second[0].title == "React"
    assert second[0] is not first[0]


@pytest.mark.asyncio
async def test_cache_key_includes_options(mixed_source):
    engine = SearchEngine(mixed_source, cache=TTLCache(60))
    await engine.search("react")
    await engine.search("react", limit=1)
    assert len(mixed_source.calls) == 6


@pytest.mark.asyncio
async def test_no_cache_hits_store_every_time(mixed_source):
    engine = SearchEngine(mixed_source)
    await engine.search("react")
    await engine.search("react")
    assert len(mixed_source.calls) == 6


# --- suggest ---


@pytest.mark.asyncio
async def test_suggest_dedupes_and_keeps_priority(fake_source):
    fake_source.titles[SearchResultType.POST] = ["React", "React Hooks", "React Native"]
    fake_source.titles[SearchResultType.TAG] = ["React", "ReactiveX", "React Query"]
    fake_source.titles[SearchResultType.PROJECT] = ["React Dashboard"]
    suggestions = await SearchEngine(fake_source).suggest("react")
    assert suggestions == ["React", "React Hooks", "React Native", "ReactiveX", "React Query"]


@pytest.mark.asyncio
async def test_suggest_quotas(fake_source):
    await SearchEngine(fake_source).suggest(" re ")
    assert sorted(fake_source.calls) == sorted(
        [
            ("find_titles", SearchResultType.POST, "re", 3),
            ("find_titles", SearchResultType.TAG, "re", 3),
            ("find_titles", SearchResultType.PROJECT, "re", 2),
        ]
    )


@pytest.mark.asyncio
async def test_suggest_never_exceeds_five(fake_source):
    for entity_type in SearchResultType:
        fake_source.titles[entity_type] = [f"{entity_type.value} {i}" for i in range(3)]
    suggestions = await SearchEngine(fake_source).suggest("react")
    assert len(suggestions) == 5
    assert len(set(suggestions)) == 5
    assert suggestions[:3] == ["post 0", "post 1", "post 2"]


@pytest.mark.asyncio
async def test_suggest_store_failure(fake_source):
    fake_source.failing.add(SearchResultType.PROJECT)
    with pytest.raises(RecallFailure) as exc_info:
        await SearchEngine(fake_source).suggest("react")
    assert exc_info.value.entity_type == "project"


@pytest.mark.asyncio
async def test_suggest_failure_waits_for_every_source(fake_source):
    fake_source.failing.add(SearchResultType.POST)
    with pytest.raises(RecallFailure) as exc_info:
        await SearchEngine(fake_source).suggest("react")
    assert exc_info.value.entity_type == "post"
    assert len(fake_source.calls) == 3


@pytest.mark.asyncio
async def test_suggest_partial_results_skip_failed_source(fake_source, caplog):
    fake_source.titles[SearchResultType.POST] = ["React Hooks"]
    fake_source.titles[SearchResultType.TAG] = ["React"]
    fake_source.titles[SearchResultType.PROJECT] = ["React Dashboard"]
    fake_source.failing.add(SearchResultType.TAG)
    engine = SearchEngine(fake_source, partial_results=True)
    with caplog.at_level(logging.WARNING, logger="site_search.search.engine"):
        suggestions = await engine.suggest("react")
    assert suggestions == ["React Hooks", "React Dashboard"]
    assert "Skipping tag results" in caplog.text


# --- popular ---


@pytest.mark.asyncio
async def test_popular_delegates(fake_source):
    fake_source.popular = [
        PopularPost(title="A", slug="a", url="/articles/a", view_count=9),
        PopularPost(title="B", slug="b", url="/articles/b", view_count=4),
    ]
    popular = await SearchEngine(fake_source).popular(1)
    assert [p.title for p in popular] == ["A"]
    assert fake_source.calls == [("popular_posts", 1)]


@pytest.mark.asyncio
async def test_popular_non_positive_limit(fake_source):
    assert await SearchEngine(fake_source).popular(0) == []
    assert fake_source.calls == []


@pytest.mark.asyncio
async def test_popular_cached(fake_source):
    fake_source.popular = [PopularPost(title="A", slug="a", url="/articles/a", view_count=9)]
    engine = SearchEngine(fake_source, cache=TTLCache(60))
    await engine.popular(5)
    await engine.popular(5)
    assert fake_source.calls == [("popular_posts", 5)]
