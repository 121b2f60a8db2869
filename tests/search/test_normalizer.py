"""Tests for query normalization."""

from site_search.search.normalizer import MIN_QUERY_LENGTH, normalize_query


def test_trims_whitespace():
    assert normalize_query("  React  ") == "React"


def test_keeps_casing():
    assert normalize_query("NeXt") == "NeXt"


def test_minimum_length_is_two():
    assert MIN_QUERY_LENGTH == 2
    assert normalize_query("ab") == "ab"


def test_too_short_returns_none():
    assert normalize_query("a") is None
    assert normalize_query("  b  ") is None


def test_empty_and_none():
    assert normalize_query("") is None
    assert normalize_query("   ") is None
    assert normalize_query(None) is None
