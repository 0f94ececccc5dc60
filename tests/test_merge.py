"""Tests for parameter merging and exclusion."""

from __future__ import annotations

import logging

from param_tracker.merge import merge_params, remove_params, sanitize_and_merge
from param_tracker.query import QueryMap, parse_query

UTM = ["utm_source", "utm_medium", "utm_campaign"]


def _q(**pairs: str) -> QueryMap:
    return QueryMap(pairs.items())


class TestMergeParams:
    def test_current_attribution_wins(self):
        merged = merge_params(
            _q(utm_source="site"), _q(utm_source="ad", ref="x"), ["utm_source"], [],
        )
        assert merged.items() == [("utm_source", "site"), ("ref", "x")]

    def test_exclusion_beats_inclusion(self):
        merged = merge_params(QueryMap(), _q(s="query", utm_id="5"), ["utm_id"], ["s"])
        assert merged.items() == [("utm_id", "5")]

    def test_link_attribution_used_when_page_has_none(self):
        merged = merge_params(_q(page="2"), _q(utm_source="ad"), UTM, [])
        assert merged.items() == [("page", "2"), ("utm_source", "ad")]

    def test_non_attribution_link_value_overrides_page(self):
        merged = merge_params(_q(ref="page", lang="en"), _q(ref="link"), UTM, [])
        assert merged.items() == [("ref", "link"), ("lang", "en")]

    def test_order_current_keys_then_link_keys(self):
        current = _q(b="1", a="2")
        link = _q(d="3", a="9", c="4")
        merged = merge_params(current, link, [], [])
        assert merged.items() == [("b", "1"), ("a", "9"), ("d", "3"), ("c", "4")]

    def test_not_commutative(self):
        page = _q(utm_source="newsletter", s="shoes")
        link = _q(utm_source="banner", category="sale")
        forward = merge_params(page, link, UTM, ["s"])
        backward = merge_params(link, page, UTM, ["s"])
        assert forward.items() == [("utm_source", "newsletter"), ("category", "sale")]
        assert backward.items() == [("utm_source", "banner"), ("category", "sale")]
        assert forward != backward

    def test_include_matches_lowercase_key(self):
        merged = merge_params(
            QueryMap([("UTM_Source", "page")]),
            QueryMap([("UTM_Source", "link")]),
            ["utm_source"],
            [],
        )
        assert merged.items() == [("UTM_Source", "page")]

    def test_exclusion_matches_lowercase_key(self):
        merged = merge_params(QueryMap([("S", "shoes")]), QueryMap([("s", "hats")]), [], ["s"])
        assert merged.items() == []

    def test_exclusion_removes_current_page_keys(self):
        merged = merge_params(_q(s="foo", utm_source="organic"), QueryMap(), UTM, ["s"])
        assert merged.items() == [("utm_source", "organic")]

    def test_repeated_link_attribution_keeps_first(self):
        link = QueryMap([("utm_source", "a"), ("utm_source", "b")])
        merged = merge_params(QueryMap(), link, UTM, [])
        assert merged.items() == [("utm_source", "a")]

    def test_link_value_collapses_current_duplicates(self):
        merged = merge_params(QueryMap([("tag", "a"), ("tag", "b")]), _q(tag="c"), [], [])
        assert merged.items() == [("tag", "c")]

    def test_inputs_not_mutated(self):
        current = _q(utm_source="site", s="x")
        link = _q(ref="y")
        merge_params(current, link, UTM, ["s"])
        assert current.items() == [("utm_source", "site"), ("s", "x")]
        assert link.items() == [("ref", "y")]

    def test_consistent_inputs_are_a_no_op(self):
        current = _q(utm_source="site", ref="y")
        assert merge_params(current, current.copy(), UTM, []) == current

    def test_end_to_end_landing_link(self):
        merged = merge_params(
            parse_query("?utm_source=organic&s=foo"),
            parse_query("?utm_source=ads"),
            ["utm_source"],
            ["s"],
        )
        assert "/landing?" + merged.to_string() == "/landing?utm_source=organic"


class TestRemoveParams:
    def test_removes_all_occurrences(self):
        query = QueryMap([("s", "1"), ("a", "2"), ("s", "3")])
        assert remove_params(query, ["s"]).items() == [("a", "2")]

    def test_returns_copy(self):
        query = _q(a="1")
        assert remove_params(query, []) is not query


class TestSanitizeAndMerge:
    def test_composes_url(self, config):
        href = sanitize_and_merge(
            "https://www.example.com/landing",
            "?utm_source=ads&s=x",
            "?utm_source=organic",
            config,
        )
        assert href == "https://www.example.com/landing?utm_source=organic"

    def test_empty_query_returns_base(self, config):
        assert sanitize_and_merge("https://example.com/", "?s=x", "", config) == "https://example.com/"

    def test_repairs_malformed_link_query(self):
        href = sanitize_and_merge("https://example.com/p", "?a=1?utm_source=x")
        assert href == "https://example.com/p?a=1&utm_source=x"

    def test_falls_back_to_base_url_on_failure(self, monkeypatch, caplog):
        def _boom(*args, **kwargs):
            raise ValueError("boom")

        monkeypatch.setattr("param_tracker.merge.merge_params", _boom)
        with caplog.at_level(logging.ERROR, logger="param_tracker.merge"):
            assert sanitize_and_merge("https://example.com/p", "a=1") == "https://example.com/p"
        assert "Failed to merge" in caplog.text
