"""Tests for accepted-origin matching."""

from __future__ import annotations

import pytest

from param_tracker.origin import extract_hostname, is_accepted_origin


class TestIsAcceptedOrigin:
    @pytest.mark.parametrize(
        "origin",
        [
            "example.com",
            "a.b.example.com",
            "https://example.com",
            "https://shop.example.com",
            "http://WWW.Example.COM:8080",
            "//cdn.example.com/path",
            "https://www.example.com/landing?utm_source=x",
        ],
    )
    def test_accepted(self, origin):
        assert is_accepted_origin(origin, ["example.com"]) is True

    @pytest.mark.parametrize(
        "origin",
        [
            "notexample.com",
            "https://example.com.evil.net",
            "https://example.org",
            "https://com",
        ],
    )
    def test_rejected(self, origin):
        assert is_accepted_origin(origin, ["example.com"]) is False

    @pytest.mark.parametrize("origin", ["", "   ", None, 42, "https://[::1", "http://"])
    def test_malformed_is_rejected_without_raising(self, origin):
        assert is_accepted_origin(origin, ["example.com"]) is False

    def test_accepted_domains_compared_case_insensitively(self):
        assert is_accepted_origin("shop.example.com", [" Example.COM "]) is True

    def test_blank_accepted_entries_skipped(self):
        assert is_accepted_origin("example.com", ["", "  "]) is False

    def test_empty_accept_list(self):
        assert is_accepted_origin("example.com", []) is False

    def test_any_of_several_domains(self):
        domains = ["example.com", "example-checkout.com"]
        assert is_accepted_origin("https://pay.example-checkout.com", domains) is True


class TestExtractHostname:
    @pytest.mark.parametrize(
        "origin, expected",
        [
            ("Example.com", "example.com"),
            ("https://Sub.Example.com:443", "sub.example.com"),
            ("//cdn.example.com", "cdn.example.com"),
            ("http://", ""),
        ],
    )
    def test_cases(self, origin, expected):
        assert extract_hostname(origin) == expected
