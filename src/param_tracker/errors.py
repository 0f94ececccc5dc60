"""Error types raised by the propagation engine.

Only :class:`ConfigError` ever reaches callers.  :class:`UrlParseError` is
raised by the URL splitting helpers and recovered at the component
boundary, where it turns into a safe default (empty query, rejected link).
"""

from __future__ import annotations


class ConfigError(ValueError):
    """Configuration could not be loaded or fails a fail-fast requirement."""


class UrlParseError(ValueError):
    """A URL or href could not be split into its parts."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Unparseable URL {url!r}{detail}")
