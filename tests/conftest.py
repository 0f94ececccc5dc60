"""Test fixtures for param-tracker tests."""

from __future__ import annotations

from typing import Any

import pytest

from param_tracker.config import DEFAULT_CONFIG, TrackerConfig, normalize_config
from param_tracker.link import Link


def make_test_config(**overrides: Any) -> TrackerConfig:
    """Defaults plus ``example.com`` as the accepted origin."""
    custom: dict[str, Any] = {"accept_origins": ["example.com"]}
    custom.update(overrides)
    return normalize_config(DEFAULT_CONFIG, custom)


def make_link(
    href: str,
    *,
    base_url: str = "https://www.example.com/",
    classes: list[str] | None = None,
    attributes: dict[str, str] | None = None,
    target: str | None = None,
) -> Link:
    """Resolve ``href`` against an example.com page."""
    return Link.from_href(
        href,
        base_url=base_url,
        classes=classes or [],
        attributes=attributes,
        target=target,
    )


@pytest.fixture
def config() -> TrackerConfig:
    return make_test_config(exclude_params=["s"])
