"""Parameters propagated into accepted forms as hidden fields."""

from __future__ import annotations

from collections.abc import Iterable

from param_tracker.config import TrackerConfig
from param_tracker.link import PageLocation
from param_tracker.merge import remove_params
from param_tracker.query import QueryMap, parse_query


def location_query(location: PageLocation) -> str:
    """Query carried by the page.

    Single-page apps often keep it inside the fragment (``#/signup?utm_source=x``),
    which takes precedence over the regular search string.
    """
    _, separator, hash_query = location.hash.partition("?")
    if separator:
        return hash_query
    return location.search


def form_params(location: PageLocation, config: TrackerConfig) -> QueryMap:
    return remove_params(parse_query(location_query(location)), config.exclude_params)


def missing_form_fields(
    params: QueryMap, existing: Iterable[tuple[str, str]] = (),
) -> list[tuple[str, str]]:
    """Pairs of ``params`` the form does not already carry with the same value."""
    present = set(existing)
    fields: list[tuple[str, str]] = []
    for pair in params:
        if pair in present:
            continue
        present.add(pair)
        fields.append(pair)
    return fields
