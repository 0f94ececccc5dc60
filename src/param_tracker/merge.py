"""Merging the current page's query into a link's query.

Attribution parameters (``include_params``) already on the current page
win over the link's own values, so the first source that brought the
visitor to this page is carried forward.  Every other link parameter
overrides the page.  Excluded parameters are dropped last, whatever their
origin.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from param_tracker.config import TrackerConfig
from param_tracker.navigation import compose_href
from param_tracker.query import QueryMap, parse_query

logger = logging.getLogger(__name__)


def remove_params(query: QueryMap, exclude_params: Iterable[str]) -> QueryMap:
    """Copy of ``query`` without keys whose lowercase form is excluded."""
    excluded = {name.lower() for name in exclude_params}
    return QueryMap((key, value) for key, value in query if key.lower() not in excluded)


def merge_params(
    current: QueryMap,
    link: QueryMap,
    include_params: Iterable[str],
    exclude_params: Iterable[str],
) -> QueryMap:
    """Merge ``link`` into ``current``.  Neither input is modified.

    Current-page keys keep their order; link-only keys follow in link
    order.  An attribution key is skipped once the working map holds it,
    so a repeated attribution key in the link keeps its first value too.
    """
    included = {name.lower() for name in include_params}
    merged = current.copy()
    for key, value in link:
        if key.lower() in included and merged.has(key):
            continue
        merged.set(key, value)
    return remove_params(merged, exclude_params)


def sanitize_and_merge(
    base_url: str,
    raw_link_query: str = "",
    raw_current_query: str = "",
    config: TrackerConfig | None = None,
) -> str:
    """Parse both queries, merge them and return ``base_url[?query]``.

    Falls back to ``base_url`` alone if the queries cannot be processed.
    """
    include_params = config.include_params if config else ()
    exclude_params = config.exclude_params if config else ()
    try:
        merged = merge_params(
            parse_query(raw_current_query),
            parse_query(raw_link_query),
            include_params,
            exclude_params,
        )
        return compose_href(base_url, merged)
    except (TypeError, ValueError):
        logger.exception("Failed to merge query parameters for %s", base_url)
        return base_url
