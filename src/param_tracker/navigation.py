"""Final href composition and the navigation decision table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from param_tracker.query import QueryMap


class NavigationAction(str, Enum):
    SCROLL_IN_PAGE = "scroll_in_page"
    OPEN_NEW_CONTEXT = "open_new_context"
    NAVIGATE_CURRENT_CONTEXT = "navigate_current_context"


@dataclass(frozen=True)
class NavigationDecision:
    """What the host should do with a clicked link.

    ``anchor`` is the fragment to scroll to for ``SCROLL_IN_PAGE`` and
    empty otherwise.  ``final_href`` is always filled in, even when the
    action does not navigate.
    """

    final_href: str
    action: NavigationAction
    anchor: str = ""


def _normalize_hash(hash_: str | None) -> str:
    if not hash_ or hash_ == "#":
        return ""
    return hash_ if hash_.startswith("#") else f"#{hash_}"


def compose_href(base_url: str, query: QueryMap, hash_: str | None = "") -> str:
    """``base_url`` + ``?query`` when the query is non-empty + ``hash_``."""
    query_string = query.to_string()
    href = f"{base_url}?{query_string}" if query_string else base_url
    return href + _normalize_hash(hash_)


def is_same_document_hash(page: str, current_page: str, hash_: str | None) -> bool:
    """A non-empty fragment pointing into the page that is already loaded."""
    return bool(_normalize_hash(hash_)) and page == current_page


def plan_navigation(
    base_url: str,
    merged_query: QueryMap,
    hash_: str | None,
    current_page: str,
    target: str | None = None,
) -> NavigationDecision:
    """Decide how to follow a rewritten link.

    ``base_url`` and ``current_page`` are origin + pathname of the link and
    of the loaded page.  Same-document fragments scroll; otherwise
    ``target="_blank"`` opens a new browsing context and anything else
    navigates the current one.
    """
    final_href = compose_href(base_url, merged_query, hash_)

    if is_same_document_hash(base_url, current_page, hash_):
        return NavigationDecision(
            final_href, NavigationAction.SCROLL_IN_PAGE, anchor=_normalize_hash(hash_),
        )
    if (target or "").strip().lower() == "_blank":
        return NavigationDecision(final_href, NavigationAction.OPEN_NEW_CONTEXT)
    return NavigationDecision(final_href, NavigationAction.NAVIGATE_CURRENT_CONTEXT)
