"""ParamTracker facade — one object per page configuration.

Wires the classifier, query parser, merger and navigation planner around a
single immutable :class:`TrackerConfig`.  A host calls:

- :meth:`ParamTracker.sanitize_link` for every anchor once the page loads,
- :meth:`ParamTracker.handle_click` when an anchor is activated,
- :meth:`ParamTracker.form_fields` before an accepted form is submitted.

``None`` from the first two means "leave the link alone".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from param_tracker.classifier import (
    is_accepted_form,
    is_trackable_destination,
    should_handle_link,
)
from param_tracker.config import (
    DEFAULT_CONFIG,
    TrackerConfig,
    load_config_file,
    normalize_config,
)
from param_tracker.forms import form_params, missing_form_fields
from param_tracker.link import LinkDescriptor, PageLocation
from param_tracker.merge import merge_params, sanitize_and_merge
from param_tracker.navigation import NavigationDecision, plan_navigation
from param_tracker.query import parse_query

logger = logging.getLogger(__name__)


class ParamTracker:
    """Parameter propagation for one page configuration."""

    def __init__(self, config: TrackerConfig) -> None:
        self.config = config

    @classmethod
    def from_settings(
        cls,
        custom: TrackerConfig | Mapping[str, Any] | None = None,
        *,
        defaults: TrackerConfig | Mapping[str, Any] | None = DEFAULT_CONFIG,
        current_hostname: str | None = None,
        require_origins: bool = False,
    ) -> ParamTracker:
        """Normalize ``custom`` over ``defaults``.

        ``current_hostname`` (the page being tracked) is always accepted and
        listed ahead of the configured origins.
        """
        config = normalize_config(defaults)
        if current_hostname:
            config = normalize_config(config, {"accept_origins": [current_hostname]})
        config = normalize_config(config, custom)
        if require_origins:
            config = normalize_config(config, {}, require_origins=True)
        return cls(config)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        current_hostname: str | None = None,
        require_origins: bool = False,
    ) -> ParamTracker:
        return cls.from_settings(
            load_config_file(path),
            defaults=None,
            current_hostname=current_hostname,
            require_origins=require_origins,
        )

    def handles(self, link: LinkDescriptor) -> bool:
        return should_handle_link(link, self.config) and is_trackable_destination(
            link, self.config,
        )

    def handle_click(
        self, link: LinkDescriptor, location: PageLocation,
    ) -> NavigationDecision | None:
        """Plan the navigation for a clicked link, or None to let it through."""
        if not self.handles(link):
            return None

        merged = merge_params(
            parse_query(location.search),
            parse_query(link.search),
            self.config.include_params,
            self.config.exclude_params,
        )
        decision = plan_navigation(
            link.origin + link.pathname,
            merged,
            link.hash,
            location.page,
            target=link.target,
        )
        logger.debug("Planned %s for %r -> %s", decision.action.value, link.href, decision.final_href)
        return decision

    def sanitize_link(self, link: LinkDescriptor) -> str | None:
        """Repair and strip the link's own query.  None when nothing changes."""
        if not should_handle_link(link, self.config):
            return None

        sanitized = sanitize_and_merge(
            link.origin + link.pathname, link.search, "", self.config,
        ) + link.hash
        if sanitized == link.origin + link.pathname + link.search + link.hash:
            return None
        return sanitized

    def form_fields(
        self,
        form_id: str | None,
        location: PageLocation,
        existing: Iterable[tuple[str, str]] = (),
    ) -> list[tuple[str, str]]:
        """Hidden ``(name, value)`` fields to add to an accepted form."""
        if not is_accepted_form(form_id, self.config):
            return []
        return missing_form_fields(form_params(location, self.config), existing)
