"""CLI handlers for ``param-tracker rewrite``, ``sanitize`` and ``show-config``."""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from param_tracker.config import DEFAULT_CONFIG, TrackerConfig, load_config_file
from param_tracker.errors import ConfigError
from param_tracker.link import Link, PageLocation
from param_tracker.tracker import ParamTracker


def _load_config(args: Namespace) -> TrackerConfig:
    if not args.config:
        return DEFAULT_CONFIG
    try:
        return load_config_file(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


def run_rewrite(args: Namespace) -> None:
    location = PageLocation.from_url(args.current)
    tracker = ParamTracker.from_settings(
        _load_config(args), defaults=None, current_hostname=location.hostname,
    )
    link = Link.from_href(
        args.href,
        base_url=args.current,
        classes=args.classes,
        attributes=dict(args.attributes),
        target=args.target,
    )

    decision = tracker.handle_click(link, location)
    if args.json:
        payload: dict[str, object] = {"handled": decision is not None}
        if decision is not None:
            payload.update(
                final_href=decision.final_href,
                action=decision.action.value,
                anchor=decision.anchor,
            )
        print(json.dumps(payload, indent=2))
    elif decision is None:
        print("unchanged")
    else:
        print(f"{decision.action.value}\t{decision.final_href}")


def run_sanitize(args: Namespace) -> None:
    tracker = ParamTracker(_load_config(args))
    link = Link.from_href(args.href, base_url=args.base)
    sanitized = tracker.sanitize_link(link)
    print(sanitized if sanitized is not None else args.href)


def run_show_config(args: Namespace) -> None:
    config = _load_config(args)
    print(json.dumps(config.model_dump(mode="json"), indent=2))
