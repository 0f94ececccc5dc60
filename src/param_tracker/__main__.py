"""CLI entry point: python -m param_tracker <command>."""

from __future__ import annotations

import argparse
import sys


def _attribute_pair(raw: str) -> tuple[str, str]:
    name, separator, value = raw.partition("=")
    if not separator or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {raw!r}")
    return name.strip(), value


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="param-tracker",
        description="Preview how links are rewritten to carry attribution parameters",
    )
    sub = parser.add_subparsers(dest="command")

    rw = sub.add_parser("rewrite", help="Plan the navigation for a clicked link")
    rw.add_argument("href", help="Raw href attribute of the link")
    rw.add_argument("--current", required=True, help="URL of the page the link is on")
    rw.add_argument("--config", default="", help="Path to a YAML tracker config")
    rw.add_argument("--target", default=None, help="Link target attribute (e.g. _blank)")
    rw.add_argument(
        "--class", dest="classes", action="append", default=[],
        help="CSS class on the link (repeatable)",
    )
    rw.add_argument(
        "--attr", dest="attributes", action="append", default=[], type=_attribute_pair,
        help="Link attribute as NAME=VALUE (repeatable)",
    )
    rw.add_argument("--json", action="store_true", default=False, help="Output as JSON")

    sz = sub.add_parser("sanitize", help="Repair and strip a link's own query")
    sz.add_argument("href", help="Raw href attribute of the link")
    sz.add_argument("--base", default="", help="Base URL to resolve relative hrefs against")
    sz.add_argument("--config", default="", help="Path to a YAML tracker config")

    sc = sub.add_parser("show-config", help="Print the normalized configuration")
    sc.add_argument("--config", default="", help="Path to a YAML tracker config")

    args = parser.parse_args(argv)

    if args.command == "rewrite":
        from param_tracker.cli.rewrite import run_rewrite
        run_rewrite(args)
    elif args.command == "sanitize":
        from param_tracker.cli.rewrite import run_sanitize
        run_sanitize(args)
    elif args.command == "show-config":
        from param_tracker.cli.rewrite import run_show_config
        run_show_config(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
