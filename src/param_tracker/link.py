"""Host-agnostic views of links and of the current page location.

The engine never touches a DOM.  Whatever hosts it (a browser bridge, an
HTML rewriter, the CLI) describes each anchor through the
:class:`LinkDescriptor` protocol.  :class:`Link` is the stock
implementation, built from a raw href resolved against the page URL.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import NamedTuple, Protocol, runtime_checkable
from urllib.parse import urljoin, urlsplit

from param_tracker.errors import UrlParseError

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


class UrlParts(NamedTuple):
    origin: str
    pathname: str
    search: str
    hash: str


def split_url(url: str) -> UrlParts:
    """Split a URL the way a browser exposes it on ``location``.

    ``origin`` is empty for relative URLs; ``search`` and ``hash`` keep
    their leading ``?``/``#`` and are empty when there is nothing after
    them.  Raises UrlParseError for URLs ``urllib`` cannot split.
    """
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        port = parts.port
    except ValueError as exc:
        raise UrlParseError(url, str(exc)) from exc

    origin = ""
    scheme = parts.scheme.lower()
    if scheme and hostname:
        host = f"[{hostname}]" if ":" in hostname else hostname
        if port is not None and port != _DEFAULT_PORTS.get(scheme):
            host = f"{host}:{port}"
        origin = f"{scheme}://{host}"

    pathname = parts.path or ("/" if origin else "")
    search = f"?{parts.query}" if parts.query else ""
    fragment = f"#{parts.fragment}" if parts.fragment else ""
    return UrlParts(origin, pathname, search, fragment)


@runtime_checkable
class LinkDescriptor(Protocol):
    """Read-only view of an anchor element.

    ``href`` is the raw attribute value; ``origin``, ``pathname``,
    ``search`` and ``hash`` are the resolved parts.
    """

    @property
    def href(self) -> str: ...

    @property
    def origin(self) -> str: ...

    @property
    def pathname(self) -> str: ...

    @property
    def search(self) -> str: ...

    @property
    def hash(self) -> str: ...

    @property
    def target(self) -> str | None: ...

    def has_class(self, name: str) -> bool: ...

    def get_attribute(self, name: str) -> str | None: ...


@dataclass(frozen=True)
class Link:
    """Plain-data :class:`LinkDescriptor`.

    Attribute names are stored lowercased, matching HTML's
    case-insensitive attribute lookup.
    """

    href: str
    origin: str = ""
    pathname: str = ""
    search: str = ""
    hash: str = ""
    target: str | None = None
    classes: frozenset[str] = frozenset()
    attributes: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_href(
        cls,
        href: str,
        *,
        base_url: str = "",
        classes: str | Iterable[str] = (),
        attributes: Mapping[str, str] | None = None,
        target: str | None = None,
    ) -> Link:
        """Resolve ``href`` against ``base_url`` and capture link metadata.

        ``classes`` may be a ``class`` attribute string or an iterable of
        names.  ``target`` falls back to a ``target`` entry in
        ``attributes``.  An href that cannot be resolved yields a link with
        empty parts, which the classifier then rejects.
        """
        attrs = {str(name).lower(): value for name, value in (attributes or {}).items()}
        if target is None:
            target = attrs.get("target")
        if isinstance(classes, str):
            classes = classes.split()

        try:
            resolved = urljoin(base_url, href) if base_url else href
            parts = split_url(resolved)
        except (UrlParseError, ValueError) as exc:
            logger.debug("Cannot resolve href %r against %r: %s", href, base_url, exc)
            parts = UrlParts("", "", "", "")

        return cls(
            href=href,
            origin=parts.origin,
            pathname=parts.pathname,
            search=parts.search,
            hash=parts.hash,
            target=target,
            classes=frozenset(classes),
            attributes=attrs,
        )

    @property
    def page(self) -> str:
        return self.origin + self.pathname

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name.lower())


@dataclass(frozen=True)
class PageLocation:
    """The current page, as ``window.location`` would report it."""

    origin: str = ""
    pathname: str = "/"
    search: str = ""
    hash: str = ""

    @classmethod
    def from_url(cls, url: str) -> PageLocation:
        try:
            parts = split_url(url)
        except UrlParseError as exc:
            logger.warning("Treating unparseable page URL as blank: %s", exc)
            return cls()
        return cls(
            origin=parts.origin,
            pathname=parts.pathname or "/",
            search=parts.search,
            hash=parts.hash,
        )

    @property
    def page(self) -> str:
        return self.origin + self.pathname

    @property
    def hostname(self) -> str:
        if not self.origin:
            return ""
        try:
            return urlsplit(self.origin).hostname or ""
        except ValueError:
            return ""
