"""Accepted-origin matching.  Subdomains of an accepted domain are accepted too."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlsplit


def extract_hostname(origin: str) -> str:
    """Hostname of an origin, URL or bare host, lowercased.  Empty if none."""
    candidate = origin.strip()
    if candidate.startswith("//"):
        candidate = f"https:{candidate}"
    elif "://" not in candidate:
        candidate = f"https://{candidate}"
    return urlsplit(candidate).hostname or ""


def is_accepted_origin(origin: str, accept_origins: Iterable[str]) -> bool:
    """True when the host of ``origin`` is, or is a subdomain of, an accepted domain.

    ``origin`` may be a full origin (``https://shop.example.com``), a URL, or
    a bare hostname.  Anything unparseable is simply not accepted.
    """
    if not isinstance(origin, str) or not origin.strip():
        return False
    try:
        hostname = extract_hostname(origin)
    except ValueError:
        return False
    if not hostname:
        return False

    for domain in accept_origins:
        clean = domain.strip().lower()
        if not clean:
            continue
        if hostname == clean or hostname.endswith(f".{clean}"):
            return True
    return False
