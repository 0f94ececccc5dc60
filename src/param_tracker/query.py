"""Query-string parsing tolerant of the malformations found in real hrefs.

Links built by CMS templates and ad platforms often carry broken queries:
a second ``?`` glued onto the first query (``?a=1?utm_source=x``), leading
``?&`` noise, or an entire query percent-encoded inside a value
(``redirect=page%3Futm_source%3Dads``).  :func:`parse_query` recovers the
intended key/value pairs from all three.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from typing import Any
from urllib.parse import quote_plus, unquote_plus, urlencode

logger = logging.getLogger(__name__)

_LEADING_NOISE = re.compile(r"^[?&]+")
_ENCODED_QUESTION_MARK = "%3f"


class QueryMap:
    """Ordered ``(key, value)`` pairs with URL search-params semantics.

    Duplicate keys are kept in encounter order.  ``set`` replaces the
    first occurrence in place and drops the rest; ``append`` always adds
    to the end.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._pairs: list[tuple[str, str]] = [(str(k), str(v)) for k, v in pairs]

    def append(self, key: str, value: str) -> None:
        self._pairs.append((key, value))

    def set(self, key: str, value: str) -> None:
        for index, (existing, _) in enumerate(self._pairs):
            if existing == key:
                tail = [pair for pair in self._pairs[index + 1:] if pair[0] != key]
                self._pairs[index:] = [(key, value), *tail]
                return
        self._pairs.append((key, value))

    def get(self, key: str, default: str | None = None) -> str | None:
        for existing, value in self._pairs:
            if existing == key:
                return value
        return default

    def get_all(self, key: str) -> list[str]:
        return [value for existing, value in self._pairs if existing == key]

    def has(self, key: str) -> bool:
        return any(existing == key for existing, _ in self._pairs)

    def delete(self, key: str) -> None:
        self._pairs = [pair for pair in self._pairs if pair[0] != key]

    def items(self) -> list[tuple[str, str]]:
        return list(self._pairs)

    def copy(self) -> QueryMap:
        return QueryMap(self._pairs)

    def to_string(self) -> str:
        """Serialize as ``application/x-www-form-urlencoded``."""
        return urlencode(self._pairs, quote_via=_quote_form)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryMap):
            return NotImplemented
        return self._pairs == other._pairs

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"QueryMap({self._pairs!r})"

    def __str__(self) -> str:
        return self.to_string()


def _quote_form(
    text: str, safe: str = "", encoding: str | None = None, errors: str | None = None,
) -> str:
    # Browser form encoding: "*" stays literal, "~" is escaped.
    return quote_plus(text, "*", encoding, errors).replace("~", "%7E")


def _split_first_question(text: str) -> tuple[str, str | None]:
    """Split at the first ``?`` that has at least one character after it."""
    index = text.find("?")
    if index == -1 or index == len(text) - 1:
        return text, None
    return text[:index], text[index + 1:]


def _split_pairs(segment: str) -> list[tuple[str, str]]:
    """Split an ``&``-delimited segment into raw (still encoded) pairs."""
    pairs: list[tuple[str, str]] = []
    for part in segment.split("&"):
        if not part:
            continue
        key, _, value = part.partition("=")
        pairs.append((key, value))
    return pairs


def _decode(text: str) -> str:
    return unquote_plus(text, errors="replace")


def _parse_segment(segment: str) -> list[tuple[str, str]]:
    return [(_decode(k), _decode(v)) for k, v in _split_pairs(segment)]


def _extract_encoded_queries(raw_pairs: list[tuple[str, str]], result: QueryMap) -> None:
    # Single pass over the flattened pairs; pairs appended here are not revisited.
    for raw_key, raw_value in raw_pairs:
        if _ENCODED_QUESTION_MARK not in raw_value.lower():
            continue
        value, nested = _split_first_question(_decode(raw_value))
        if nested is None:
            continue
        key = _decode(raw_key)
        result.set(key, value)
        for nested_key, nested_value in _parse_segment(_LEADING_NOISE.sub("", nested)):
            if not result.has(nested_key):
                result.append(nested_key, nested_value)


def parse_query(raw: Any) -> QueryMap:
    """Parse a possibly malformed query string into a :class:`QueryMap`.

    >>> parse_query("?a=1?b=2&c=3").items()
    [('a', '1'), ('b', '2'), ('c', '3')]
    >>> parse_query("x=example%3Futm_source%3Dtest").items()
    [('x', 'example'), ('utm_source', 'test')]
    """
    if not isinstance(raw, str):
        if raw is not None:
            logger.debug("Treating non-string query %r as empty", raw)
        return QueryMap()

    remaining = _LEADING_NOISE.sub("", raw)
    raw_pairs: list[tuple[str, str]] = []
    while remaining:
        segment, rest = _split_first_question(remaining)
        raw_pairs.extend(_split_pairs(segment))
        if rest is None:
            break
        remaining = rest

    result = QueryMap((_decode(k), _decode(v)) for k, v in raw_pairs)
    _extract_encoded_queries(raw_pairs, result)
    return result
