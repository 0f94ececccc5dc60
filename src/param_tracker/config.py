"""Tracker configuration — normalization of user overrides over defaults.

A :class:`TrackerConfig` is built once at startup and passed explicitly to
every engine call.  It is frozen, so the same instance can be shared by any
number of concurrent callers.

Normalization is permissive: malformed shapes (a string where a list is
expected, a non-mapping override, non-string entries) are dropped with a
warning instead of failing.  The only fail-fast rule is the optional
``require_origins`` check.

Example::

    config = normalize_config(
        DEFAULT_CONFIG,
        {
            "accept_origins": ["Example.com"],
            "exclude_params": ["s", "category"],
            "ignore_protocols": ["whatsapp"],
        },
    )
    config.accept_origins    # ("example.com",)
    config.ignore_protocols  # (..., "javascript:", "whatsapp:")

The camelCase keys of the browser tracker (``acceptOrigins``) and its
nested ``{"form": {...}, "link": {...}}`` layout are accepted as well, so
an existing JavaScript configuration can be reused verbatim.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from param_tracker.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _FieldRule:
    lowercase: bool = False
    ensure_colon: bool = False
    aliases: tuple[str, ...] = ()


_FIELD_RULES: dict[str, _FieldRule] = {
    "accept_origins": _FieldRule(lowercase=True, aliases=("acceptOrigins",)),
    "accept_form_ids": _FieldRule(aliases=("acceptFormIds",)),
    "ignore_pathnames": _FieldRule(lowercase=True, aliases=("ignorePathnames",)),
    "ignore_classes": _FieldRule(aliases=("ignoreClasses",)),
    "ignore_protocols": _FieldRule(
        lowercase=True, ensure_colon=True, aliases=("ignoreProtocols",),
    ),
    "manage_attributes": _FieldRule(
        lowercase=True, aliases=("manageAttributes", "attributes"),
    ),
    "ignore_attr_values": _FieldRule(aliases=("ignoreAttrValues", "dataItems")),
    "include_params": _FieldRule(lowercase=True, aliases=("includeParams",)),
    "exclude_params": _FieldRule(lowercase=True, aliases=("excludeParams",)),
}

_SECTIONS = ("form", "link")


def sanitize_string_list(
    values: list[Any] | tuple[Any, ...],
    *,
    lowercase: bool = False,
    ensure_colon: bool = False,
) -> tuple[str, ...]:
    """Trim, drop blanks and non-strings, dedupe in first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        if not isinstance(value, str):
            continue
        cleaned = value.strip()
        if not cleaned:
            continue
        if lowercase:
            cleaned = cleaned.lower()
        if ensure_colon and not cleaned.endswith(":"):
            cleaned += ":"
        seen.setdefault(cleaned, None)
    return tuple(seen)


class TrackerConfig(BaseModel):
    """Immutable engine configuration.

    Every field is a tuple of trimmed, non-empty, unique strings.  Case
    rules are per field: hostnames, pathnames, protocols, attribute names
    and parameter names are lowercased; class names, form ids and
    attribute values keep their case.  ``ignore_protocols`` entries always
    end with ``":"``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    accept_origins: tuple[str, ...] = ()
    accept_form_ids: tuple[str, ...] = ()
    ignore_pathnames: tuple[str, ...] = ()
    ignore_classes: tuple[str, ...] = ()
    ignore_protocols: tuple[str, ...] = ()
    manage_attributes: tuple[str, ...] = ()
    ignore_attr_values: tuple[str, ...] = ()
    include_params: tuple[str, ...] = ()
    exclude_params: tuple[str, ...] = ()

    @field_validator(*_FIELD_RULES, mode="before")
    @classmethod
    def normalize_entries(cls, values: Any, info: ValidationInfo) -> Any:
        if not isinstance(values, (list, tuple)):
            return values  # let pydantic report the shape error
        rule = _FIELD_RULES[info.field_name]
        return sanitize_string_list(
            values, lowercase=rule.lowercase, ensure_colon=rule.ensure_colon,
        )


DEFAULT_CONFIG = TrackerConfig(
    ignore_protocols=(
        "mailto:",
        "tel:",
        "sms:",
        "file:",
        "blob:",
        "data:",
        "ftp:",
        "ftps:",
        "javascript:",
    ),
    include_params=(
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_id",
        "utm_term",
        "utm_content",
    ),
)


def _as_mapping(source: Any, label: str) -> dict[str, Any]:
    if source is None:
        return {}
    if isinstance(source, TrackerConfig):
        return source.model_dump()
    if isinstance(source, Mapping):
        return _flatten_sections(source, label)
    logger.warning(
        "Ignoring %s configuration: expected a mapping, got %s",
        label, type(source).__name__,
    )
    return {}


def _flatten_sections(raw: Mapping[Any, Any], label: str) -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in _SECTIONS:
            flat[key] = value
            continue
        if isinstance(value, Mapping):
            flat.update(value)
        else:
            logger.warning(
                "Ignoring %s configuration section %r: expected a mapping, got %s",
                label, key, type(value).__name__,
            )
    return flat


def _field_values(flat: dict[str, Any], name: str, label: str) -> list[Any]:
    rule = _FIELD_RULES[name]
    for key in (name, *rule.aliases):
        if key not in flat:
            continue
        value = flat[key]
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        logger.warning(
            "Ignoring %s configuration field %r: expected a list, got %s",
            label, key, type(value).__name__,
        )
        return []
    return []


def _log_unknown_keys(flat: dict[str, Any], label: str) -> None:
    known = {key for name, rule in _FIELD_RULES.items() for key in (name, *rule.aliases)}
    unknown = sorted(str(key) for key in flat if key not in known)
    if unknown:
        logger.debug("Unknown %s configuration keys ignored: %s", label, ", ".join(unknown))


def normalize_config(
    defaults: TrackerConfig | Mapping[str, Any] | None,
    custom: TrackerConfig | Mapping[str, Any] | None = None,
    *,
    require_origins: bool = False,
) -> TrackerConfig:
    """Merge ``defaults ++ custom`` field by field into a :class:`TrackerConfig`.

    Raises ConfigError only when ``require_origins`` is set and no accepted
    origin survives normalization.
    """
    base = _as_mapping(defaults, "default")
    override = _as_mapping(custom, "custom")
    _log_unknown_keys(override, "custom")

    merged = {
        name: _field_values(base, name, "default") + _field_values(override, name, "custom")
        for name in _FIELD_RULES
    }
    config = TrackerConfig(**merged)

    if require_origins and not config.accept_origins:
        raise ConfigError("The 'accept_origins' setting must list at least one domain")
    return config


def load_config_file(
    path: str | Path,
    *,
    defaults: TrackerConfig | Mapping[str, Any] | None = DEFAULT_CONFIG,
    require_origins: bool = False,
) -> TrackerConfig:
    """Load a YAML override file and normalize it over ``defaults``.

    An empty file yields the defaults.  Unreadable files, YAML syntax
    errors and non-mapping roots raise ConfigError.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read tracker config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in tracker config {path}: {exc}") from exc

    if raw_data is None:
        raw_data = {}
    if not isinstance(raw_data, dict):
        raise ConfigError(f"Tracker config root must be a mapping: {path}")

    logger.debug("Loaded tracker config from %s", path)
    return normalize_config(defaults, raw_data, require_origins=require_origins)
