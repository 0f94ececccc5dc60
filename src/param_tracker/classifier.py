"""Link and form eligibility rules.

:func:`should_handle_link` decides whether a link is a navigation the
tracker may rewrite at all.  Checks run cheapest first and the first
rejection wins; the outcome is the same as requiring every individual
predicate to pass.

:func:`is_trackable_destination` adds the destination rules (accepted
origin, ignored pathnames) applied before a click is rewritten.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from param_tracker.config import TrackerConfig
from param_tracker.link import LinkDescriptor
from param_tracker.origin import is_accepted_origin

logger = logging.getLogger(__name__)

# Downloads and static assets: a click on these is never a page navigation.
FILE_EXTENSIONS: tuple[str, ...] = (
    # documents
    "pdf", "doc", "docx", "rtf", "txt", "md", "json",
    "xls", "xlsx", "csv", "ppt", "pptx",
    # images
    "jpg", "jpeg", "png", "gif", "bmp", "svg", "avif", "webp",
    # audio
    "mp3", "wav", "aac", "mid", "midi", "flac", "ogg",
    # video
    "mp4", "avi", "mov", "wmv", "mkv", "webm",
    # archives
    "zip", "rar", "7z", "tar", "gz", "bz2", "tar.gz", "tar.bz2",
    # executables and scripts
    "exe", "msi", "dll", "sys", "bat", "sh",
    # source and config files
    "css", "js", "php", "xml", "ts", "jsx", "tsx", "vue",
    "ini", "conf", "cfg", "env", "yaml", "yml",
)

_FILE_PATTERN = re.compile(
    r"\.(" + "|".join(re.escape(ext) for ext in FILE_EXTENSIONS) + r")$",
    re.IGNORECASE,
)


def has_ignored_class(link: LinkDescriptor, config: TrackerConfig) -> bool:
    return any(link.has_class(name) for name in config.ignore_classes)


def has_ignored_protocol(link: LinkDescriptor, config: TrackerConfig) -> bool:
    href = (link.href or "").strip().lower()
    return any(href.startswith(protocol) for protocol in config.ignore_protocols)


def is_file_url(href: str) -> bool:
    """True when the path of ``href`` ends with a :data:`FILE_EXTENSIONS` entry."""
    if not isinstance(href, str) or not href.strip():
        return False
    try:
        path = urlsplit(href.strip()).path
    except ValueError:
        return False
    return bool(_FILE_PATTERN.search(path))


def has_ignored_attribute(link: LinkDescriptor, config: TrackerConfig) -> bool:
    for attribute in config.manage_attributes:
        value = link.get_attribute(attribute)
        if value and value in config.ignore_attr_values:
            return True
    return False


def should_handle_link(link: LinkDescriptor, config: TrackerConfig) -> bool:
    """Return True if the link may be rewritten."""
    if has_ignored_class(link, config):
        logger.debug("Skipping %r: ignored class", link.href)
        return False
    if has_ignored_protocol(link, config):
        logger.debug("Skipping %r: ignored protocol", link.href)
        return False
    if is_file_url(link.href or ""):
        logger.debug("Skipping %r: file link", link.href)
        return False
    if has_ignored_attribute(link, config):
        logger.debug("Skipping %r: ignored attribute value", link.href)
        return False
    return True


def is_ignored_pathname(pathname: str, config: TrackerConfig) -> bool:
    lowered = (pathname or "").lower()
    return any(fragment in lowered for fragment in config.ignore_pathnames)


def is_trackable_destination(link: LinkDescriptor, config: TrackerConfig) -> bool:
    """Accepted origin and a pathname outside ``ignore_pathnames``."""
    if not is_accepted_origin(link.origin, config.accept_origins):
        logger.debug("Skipping %r: origin %r not accepted", link.href, link.origin)
        return False
    if is_ignored_pathname(link.pathname, config):
        logger.debug("Skipping %r: ignored pathname", link.href)
        return False
    return True


def is_accepted_form(form_id: str | None, config: TrackerConfig) -> bool:
    """True when some ``accept_form_ids`` entry is a substring of ``form_id``."""
    if not form_id:
        return False
    return any(accepted in form_id for accepted in config.accept_form_ids)
