"""param-tracker — keep attribution parameters alive across site navigation.

Pure engine behind a link/form rewriting shell: configuration
normalization, link classification, malformed-query parsing, parameter
merging and navigation planning.

Public API::

    from param_tracker import ParamTracker, normalize_config
    from param_tracker.query import parse_query
    from param_tracker.merge import merge_params
    from param_tracker.navigation import plan_navigation
"""

from param_tracker.classifier import should_handle_link
from param_tracker.config import DEFAULT_CONFIG, TrackerConfig, load_config_file, normalize_config
from param_tracker.errors import ConfigError, UrlParseError
from param_tracker.link import Link, LinkDescriptor, PageLocation
from param_tracker.merge import merge_params
from param_tracker.navigation import NavigationAction, NavigationDecision, plan_navigation
from param_tracker.origin import is_accepted_origin
from param_tracker.query import QueryMap, parse_query
from param_tracker.tracker import ParamTracker

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigError",
    "Link",
    "LinkDescriptor",
    "NavigationAction",
    "NavigationDecision",
    "PageLocation",
    "ParamTracker",
    "QueryMap",
    "TrackerConfig",
    "UrlParseError",
    "is_accepted_origin",
    "load_config_file",
    "merge_params",
    "normalize_config",
    "parse_query",
    "plan_navigation",
    "should_handle_link",
]
__version__ = "0.1.0"
