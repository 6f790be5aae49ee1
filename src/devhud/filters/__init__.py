"""Log filter state: query-string codec, evaluation, and the debounced term bridge."""

from .codec import (
    EMPTY_FILTER_TERM,
    EMPTY_TERM,
    FilterLevel,
    FilterSet,
    FilterSource,
    FilterTerm,
    create_log_search,
    filter_set_from_location,
    filter_set_from_query,
    filter_sets_equal,
    make_filter_term,
    parse,
    parse_filter_term,
    serialize,
    to_query,
)
from .debounce import DEFAULT_DEBOUNCE_SECONDS, Debouncer
from .evaluator import (
    LogAlert,
    LogFilter,
    LogLevel,
    LogLine,
    count_matching_level,
    count_matching_level_and_source,
    filter_alerts,
    is_build_span_id,
    level_label,
    matches_term,
    source_counts,
    tag_alert,
    tag_alerts,
)
from .navigation import FilterTermSession, Location, NavigationHistory

__all__ = [
    # Codec
    "EMPTY_TERM",
    "EMPTY_FILTER_TERM",
    "FilterLevel",
    "FilterSource",
    "FilterTerm",
    "FilterSet",
    "parse",
    "parse_filter_term",
    "make_filter_term",
    "filter_set_from_query",
    "filter_set_from_location",
    "serialize",
    "create_log_search",
    "to_query",
    "filter_sets_equal",
    # Evaluator
    "LogAlert",
    "tag_alert",
    "tag_alerts",
    "count_matching_level",
    "count_matching_level_and_source",
    "source_counts",
    "level_label",
    "matches_term",
    "filter_alerts",
    "LogLevel",
    "LogLine",
    "LogFilter",
    "is_build_span_id",
    # Debounced term bridge
    "DEFAULT_DEBOUNCE_SECONDS",
    "Debouncer",
    "Location",
    "NavigationHistory",
    "FilterTermSession",
]
